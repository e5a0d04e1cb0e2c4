"""Tests for eye-based alignment transform estimation."""

import math

import numpy as np
import pytest

from faceverify.verification.errors import DegenerateGeometryError, VerificationAborted
from faceverify.verification.geometry import (
    DESIRED_EYE_DISTANCE,
    AlignmentTransform,
    estimate_alignment,
    eye_line_angle,
    eyes_midpoint,
    round_half_up,
)


class TestEstimateAlignment:
    def test_horizontal_eyes_scenario(self):
        t = estimate_alignment((100, 150), (140, 150))
        assert t.angle == pytest.approx(0.0)
        assert t.scale == pytest.approx(2.0)
        assert t.pivot == pytest.approx((120.0, 150.0))

    def test_angle_uses_atan2_of_right_minus_left(self):
        t = estimate_alignment((0, 0), (10, 10))
        assert t.angle == pytest.approx(45.0)
        assert t.scale == pytest.approx(DESIRED_EYE_DISTANCE / math.hypot(10, 10))

    def test_custom_desired_distance(self):
        t = estimate_alignment((0, 0), (50, 0), desired_distance=100.0)
        assert t.scale == pytest.approx(2.0)

    def test_already_canonical_is_identity(self):
        t = estimate_alignment((200, 120), (280, 120))
        assert t.angle == pytest.approx(0.0, abs=1e-9)
        assert t.scale == pytest.approx(1.0)
        np.testing.assert_allclose(t.matrix(), [[1, 0, 0], [0, 1, 0]], atol=1e-9)

    def test_coincident_eyes_raise(self):
        with pytest.raises(DegenerateGeometryError):
            estimate_alignment((50, 50), (50, 50))

    def test_nearly_coincident_eyes_raise(self):
        with pytest.raises(VerificationAborted):
            estimate_alignment((50, 50), (50 + 1e-9, 50))

    @pytest.mark.parametrize("left,right", [
        ((100, 150), (140, 150)),
        ((100, 150), (140, 170)),
        ((300, 90), (250, 140)),
        ((12.3, 45.6), (13.1, 44.9)),
        ((0, 0), (0, 60)),
        ((640, 480), (10, 470)),
    ])
    def test_reapplied_transform_levels_and_spaces_eyes(self, left, right):
        t = estimate_alignment(left, right)
        (lx, ly), (rx, ry) = t.apply([left, right])

        angle = math.degrees(math.atan2(ry - ly, rx - lx))
        assert abs(angle) < 1e-3
        assert math.hypot(rx - lx, ry - ly) == pytest.approx(DESIRED_EYE_DISTANCE, abs=1e-3)

    def test_pivot_is_fixed_point(self):
        t = estimate_alignment((110, 160), (170, 130))
        out = t.apply([t.pivot])[0]
        np.testing.assert_allclose(out, t.pivot, atol=1e-9)

    def test_random_pairs(self):
        rng = np.random.default_rng(3)
        for _ in range(200):
            left = tuple(rng.uniform(0, 640, 2))
            right = tuple(rng.uniform(0, 640, 2))
            if math.dist(left, right) < 1.0:
                continue
            t = estimate_alignment(left, right)
            (lx, ly), (rx, ry) = t.apply([left, right])
            assert abs(ry - ly) < 1e-6 * DESIRED_EYE_DISTANCE + 1e-6
            assert rx > lx


class TestHelpers:
    def test_midpoint(self):
        assert eyes_midpoint((0, 0), (10, 4)) == (5.0, 2.0)

    def test_eye_line_angle(self):
        assert eye_line_angle((0, 0), (0, 5)) == pytest.approx(90.0)
        assert eye_line_angle((0, 0), (-5, 0)) == pytest.approx(180.0)

    @pytest.mark.parametrize("v,expected", [
        (2.5, 3), (2.4999, 2), (-0.5, 0), (-1.5, -1), (119.5, 120), (7.0, 7),
    ])
    def test_round_half_up(self, v, expected):
        assert round_half_up(v) == expected

    def test_matrix_shape(self):
        m = AlignmentTransform(angle=10.0, scale=1.5, pivot=(3.0, 4.0)).matrix()
        assert m.shape == (2, 3)
