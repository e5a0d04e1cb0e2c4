"""Tests for the shift-don't-shrink ROI extraction."""

import numpy as np
import pytest

from faceverify.verification.errors import InsufficientFrameSizeError
from faceverify.verification.roi import PATCH_SIZE, extract_roi, roi_origin
from faceverify.verification.types import Frame


class TestRoiOrigin:
    def test_centered_inside_frame(self):
        assert roi_origin((320, 240), 160, 640, 480) == (240, 160)

    def test_center_is_rounded_half_up(self):
        assert roi_origin((320.5, 239.5), 160, 640, 480) == (241, 160)

    def test_negative_origin_clamped_to_zero(self):
        assert roi_origin((10, 20), 160, 640, 480) == (0, 0)

    def test_far_edge_shifted_back(self):
        assert roi_origin((630, 470), 160, 640, 480) == (480, 320)

    def test_frame_exactly_patch_size(self):
        assert roi_origin((5, 155), 160, 160, 160) == (0, 0)

    @pytest.mark.parametrize("w,h", [(159, 480), (640, 100), (10, 10)])
    def test_too_small_frame_raises(self, w, h):
        with pytest.raises(InsufficientFrameSizeError):
            roi_origin((w / 2, h / 2), 160, w, h)

    def test_origin_always_within_bounds(self):
        rng = np.random.default_rng(11)
        for _ in range(500):
            w = int(rng.integers(160, 900))
            h = int(rng.integers(160, 700))
            center = (float(rng.uniform(-300, w + 300)), float(rng.uniform(-300, h + 300)))
            x, y = roi_origin(center, 160, w, h)
            assert 0 <= x <= w - 160
            assert 0 <= y <= h - 160


class TestExtractRoi:
    def test_output_is_exact_patch_size(self, make_frame):
        frame = make_frame(width=320, height=240)
        for center in [(0, 0), (160, 120), (319, 239), (-50, 400)]:
            crop = extract_roi(frame, center)
            assert crop.shape == (PATCH_SIZE, PATCH_SIZE, 3)

    def test_crop_matches_source_region(self, make_frame):
        frame = make_frame(width=320, height=240)
        crop = extract_roi(frame, (200, 100))
        np.testing.assert_array_equal(crop, frame.pixels[20:180, 120:280])

    def test_crop_is_owned_copy(self, make_frame):
        frame = make_frame(width=320, height=240)
        crop = extract_roi(frame, (160, 120))
        assert crop.flags.writeable
        assert not np.shares_memory(crop, frame.pixels)

    def test_no_padding_at_border(self):
        pixels = np.full((200, 300, 3), 7, dtype=np.uint8)
        crop = extract_roi(Frame(pixels=pixels), (299, 199))
        assert np.all(crop == 7)

    def test_custom_size(self, make_frame):
        crop = extract_roi(make_frame(), (50, 50), size=112)
        assert crop.shape == (112, 112, 3)

    def test_small_frame_raises(self, make_frame):
        with pytest.raises(InsufficientFrameSizeError):
            extract_roi(make_frame(width=150, height=240), (75, 120))
