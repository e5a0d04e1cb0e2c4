"""
Eye-based similarity transform.
The transform rotates about the eyes midpoint so that the eye line becomes
horizontal, and scales so that the eyes end up `desired_distance` pixels
apart. Matrix convention is cv2.getRotationMatrix2D (positive angle rotates
counter-clockwise on screen).
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Sequence
import cv2
import numpy as np
from .errors import DegenerateGeometryError
from .types import Point

DESIRED_EYE_DISTANCE = 80.0
MIN_EYE_DISTANCE = 1e-6


@dataclass(frozen=True)
class AlignmentTransform:
    angle: float  # degrees
    scale: float
    pivot: Point  # eyes midpoint

    def matrix(self) -> np.ndarray:
        """2x3 float64 affine matrix."""
        return cv2.getRotationMatrix2D(
            (float(self.pivot[0]), float(self.pivot[1])), float(self.angle), float(self.scale)
        )

    def apply(self, points: Sequence[Point]) -> np.ndarray:
        """Map (N,2) points through the transform."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        M = self.matrix()
        return pts @ M[:, :2].T + M[:, 2]


def eyes_midpoint(left_eye: Point, right_eye: Point) -> Point:
    return ((left_eye[0] + right_eye[0]) / 2.0, (left_eye[1] + right_eye[1]) / 2.0)


def eye_line_angle(left_eye: Point, right_eye: Point) -> float:
    dx = right_eye[0] - left_eye[0]
    dy = right_eye[1] - left_eye[1]
    return math.degrees(math.atan2(dy, dx))


def round_half_up(v: float) -> int:
    # halves go toward +inf, so -0.5 -> 0 and 2.5 -> 3
    return int(math.floor(v + 0.5))


def estimate_alignment(
    left_eye: Point,
    right_eye: Point,
    desired_distance: float = DESIRED_EYE_DISTANCE,
) -> AlignmentTransform:
    dx = float(right_eye[0]) - float(left_eye[0])
    dy = float(right_eye[1]) - float(left_eye[1])
    current = math.hypot(dx, dy)
    if current <= MIN_EYE_DISTANCE:
        raise DegenerateGeometryError(
            f"eyes coincide (distance={current:.3g}); scale is undefined"
        )

    return AlignmentTransform(
        angle=math.degrees(math.atan2(dy, dx)),
        scale=float(desired_distance) / current,
        pivot=eyes_midpoint(left_eye, right_eye),
    )
