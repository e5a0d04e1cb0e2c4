from typing import Tuple
import numpy as np
from .errors import InsufficientFrameSizeError
from .geometry import round_half_up
from .types import Frame, Point

PATCH_SIZE = 160


def roi_origin(center: Point, size: int, width: int, height: int) -> Tuple[int, int]:
    """
    Top-left corner of a size x size square centered on `center`.
    The square is shifted back inside the frame, never shrunk or padded.
    """
    if width < size or height < size:
        raise InsufficientFrameSizeError(
            f"frame {width}x{height} is smaller than patch {size}x{size}"
        )

    half = size // 2
    x = round_half_up(center[0]) - half
    y = round_half_up(center[1]) - half

    if x < 0:
        x = 0
    if y < 0:
        y = 0
    if x + size > width:
        x = width - size
    if y + size > height:
        y = height - size
    return x, y


def extract_roi(frame: Frame, center: Point, size: int = PATCH_SIZE) -> np.ndarray:
    x, y = roi_origin(center, size, frame.width, frame.height)
    # copy: the crop must not keep the aligned frame alive
    return frame.pixels[y:y + size, x:x + size].copy()
