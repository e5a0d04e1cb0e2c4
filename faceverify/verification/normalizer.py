import cv2
import numpy as np
from .roi import PATCH_SIZE
from .types import CanonicalPatch, ColorLayout

_TO_RGB = {
    ColorLayout.BGR: cv2.COLOR_BGR2RGB,
    ColorLayout.BGRA: cv2.COLOR_BGRA2RGB,
    ColorLayout.RGBA: cv2.COLOR_RGBA2RGB,
}


_TO_BGR = {
    ColorLayout.RGB: cv2.COLOR_RGB2BGR,
    ColorLayout.BGRA: cv2.COLOR_BGRA2BGR,
    ColorLayout.RGBA: cv2.COLOR_RGBA2BGR,
}


def to_rgb(img: np.ndarray, layout: ColorLayout) -> np.ndarray:
    code = _TO_RGB.get(ColorLayout(layout))
    if code is None:
        return img.copy()
    return cv2.cvtColor(img, code)


def to_bgr(img: np.ndarray, layout: ColorLayout) -> np.ndarray:
    code = _TO_BGR.get(ColorLayout(layout))
    if code is None:
        return img.copy()
    return cv2.cvtColor(img, code)


def normalize_patch(crop: np.ndarray, layout: ColorLayout = ColorLayout.BGR, size: int = PATCH_SIZE) -> CanonicalPatch:
    """
    uint8 crop in `layout` -> CanonicalPatch (RGB float32, values in [0,1]).
    Crops that are not exactly size x size are resized (bilinear) first.
    """
    img = crop
    if img.shape[0] != size or img.shape[1] != size:
        img = cv2.resize(img, (size, size), interpolation=cv2.INTER_LINEAR)

    rgb = to_rgb(img, layout)
    data = rgb.astype(np.float32) * np.float32(1.0 / 255.0)
    return CanonicalPatch(data=np.clip(data, 0.0, 1.0))
