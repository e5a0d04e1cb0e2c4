import queue
from dataclasses import dataclass
from typing import Iterator, Tuple
import cv2
import numpy as np
from .normalizer import to_bgr
from .types import CanonicalPatch, ColorLayout

# slots: first surface shows the enrolled patch, second the latest probe
SLOT_REFERENCE = "reference"
SLOT_PROBE = "probe"


@dataclass
class PreviewItem:
    slot: str
    crop: np.ndarray  # uint8, source layout
    patch: np.ndarray  # float32 RGB [0,1]
    layout: ColorLayout


def patch_to_bgr(patch: np.ndarray) -> np.ndarray:
    """Float RGB [0,1] -> uint8 BGR for display."""
    u8 = np.clip(np.rint(np.asarray(patch, dtype=np.float32) * 255.0), 0, 255).astype(np.uint8)
    return cv2.cvtColor(u8, cv2.COLOR_RGB2BGR)


def render_item(item: PreviewItem) -> np.ndarray:
    """Side by side: crop before normalization | normalized patch."""
    before = to_bgr(item.crop, item.layout)
    after = patch_to_bgr(item.patch)
    if before.shape[:2] != after.shape[:2]:
        before = cv2.resize(before, (after.shape[1], after.shape[0]), interpolation=cv2.INTER_LINEAR)
    return np.hstack([before, after])


class PatchPreview:
    """
    Best-effort hand-off of debug patches from the worker to the UI thread.
    post() never blocks; when the UI falls behind, previews are dropped.
    """
    def __init__(self, maxsize: int = 4):
        self._q: "queue.Queue[PreviewItem]" = queue.Queue(maxsize=maxsize)
        self.dropped = 0

    def post(self, slot: str, crop: np.ndarray, patch: CanonicalPatch, layout: ColorLayout) -> bool:
        item = PreviewItem(slot=slot, crop=crop.copy(), patch=patch.data.copy(), layout=ColorLayout(layout))
        try:
            self._q.put_nowait(item)
        except queue.Full:
            self.dropped += 1
            return False
        return True

    def drain(self) -> Iterator[Tuple[str, np.ndarray]]:
        while True:
            try:
                item = self._q.get_nowait()
            except queue.Empty:
                return
            yield item.slot, render_item(item)
