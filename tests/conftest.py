"""Shared fixtures for faceverify tests.

All frames and embeddings are synthetic; no camera or ML models needed.
"""

import numpy as np
import pytest

from faceverify.verification.types import ColorLayout, Frame
from helpers import face_with_eyes


@pytest.fixture
def make_frame():
    """Factory for deterministic noisy frames."""
    def _make(width: int = 320, height: int = 240, seed: int = 0, layout=ColorLayout.BGR) -> Frame:
        rng = np.random.default_rng(seed)
        channels = ColorLayout(layout).channels
        pixels = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
        return Frame(pixels=pixels, layout=layout)
    return _make


@pytest.fixture
def frame(make_frame):
    return make_frame()


@pytest.fixture
def make_embedding():
    """Factory fixture for deterministic raw (unnormalized) embeddings."""
    def _make(seed: int = 0, dim: int = 128, scale: float = 7.5) -> np.ndarray:
        rng = np.random.default_rng(seed)
        return (rng.standard_normal(dim) * scale).astype(np.float32)
    return _make


@pytest.fixture
def stub_face():
    return face_with_eyes()
