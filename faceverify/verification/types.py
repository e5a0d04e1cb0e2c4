from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple
import numpy as np

Point = Tuple[float, float]

# Landmark names (detector contract)
LEFT_EYE = "LEFT_EYE"
RIGHT_EYE = "RIGHT_EYE"
NOSE_BASE = "NOSE_BASE"
MOUTH_LEFT = "MOUTH_LEFT"
MOUTH_RIGHT = "MOUTH_RIGHT"

LandmarkSet = Dict[str, Point]


class ColorLayout(str, Enum):
    BGR = "bgr"
    RGB = "rgb"
    BGRA = "bgra"
    RGBA = "rgba"

    @property
    def channels(self) -> int:
        return 4 if self in (ColorLayout.BGRA, ColorLayout.RGBA) else 3


@dataclass(frozen=True)
class Frame:
    pixels: np.ndarray  # (H,W,C) uint8
    layout: ColorLayout = ColorLayout.BGR

    def __post_init__(self):
        object.__setattr__(self, "layout", ColorLayout(self.layout))
        if self.pixels.ndim != 3 or self.pixels.shape[2] != self.layout.channels:
            raise ValueError(
                f"pixels shape {self.pixels.shape} does not match layout {self.layout.value}"
            )
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


@dataclass
class DetectedFace:
    x1: int
    y1: int
    x2: int
    y2: int
    score: float
    landmarks: LandmarkSet = field(default_factory=dict)  # FULL-frame coords


@dataclass(frozen=True)
class CanonicalPatch:
    data: np.ndarray  # (S,S,3) float32 RGB in [0,1]

    @property
    def size(self) -> int:
        return int(self.data.shape[0])


@dataclass
class ComparisonResult:
    similarity: float
    distance: float
    accepted: bool


class Phase(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    DONE_NO_FACE = "done_no_face"
    RESOLVED = "resolved"


class Outcome(str, Enum):
    ENROLLED = "enrolled"
    COMPARED = "compared"
    ABORTED = "aborted"


@dataclass
class AttemptResult:
    outcome: Outcome
    phase: Phase
    similarity: Optional[float] = None
    distance: Optional[float] = None
    accepted: Optional[bool] = None
    reason: Optional[str] = None
    dim: int = 0

    @property
    def has_score(self) -> bool:
        return self.similarity is not None
