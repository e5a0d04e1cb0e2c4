from .comparator import compare, cosine_distance, l2_normalize, similarity
from .config import VerifyConfig
from .errors import (
    DegenerateGeometryError,
    InferenceUnavailable,
    InsufficientFrameSizeError,
    MissingLandmarks,
    NoFaceDetected,
    VerificationAborted,
    ZeroVectorError,
)
from .geometry import AlignmentTransform, estimate_alignment
from .pipeline import VerificationPipeline
from .session import ActivationControl, SessionState
from .types import AttemptResult, ColorLayout, DetectedFace, Frame, Outcome, Phase
from .worker import FrameWorker
