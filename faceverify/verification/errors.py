class VerificationAborted(Exception):
    """
    Base for every recoverable failure of a single armed attempt.
    The pipeline turns these into an aborted AttemptResult; none of them
    ends the session.
    """
    reason = "aborted"


class NoFaceDetected(VerificationAborted):
    reason = "no_face"


class MissingLandmarks(VerificationAborted):
    reason = "missing_landmarks"


class DegenerateGeometryError(VerificationAborted, ValueError):
    reason = "degenerate_geometry"


class InsufficientFrameSizeError(VerificationAborted, ValueError):
    reason = "frame_too_small"


class InferenceUnavailable(VerificationAborted, RuntimeError):
    reason = "inference_unavailable"


class ZeroVectorError(VerificationAborted, ValueError):
    reason = "zero_vector"
