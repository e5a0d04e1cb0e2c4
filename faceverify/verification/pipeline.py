"""
One armed attempt per trigger:
detector -> eye transform -> aligned frame -> 160x160 ROI -> normalized patch
-> embedder -> enroll (first success) or compare against the reference.

Every recoverable failure ends the attempt with an aborted result; the
session itself is never torn down here.
"""

from __future__ import annotations
from typing import List, Optional, Protocol
import numpy as np
from .aligner import align_frame
from .comparator import compare, l2_normalize
from .config import VerifyConfig
from .errors import (
    InferenceUnavailable,
    MissingLandmarks,
    NoFaceDetected,
    VerificationAborted,
)
from .geometry import estimate_alignment
from .logger import SessionLogger
from .normalizer import normalize_patch
from .preview import SLOT_PROBE, SLOT_REFERENCE, PatchPreview
from .roi import extract_roi
from .session import BufferScope, SessionState
from .types import (
    LEFT_EYE,
    RIGHT_EYE,
    AttemptResult,
    CanonicalPatch,
    DetectedFace,
    Frame,
    Outcome,
    Phase,
)


class FaceDetector(Protocol):
    def detect(self, frame: Frame) -> List[DetectedFace]: ...


class Embedder(Protocol):
    def embed(self, patch: CanonicalPatch) -> Optional[np.ndarray]: ...


class VerificationPipeline:
    def __init__(
        self,
        detector: FaceDetector,
        embedder: Embedder,
        config: Optional[VerifyConfig] = None,
        logger: Optional[SessionLogger] = None,
        preview: Optional[PatchPreview] = None,
    ):
        self.detector = detector
        self.embedder = embedder
        self.config = config or VerifyConfig()
        self.logger = logger
        self.preview = preview
        self.debug = bool(self.config.debug)
        self.last_scope: Optional[BufferScope] = None

    def process_frame(self, frame: Frame, state: SessionState) -> Optional[AttemptResult]:
        """
        Returns None when the session is not armed (frame ignored), otherwise
        the result of the single attempt the trigger allowed.
        """
        if not state.activation.claim():
            return None

        with BufferScope() as scope:
            self.last_scope = scope
            try:
                result = self._attempt(frame, state, scope)
            except (NoFaceDetected, MissingLandmarks) as e:
                result = self._aborted(e, Phase.DONE_NO_FACE)
            except VerificationAborted as e:
                result = self._aborted(e, Phase.RESOLVED)

        if self.logger is not None:
            self.logger.log_result(result)
        return result

    def _aborted(self, err: VerificationAborted, phase: Phase) -> AttemptResult:
        if self.debug:
            print(f"[pipeline] attempt aborted: {err.reason} ({err})")
        return AttemptResult(outcome=Outcome.ABORTED, phase=phase, reason=err.reason)

    def _attempt(self, frame: Frame, state: SessionState, scope: BufferScope) -> AttemptResult:
        cfg = self.config

        faces = self.detector.detect(frame)
        if not faces:
            raise NoFaceDetected("detector returned no faces")

        face = faces[0]
        left = face.landmarks.get(LEFT_EYE)
        right = face.landmarks.get(RIGHT_EYE)
        if left is None or right is None:
            raise MissingLandmarks("first face lacks LEFT_EYE/RIGHT_EYE")

        transform = estimate_alignment(left, right, cfg.desired_eye_distance)
        if self.debug:
            print(f"[pipeline] angle={transform.angle:.2f} scale={transform.scale:.3f} pivot={transform.pivot}")

        aligned = scope.hold(align_frame(frame, transform))
        crop = scope.hold(extract_roi(aligned, transform.pivot, cfg.patch_size))
        patch = scope.hold(normalize_patch(crop, frame.layout, cfg.patch_size))

        if self.preview is not None:
            slot = SLOT_PROBE if state.enrolled else SLOT_REFERENCE
            self.preview.post(slot, crop, patch, frame.layout)

        raw = scope.hold(self._infer(patch))

        if not state.enrolled:
            state.enroll(l2_normalize(raw))
            return AttemptResult(outcome=Outcome.ENROLLED, phase=Phase.RESOLVED, dim=int(raw.size))

        probe = l2_normalize(raw)
        cmp = compare(state.reference, probe, cfg.match_threshold)
        return AttemptResult(
            outcome=Outcome.COMPARED,
            phase=Phase.RESOLVED,
            similarity=cmp.similarity,
            distance=cmp.distance,
            accepted=cmp.accepted,
            dim=int(raw.size),
        )

    def _infer(self, patch: CanonicalPatch) -> np.ndarray:
        try:
            raw = self.embedder.embed(patch)
        except Exception as e:
            raise InferenceUnavailable(f"embedder failed: {e}") from e
        if raw is None:
            raise InferenceUnavailable("embedder returned nothing")
        raw = np.asarray(raw, dtype=np.float32).reshape(-1)
        if raw.size == 0:
            raise InferenceUnavailable("embedder returned an empty vector")
        return raw
