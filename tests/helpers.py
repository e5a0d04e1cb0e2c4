"""Shared test helpers for faceverify tests."""

from faceverify.verification.types import LEFT_EYE, RIGHT_EYE, DetectedFace


class StubDetector:
    """Returns a fixed list of faces and counts calls."""

    def __init__(self, faces=None):
        self.faces = list(faces or [])
        self.calls = 0

    def detect(self, frame):
        self.calls += 1
        return list(self.faces)


class StubEmbedder:
    """Returns queued raw embeddings in order.

    None entries simulate an engine that produced nothing, exception
    instances are raised.
    """

    def __init__(self, outputs=None):
        self.outputs = list(outputs or [])
        self.patches = []

    def embed(self, patch):
        self.patches.append(patch.data.shape)
        if not self.outputs:
            return None
        out = self.outputs.pop(0)
        if isinstance(out, Exception):
            raise out
        return out


def face_with_eyes(left=(100.0, 150.0), right=(140.0, 150.0)):
    return DetectedFace(
        x1=60, y1=100, x2=180, y2=240, score=1.0,
        landmarks={LEFT_EYE: left, RIGHT_EYE: right},
    )
