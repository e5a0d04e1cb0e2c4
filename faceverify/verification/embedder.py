import numpy as np
import onnxruntime as ort
from pathlib import Path
from typing import Optional
from .types import CanonicalPatch

class FaceNetEmbedderONNX:
    """
    FaceNet-style ONNX embedder.
    Input: CanonicalPatch (160x160 RGB float32 in [0,1]) -> batch of one,
    NHWC or NCHW depending on the model input.
    Output: raw (not normalized) embedding (D,), or None if the model
    produced nothing.
    """
    def __init__(
        self,
        model_path: str = None,
        debug: bool = False,
    ):
        if model_path is None:
            # Default to project_root/models/facenet.onnx
            model_path = str(Path(__file__).resolve().parent.parent.parent / "models/facenet.onnx")

        self.model_path = str(model_path)
        self.debug = bool(debug)
        self.sess = ort.InferenceSession(self.model_path, providers=["CPUExecutionProvider"])
        inp = self.sess.get_inputs()[0]
        self.in_name = inp.name
        self.out_name = self.sess.get_outputs()[0].name
        # (1,3,H,W) models want channels first
        self.channels_first = len(inp.shape) == 4 and inp.shape[1] == 3

        if self.debug:
            print("[embed] model:", self.model_path)
            print("[embed] input:", inp.name, inp.shape, inp.type)
            print("[embed] output:", self.sess.get_outputs()[0].name, self.sess.get_outputs()[0].shape)

    def _preprocess(self, patch: CanonicalPatch) -> np.ndarray:
        x = np.asarray(patch.data, dtype=np.float32)
        if self.channels_first:
            x = np.transpose(x, (2, 0, 1))
        return np.ascontiguousarray(x[None, ...])

    def embed(self, patch: CanonicalPatch) -> Optional[np.ndarray]:
        x = self._preprocess(patch)
        outputs = self.sess.run([self.out_name], {self.in_name: x})
        if not outputs or outputs[0] is None:
            return None
        emb = np.asarray(outputs[0], dtype=np.float32).reshape(-1)
        if emb.size == 0:
            return None
        return emb
