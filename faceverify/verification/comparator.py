import numpy as np
from .errors import ZeroVectorError
from .types import ComparisonResult

ZERO_NORM_EPS = 1e-12


def l2_normalize(v: np.ndarray, eps: float = ZERO_NORM_EPS) -> np.ndarray:
    v = np.asarray(v, dtype=np.float32).reshape(-1)
    n = float(np.linalg.norm(v))
    if not np.isfinite(n) or n <= eps:
        raise ZeroVectorError(f"cannot normalize vector with norm {n:.3g}")
    return (v / n).astype(np.float32)


def similarity(a: np.ndarray, b: np.ndarray) -> float:
    # callers pass normalized vectors; dot is then the cosine
    a = np.asarray(a, dtype=np.float32).reshape(-1)
    b = np.asarray(b, dtype=np.float32).reshape(-1)
    if a.shape != b.shape:
        raise ValueError(f"embedding dims differ: {a.size} vs {b.size}")
    return float(np.dot(a, b))


def cosine_distance(a: np.ndarray, b: np.ndarray) -> float:
    return 1.0 - similarity(a, b)


def compare(reference: np.ndarray, probe: np.ndarray, threshold: float) -> ComparisonResult:
    sim = similarity(reference, probe)
    return ComparisonResult(
        similarity=sim,
        distance=1.0 - sim,
        accepted=bool(sim >= threshold),
    )
