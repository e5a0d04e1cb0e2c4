import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional
import numpy as np
from .types import Phase


class ActivationControl:
    """
    One-shot arm/claim switch shared between the trigger (UI thread) and
    the frame worker. Phase reads and transitions happen under one lock.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._phase = Phase.IDLE

    @property
    def phase(self) -> Phase:
        with self._lock:
            return self._phase

    def arm(self) -> bool:
        """IDLE -> ARMED. Returns False when already armed (triggers do not queue)."""
        with self._lock:
            if self._phase is Phase.ARMED:
                return False
            self._phase = Phase.ARMED
            return True

    def claim(self) -> bool:
        """Consume the armed request for one attempt: ARMED -> IDLE."""
        with self._lock:
            if self._phase is not Phase.ARMED:
                return False
            self._phase = Phase.IDLE
            return True


@dataclass
class SessionState:
    reference: Optional[np.ndarray] = None  # (D,) float32, L2-normalized
    activation: ActivationControl = field(default_factory=ActivationControl)

    @property
    def enrolled(self) -> bool:
        return self.reference is not None

    @property
    def phase(self) -> Phase:
        return self.activation.phase

    def enroll(self, embedding: np.ndarray) -> None:
        if self.reference is not None:
            raise RuntimeError("reference embedding is already enrolled for this session")
        self.reference = np.asarray(embedding, dtype=np.float32).reshape(-1).copy()


class BufferScope:
    """
    Holds the transient buffers of one attempt and drops them on exit,
    whichever way the attempt ended.
    """
    def __init__(self):
        self._buffers: List[Any] = []
        self.released = 0

    def hold(self, buf):
        self._buffers.append(buf)
        return buf

    def __len__(self) -> int:
        return len(self._buffers)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.released = len(self._buffers)
        self._buffers.clear()
        return False
