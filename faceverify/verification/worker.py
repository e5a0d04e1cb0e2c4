import queue
import threading
from typing import Callable, Optional
from .pipeline import VerificationPipeline
from .session import SessionState
from .types import AttemptResult, Frame

ResultCallback = Callable[[AttemptResult], None]


class FrameWorker:
    """
    Single dedicated processing thread.
    At most one frame is in flight; frames submitted while it is busy are
    dropped, never buffered.
    """
    def __init__(
        self,
        pipeline: VerificationPipeline,
        state: SessionState,
        on_result: Optional[ResultCallback] = None,
        name: str = "verify-worker",
    ):
        self.pipeline = pipeline
        self.state = state
        self.on_result = on_result
        self.name = name

        self._admit = threading.Semaphore(1)
        self._inbox: "queue.Queue[Optional[Frame]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._stopping = threading.Event()

        self.submitted = 0
        self.processed = 0
        self.dropped = 0
        self.failure: Optional[BaseException] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "FrameWorker":
        if self.running:
            return self
        self._stopping.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        return self

    def submit(self, frame: Frame) -> bool:
        """Non-blocking. Returns False when the frame was dropped."""
        if self.failure is not None or self._stopping.is_set():
            self.dropped += 1
            return False
        if not self._admit.acquire(blocking=False):
            self.dropped += 1
            return False
        self.submitted += 1
        self._inbox.put(frame)
        return True

    def stop(self, timeout: float = 2.0):
        self._stopping.set()
        self._inbox.put(None)
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def raise_if_failed(self):
        if self.failure is not None:
            raise RuntimeError(f"{self.name} stopped on an unexpected error") from self.failure

    def _run(self):
        while True:
            frame = self._inbox.get()
            if frame is None:
                return
            try:
                result = self.pipeline.process_frame(frame, self.state)
                self.processed += 1
                if result is not None and self.on_result is not None:
                    self.on_result(result)
            except Exception as e:
                print(f"[worker] unexpected error, stopping: {e!r}")
                self.failure = e
                return
            finally:
                del frame
                self._admit.release()
