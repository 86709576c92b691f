"""
Frame scheduling primitives.

The draw loop ticks at a fixed rate and never waits for inference:
- TickClock coalesces ticks that arrive early
- LandmarkMailbox holds the latest detection (latest wins)
- InferenceGate keeps at most one detection request in flight
"""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional
import threading

TARGET_FPS = 30
FRAME_INTERVAL_MS = 1000.0 / TARGET_FPS


class TickClock:
    """Decides which loop iterations become ticks."""

    def __init__(self, fps: float = TARGET_FPS):
        self.interval_ms = 1000.0 / fps
        self._last_ms: Optional[float] = None
        self.elapsed_ms = self.interval_ms

    def ready(self, now_ms: float) -> bool:
        """
        Check whether a tick is due.

        Early calls are skipped, never queued. The phase is kept aligned to
        the interval so slow frames do not accumulate drift.

        Returns:
            True if the caller should run a tick now
        """
        if self._last_ms is None:
            self._last_ms = now_ms
            self.elapsed_ms = self.interval_ms
            return True

        elapsed = now_ms - self._last_ms
        if elapsed < self.interval_ms:
            return False

        self._last_ms = now_ms - (elapsed % self.interval_ms)
        self.elapsed_ms = elapsed
        return True

    def time_until_next(self, now_ms: float) -> float:
        """Milliseconds until the next tick is due (0 if already due)."""
        if self._last_ms is None:
            return 0.0
        return max(0.0, self.interval_ms - (now_ms - self._last_ms))


class LandmarkMailbox:
    """
    Single-slot store for the latest detection result.
    Written by the inference thread, read by the tick.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._value = None

    def post(self, value) -> None:
        with self._lock:
            self._value = value

    def read(self):
        """Return the latest result without consuming it."""
        with self._lock:
            return self._value

    def clear(self) -> None:
        self.post(None)


class InferenceGate:
    """
    Runs a detector on a background thread, one request at a time.

    Requests made while one is in flight are dropped, so a slow detector
    lowers the detection rate instead of stalling the draw loop.
    """

    def __init__(self, detector: Callable[[], object], mailbox: LandmarkMailbox):
        """
        Args:
            detector: Callable returning landmarks or None (may raise)
            mailbox: Destination for results
        """
        self._detector = detector
        self._mailbox = mailbox
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="inference"
        )
        self._pending: Optional[Future] = None
        self.dropped_requests = 0
        self.failed_requests = 0

    def submit(self) -> bool:
        """
        Request a detection.

        Returns:
            True if a request was issued, False if skipped
        """
        if self._executor is None:
            return False
        if self._pending is not None and not self._pending.done():
            self.dropped_requests += 1
            return False

        self._pending = self._executor.submit(self._detector)
        self._pending.add_done_callback(self._on_done)
        return True

    def _on_done(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            # A failed detection counts as "no hand" for this cycle
            self.failed_requests += 1
            print(f"Frame dropped: {error}")
            self._mailbox.post(None)
            return
        self._mailbox.post(future.result())

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def close(self) -> None:
        """Stop accepting requests and wait for the one in flight."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "InferenceGate":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
