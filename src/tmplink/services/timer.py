import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ElapsedTimer:
    """Ticks once per interval while an upload is running.

    Display only: observers get the number of whole seconds since ``start()``.
    """

    def __init__(
        self,
        on_tick: Optional[Callable[[int], None]] = None,
        interval: float = 1.0,
    ) -> None:
        self._on_tick = on_tick
        self.interval = interval
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None

    @property
    def elapsed(self) -> int:
        if self._started_at is None:
            return 0
        end = self._stopped_at if self._stopped_at is not None else time.monotonic()
        return int(end - self._started_at)

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return

            self.ticks = 0
            self._started_at = time.monotonic()
            self._stopped_at = None
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._tick_loop, name="ElapsedTimer", daemon=True)
            self._thread.start()

    def stop(self) -> None:
        with self._lock:
            if self._thread is None:
                return

            self._stopped_at = time.monotonic()
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        if thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _tick_loop(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.ticks += 1
            if self._on_tick is None:
                continue
            try:
                self._on_tick(self.ticks)
            except Exception as e:
                logger.error(f"Error in on_tick: {e}")

    def __enter__(self) -> "ElapsedTimer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
