"""Background dispatch of log calls on a worker thread."""

from __future__ import annotations

import atexit
import logging
import threading
import time
from dataclasses import dataclass
from queue import Empty, Full, Queue
from typing import Any, Callable, Tuple

__all__ = ["DispatchConfig", "BackgroundDispatcher"]

logger = logging.getLogger(__name__)

Task = Tuple[Any, Any]


@dataclass(slots=True)
class DispatchConfig:
    background: bool = True
    queue_maxsize: int = 0
    graceful_shutdown_timeout_s: float = 5.0


class BackgroundDispatcher:
    """Run queued ``(value, level)`` pairs through ``target`` off the caller's thread.

    The worker starts on the first submission and is stopped at interpreter
    exit, draining whatever is still queued.
    """

    _POLL_INTERVAL_S = 0.1

    def __init__(self, target: Callable[[Any, Any], Any], *, config: DispatchConfig | None = None) -> None:
        self.config = config or DispatchConfig()
        self._target = target
        self.queue: Queue[Task] = Queue(maxsize=self.config.queue_maxsize)
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._worker: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def submit(self, value: Any, level: Any) -> bool:
        """Queue one call; returns ``False`` when it had to be dropped."""

        self._ensure_started()
        try:
            self.queue.put_nowait((value, level))
        except Full:
            logger.warning("Background queue is full (%d items); dropping log call", self.queue.maxsize)
            return False
        return True

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every queued call has been handled."""

        if not self.running:
            return self.queue.unfinished_tasks == 0
        if timeout is None:
            timeout = self.config.graceful_shutdown_timeout_s
        deadline = time.monotonic() + timeout
        with self.queue.all_tasks_done:
            while self.queue.unfinished_tasks:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self.queue.all_tasks_done.wait(remaining)
        return True

    def stop(self) -> None:
        with self._lock:
            worker = self._worker
            if worker is None:
                return
            self._stop_event.set()
            worker.join(timeout=self.config.graceful_shutdown_timeout_s)
            if worker.is_alive():
                logger.warning("Background worker did not stop within %.1fs", self.config.graceful_shutdown_timeout_s)
            self._worker = None
            atexit.unregister(self.stop)

    def _ensure_started(self) -> None:
        if self.running:
            return
        with self._lock:
            if self.running:
                return
            self._stop_event.clear()
            self._worker = threading.Thread(target=self._run, name="gelflog-dispatch", daemon=True)
            self._worker.start()
            atexit.register(self.stop)

    def _run(self) -> None:
        while True:
            try:
                value, level = self.queue.get(timeout=self._POLL_INTERVAL_S)
            except Empty:
                if self._stop_event.is_set():
                    return
                continue
            try:
                self._target(value, level)
            except Exception:
                logger.exception("Background log call failed")
            finally:
                self.queue.task_done()

    def __enter__(self) -> "BackgroundDispatcher":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.stop()
