"""Change queue that serializes reload callbacks, optionally debounced."""

from __future__ import annotations

import threading
from typing import Callable

from .config import LOGGER


class ChangeQueue:
    """Runs ``process_cb`` for every notified change.

    With ``delay_secs`` of 0 each notification runs the callback right away
    on the caller's thread. A positive delay collapses a burst of
    notifications into one call fired from a timer thread.
    """

    def __init__(self, process_cb: Callable[[], None], delay_secs: float = 0.0):
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._process_cb = process_cb
        self._delay = max(0.0, float(delay_secs))
        # Only one callback at a time: the store has a single writer
        self._processing_lock = threading.Lock()

    @property
    def delay_secs(self) -> float:
        return self._delay

    def notify(self) -> None:
        if self._delay <= 0:
            self._run()
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._delay, self._flush)
            self._timer.daemon = True
            self._timer.start()

    def _flush(self) -> None:
        with self._lock:
            self._timer = None
        self._run()

    def _run(self) -> None:
        with self._processing_lock:
            try:
                self._process_cb()
            except Exception as exc:
                LOGGER.error(
                    "Change callback failed, still watching",
                    extra={"error": str(exc)},
                    exc_info=True,
                )

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


__all__ = ["ChangeQueue"]
