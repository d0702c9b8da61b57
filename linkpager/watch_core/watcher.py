"""FileWatcher: run a callback whenever one file changes on disk."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional, Type, Union

from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from linkpager.logger import ContextLogger, WatchError

from .config import LOGGER, debounce_secs_default, use_polling_default
from .handler import ReloadHandler
from .queue import ChangeQueue
from .utils import create_observer, normalize_path


class FileWatcher:
    """Watches ``path`` and invokes ``on_change`` for each change event.

    The observer runs in its own thread. ``start()`` raises ``WatchError``
    when the watch cannot be established; failures inside ``on_change`` are
    logged and the watch keeps running.

    Example:
        >>> with FileWatcher("links.txt", store.reload):
        ...     serve_forever()
    """

    def __init__(
        self,
        path: Union[str, Path],
        on_change: Callable[[], None],
        *,
        use_polling: Optional[bool] = None,
        debounce_secs: Optional[float] = None,
        observer_cls: Type[BaseObserver] = Observer,
    ):
        self.path = Path(normalize_path(path))
        self.on_change = on_change
        self.use_polling = use_polling_default() if use_polling is None else bool(use_polling)
        self.debounce_secs = debounce_secs_default() if debounce_secs is None else float(debounce_secs)
        self._observer_cls = observer_cls
        self._observer: BaseObserver | None = None
        self._queue: ChangeQueue | None = None
        self._log = ContextLogger(LOGGER, path=str(self.path))

    @property
    def running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> "FileWatcher":
        if self._observer is not None:
            raise WatchError(f"already watching {self.path}")
        if not self.path.exists():
            raise WatchError(f"cannot watch {self.path}: no such file")
        if self.path.is_dir():
            raise WatchError(f"cannot watch {self.path}: is a directory")

        queue = ChangeQueue(self.on_change, self.debounce_secs)
        handler = ReloadHandler(self.path, queue)
        observer = create_observer(self.use_polling, observer_cls=self._observer_cls)
        try:
            observer.schedule(handler, str(self.path.parent), recursive=False)
            observer.start()
        except OSError as exc:
            raise WatchError(f"cannot watch {self.path}: {exc}") from exc

        self._queue = queue
        self._observer = observer
        self._log.info("Watching file for changes", debounce_secs=self.debounce_secs)
        return self

    def stop(self) -> None:
        observer, self._observer = self._observer, None
        queue, self._queue = self._queue, None
        if queue is not None:
            queue.cancel()
        if observer is not None:
            observer.stop()
            observer.join()
            self._log.info("Stopped watching file")

    def __enter__(self) -> "FileWatcher":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()


def watch(path: Union[str, Path], on_change: Callable[[], None], **kwargs) -> None:
    """Block watching ``path`` until interrupted."""
    with FileWatcher(path, on_change, **kwargs):
        try:
            while True:
                time.sleep(1.0)
        except KeyboardInterrupt:
            pass


__all__ = ["FileWatcher", "watch"]
