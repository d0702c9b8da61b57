"""Watchdog event handler that reacts to changes of a single file."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler

from .config import LOGGER
from .utils import normalize_path


class ReloadHandler(FileSystemEventHandler):
    """Forwards events about ``target`` to ``queue.notify()``.

    The observer watches the parent directory, so everything else happening
    there is dropped here.
    """

    def __init__(self, target: Union[str, Path], queue):
        super().__init__()
        self.target = normalize_path(target)
        self.queue = queue

    def _concerns_target(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        if normalize_path(event.src_path) == self.target:
            return True
        dest = getattr(event, "dest_path", None)
        return bool(dest) and normalize_path(dest) == self.target

    def _maybe_notify(self, event: FileSystemEvent) -> None:
        if not self._concerns_target(event):
            return
        LOGGER.debug("Change detected on %s (%s)", self.target, event.event_type)
        self.queue.notify()

    def on_modified(self, event):
        self._maybe_notify(event)

    def on_created(self, event):
        self._maybe_notify(event)

    def on_deleted(self, event):
        self._maybe_notify(event)

    def on_moved(self, event):
        self._maybe_notify(event)


__all__ = ["ReloadHandler"]
