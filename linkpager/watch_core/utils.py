"""Misc utilities shared across watch_core modules."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Type, Union

from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from .config import LOGGER


def create_observer(use_polling: bool, observer_cls: Type[BaseObserver] = Observer) -> BaseObserver:
    """Create a watchdog observer based on configuration."""
    if use_polling:
        from watchdog.observers.polling import PollingObserver

        LOGGER.info("Using polling observer for filesystem events")
        return PollingObserver()
    return observer_cls()


def normalize_path(path: Union[str, bytes, Path]) -> str:
    """Absolute, normalized form used to compare event paths with the target."""
    if isinstance(path, bytes):
        path = os.fsdecode(path)
    return os.path.normpath(os.path.abspath(str(path)))


__all__ = ["create_observer", "normalize_path"]
