"""Shared configuration and logging helpers for the file watcher."""

from __future__ import annotations

import os

from linkpager.logger import get_logger, safe_bool, safe_float


LOGGER = get_logger("linkpager.watch")


def use_polling_default() -> bool:
    return safe_bool(os.environ.get("LINKPAGER_WATCH_USE_POLLING"), False, LOGGER, "LINKPAGER_WATCH_USE_POLLING")


def debounce_secs_default() -> float:
    """Debounce interval for change events; 0 fires once per event."""
    return max(
        0.0,
        safe_float(os.environ.get("LINKPAGER_WATCH_DEBOUNCE_SECS"), 0.0, LOGGER, "LINKPAGER_WATCH_DEBOUNCE_SECS"),
    )
