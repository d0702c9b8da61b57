"""Building blocks for watching the links file.

Modules:
    config: watcher settings and logger
    queue: optional debounced change queue
    handler: watchdog event handler filtering events for one file
    utils: observer factory and env helpers
    watcher: FileWatcher facade tying the pieces together
"""

from . import config, queue, handler, utils, watcher
from .watcher import FileWatcher, watch

__all__ = [
    "config",
    "queue",
    "handler",
    "utils",
    "watcher",
    "FileWatcher",
    "watch",
]
