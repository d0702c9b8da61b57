"""linkpager: serve a links file as paginated HTML, reloading it on change."""

from ._version import __version__
from .entries import Entry, ParseResult, parse_entries
from .store import EntryStore, Snapshot
from .pagination import PageView, build_page

__all__ = [
    "__version__",
    "Entry",
    "ParseResult",
    "parse_entries",
    "EntryStore",
    "Snapshot",
    "PageView",
    "build_page",
]
