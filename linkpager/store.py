"""In-memory entry store with atomic replace-on-reload."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

from .entries import Entry, parse_entries
from .logger import ConfigurationError, SourceReadError, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """One published generation of the links file."""

    entries: Tuple[Entry, ...]
    skipped: int
    page_count: int
    loaded_at: float


def _page_count(length: int, page_size: int) -> int:
    return (length + page_size - 1) // page_size


class EntryStore:
    """Holds the current entry list for ``source``.

    The constructor performs the initial load and raises ``SourceReadError``
    if it fails. Readers never take the lock: they grab the current snapshot
    reference once and slice it, so a concurrent reload is either fully
    visible or not visible at all.
    """

    def __init__(self, source: Union[str, Path], page_size: int):
        if page_size < 1:
            raise ConfigurationError(f"page size must be positive, got {page_size}")
        self._source = Path(source)
        self._page_size = int(page_size)
        # Serializes writers only
        self._lock = threading.Lock()
        self._snapshot: Snapshot | None = None
        self.reload()

    @property
    def source(self) -> Path:
        return self._source

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def count(self) -> int:
        return len(self.snapshot.entries)

    @property
    def skipped(self) -> int:
        return self.snapshot.skipped

    @property
    def page_count(self) -> int:
        return self.snapshot.page_count

    @property
    def loaded_at(self) -> float:
        return self.snapshot.loaded_at

    def _read_source(self) -> str:
        try:
            with self._source.open("rb") as f:
                data = f.read()
        except OSError as exc:
            raise SourceReadError(self._source, exc) from exc
        return data.decode("utf-8", errors="replace")

    def reload(self) -> int:
        """Re-read and re-parse the source, then publish the new list.

        Returns the number of entries loaded. On read failure the previous
        list stays in place and ``SourceReadError`` propagates.
        """
        text = self._read_source()
        result = parse_entries(text)
        snap = Snapshot(
            entries=result.entries,
            skipped=result.skipped,
            page_count=_page_count(len(result.entries), self._page_size),
            loaded_at=time.time(),
        )
        with self._lock:
            self._snapshot = snap
        logger.info(
            "Updated link data, loaded %d entries, skipped %d bad lines",
            len(snap.entries),
            snap.skipped,
        )
        return len(snap.entries)

    def page(self, index: int) -> Tuple[Entry, ...]:
        """Return the zero-based page ``index``; empty when there is no such page."""
        entries = self.snapshot.entries
        start = index * self._page_size
        stop = min(start + self._page_size, len(entries))
        if start < 0 or start >= len(entries) or stop <= start:
            return ()
        return entries[start:stop]


__all__ = ["EntryStore", "Snapshot"]
