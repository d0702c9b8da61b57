"""Per-request page views over an ``EntryStore``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .entries import Entry
from .logger import PageNotFound
from .store import EntryStore


@dataclass(frozen=True)
class PageView:
    items: Tuple[Entry, ...]
    page: int
    has_next: bool
    next_page: int
    has_prev: bool
    prev_page: int


def build_page(store: EntryStore, index: int) -> PageView:
    """Build the view for page ``index`` or raise ``PageNotFound``.

    A full page is taken to mean a next page exists, so a list whose length
    is an exact multiple of the page size advertises one page too many.
    """
    items = store.page(index)
    if not items:
        raise PageNotFound(index)
    return PageView(
        items=items,
        page=index,
        has_next=len(items) == store.page_size,
        next_page=index + 1,
        has_prev=index > 0,
        prev_page=index - 1,
    )


__all__ = ["PageView", "build_page"]
