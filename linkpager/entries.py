"""Parsing of the links file into (url, owner) entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Tuple


@dataclass(frozen=True)
class Entry:
    url: str
    owner: str


class ParseResult(NamedTuple):
    entries: Tuple[Entry, ...]
    skipped: int


def parse_line(line: str) -> Entry | None:
    """Return the entry for a ``URL OWNER`` line, or None when malformed."""
    tokens = line.split()
    if len(tokens) != 2:
        return None
    return Entry(url=tokens[0], owner=tokens[1])


def parse_entries(raw_text: str) -> ParseResult:
    """Parse the whole file body.

    Every line must carry exactly two whitespace-separated tokens; anything
    else (blank lines included) is counted in ``skipped``. Entries come back
    most recent first, i.e. the last line of the file is the first entry.
    """
    out = []
    skipped = 0
    for line in raw_text.splitlines():
        entry = parse_line(line)
        if entry is None:
            skipped += 1
            continue
        out.append(entry)
    out.reverse()
    return ParseResult(tuple(out), skipped)


__all__ = ["Entry", "ParseResult", "parse_line", "parse_entries"]
