# core/search.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Iterable, List

from linkpad.core.model import Entry

__all__ = ["filter_entries", "sort_entries"]

def filter_entries(entries: Iterable[Entry], query: str) -> List[Entry]:
    """Entries whose text contains query, ignoring case. An empty query keeps everything."""
    if not query:
        return list(entries)
    needle = query.casefold()
    return [e for e in entries if needle in e.text.casefold()]

def sort_entries(entries: Iterable[Entry], ascending: bool = True) -> List[Entry]:
    return sorted(entries, key=lambda e: e.text, reverse=not ascending)
