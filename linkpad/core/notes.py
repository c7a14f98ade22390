# core/notes.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Tuple

__all__ = ["find_matches", "replace_match", "replace_all", "FindState"]

Span = Tuple[int, int]

def _pattern(query: str, case_sensitive: bool, whole_words: bool) -> re.Pattern:
    body = re.escape(query)
    if whole_words:
        body = rf"\b{body}\b"
    return re.compile(body, 0 if case_sensitive else re.IGNORECASE)

def find_matches(text: str, query: str, case_sensitive: bool = False,
                 whole_words: bool = False) -> List[Span]:
    """Return (start, end) spans of every literal occurrence of query in text."""
    if not query:
        return []
    return [m.span() for m in _pattern(query, case_sensitive, whole_words).finditer(text)]

def replace_match(text: str, span: Span, replacement: str) -> str:
    start, end = span
    return text[:start] + replacement + text[end:]

def replace_all(text: str, query: str, replacement: str, case_sensitive: bool = False,
                whole_words: bool = False) -> Tuple[str, int]:
    """Replace every match. Returns (new text, number of replacements)."""
    if not query:
        return text, 0
    pattern = _pattern(query, case_sensitive, whole_words)
    return pattern.subn(lambda _m: replacement, text)

@dataclass
class FindState:
    """
    Find/replace cursor over a block of notes text.

    `current` is -1 when there are no matches. Navigation wraps at both ends.
    """
    text: str
    query: str = ""
    case_sensitive: bool = False
    whole_words: bool = False
    matches: List[Span] = field(default_factory=list)
    current: int = -1

    def __post_init__(self):
        self.refresh()

    def refresh(self):
        self.matches = find_matches(self.text, self.query, self.case_sensitive, self.whole_words)
        self.current = 0 if self.matches else -1

    def find_next(self) -> int:
        if self.matches:
            self.current = (self.current + 1) % len(self.matches)
        return self.current

    def find_previous(self) -> int:
        if self.matches:
            self.current = (self.current - 1) % len(self.matches)
        return self.current

    def replace_current(self, replacement: str) -> bool:
        """Replace the selected match, then re-scan and keep the cursor in range."""
        if not self.matches:
            return False
        index = self.current
        self.text = replace_match(self.text, self.matches[index], replacement)
        self.matches = find_matches(self.text, self.query, self.case_sensitive, self.whole_words)
        self.current = min(index, len(self.matches) - 1) if self.matches else -1
        return True

    def replace_all(self, replacement: str) -> int:
        self.text, count = replace_all(self.text, self.query, replacement,
                                       self.case_sensitive, self.whole_words)
        self.matches = []
        self.current = -1
        return count
