# core/targets.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

__all__ = ["TargetKind", "EntryTarget", "classify_entry_text"]

# "scheme:" per RFC 3986; at least two characters so "C:\..." stays a path.
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")

class TargetKind(Enum):
    URL = "url"
    FILE = "file"
    DIRECTORY = "directory"
    MISSING = "missing"

@dataclass(frozen=True)
class EntryTarget:
    kind: TargetKind
    value: str

    @property
    def error(self) -> str:
        return f"Path not found: {self.value}" if self.kind is TargetKind.MISSING else ""

def classify_entry_text(text: str) -> EntryTarget:
    """Decide what opening an entry means: a URL, or an existing file or directory."""
    raw = text.strip()
    if not raw:
        return EntryTarget(TargetKind.MISSING, raw)
    if _SCHEME_RE.match(raw):
        return EntryTarget(TargetKind.URL, raw)

    path = Path(raw).expanduser()
    if path.is_dir():
        return EntryTarget(TargetKind.DIRECTORY, str(path))
    if path.exists():
        return EntryTarget(TargetKind.FILE, str(path))
    return EntryTarget(TargetKind.MISSING, raw)
