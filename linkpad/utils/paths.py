'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Union

Pathish = Union[str, Path]

__all__ = [
    "HOME_ENV",
    "SAVE_DELAY_ENV",
    "DOCUMENT_NAME",
    "LEGACY_CSV_NAME",
    "ORIGINAL_CSV_NAME",
    "DEFAULT_SAVE_DELAY",
    "data_dir",
    "document_path",
    "legacy_csv_paths",
    "backup_path",
    "save_delay",
]

HOME_ENV = "LINKPAD_HOME"
SAVE_DELAY_ENV = "LINKPAD_SAVE_DELAY"

DOCUMENT_NAME = "linkpad.json"
LEGACY_CSV_NAME = "links.csv"
ORIGINAL_CSV_NAME = "epanel.csv"
DEFAULT_SAVE_DELAY = 1.0


def data_dir() -> Path:
    """
    Directory holding the document:
      $LINKPAD_HOME if set, else ~/Documents/LinkPad
    Does not create it.
    """
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / "Documents" / "LinkPad"


def document_path(override: Optional[Pathish] = None) -> Path:
    """Path of the saved document; an explicit override wins over the environment."""
    if override is not None:
        return Path(override).expanduser().resolve()
    return data_dir() / DOCUMENT_NAME


def legacy_csv_paths(doc_path: Pathish) -> List[Path]:
    """
    Flat "text,date" files older builds saved, most specific first:
    links.csv next to the document, then ~/Documents/epanel.csv.
    """
    return [
        Path(doc_path).with_name(LEGACY_CSV_NAME),
        Path.home() / "Documents" / ORIGINAL_CSV_NAME,
    ]


def backup_path(doc_path: Pathish) -> Path:
    p = Path(doc_path)
    return p.with_name(p.name + ".bak")


def save_delay() -> float:
    """Debounce delay in seconds from $LINKPAD_SAVE_DELAY, falling back to the default."""
    raw = os.environ.get(SAVE_DELAY_ENV)
    if not raw:
        return DEFAULT_SAVE_DELAY
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_SAVE_DELAY
    return value if value >= 0 else DEFAULT_SAVE_DELAY
