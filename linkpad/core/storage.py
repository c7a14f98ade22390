# core/storage.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from pathlib import Path
from typing import Union

from linkpad.core.codec import DocumentFormatError, dumps_document, loads_document
from linkpad.core.importers import parse_delimited
from linkpad.core.log import Log
from linkpad.core.model import Document
from linkpad.utils.fs_atomic import atomic_copy, atomic_write_text
from linkpad.utils.paths import backup_path, legacy_csv_paths

__all__ = ["load_document", "save_document", "backup_document", "preserve_corrupt"]

Pathish = Union[str, Path]

def _read_utf8(p: Path) -> str:
    """Read a text file; bytes that aren't UTF-8 count as a malformed document."""
    data = p.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DocumentFormatError(f"{p.name} is not UTF-8 text: {e}") from e

def load_document(path: Pathish) -> Document:
    """
    Load the document at path.

    A missing file gives an empty document, seeded from the first legacy
    "text,date" file found (links.csv beside it, then ~/Documents/epanel.csv).
    Raises DocumentFormatError on a corrupt or non-UTF-8 file and OSError
    when it can't be read.
    """
    p = Path(path)
    if p.exists():
        document = loads_document(_read_utf8(p))
        Log.debug(f"Loaded document from {p}", 1)
        return document

    document = Document.new()
    legacy = next((c for c in legacy_csv_paths(p) if c.is_file()), None)
    if legacy is not None:
        entries = parse_delimited(_read_utf8(legacy))
        document.root_folder.entries.extend(entries)
        Log.debug(f"Migrated {len(entries)} entries from {legacy}", 0)
    else:
        Log.debug(f"No document at {p}; starting empty", 1)
    return document

def save_document(path: Pathish, document: Document) -> None:
    """Atomically write document to path. Raises OSError on failure."""
    atomic_write_text(path, dumps_document(document))
    Log.debug(f"Saved document to {path}", 2)

def backup_document(path: Pathish, document: Document) -> Path:
    """Write document to <name>.bak beside path and return the backup path."""
    dst = backup_path(path)
    save_document(dst, document)
    Log.debug(f"Backed up document to {dst.name}", 1)
    return dst

def preserve_corrupt(path: Pathish) -> Path:
    """Copy an unreadable document to <name>.corrupt so a later save can't destroy it."""
    p = Path(path)
    dst = p.with_name(p.name + ".corrupt")
    atomic_copy(p, dst)
    Log.debug(f"Kept unreadable document as {dst.name}", 0)
    return dst
