# core/exporters.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from linkpad.core.codec import dumps_document
from linkpad.core.log import Log
from linkpad.core.model import Document, Folder
from linkpad.core.navigator import all_entries
from linkpad.utils.fs_atomic import atomic_write_text

__all__ = ["ExportFormat", "detect_export_format", "export_delimited", "export_document"]

Pathish = Union[str, Path]

class ExportFormat(Enum):
    STRUCTURED = "structured"
    DELIMITED = "delimited"

def detect_export_format(path: Pathish) -> ExportFormat:
    if Path(path).suffix.lower() == ".json":
        return ExportFormat.STRUCTURED
    return ExportFormat.DELIMITED

def export_delimited(root: Folder) -> str:
    """Flatten every entry into "text,YYYY-MM-DD" lines, in tree order."""
    return "\n".join(
        f"{entry.text},{entry.created_at.strftime('%Y-%m-%d')}"
        for entry in all_entries(root)
    )

def export_document(document: Document, path: Pathish, fmt: Optional[ExportFormat] = None) -> ExportFormat:
    """Write document to path (atomically). Raises OSError on failure."""
    fmt = fmt or detect_export_format(path)
    if fmt is ExportFormat.STRUCTURED:
        payload = dumps_document(document)
    else:
        payload = export_delimited(document.root_folder)
    atomic_write_text(path, payload)
    Log.debug(f"Exported {fmt.value} document to {path}", 1)
    return fmt
