# core/codec.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Set

from linkpad.core.log import Log
from linkpad.core.model import (
    ROOT_FOLDER_ID,
    ROOT_FOLDER_NAME,
    Document,
    Entry,
    Folder,
    new_id,
)

__all__ = [
    "DocumentFormatError",
    "format_date",
    "parse_date",
    "document_to_dict",
    "document_from_dict",
    "dumps_document",
    "loads_document",
]

# Dates written by older builds may be plain numbers: seconds since 2001-01-01 UTC.
_REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)

class DocumentFormatError(ValueError):
    """Payload doesn't match the current or the legacy document schema."""
    pass

# ---------- Dates ----------

def format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

def parse_date(value: Any) -> datetime:
    """Parse an ISO-8601 string (or a legacy reference-epoch number) into aware UTC."""
    if isinstance(value, bool):
        raise DocumentFormatError(f"Invalid date: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return _REFERENCE_EPOCH + timedelta(seconds=value)
        except (OverflowError, ValueError) as e:
            raise DocumentFormatError(f"Date out of range: {value!r}") from e
    if not isinstance(value, str):
        raise DocumentFormatError(f"Invalid date: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise DocumentFormatError(f"Invalid date: {value!r}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as e:
        raise DocumentFormatError(f"Date out of range: {value!r}") from e

# ---------- Encoding ----------

def _entry_to_dict(entry: Entry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "text": entry.text,
        "createdAt": format_date(entry.created_at),
    }

def _folder_to_dict(folder: Folder) -> Dict[str, Any]:
    return {
        "id": folder.id,
        "name": folder.name,
        "isCollapsed": folder.is_collapsed,
        "entries": [_entry_to_dict(e) for e in folder.entries],
        "subfolders": [_folder_to_dict(f) for f in folder.subfolders],
    }

def document_to_dict(document: Document) -> Dict[str, Any]:
    return {
        "rootFolder": _folder_to_dict(document.root_folder),
        "notes": document.notes,
    }

def dumps_document(document: Document) -> str:
    """Serialize with sorted keys and stable indentation so saved files diff cleanly."""
    return json.dumps(document_to_dict(document), indent=2, sort_keys=True, ensure_ascii=False) + "\n"

# ---------- Decoding ----------

class _IdRegistry:
    """Hands out ids while decoding, replacing missing or repeated ones."""

    def __init__(self):
        self.seen: Set[str] = {ROOT_FOLDER_ID}
        self.reassigned = 0

    def claim(self, raw: Any) -> str:
        if isinstance(raw, str) and raw and raw not in self.seen:
            self.seen.add(raw)
            return raw
        fresh = new_id()
        self.seen.add(fresh)
        self.reassigned += 1
        return fresh

def _require(obj: Any, key: str, kind, where: str):
    if not isinstance(obj, dict) or key not in obj:
        raise DocumentFormatError(f"{where}: missing '{key}'")
    value = obj[key]
    if not isinstance(value, kind):
        raise DocumentFormatError(f"{where}: '{key}' has the wrong type")
    return value

def _entry_from_dict(obj: Any, ids: _IdRegistry, date_keys=("createdAt",)) -> Entry:
    text = _require(obj, "text", str, "entry")
    raw_date = next((obj[k] for k in date_keys if k in obj), None)
    if raw_date is None:
        raise DocumentFormatError("entry: missing date")
    return Entry(id=ids.claim(obj.get("id")), text=text, created_at=parse_date(raw_date))

def _folder_from_dict(obj: Any, ids: _IdRegistry) -> Folder:
    name = _require(obj, "name", str, "folder")
    entries = _require(obj, "entries", list, "folder")
    subfolders = _require(obj, "subfolders", list, "folder")
    folder = Folder(
        id=ids.claim(obj.get("id")),
        name=name,
        is_collapsed=bool(obj.get("isCollapsed", False)),
    )
    folder.entries = [_entry_from_dict(e, ids) for e in entries]
    folder.subfolders = [_folder_from_dict(f, ids) for f in subfolders]
    return folder

def _current_from_dict(payload: Dict[str, Any], ids: _IdRegistry) -> Document:
    raw_root = _require(payload, "rootFolder", dict, "document")
    notes = payload.get("notes", "")
    if not isinstance(notes, str):
        raise DocumentFormatError("document: 'notes' has the wrong type")

    entries = _require(raw_root, "entries", list, "rootFolder")
    subfolders = _require(raw_root, "subfolders", list, "rootFolder")

    # The root's identity is fixed no matter what the payload says.
    document = Document.new(notes=notes)
    root = document.root_folder
    root.entries = [_entry_from_dict(e, ids) for e in entries]
    root.subfolders = [_folder_from_dict(f, ids) for f in subfolders]
    return document

def _legacy_from_dict(payload: Dict[str, Any], ids: _IdRegistry) -> Document:
    """
    Upgrade the old flat layout: {folders: [...], rootEntries: [...], notes}.
    Legacy folders hold only entries; they become direct children of root.
    """
    folders = _require(payload, "folders", list, "legacy document")
    root_entries = _require(payload, "rootEntries", list, "legacy document")
    notes = payload.get("notes", "")
    if not isinstance(notes, str):
        raise DocumentFormatError("legacy document: 'notes' has the wrong type")

    legacy_keys = ("createdAt", "date")
    document = Document.new(notes=notes)
    root = document.root_folder
    root.entries = [_entry_from_dict(e, ids, legacy_keys) for e in root_entries]

    for raw in folders:
        name = _require(raw, "name", str, "legacy folder")
        raw_entries = _require(raw, "entries", list, "legacy folder") if "entries" in raw else []
        folder = Folder(id=ids.claim(raw.get("id")), name=name,
                        is_collapsed=bool(raw.get("isCollapsed", False)))
        folder.entries = [_entry_from_dict(e, ids, legacy_keys) for e in raw_entries]
        root.subfolders.append(folder)

    return document

def document_from_dict(payload: Any) -> Document:
    """
    Decode a document, falling back to the legacy flat schema.
    Raises DocumentFormatError if neither schema fits.
    """
    if not isinstance(payload, dict):
        raise DocumentFormatError("Document must be a JSON object")

    ids = _IdRegistry()
    try:
        document = _current_from_dict(payload, ids)
    except DocumentFormatError as current_err:
        ids = _IdRegistry()
        try:
            document = _legacy_from_dict(payload, ids)
        except DocumentFormatError:
            raise current_err
        Log.debug("Upgraded legacy flat document to nested root folder", 1)

    if ids.reassigned:
        Log.debug(f"Assigned fresh ids to {ids.reassigned} item(s) with missing or duplicate ids", 0)
    return document

def loads_document(text: str) -> Document:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Malformed JSON: {e}") from e
    except RecursionError as e:
        raise DocumentFormatError("Document is nested too deeply") from e
    try:
        return document_from_dict(payload)
    except RecursionError as e:
        raise DocumentFormatError("Folders are nested too deeply") from e
