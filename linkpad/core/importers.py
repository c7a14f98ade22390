# core/importers.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import plistlib
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Union
from xml.parsers.expat import ExpatError

from linkpad.core.codec import DocumentFormatError, loads_document, parse_date
from linkpad.core.log import Log
from linkpad.core.model import Document, Entry, Folder, utc_now
from linkpad.core.mutations import create_folder
from linkpad.core.navigator import all_entries, count_items, find_folder

__all__ = [
    "ImportFormat",
    "ImportFormatError",
    "ImportResult",
    "SAFARI_FOLDER_NAME",
    "UNTITLED_FOLDER_NAME",
    "detect_format",
    "normalize_text",
    "parse_delimited",
    "parse_bookmarks",
    "parse_structured",
    "merge_delimited",
    "merge_structural",
    "merge_bookmarks",
    "import_file",
]

SAFARI_FOLDER_NAME = "Imported-Safari"
UNTITLED_FOLDER_NAME = "Untitled Folder"
IMPORTED_FOLDER_PREFIX = "Imported-"

_LEAF = "WebBookmarkTypeLeaf"
_LIST = "WebBookmarkTypeList"

Pathish = Union[str, Path]
ConfirmFn = Callable[[str], bool]

class ImportFormat(Enum):
    STRUCTURED = "structured"   # full document export; replaces everything
    DELIMITED = "delimited"     # "text,date" lines; additive merge
    BOOKMARKS = "bookmarks"     # browser bookmark plist; structural merge

class ImportFormatError(ValueError):
    """The import source could not be parsed."""
    pass

@dataclass
class ImportResult:
    format: ImportFormat
    added: int = 0
    duplicates: int = 0
    folders_created: int = 0
    replaced: bool = False
    message: str = ""

def detect_format(path: Pathish) -> ImportFormat:
    """Pick the import format from the file extension; unknown ones are delimited text."""
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return ImportFormat.STRUCTURED
    if suffix == ".plist":
        return ImportFormat.BOOKMARKS
    return ImportFormat.DELIMITED

def normalize_text(text: str) -> str:
    return text.strip().lower()

def _plural(n: int, word: str) -> str:
    if n == 1:
        return f"{n} {word}"
    if word.endswith("y"):
        return f"{n} {word[:-1]}ies"
    return f"{n} {word}s"

# ---------- Delimited text ----------

def _parse_line_date(raw: str) -> Optional[datetime]:
    raw = raw.strip()
    try:
        day = datetime.strptime(raw, "%Y-%m-%d")
        return day.replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        return parse_date(raw)
    except DocumentFormatError:
        return None

def parse_delimited(text: str) -> List[Entry]:
    """
    Parse "text,date" lines into fresh entries.

    Only the last comma-separated field is the date; everything before it is
    the text, commas included. Lines without a usable date are skipped.
    """
    entries = []
    for line in text.splitlines():
        if not line.strip():
            continue
        body, sep, raw_date = line.rpartition(",")
        if not sep or not body:
            continue
        created_at = _parse_line_date(raw_date)
        if created_at is None:
            Log.debug(f"Skipping line with unreadable date: {line!r}", 2)
            continue
        entries.append(Entry.new(body, created_at))
    return entries

def merge_delimited(root: Folder, entries: List[Entry], today: Optional[date] = None) -> ImportResult:
    """
    Add the entries whose text isn't already in the tree (exact match) to a new
    "Imported-<date>" folder under root. No folder is made if nothing is new.
    """
    result = ImportResult(ImportFormat.DELIMITED)
    existing = {e.text for e in all_entries(root)}
    unique = [e for e in entries if e.text not in existing]
    result.duplicates = len(entries) - len(unique)

    if not unique:
        result.message = f"No new entries to import ({_plural(result.duplicates, 'duplicate')} skipped)."
        return result

    name = f"{IMPORTED_FOLDER_PREFIX}{(today or date.today()).isoformat()}"
    folder = find_folder(root, create_folder(root, name))
    folder.entries.extend(unique)

    result.added = len(unique)
    result.folders_created = 1
    result.message = (
        f"Imported {_plural(result.added, 'entry')} into '{name}'"
        f" ({_plural(result.duplicates, 'duplicate')} skipped)."
    )
    return result

# ---------- Bookmark plist ----------

def _stage_children(children: Iterable, into: Folder, stamp: datetime) -> None:
    for node in children:
        if not isinstance(node, dict):
            continue
        kind = node.get("WebBookmarkType")
        if kind == _LEAF:
            url = node.get("URLString")
            if isinstance(url, str) and url.strip():
                into.entries.append(Entry.new(url, stamp))
        elif kind == _LIST:
            title = node.get("Title")
            name = title if isinstance(title, str) and title.strip() else UNTITLED_FOLDER_NAME
            sub = Folder.new(name)
            _stage_children(node.get("Children") or [], sub, stamp)
            into.subfolders.append(sub)
        # Proxy nodes (History, Reading List placeholders) hold nothing to import.

def parse_bookmarks(data: bytes) -> Folder:
    """
    Convert a Safari-style bookmark plist (XML or binary) into a staging folder.
    Leaves become entries stamped with the import time; lists become subfolders.
    """
    try:
        payload = plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError) as e:
        raise ImportFormatError(f"Not a readable bookmark export: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("Children"), list):
        raise ImportFormatError("Bookmark export has no top-level bookmark list")

    staging = Folder.new(SAFARI_FOLDER_NAME)
    _stage_children(payload["Children"], staging, utc_now())
    return staging

def merge_structural(dest: Folder, source: Folder, seen: Set[str], result: ImportResult) -> None:
    """
    Merge source into dest, folder by folder.

    seen holds normalized texts from the whole destination tree and grows as
    entries are added, so repeats inside the same import are caught too.
    Subfolders pair up by case-insensitive name; unmatched ones are created.
    """
    for entry in source.entries:
        key = normalize_text(entry.text)
        if key in seen:
            result.duplicates += 1
            continue
        dest.entries.append(entry)
        seen.add(key)
        result.added += 1

    for sub in source.subfolders:
        wanted = sub.name.lower()
        match = next((f for f in dest.subfolders if f.name.lower() == wanted), None)
        if match is None:
            match = Folder.new(sub.name)
            dest.subfolders.append(match)
            result.folders_created += 1
        merge_structural(match, sub, seen, result)

def merge_bookmarks(root: Folder, staging: Folder) -> ImportResult:
    """Merge a staged bookmark tree into the Imported-Safari folder, creating it if needed."""
    result = ImportResult(ImportFormat.BOOKMARKS)
    seen = {normalize_text(e.text) for e in all_entries(root)}

    target = next((f for f in root.subfolders if f.name == SAFARI_FOLDER_NAME), None)
    if target is None:
        target = find_folder(root, create_folder(root, SAFARI_FOLDER_NAME))
        result.folders_created += 1

    merge_structural(target, staging, seen, result)
    result.message = (
        f"Imported {_plural(result.added, 'bookmark')} into '{SAFARI_FOLDER_NAME}'"
        f" ({_plural(result.folders_created, 'new folder')},"
        f" {_plural(result.duplicates, 'duplicate')} skipped)."
    )
    return result

# ---------- Structured document ----------

def parse_structured(data: bytes) -> Document:
    try:
        return loads_document(data.decode("utf-8-sig"))
    except UnicodeDecodeError as e:
        raise ImportFormatError(f"Document is not UTF-8 text: {e}") from e
    except DocumentFormatError as e:
        raise ImportFormatError(f"Not a LinkPad document: {e}") from e

# ---------- Dispatch ----------

def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportFormatError(f"File is not UTF-8 text: {e}") from e

def import_file(document: Document, path: Pathish, confirm_replace: Optional[ConfirmFn] = None,
                today: Optional[date] = None) -> ImportResult:
    """
    Read path and bring it into document according to its format.

    Everything is parsed before the tree is touched, so a parse failure
    (ImportFormatError) leaves the document as it was. OSError from reading
    propagates. A structured import only replaces the document if
    confirm_replace(question) returns True.
    """
    path = Path(path)
    fmt = detect_format(path)
    data = path.read_bytes()
    Log.debug(f"Importing {path.name} as {fmt.value}", 1)

    if fmt is ImportFormat.STRUCTURED:
        incoming = parse_structured(data)
        folders, entries = count_items(incoming.root_folder)
        question = (
            f"Replace all folders, entries and notes with the contents of '{path.name}'"
            f" ({_plural(folders, 'folder')}, {_plural(entries, 'entry')})?"
        )
        if confirm_replace is None or not confirm_replace(question):
            return ImportResult(fmt, message="Import cancelled; nothing was replaced.")

        document.root_folder = incoming.root_folder
        document.notes = incoming.notes
        return ImportResult(
            fmt,
            added=entries,
            folders_created=folders,
            replaced=True,
            message=f"Replaced document with '{path.name}' ({_plural(folders, 'folder')}, {_plural(entries, 'entry')}).",
        )

    if fmt is ImportFormat.BOOKMARKS:
        staging = parse_bookmarks(data)
        if not staging.entries and not staging.subfolders:
            raise ImportFormatError(f"No bookmarks found in '{path.name}'")
        return merge_bookmarks(document.root_folder, staging)

    entries = parse_delimited(_decode_text(data))
    if not entries:
        raise ImportFormatError(f"No valid 'text,date' lines found in '{path.name}'")
    return merge_delimited(document.root_folder, entries, today)
