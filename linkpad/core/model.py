# core/model.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

__all__ = [
    "ROOT_FOLDER_ID",
    "ROOT_FOLDER_NAME",
    "Entry",
    "Folder",
    "Document",
    "new_id",
    "utc_now",
]

# The root folder's identity never changes; it is not a uuid4 so it can't collide.
ROOT_FOLDER_ID = "0" * 32
ROOT_FOLDER_NAME = "Links"

def new_id() -> str:
    return uuid.uuid4().hex

def utc_now() -> datetime:
    # Seconds precision; that is all the on-disk format keeps.
    return datetime.now(timezone.utc).replace(microsecond=0)

@dataclass
class Entry:
    """A saved URL or filesystem path."""
    id: str
    text: str
    created_at: datetime

    @classmethod
    def new(cls, text: str, created_at: Optional[datetime] = None) -> "Entry":
        return cls(id=new_id(), text=text, created_at=created_at or utc_now())

@dataclass
class Folder:
    """Named container of entries (appended) and subfolders (newest first)."""
    id: str
    name: str
    entries: List[Entry] = field(default_factory=list)
    subfolders: List["Folder"] = field(default_factory=list)
    is_collapsed: bool = False

    @classmethod
    def new(cls, name: str) -> "Folder":
        return cls(id=new_id(), name=name)

    @property
    def is_root(self) -> bool:
        return self.id == ROOT_FOLDER_ID

@dataclass
class Document:
    """
    Everything that gets persisted: the folder tree plus the free-form notes.

    The root folder always carries ROOT_FOLDER_ID / ROOT_FOLDER_NAME. Mutation
    goes through core.mutations; nothing else should edit the tree in place.
    """
    root_folder: Folder = field(default_factory=lambda: Folder(ROOT_FOLDER_ID, ROOT_FOLDER_NAME))
    notes: str = ""

    @classmethod
    def new(cls, notes: str = "") -> "Document":
        return cls(root_folder=Folder(ROOT_FOLDER_ID, ROOT_FOLDER_NAME), notes=notes)

    def snapshot(self) -> "Document":
        """Deep copy for the writer thread; later edits never reach it."""
        return copy.deepcopy(self)
