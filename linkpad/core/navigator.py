# core/navigator.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from linkpad.core.model import ROOT_FOLDER_ID, Entry, Folder

__all__ = [
    "iter_folders",
    "find_folder",
    "find_parent_folder",
    "find_entry",
    "locate_entry",
    "find_containing_folder_id",
    "is_descendant",
    "all_entries",
    "count_items",
]

# Every lookup walks the tree depth-first: a folder before its children,
# children in storage order. Trees are personal-sized, so no index is kept.

def iter_folders(folder: Folder) -> Iterator[Folder]:
    """Yield folder and every folder below it, depth-first."""
    yield folder
    for sub in folder.subfolders:
        yield from iter_folders(sub)

def find_folder(root: Folder, folder_id: str) -> Optional[Folder]:
    if folder_id == ROOT_FOLDER_ID:
        return root
    return next((f for f in iter_folders(root) if f.id == folder_id), None)

def find_parent_folder(root: Folder, folder_id: str) -> Optional[Folder]:
    """Return the folder whose subfolders hold folder_id, or None (root or unknown)."""
    for f in iter_folders(root):
        if any(sub.id == folder_id for sub in f.subfolders):
            return f
    return None

def locate_entry(root: Folder, entry_id: str) -> Optional[Tuple[Folder, int]]:
    """Return (holding folder, index) for entry_id, or None if absent."""
    for f in iter_folders(root):
        for idx, entry in enumerate(f.entries):
            if entry.id == entry_id:
                return f, idx
    return None

def find_entry(root: Folder, entry_id: str) -> Optional[Entry]:
    loc = locate_entry(root, entry_id)
    if loc is None:
        return None
    folder, idx = loc
    return folder.entries[idx]

def find_containing_folder_id(root: Folder, item_id: str) -> str:
    """
    Where should something "added at item_id" go?

    A folder id answers itself (add *into* the selected folder), an entry id
    answers the folder holding it, and anything unknown falls back to root.
    """
    if find_folder(root, item_id) is not None:
        return item_id
    loc = locate_entry(root, item_id)
    if loc is not None:
        return loc[0].id
    return ROOT_FOLDER_ID

def is_descendant(root: Folder, folder_id: str, ancestor_id: str) -> bool:
    """True iff folder_id sits somewhere below ancestor_id (never ancestor_id itself)."""
    ancestor = find_folder(root, ancestor_id)
    if ancestor is None:
        return False
    for sub in ancestor.subfolders:
        if any(f.id == folder_id for f in iter_folders(sub)):
            return True
    return False

def all_entries(root: Folder) -> List[Entry]:
    """Every entry in the tree, in traversal order."""
    return [entry for f in iter_folders(root) for entry in f.entries]

def count_items(root: Folder) -> Tuple[int, int]:
    """Return (folder count excluding root, entry count)."""
    folders = 0
    entries = 0
    for f in iter_folders(root):
        folders += 1
        entries += len(f.entries)
    return folders - 1, entries
