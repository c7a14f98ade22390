# core/mutations.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Optional

from linkpad.core.log import Log
from linkpad.core.model import ROOT_FOLDER_ID, Entry, Folder
from linkpad.core.navigator import (
    find_folder,
    find_parent_folder,
    locate_entry,
    is_descendant,
)

__all__ = [
    "create_folder",
    "rename_folder",
    "delete_folder",
    "toggle_folder_collapsed",
    "add_entry",
    "delete_entry",
    "move_entry",
    "move_folder",
]

# Unknown ids and structurally illegal requests are silent no-ops: the UI can
# legitimately be a step behind the model. Every function reports whether it
# changed anything so the caller knows when to notify and save.

# ---------- Folders ----------

def create_folder(root: Folder, name: str, parent_id: str = ROOT_FOLDER_ID) -> Optional[str]:
    """
    Create a folder at the front of parent_id's subfolders.
    Returns the new folder id, or None if the parent doesn't exist.
    """
    parent = find_folder(root, parent_id)
    if parent is None:
        Log.debug(f"create_folder: parent {parent_id} not found", 2)
        return None

    folder = Folder.new(name)
    parent.subfolders.insert(0, folder)
    Log.debug(f"Created folder '{name}' ({folder.id}) under {parent.id}", 1)
    return folder.id

def rename_folder(root: Folder, folder_id: str, new_name: str) -> bool:
    """Rename a folder. Root and blank names are refused."""
    if folder_id == ROOT_FOLDER_ID:
        return False
    name = new_name.strip()
    if not name:
        return False

    folder = find_folder(root, folder_id)
    if folder is None:
        return False
    # Stored as typed; only the emptiness check uses the trimmed form.
    folder.name = new_name
    return True

def delete_folder(root: Folder, folder_id: str) -> bool:
    """Remove a folder and everything under it. Root can't be deleted."""
    if folder_id == ROOT_FOLDER_ID:
        return False

    parent = find_parent_folder(root, folder_id)
    if parent is None:
        return False

    parent.subfolders = [f for f in parent.subfolders if f.id != folder_id]
    Log.debug(f"Deleted folder {folder_id}", 1)
    return True

def toggle_folder_collapsed(root: Folder, folder_id: str) -> bool:
    if folder_id == ROOT_FOLDER_ID:
        return False
    folder = find_folder(root, folder_id)
    if folder is None:
        return False
    folder.is_collapsed = not folder.is_collapsed
    return True

def move_folder(root: Folder, folder_id: str, to_parent_id: str) -> bool:
    """
    Move folder_id (with its subtree) to the front of to_parent_id's subfolders.

    Refused for root, for a folder moved into itself, and for a move into one
    of its own descendants, which would detach a cycle from the tree.
    """
    if folder_id == ROOT_FOLDER_ID or folder_id == to_parent_id:
        return False
    if is_descendant(root, to_parent_id, folder_id):
        Log.debug(f"move_folder: {to_parent_id} is inside {folder_id}, refusing", 1)
        return False

    parent = find_parent_folder(root, folder_id)
    dest = find_folder(root, to_parent_id)
    if parent is None or dest is None:
        return False

    idx = next(i for i, f in enumerate(parent.subfolders) if f.id == folder_id)
    folder = parent.subfolders.pop(idx)
    dest.subfolders.insert(0, folder)
    Log.debug(f"Moved folder {folder_id} from {parent.id} to {dest.id}", 1)
    return True

# ---------- Entries ----------

def add_entry(root: Folder, entry: Entry, to_folder_id: str = ROOT_FOLDER_ID) -> bool:
    """Append entry to the end of a folder's entries. An id already in the tree is refused."""
    if locate_entry(root, entry.id) is not None:
        Log.debug(f"add_entry: entry {entry.id} is already in the tree", 2)
        return False
    folder = find_folder(root, to_folder_id)
    if folder is None:
        Log.debug(f"add_entry: folder {to_folder_id} not found", 2)
        return False
    folder.entries.append(entry)
    return True

def delete_entry(root: Folder, entry_id: str) -> bool:
    loc = locate_entry(root, entry_id)
    if loc is None:
        return False
    folder, idx = loc
    del folder.entries[idx]
    Log.debug(f"Deleted entry {entry_id}", 1)
    return True

def move_entry(root: Folder, entry_id: str, to_folder_id: str) -> bool:
    """
    Move an entry to the end of another folder's entries.

    Both the entry and the destination are resolved before anything is
    removed, so a bad destination leaves the entry where it was.
    """
    loc = locate_entry(root, entry_id)
    dest = find_folder(root, to_folder_id)
    if loc is None or dest is None:
        return False

    folder, idx = loc
    entry = folder.entries.pop(idx)
    dest.entries.append(entry)
    Log.debug(f"Moved entry {entry_id} from {folder.id} to {dest.id}", 1)
    return True
