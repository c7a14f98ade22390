# core/store.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import threading
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Union

from linkpad.core import mutations
from linkpad.core import navigator
from linkpad.core.codec import DocumentFormatError
from linkpad.core.exporters import ExportFormat, export_document
from linkpad.core.importers import ImportFormatError, ImportResult
from linkpad.core.importers import import_file as run_import
from linkpad.core.io_worker import IOWorker
from linkpad.core.log import Log
from linkpad.core.model import ROOT_FOLDER_ID, Document, Entry, Folder
from linkpad.core.notes import FindState, replace_all
from linkpad.core.persistence import PersistenceController, SaveState
from linkpad.core.search import filter_entries, sort_entries
from linkpad.core.storage import backup_document, load_document, preserve_corrupt, save_document
from linkpad.utils.paths import document_path, save_delay

__all__ = ["LinkStore"]

Pathish = Union[str, Path]

class LinkStore:
    """
    The one owner of a LinkPad document and the API the UI talks to.

    OVERVIEW:
    - Folder/entry commands go through core.mutations under a single lock, so
      the save timer and writer thread never see a half-applied change.
    - Every command that changes the tree fires on_change() and schedules a
      debounced save. Commands that change nothing stay silent.
    - Unknown ids and illegal moves are no-ops (False/None), never errors.
    - Import/export/save problems are reported through on_alert(message);
      the in-memory document stays authoritative.

    Build one at startup with LinkStore.open() and pass it to whoever needs it.
    """

    def __init__(self, document: Optional[Document] = None, *,
                 path: Optional[Pathish] = None,
                 delay: Optional[float] = None,
                 post: Optional[Callable] = None,
                 io_worker: Optional[IOWorker] = None,
                 on_alert: Optional[Callable[[str], None]] = None,
                 on_change: Optional[Callable[[], None]] = None,
                 save_fn: Callable = save_document):
        self._document = document or Document.new()
        self._lock = threading.RLock()
        self.on_alert = on_alert
        self.on_change = on_change

        self._persistence: Optional[PersistenceController] = None
        if path is not None:
            self._persistence = PersistenceController(
                path,
                self.snapshot,
                io_worker=io_worker,
                delay=save_delay() if delay is None else delay,
                post=post,
                on_error=self.alert,
                save_fn=save_fn,
            )

    @classmethod
    def open(cls, path: Optional[Pathish] = None, **kwargs) -> "LinkStore":
        """
        Load the document at path (default location if None) and attach a saver.

        An unreadable file is copied aside as <name>.corrupt and reported, and
        the store starts empty rather than refusing to run.
        """
        doc_path = document_path(path)
        store = cls(path=doc_path, **kwargs)
        try:
            store._document = load_document(doc_path)
        except (DocumentFormatError, OSError) as e:
            message = f"Could not read '{doc_path.name}': {e}"
            try:
                kept = preserve_corrupt(doc_path)
                message += f" (kept a copy as '{kept.name}')"
            except OSError as copy_err:
                Log.debug(f"Could not keep a copy of {doc_path}: {copy_err}", 0)
            store.alert(message)
        return store

    # ---------------- State ----------------

    @property
    def document(self) -> Document:
        """Live document, for display only. Change it through this class."""
        return self._document

    @property
    def root(self) -> Folder:
        return self._document.root_folder

    @property
    def notes(self) -> str:
        return self._document.notes

    @property
    def path(self) -> Optional[Path]:
        return self._persistence.path if self._persistence else None

    @property
    def persistence(self) -> Optional[PersistenceController]:
        return self._persistence

    @property
    def save_state(self) -> SaveState:
        return self._persistence.state if self._persistence else SaveState.IDLE

    def snapshot(self) -> Document:
        with self._lock:
            return self._document.snapshot()

    def _changed(self):
        if self.on_change is not None:
            self.on_change()
        if self._persistence is not None:
            self._persistence.schedule()

    def alert(self, message: str):
        """Send a user-visible message down the alert channel."""
        Log.debug(message, 0)
        if self.on_alert is not None:
            self.on_alert(message)

    def _apply(self, fn, *args):
        with self._lock:
            result = fn(self._document.root_folder, *args)
        if result:
            self._changed()
        return result

    # ---------------- Lookups ----------------

    def find_folder(self, folder_id: str) -> Optional[Folder]:
        with self._lock:
            return navigator.find_folder(self.root, folder_id)

    def find_entry(self, entry_id: str) -> Optional[Entry]:
        with self._lock:
            return navigator.find_entry(self.root, entry_id)

    def containing_folder_id(self, item_id: Optional[str]) -> str:
        """Folder a new entry should go into when item_id is selected."""
        if item_id is None:
            return ROOT_FOLDER_ID
        with self._lock:
            return navigator.find_containing_folder_id(self.root, item_id)

    def is_descendant(self, folder_id: str, ancestor_id: str) -> bool:
        with self._lock:
            return navigator.is_descendant(self.root, folder_id, ancestor_id)

    def all_entries(self) -> List[Entry]:
        with self._lock:
            return navigator.all_entries(self.root)

    def search_entries(self, query: str = "", ascending: bool = True) -> List[Entry]:
        return sort_entries(filter_entries(self.all_entries(), query), ascending)

    # ---------------- Folder commands ----------------

    def create_folder(self, name: str, parent_id: str = ROOT_FOLDER_ID) -> Optional[str]:
        return self._apply(mutations.create_folder, name, parent_id)

    def rename_folder(self, folder_id: str, new_name: str) -> bool:
        return self._apply(mutations.rename_folder, folder_id, new_name)

    def delete_folder(self, folder_id: str) -> bool:
        """Irreversible; the caller confirms with the user first."""
        return self._apply(mutations.delete_folder, folder_id)

    def toggle_folder_collapsed(self, folder_id: str) -> bool:
        return self._apply(mutations.toggle_folder_collapsed, folder_id)

    def move_folder(self, folder_id: str, to_parent_id: str) -> bool:
        return self._apply(mutations.move_folder, folder_id, to_parent_id)

    # ---------------- Entry commands ----------------

    def add_entry(self, entry: Entry, to_folder_id: str = ROOT_FOLDER_ID) -> bool:
        return self._apply(mutations.add_entry, entry, to_folder_id)

    def new_entry(self, text: str, to_folder_id: str = ROOT_FOLDER_ID) -> Optional[str]:
        """Create an entry for text; returns its id, or None for blank text or an unknown folder."""
        if not text.strip():
            return None
        entry = Entry.new(text)
        return entry.id if self.add_entry(entry, to_folder_id) else None

    def delete_entry(self, entry_id: str) -> bool:
        return self._apply(mutations.delete_entry, entry_id)

    def move_entry(self, entry_id: str, to_folder_id: str) -> bool:
        return self._apply(mutations.move_entry, entry_id, to_folder_id)

    # ---------------- Notes ----------------

    def set_notes(self, text: str) -> bool:
        with self._lock:
            if text == self._document.notes:
                return False
            self._document.notes = text
        self._changed()
        return True

    def replace_in_notes(self, query: str, replacement: str, case_sensitive: bool = False,
                         whole_words: bool = False, occurrence: Optional[int] = None) -> int:
        """
        Replace matches in the notes; returns the number replaced.
        With occurrence (1-based) only that match is replaced.
        """
        with self._lock:
            if occurrence is None:
                text, count = replace_all(self._document.notes, query, replacement,
                                          case_sensitive, whole_words)
            else:
                state = FindState(self._document.notes, query, case_sensitive, whole_words)
                if not 1 <= occurrence <= len(state.matches):
                    return 0
                for _ in range(occurrence - 1):
                    state.find_next()
                text, count = state.text, int(state.replace_current(replacement))
        if count:
            self.set_notes(text)
        return count

    # ---------------- Import / export ----------------

    def _backup_before_replace(self) -> bool:
        if self._persistence is None:
            return True
        try:
            backup_document(self._persistence.path, self.snapshot())
        except OSError as e:
            self.alert(f"Could not back up the current document ({e}); nothing was replaced.")
            return False
        return True

    def import_file(self, path: Pathish, confirm_replace: Optional[Callable[[str], bool]] = None,
                    today: Optional[date] = None) -> Optional[ImportResult]:
        """
        Import path according to its extension and report the outcome via on_alert.

        A full document (.json) replaces everything, and only if
        confirm_replace(question) returns True. Returns None on failure.
        """
        path = Path(path)

        def confirm(question: str) -> bool:
            if confirm_replace is None or not confirm_replace(question):
                return False
            return self._backup_before_replace()

        try:
            with self._lock:
                result = run_import(self._document, path, confirm, today)
        except ImportFormatError as e:
            self.alert(f"Import failed: {e}")
            return None
        except OSError as e:
            self.alert(f"Could not read '{path.name}': {e}")
            return None

        Log.debug(result.message, 1)
        if result.replaced or result.added or result.folders_created:
            self._changed()
        self.alert(result.message)
        return result

    def export_file(self, path: Pathish, fmt: Optional[ExportFormat] = None) -> bool:
        """Export as a full document (.json) or as "text,date" lines."""
        try:
            export_document(self.snapshot(), path, fmt)
        except OSError as e:
            self.alert(f"Export failed: {e}")
            return False
        return True

    # ---------------- Saving ----------------

    def save_sync(self) -> bool:
        """Write right now, skipping the debounce timer. Call at shutdown."""
        if self._persistence is None:
            return True
        return self._persistence.save_sync()

    def close(self) -> bool:
        return self.save_sync()
