# core/persistence.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from linkpad.core.io_worker import IOWorker
from linkpad.core.log import Log
from linkpad.core.model import Document
from linkpad.core.storage import save_document
from linkpad.utils.paths import DEFAULT_SAVE_DELAY

__all__ = ["SaveState", "PersistenceController"]

Pathish = Union[str, Path]

def _call_inline(fn, *args):
    fn(*args)

class SaveState(Enum):
    IDLE = "idle"
    PENDING_WRITE = "pending"
    WRITING = "writing"

class PersistenceController:
    """
    Debounced writer for a single document file.

    STATE MACHINE:
        IDLE -> PENDING_WRITE -> WRITING -> IDLE

    - schedule() cancels any waiting timer and starts a new one, so a burst of
      edits produces one write of the newest state.
    - When the timer fires, the snapshot is taken on the owner thread (through
      `post`) and written on the IOWorker thread.
    - A schedule() during a write moves back to PENDING_WRITE; the write in
      flight is never cancelled.
    - save_sync() skips the timer and writes right away. Used at shutdown.

    Write failures are passed to on_error and logged. Nothing is retried; the
    next scheduled write simply tries again with the latest state.
    """

    def __init__(self, path: Pathish, snapshot_fn: Callable[[], Document], *,
                 io_worker: Optional[IOWorker] = None,
                 delay: float = DEFAULT_SAVE_DELAY,
                 post: Optional[Callable] = None,
                 on_error: Optional[Callable[[str], None]] = None,
                 save_fn: Callable[[Pathish, Document], None] = save_document):
        self.path = Path(path)
        self.delay = delay
        self._snapshot_fn = snapshot_fn
        self._post = post or _call_inline
        self._io = io_worker or IOWorker(post=post)
        self._on_error = on_error
        self._save_fn = save_fn

        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._sync_epoch = 0
        self._in_flight = 0
        self._state = SaveState.IDLE

        self.writes = 0
        self.last_error: Optional[BaseException] = None

    @property
    def state(self) -> SaveState:
        with self._lock:
            return self._state

    @property
    def io_worker(self) -> IOWorker:
        return self._io

    # ---------------- Debounced path ----------------

    def schedule(self):
        """Note a change; (re)start the debounce timer."""
        with self._lock:
            self._cancel_timer_locked()
            self._generation += 1
            self._state = SaveState.PENDING_WRITE
            timer = threading.Timer(self.delay, self._on_timer, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> bool:
        """Drop a pending (not yet started) write. Returns True if one was pending."""
        with self._lock:
            if self._state is not SaveState.PENDING_WRITE:
                return False
            self._cancel_timer_locked()
            self._generation += 1
            self._state = SaveState.WRITING if self._in_flight else SaveState.IDLE
            return True

    def _cancel_timer_locked(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, generation: int):
        # Timer thread: hop to the owner thread before touching the document.
        self._post(self._begin_write, generation)

    def _begin_write(self, generation: int):
        with self._lock:
            # A newer schedule() or save_sync() superseded this timer.
            if generation != self._generation or self._state is not SaveState.PENDING_WRITE:
                return
            self._timer = None
            self._state = SaveState.WRITING
            self._in_flight += 1
            sync_epoch = self._sync_epoch

        snapshot = self._snapshot_fn()
        Log.debug(f"Writing {self.path.name} in background", 2)
        self._io.submit(self._write_if_current, snapshot, sync_epoch, callback=self._on_written)

    def _write_if_current(self, snapshot: Document, sync_epoch: int) -> bool:
        # Worker thread. A save_sync() that started after the snapshot already wrote newer state.
        with self._lock:
            if sync_epoch != self._sync_epoch:
                return False
        self._save_fn(self.path, snapshot)
        return True

    def _on_written(self, result, err):
        with self._lock:
            self._in_flight -= 1
            if self._state is SaveState.WRITING and self._in_flight == 0:
                self._state = SaveState.IDLE

        if err is None:
            if result:
                self.writes += 1
                self.last_error = None
            else:
                Log.debug(f"Dropped stale background write of {self.path.name}", 1)
            return

        exc, tb = err
        self.last_error = exc
        Log.debug(f"Background save failed:\n{tb}", 0)
        self._report(f"Failed to save '{self.path.name}': {exc}")

    # ---------------- Synchronous path ----------------

    def save_sync(self) -> bool:
        """
        Cancel any pending timer and write the current document now.
        Waits for a background write in flight so it can't land after this one.
        Returns True on success.
        """
        with self._lock:
            self._cancel_timer_locked()
            self._generation += 1
            self._sync_epoch += 1
            self._state = SaveState.WRITING

        self._io.drain()
        snapshot = self._snapshot_fn()
        try:
            self._save_fn(self.path, snapshot)
        except OSError as e:
            self.last_error = e
            Log.debug(f"Synchronous save failed: {e}", 0)
            self._report(f"Failed to save '{self.path.name}': {e}")
            return False
        finally:
            with self._lock:
                if self._state is SaveState.WRITING and self._in_flight == 0:
                    self._state = SaveState.IDLE

        self.writes += 1
        self.last_error = None
        Log.debug(f"Saved {self.path.name} synchronously", 1)
        return True

    def _report(self, message: str):
        if self._on_error is not None:
            self._on_error(message)
