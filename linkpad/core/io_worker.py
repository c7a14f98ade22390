# core/io_worker.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import threading
import queue
import traceback

from linkpad.core.log import Log

def _call_inline(fn, *args):
    fn(*args)

class IOWorker:
    """
    Single background thread for file/IO tasks; the owner thread never blocks on disk.

    Callbacks are handed to `post`, which should run them on the owner thread
    (wx.CallAfter in the GUI). Without one they run on the worker thread.
    """

    def __init__(self, post=None):
        self._post = post or _call_inline
        self._q = queue.Queue()
        self._t = threading.Thread(target=self._run, name="IOWorker", daemon=True)
        self._t.start()

    def submit(self, fn, *args, callback=None, **kwargs):
        """Queue a task; callback(result, error) is delivered through post."""
        self._q.put((fn, args, kwargs, callback))

    def drain(self):
        """Block until every queued task has finished. Never call from the worker itself."""
        self._q.join()

    def _run(self):
        """Background thread main loop."""
        while True:
            fn, args, kwargs, cb = self._q.get()
            result = None
            err = None

            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                err = (e, traceback.format_exc())

            if cb:
                try:
                    self._post(cb, result, err)
                except Exception:
                    # A failing callback must not end the loop.
                    Log.debug(f"IOWorker callback failed:\n{traceback.format_exc()}", 0)
            elif err is not None:
                Log.debug(f"IOWorker task failed:\n{err[1]}", 0)

            self._q.task_done()
