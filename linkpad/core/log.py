################################################################################################

'''

Copyright 2025 Aaron Vose (avose@aaronvose.net)

Licensed under the LGPL v2.1; see the file 'LICENSE' for details.

This file holds the code for the info / debug logger.

'''

################################################################################################

import inspect
import os
import threading
from collections import deque
from datetime import datetime

################################################################################################

MAX_LOG_RECORDS = 5000

def _now() -> str:
    return datetime.now().strftime("%m/%d/%Y %H:%M:%S")

class LogManager():
    __log = None
    __lock = threading.Lock()

    def __init__(self, verbosity: int = 0):
        with LogManager.__lock:
            if LogManager.__log is None:
                LogManager.__log = deque(maxlen=MAX_LOG_RECORDS)
                LogManager.__log.append((_now(), "Begin LinkPad Log"))
        self.verbosity = verbosity

    def add(self, text: str):
        with LogManager.__lock:
            LogManager.__log.append((_now(), text))

    def debug(self, text: str, level: int = 0):
        if self.verbosity < level:
            return

        # Tag the record with the caller's module file name.
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        filename = os.path.basename(caller.f_code.co_filename) if caller else "unknown"
        self.add(f"[{filename}] {text}")

    def get(self, index: int = None):
        with LogManager.__lock:
            if index is not None:
                return LogManager.__log[index]
            return list(LogManager.__log)

    def count(self):
        with LogManager.__lock:
            return len(LogManager.__log)

    def set_verbosity(self, verbosity: int = 0):
        self.verbosity = verbosity

    def clear(self):
        """Clear all log entries."""
        with LogManager.__lock:
            LogManager.__log.clear()
            LogManager.__log.append((_now(), "Log cleared"))

    def write_to_file(self, filepath: str):
        """Write all log entries to a file."""
        lines = [f"[{timestamp}] {message}\n" for timestamp, message in self.get()]
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                f.writelines(lines)
            self.add(f"Log written to file: {filepath}")
        except OSError as e:
            self.add(f"Failed to write log to file '{filepath}': {e}")

################################################################################################

Log = LogManager()

################################################################################################
