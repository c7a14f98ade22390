"""Shared fixtures for the LinkPad test suite."""

import time
from datetime import datetime, timezone

import pytest

from linkpad.core.log import Log
from linkpad.core.model import Document, Entry, Folder


def _wait_for(predicate, timeout=3.0, interval=0.01):
    deadline = time.monotonic() + timeout
    while True:
        value = predicate()
        if value or time.monotonic() >= deadline:
            return value
        time.sleep(interval)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    monkeypatch.setenv("LINKPAD_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("HOME", str(tmp_path / "user"))
    monkeypatch.delenv("LINKPAD_SAVE_DELAY", raising=False)


@pytest.fixture(autouse=True)
def quiet_log():
    Log.set_verbosity(0)
    yield
    Log.set_verbosity(0)


@pytest.fixture
def stamp():
    return datetime(2024, 1, 1, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_document(stamp):
    """
    Root
      Work/
        Projects/
          https://projects.example.com
        https://work.example.com
      https://root.example.com
    """
    document = Document.new(notes="remember the milk")
    root = document.root_folder

    projects = Folder(id="f-projects", name="Projects")
    projects.entries.append(Entry(id="e-projects", text="https://projects.example.com", created_at=stamp))

    work = Folder(id="f-work", name="Work")
    work.subfolders.append(projects)
    work.entries.append(Entry(id="e-work", text="https://work.example.com", created_at=stamp))

    root.subfolders.append(work)
    root.entries.append(Entry(id="e-root", text="https://root.example.com", created_at=stamp))
    return document


@pytest.fixture
def wait_for():
    """Poll a predicate until it is truthy or the timeout elapses; returns the last value."""
    return _wait_for
