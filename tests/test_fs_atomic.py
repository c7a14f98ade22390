import os

import pytest

from linkpad.utils.fs_atomic import atomic_copy, atomic_write_bytes, atomic_write_text


def test_write_creates_parents_and_replaces(tmp_path):
    target = tmp_path / "a" / "b" / "doc.json"
    atomic_write_text(target, "first")
    atomic_write_text(target, "second")
    assert target.read_text() == "second"
    assert os.listdir(target.parent) == ["doc.json"]


def test_failed_write_leaves_original(tmp_path, monkeypatch):
    target = tmp_path / "doc.json"
    atomic_write_bytes(target, b"original")

    def boom(src, dst):
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", boom)
    with pytest.raises(OSError):
        atomic_write_bytes(target, b"new")

    assert target.read_bytes() == b"original"
    assert os.listdir(tmp_path) == ["doc.json"]


def test_copy(tmp_path):
    src = tmp_path / "src.txt"
    src.write_text("payload")
    atomic_copy(src, tmp_path / "copy" / "dst.txt")
    assert (tmp_path / "copy" / "dst.txt").read_text() == "payload"


def test_copy_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        atomic_copy(tmp_path / "missing", tmp_path / "dst")
