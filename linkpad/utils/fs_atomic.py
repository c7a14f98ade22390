'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

import os
import shutil
import uuid
from pathlib import Path
from typing import Union

Pathish = Union[str, Path]

__all__ = ["fsync_dir", "atomic_write_bytes", "atomic_write_text", "atomic_copy"]


def fsync_dir(dir_path: Pathish) -> None:
    """
    Fsync a directory so a rename inside it survives a crash.
    No-op if the directory doesn't exist or the platform can't open directories.
    """
    d = Path(dir_path)
    if not d.exists():
        return
    try:
        fd = os.open(str(d), os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError:
        pass
    finally:
        os.close(fd)


def _write_tmp_and_replace(dst_path: Path, write_fn, *, mode_from: Path | None = None) -> None:
    """
    Write through a temp file in the destination directory, fsync it,
    then os.replace() it over dst_path. The temp file is removed on failure.
    """
    dst_dir = dst_path.parent
    dst_dir.mkdir(parents=True, exist_ok=True)
    tmp_path = dst_dir / f".{dst_path.name}.tmp-{os.getpid()}-{uuid.uuid4().hex[:8]}"

    try:
        with open(tmp_path, "wb") as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
        if mode_from is not None:
            os.chmod(tmp_path, mode_from.stat().st_mode & 0o777)
        os.replace(tmp_path, dst_path)
    except BaseException:
        if tmp_path.exists():
            tmp_path.unlink()
        raise

    fsync_dir(dst_dir)


def atomic_write_bytes(dst: Pathish, data: bytes) -> None:
    """Atomically replace dst with data."""
    def _writer(fobj):
        fobj.write(data)

    _write_tmp_and_replace(Path(dst), _writer)


def atomic_write_text(dst: Pathish, text: str, encoding: str = "utf-8") -> None:
    atomic_write_bytes(dst, text.encode(encoding))


def atomic_copy(src: Pathish, dst: Pathish, *, chunk_size: int = 1 << 20) -> None:
    """
    Atomically copy src over dst, keeping the source's permission bits.
    Raises FileNotFoundError if src is not a regular file.
    """
    src_path = Path(src)
    dst_path = Path(dst)
    if not src_path.is_file():
        raise FileNotFoundError(f"Source not found or not a file: {src_path}")
    if dst_path.exists() and src_path.resolve() == dst_path.resolve():
        return

    def _writer(fobj):
        with open(src_path, "rb") as r:
            shutil.copyfileobj(r, fobj, length=chunk_size)

    _write_tmp_and_replace(dst_path, _writer, mode_from=src_path)
