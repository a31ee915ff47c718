"""Filesystem write primitives used by the store."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, content: str) -> None:
    """Replace `path` with `content` so readers see either the old or the new file.

    The temp file lives in the same directory so the final os.replace is a
    same-filesystem rename.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o777)
        else:
            os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def create_exclusive(path: Path, content: str) -> None:
    """Write a new file, raising FileExistsError if `path` already exists."""
    with open(path, "x", encoding="utf-8", newline="") as f:
        f.write(content)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask
