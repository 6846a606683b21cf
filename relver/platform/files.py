"""Filesystem helpers for manifests and the changelog."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "read_text_if_exists"]


def read_text_if_exists(path: Path, *, encoding: str = "utf-8") -> str | None:
    """Return the file content, or None when the file does not exist.

    Other OS errors (permissions, directories) propagate.
    """
    try:
        return path.read_text(encoding=encoding)
    except FileNotFoundError:
        return None


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path via a sibling temp file and ``os.replace``.

    A reader never observes a half-written manifest; line endings are
    written exactly as given. An existing file keeps its permission bits;
    a new one gets the usual umask-derived mode instead of mkstemp's 0600.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            shutil.copymode(path, tmp_path)
        else:
            os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask
