"""Filesystem helpers shared by the configuration writer and the settings loader."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import structlog

log = structlog.get_logger()


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write *text* to *path* via a temporary sibling file and ``os.replace``.

    Readers observe either the previous content or the complete new content,
    even if the process dies mid-write.  The parent directory is created when
    missing.

    Args:
        path: Final destination.
        text: Complete document to write.
        encoding: Text encoding.

    Raises:
        OSError: When the directory cannot be created or the file cannot be
            written or renamed.  The temporary file is removed in that case.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    log.debug("fs.atomic_write", path=str(path), bytes=len(text.encode(encoding)))


__all__ = ["atomic_write_text"]
