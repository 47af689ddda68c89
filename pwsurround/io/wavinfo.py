"""Cheap audio-header probing and content hashing for impulse-response files.

Header decoding is delegated to :mod:`soundfile` (libsndfile), which
understands integer and IEEE-float WAV alike.  Only the header is read; the
sample data is never loaded.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import NamedTuple, Optional

import soundfile
import structlog

log = structlog.get_logger()

_CHUNK = 1 << 20


class HeaderInfo(NamedTuple):
    """Sample rate / channel count pair; either value may be unknown."""

    sample_rate: Optional[int]
    channel_count: Optional[int]


UNKNOWN = HeaderInfo(None, None)


def read_header(path: Path) -> HeaderInfo:
    """Return the sample rate and channel count stored in *path*.

    Args:
        path: Audio file to inspect.

    Returns:
        :class:`HeaderInfo`; both fields are ``None`` when the header cannot be
        decoded (damaged file, unsupported format, permission problem).
    """
    # LibsndfileError is a RuntimeError; an unencodable name raises UnicodeEncodeError.
    try:
        info = soundfile.info(str(path))
    except (RuntimeError, OSError, ValueError) as exc:
        log.debug("wavinfo.undecodable", path=str(path), error=str(exc))
        return UNKNOWN
    return HeaderInfo(int(info.samplerate), int(info.channels))


def file_checksum(path: Path) -> str:
    """Return the BLAKE2b hex digest of the file contents.

    Raises:
        OSError: When *path* cannot be read.
    """
    digest = hashlib.blake2b(digest_size=16)
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


__all__ = ["HeaderInfo", "UNKNOWN", "read_header", "file_checksum"]
