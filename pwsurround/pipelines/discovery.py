"""Recursive discovery of impulse-response files.

:func:`scan_directory` walks a root directory, keeps files with the audio
extension, reads their headers in a small thread pool and returns a
:class:`~pwsurround.models.Catalog` in deterministic order:

* entries below the priority sub-directory (``HeSuVi/`` by default) first;
* within each group, case-sensitive lexicographic order of the POSIX relative
  path (plain ``str`` comparison).

Linked sub-directories are followed once each.  Unreadable directories and
files whose names are not valid UTF-8 are recorded on the catalog and skipped.  The scan
either returns a complete catalog or raises; partial results never escape.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple

import structlog

from pwsurround.errors import NoEntriesFound, RootNotFound, ScanCancelled, UnreadableEntry
from pwsurround.io.wavinfo import HeaderInfo, read_header
from pwsurround.models import Catalog, CatalogEntry

log = structlog.get_logger()

DEFAULT_EXTENSION = ".wav"
DEFAULT_PRIORITY_DIR = "HeSuVi"

# Header probing is I/O bound; a handful of threads is plenty.
_MAX_HEADER_WORKERS = min(8, (os.cpu_count() or 2) * 2)

HeaderReader = Callable[[Path], HeaderInfo]


# ─────────────────────────────────────────────────────────────────────────────
# Ordering
# ─────────────────────────────────────────────────────────────────────────────
def catalog_sort_key(relative_path: str, priority_dir: str = DEFAULT_PRIORITY_DIR) -> Tuple[bool, str]:
    """Return the sort key placing *priority_dir* entries first.

    Args:
        relative_path: POSIX relative path of an entry.
        priority_dir: Name of the sub-directory sorted before all others.

    Returns:
        ``(outside_priority_group, relative_path)``.
    """
    in_priority = bool(priority_dir) and relative_path.startswith(priority_dir + "/")
    return (not in_priority, relative_path)


def order_entries(
    entries: List[CatalogEntry], priority_dir: str = DEFAULT_PRIORITY_DIR
) -> Tuple[CatalogEntry, ...]:
    """Return *entries* in catalog order (a pure function of the entry set)."""
    return tuple(sorted(entries, key=lambda e: catalog_sort_key(e.relative_path, priority_dir)))


# ─────────────────────────────────────────────────────────────────────────────
# Walking
# ─────────────────────────────────────────────────────────────────────────────
def _check_cancel(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ScanCancelled("scan superseded")


def _has_extension(name: str, extension: str) -> bool:
    return name.lower().endswith(extension.lower()) and len(name) > len(extension)


def _is_utf8(text: str) -> bool:
    # os.walk decodes undecodable bytes to lone surrogates.
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def find_candidates(
    root: Path,
    *,
    extension: str = DEFAULT_EXTENSION,
    cancel_event: Optional[threading.Event] = None,
) -> Tuple[List[Tuple[str, Path]], List[UnreadableEntry]]:
    """Walk *root* and collect ``(relative_path, absolute_path)`` pairs.

    Args:
        root: Resolved directory to walk.
        extension: File extension to keep, compared case-insensitively.
        cancel_event: Checked once per directory.

    Returns:
        Tuple of the candidate list (unordered) and the skipped entries.
    """
    warnings: List[UnreadableEntry] = []

    def _onerror(err: OSError) -> None:
        path = Path(err.filename) if err.filename else root
        reason = err.strerror or str(err)
        log.warning("scan.unreadable", path=str(path), reason=reason)
        warnings.append(UnreadableEntry(path, reason))

    def _skip(path: Path, reason: str) -> None:
        log.warning("scan.skipped", path=str(path), reason=reason)
        warnings.append(UnreadableEntry(path, reason))

    found: List[Tuple[str, Path]] = []
    visited: Set[Tuple[int, int]] = set()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_onerror, followlinks=True):
        _check_cancel(cancel_event)
        # Linked directories are followed; (device, inode) pairs stop cycles
        # and second visits of a directory reachable through two links.
        try:
            st = os.stat(dirpath)
        except OSError as exc:
            _onerror(exc)
            dirnames[:] = []
            continue
        if (st.st_dev, st.st_ino) in visited:
            dirnames[:] = []
            _skip(Path(dirpath), "directory already scanned through another link")
            continue
        visited.add((st.st_dev, st.st_ino))
        dirnames.sort()

        for name in sorted(filenames):
            if not _has_extension(name, extension):
                continue
            full = Path(dirpath) / name
            if not _is_utf8(str(full)):
                _skip(full, "file name is not valid UTF-8")
                continue
            if not full.is_file():
                # Dangling symlink or a special file carrying the extension.
                _skip(full, "not a regular file")
                continue
            rel = full.relative_to(root).as_posix()
            found.append((rel, full.resolve()))
    return found, warnings


def scan_directory(
    root: Path | str,
    *,
    extension: str = DEFAULT_EXTENSION,
    priority_dir: str = DEFAULT_PRIORITY_DIR,
    cancel_event: Optional[threading.Event] = None,
    read: HeaderReader = read_header,
) -> Catalog:
    """Scan *root* recursively and return an ordered catalog.

    Args:
        root: Directory holding impulse-response files (any depth).
        extension: Audio extension to keep (case-insensitive).
        priority_dir: Sub-directory whose entries sort first.
        cancel_event: When set, the scan stops at the next checkpoint.
        read: Header reader; replaced in tests.

    Returns:
        A complete :class:`Catalog`.

    Raises:
        RootNotFound: When *root* is missing or not a directory.
        NoEntriesFound: When the scan finishes with an empty catalog.
        ScanCancelled: When *cancel_event* was set before completion.
    """
    root_path = Path(root).expanduser()
    if not root_path.is_dir():
        log.error("scan.root_missing", root=str(root_path))
        raise RootNotFound(root_path)
    root_path = root_path.resolve()

    log.info("scan.start", root=str(root_path), extension=extension)
    candidates, warnings = find_candidates(
        root_path, extension=extension, cancel_event=cancel_event
    )

    if not candidates:
        log.warning("scan.empty", root=str(root_path), skipped=len(warnings))
        raise NoEntriesFound(root_path, tuple(warnings))

    entries: List[CatalogEntry] = []
    with ThreadPoolExecutor(max_workers=_MAX_HEADER_WORKERS) as pool:
        try:
            for (rel, abs_path), header in zip(
                candidates, pool.map(read, (c[1] for c in candidates))
            ):
                _check_cancel(cancel_event)
                entries.append(
                    CatalogEntry(
                        relative_path=rel,
                        absolute_path=abs_path,
                        sample_rate=header.sample_rate,
                        channel_count=header.channel_count,
                    )
                )
        except ScanCancelled:
            pool.shutdown(wait=False, cancel_futures=True)
            raise

    catalog = Catalog(
        root=root_path,
        entries=order_entries(entries, priority_dir),
        warnings=tuple(warnings),
    )
    log.info(
        "scan.done",
        root=str(root_path),
        entries=len(catalog),
        skipped=len(warnings),
    )
    return catalog


__all__ = [
    "DEFAULT_EXTENSION",
    "DEFAULT_PRIORITY_DIR",
    "catalog_sort_key",
    "order_entries",
    "find_candidates",
    "scan_directory",
]
