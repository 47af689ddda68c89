"""
Static HRTF description table and the resolver that queries it.

The table maps an HRIR *filename* (case-sensitive, extension included, no
directory part) to an :class:`~pwsurround.models.HrtfDescriptor`.  It is read
once, lazily, from the packaged ``hrtf_descriptions.csv`` and exposed as a
read-only :class:`types.MappingProxyType`, so concurrent lookups need no lock.

CSV layout (semicolon separated, header row required)::

    HRIR;HRTF;Configuration;Description;Source;Credits;Points
"""

from __future__ import annotations

import csv
import io
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

import structlog

from pwsurround.errors import MetadataTableError
from pwsurround.models import CatalogEntry, HrtfDescriptor

log = structlog.get_logger()

_COLUMNS = ("HRIR", "HRTF", "Configuration", "Description", "Source", "Credits", "Points")
_CONFIGURATIONS = {"Headphones", "Speakers"}


# --------------------------------------------------------------------------- #
# Parsing                                                                     #
# --------------------------------------------------------------------------- #
def _parse_configuration(value: str, hrir: str) -> Optional[str]:
    value = value.strip()
    if not value:
        return None
    if value not in _CONFIGURATIONS:
        log.warning("descriptions.bad_configuration", hrir=hrir, value=value)
        return None
    return value


def _parse_points(value: str, hrir: str) -> Optional[int]:
    value = value.strip()
    if not value:
        return None
    try:
        points = int(value)
    except ValueError:
        log.warning("descriptions.bad_points", hrir=hrir, value=value)
        return None
    if points <= 0:
        log.warning("descriptions.bad_points", hrir=hrir, value=value)
        return None
    return points


def parse_descriptions(text: str) -> Mapping[str, HrtfDescriptor]:
    """Parse the semicolon-separated description table.

    Args:
        text: Full CSV document including the header row.

    Returns:
        Read-only mapping ``filename -> HrtfDescriptor``.  On duplicate keys
        the first row wins.

    Raises:
        MetadataTableError: When the header or a row has the wrong shape.
    """
    reader = csv.reader(io.StringIO(text), delimiter=";")
    header = next(reader, None)
    if header is None or tuple(h.strip() for h in header) != _COLUMNS:
        raise MetadataTableError(f"Unexpected description table header: {header!r}")

    table: Dict[str, HrtfDescriptor] = {}
    for lineno, row in enumerate(reader, start=2):
        if not row:
            continue
        if len(row) != len(_COLUMNS):
            raise MetadataTableError(
                f"Line {lineno}: expected {len(_COLUMNS)} columns, got {len(row)}"
            )
        hrir = row[0].strip()
        if hrir in table:
            log.warning("descriptions.duplicate", hrir=hrir, line=lineno)
            continue
        table[hrir] = HrtfDescriptor(
            name=row[1].strip(),
            configuration=_parse_configuration(row[2], hrir),
            description=row[3].strip(),
            source=row[4].strip(),
            credits=row[5].strip(),
            points=_parse_points(row[6], hrir),
        )
    return MappingProxyType(table)


def load_descriptions(path: Path | str) -> Mapping[str, HrtfDescriptor]:
    """Load a description table from a CSV file on disk."""
    return parse_descriptions(Path(path).read_text(encoding="utf-8"))


@lru_cache(maxsize=None)
def default_table() -> Mapping[str, HrtfDescriptor]:
    """Return the packaged table, parsed on first use and shared afterwards."""
    text = files("pwsurround.resources").joinpath("hrtf_descriptions.csv").read_text(
        encoding="utf-8"
    )
    table = parse_descriptions(text)
    log.debug("descriptions.loaded", entries=len(table))
    return table


# --------------------------------------------------------------------------- #
# Resolver                                                                    #
# --------------------------------------------------------------------------- #
class MetadataResolver:
    """Resolve filenames to descriptors.

    Unknown names resolve to ``None``; that is a normal outcome, not an error.
    """

    def __init__(self, table: Mapping[str, HrtfDescriptor] | None = None) -> None:
        self._table = MappingProxyType(dict(table)) if table is not None else None

    @property
    def table(self) -> Mapping[str, HrtfDescriptor]:
        return self._table if self._table is not None else default_table()

    def resolve(self, filename: str) -> Optional[HrtfDescriptor]:
        """Return the descriptor for *filename* (exact match) or ``None``."""
        return self.table.get(filename)

    def annotate(self, entry: CatalogEntry) -> Optional[HrtfDescriptor]:
        """Resolve the descriptor of a catalog *entry* by its filename."""
        return self.resolve(entry.filename)

    def __len__(self) -> int:
        return len(self.table)


def resolve(filename: str) -> Optional[HrtfDescriptor]:
    """Module-level shortcut querying the packaged table."""
    return default_table().get(filename)


__all__ = [
    "parse_descriptions",
    "load_descriptions",
    "default_table",
    "MetadataResolver",
    "resolve",
]
