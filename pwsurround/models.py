"""
Typed, immutable value objects that circulate between the scan, lookup,
render and apply stages.

Every class inherits from :class:`pydantic.BaseModel` with ``frozen=True`` so
an object, once built, can be shared between threads without locking.  A
rescan builds a brand-new :class:`Catalog`; nothing here is mutated in place.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from pwsurround.errors import UnreadableEntry

DEFAULT_DEVICE_NAME = "Virtual Surround Sink"


# --------------------------------------------------------------------------- #
# 1 – Catalog                                                                 #
# --------------------------------------------------------------------------- #
class CatalogEntry(BaseModel, frozen=True):
    """One candidate impulse-response file found during a scan.

    Attributes
    ----------
    relative_path
        POSIX-style path relative to the scan root.  Stable identity of the
        entry across rescans, even when the root itself moves.
    absolute_path
        Resolved absolute path of the file.
    sample_rate
        Sample rate read from the audio header, ``None`` when undecodable.
    channel_count
        Channel count read from the audio header, ``None`` when undecodable.
    """

    relative_path: str
    absolute_path: Path
    sample_rate: Optional[int] = None
    channel_count: Optional[int] = None

    @property
    def filename(self) -> str:
        """Last component of :attr:`relative_path`."""
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def sample_rate_label(self) -> str:
        """Human-readable sample rate such as ``"44.1 kHz"``."""
        if self.sample_rate is None:
            return "?"
        khz = self.sample_rate / 1000
        return f"{khz:g} kHz"


class Catalog(BaseModel):
    """Ordered, immutable result of one directory scan.

    Attributes
    ----------
    root
        Resolved root directory that was scanned.
    entries
        Entries in catalog order (priority sub-directory first, then
        case-sensitive lexicographic by relative path).
    warnings
        Directories or files that were skipped because they could not be read.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    root: Path
    entries: tuple[CatalogEntry, ...] = ()
    warnings: tuple[UnreadableEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, relative_path: str) -> Optional[CatalogEntry]:
        """Return the entry whose relative path equals *relative_path*."""
        wanted = relative_path.replace("\\", "/").lstrip("/")
        return next((e for e in self.entries if e.relative_path == wanted), None)

    def find_absolute(self, path: Path | str) -> Optional[CatalogEntry]:
        """Return the entry pointing at *path* (compared after resolving)."""
        target = Path(path).expanduser().resolve()
        return next((e for e in self.entries if e.absolute_path == target), None)

    def filtered(
        self,
        search: str = "",
        sample_rate: Optional[int] = None,
    ) -> "Catalog":
        """Return a new catalog restricted to matching entries.

        Args:
            search: Case-insensitive substring matched against the relative
                path.  Empty matches everything.
            sample_rate: When given, only entries with exactly this sample rate
                are kept (entries with an unknown rate are dropped).

        Returns:
            A catalog with the same root and warnings, ordering preserved.
        """
        needle = search.strip().lower()

        def _keep(entry: CatalogEntry) -> bool:
            if sample_rate is not None and entry.sample_rate != sample_rate:
                return False
            return not needle or needle in entry.relative_path.lower()

        return self.select(_keep)

    def select(self, predicate: Callable[[CatalogEntry], bool]) -> "Catalog":
        """Return a new catalog holding the entries accepted by *predicate*."""
        return Catalog(
            root=self.root,
            entries=tuple(e for e in self.entries if predicate(e)),
            warnings=self.warnings,
        )


# --------------------------------------------------------------------------- #
# 2 – Metadata                                                                #
# --------------------------------------------------------------------------- #
class HrtfDescriptor(BaseModel, frozen=True):
    """Descriptive record for a known HRIR file.

    Attributes
    ----------
    name
        Name of the HRTF the file was derived from.
    description
        Free-text description.
    source
        Where the measurement or preset comes from.
    credits
        Author / owner credits.
    configuration
        ``"Headphones"`` or ``"Speakers"`` when the table says so.
    points
        Number of measurement points, when known.
    """

    name: str
    description: str = ""
    source: str = ""
    credits: str = ""
    configuration: Optional[Literal["Headphones", "Speakers"]] = None
    points: Optional[int] = Field(default=None, gt=0)

    def short_description(self, limit: int = 240) -> str:
        """Return :attr:`description` cut to roughly *limit* characters."""
        if len(self.description) <= limit:
            return self.description
        return self.description[: limit - 3].rstrip() + "..."


# --------------------------------------------------------------------------- #
# 3 – Device / configuration state                                            #
# --------------------------------------------------------------------------- #
class DeviceOptions(BaseModel, frozen=True):
    """User selection fed into the configuration renderer.

    Attributes
    ----------
    device_name
        Human-visible name of the virtual sink.
    ir_file_path
        Absolute path of the selected impulse-response file.
    wav_folder
        Root directory of the scan the selection came from.
    """

    device_name: str = DEFAULT_DEVICE_NAME
    ir_file_path: Path
    wav_folder: Optional[Path] = None

    @classmethod
    def for_entry(
        cls,
        entry: CatalogEntry,
        *,
        device_name: str = DEFAULT_DEVICE_NAME,
        wav_folder: Optional[Path] = None,
    ) -> "DeviceOptions":
        """Build options for a catalog *entry*."""
        return cls(
            device_name=device_name,
            ir_file_path=entry.absolute_path,
            wav_folder=wav_folder,
        )


class ConfigState(BaseModel, frozen=True):
    """Presence of the PipeWire configuration file; computed, never cached."""

    present: bool
    path: Path

    @classmethod
    def absent(cls, path: Path) -> "ConfigState":
        return cls(present=False, path=path)

    @classmethod
    def present_at(cls, path: Path) -> "ConfigState":
        return cls(present=True, path=path)

    def __str__(self) -> str:
        return f"Present({self.path})" if self.present else "Absent"


__all__ = [
    "DEFAULT_DEVICE_NAME",
    "CatalogEntry",
    "Catalog",
    "HrtfDescriptor",
    "DeviceOptions",
    "ConfigState",
]
