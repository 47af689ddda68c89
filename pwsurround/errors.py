"""Custom exceptions shared by the scanner, the renderer and the controller.

Recoverable conditions (``RootNotFound``, ``NoEntriesFound``,
``RestartFailed``) are reported to the user.  ``TemplateIncomplete`` signals a
template/code mismatch and should never surface in a correct build.
"""

from __future__ import annotations

from pathlib import Path


class SurroundError(RuntimeError):
    """Base class for every error raised by *pwsurround*."""

    pass


# --------------------------------------------------------------------------- #
# Scanning                                                                    #
# --------------------------------------------------------------------------- #
class RootNotFound(SurroundError):
    """Raised when the scan root does not exist or is not a directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        super().__init__(f"IR directory not found or not a directory: {self.root}")


class NoEntriesFound(SurroundError):
    """Raised when a scan completes without finding a single candidate file."""

    def __init__(self, root: Path, warnings: tuple["UnreadableEntry", ...] = ()) -> None:
        self.root = Path(root)
        self.warnings = tuple(warnings)
        super().__init__(f"No impulse-response files found in {self.root}")


class ScanCancelled(SurroundError):
    """Raised inside a scan that was superseded by a newer one."""

    pass


class UnreadableEntry(SurroundError):
    """A file or directory skipped during a scan.

    Instances are collected on :class:`pwsurround.models.Catalog` rather than
    raised, so a single bad directory never aborts the whole scan.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class MetadataTableError(SurroundError):
    """Raised when the HRTF description table cannot be parsed."""

    pass


# --------------------------------------------------------------------------- #
# Rendering                                                                   #
# --------------------------------------------------------------------------- #
class InvalidDeviceName(SurroundError, ValueError):
    """Raised for a device name that would yield an unusable sink."""

    pass


class InvalidIrPath(SurroundError, ValueError):
    """Raised for an IR path that cannot be written into the UTF-8 configuration."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"IR file path is not valid UTF-8: {str(self.path)!r}")


class TemplateIncomplete(SurroundError):
    """Raised when placeholders survive substitution."""

    def __init__(self, leftovers: list[str]) -> None:
        self.leftovers = sorted(set(leftovers))
        super().__init__("Unresolved template placeholder(s): " + ", ".join(self.leftovers))


# --------------------------------------------------------------------------- #
# Persistence / services                                                      #
# --------------------------------------------------------------------------- #
class ConfigIOError(SurroundError):
    """Raised when the PipeWire configuration file cannot be written or removed."""

    def __init__(self, operation: str, path: Path, detail: str = "") -> None:
        self.operation = operation
        self.path = Path(path)
        msg = f"Failed to {operation} {self.path}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class RestartFailed(SurroundError):
    """Raised when the audio services could not be restarted.

    The configuration file is left as written; a manual restart picks it up.
    """

    def __init__(
        self,
        service: str,
        detail: str,
        *,
        returncode: int | None = None,
        timed_out: bool = False,
    ) -> None:
        self.service = service
        self.returncode = returncode
        self.timed_out = timed_out
        super().__init__(f"Restarting {service} failed: {detail}")


class OperationInProgress(SurroundError):
    """Raised when an apply/remove is requested while another one runs."""

    pass


class PwCliError(SurroundError):
    """Raised when ``pw-cli`` is missing or its output cannot be used."""

    pass


__all__ = [
    "SurroundError",
    "RootNotFound",
    "NoEntriesFound",
    "ScanCancelled",
    "UnreadableEntry",
    "MetadataTableError",
    "InvalidDeviceName",
    "InvalidIrPath",
    "TemplateIncomplete",
    "ConfigIOError",
    "RestartFailed",
    "OperationInProgress",
    "PwCliError",
]
