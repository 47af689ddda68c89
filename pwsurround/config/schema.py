"""
Pydantic model mirroring the YAML settings file consumed by *pwsurround*.

These are application settings (scan root, device name, restart policy),
not the PipeWire configuration that the tool generates.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from pwsurround.models import DEFAULT_DEVICE_NAME
from pwsurround.pipewire.paths import default_target_path, dev_target_path


class Settings(BaseModel, frozen=True):
    """Root settings object.

    Attributes:
        version: Settings schema version.
        wav_directory: Root scanned for IR files; ``None`` = working directory.
        virtual_device_name: Name of the virtual sink.
        priority_dir: Sub-directory listed first in the catalog.
        extension: Audio file extension to scan for.
        config_path: Explicit path of the generated PipeWire configuration.
        services: User units restarted, in order, after apply/remove.
        restart_timeout: Seconds allowed per unit restart.
        stage_ir: Copy the selected IR next to the configuration.
        descriptions_file: Semicolon-separated HRTF description table used
            instead of the packaged one.
        dev_mode: Runtime-only flag; writes to a temporary path and skips
            service restarts.  Never persisted.
    """

    version: int = 1
    wav_directory: Optional[Path] = None
    virtual_device_name: str = DEFAULT_DEVICE_NAME
    priority_dir: str = "HeSuVi"
    extension: str = ".wav"
    config_path: Optional[Path] = None
    services: List[str] = Field(default_factory=lambda: ["pipewire", "wireplumber"], min_length=1)
    restart_timeout: float = Field(30.0, gt=0)
    stage_ir: bool = False
    descriptions_file: Optional[Path] = None
    dev_mode: bool = Field(False, exclude=True)

    # --------------------------- validators ------------------------------ #
    @field_validator("extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        value = value.strip()
        if not value or value == ".":
            raise ValueError("extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("virtual_device_name")
    @classmethod
    def _non_empty_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("virtual_device_name must not be empty")
        return value

    @field_validator("wav_directory", "config_path", "descriptions_file")
    @classmethod
    def _expand_user(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    # --------------------------- convenience ----------------------------- #
    def target_path(self) -> Path:
        """Return where the PipeWire configuration is written."""
        if self.config_path is not None:
            return self.config_path
        if self.dev_mode:
            return dev_target_path()
        return default_target_path()

    def scan_root(self) -> Path:
        """Return the directory to scan (working directory when unset)."""
        return self.wav_directory if self.wav_directory is not None else Path.cwd()
