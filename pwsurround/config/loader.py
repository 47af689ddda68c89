"""
YAML settings loader.

Search precedence (first existing file wins)
1. An explicit path argument (``--settings`` on the CLI).
2. ``$PWSURROUND_SETTINGS``.
3. ``$XDG_CONFIG_HOME/pwsurround/settings.yaml`` (``~/.config`` by default).
4. The packaged default shipped inside the wheel.

Saving always targets the first of 1-3 that is defined, never the packaged file.
"""

from __future__ import annotations

import os
from importlib.resources import as_file, files
from pathlib import Path
from typing import Optional

import structlog
import yaml

from pwsurround.pipewire.paths import config_home
from pwsurround.utils.fs import atomic_write_text

from .schema import Settings

log = structlog.get_logger()

ENV_SETTINGS = "PWSURROUND_SETTINGS"

_DEFAULT_SETTINGS = files("pwsurround.resources") / "default_settings.yaml"


# --------------------------------------------------------------------------- #
# Helper functions                                                            #
# --------------------------------------------------------------------------- #
def user_settings_path() -> Path:
    """Return ``<config home>/pwsurround/settings.yaml``."""
    return config_home() / "pwsurround" / "settings.yaml"


def _env_path() -> Optional[Path]:
    env = os.environ.get(ENV_SETTINGS)
    return Path(env).expanduser() if env else None


def _first_existing(*candidates: Optional[Path]) -> Optional[Path]:
    """Return the first path in *candidates* that exists on disk."""
    for p in candidates:
        if p is not None and p.exists():
            return p
    return None


def _load_yaml(path: Path) -> dict:
    """Read a YAML mapping; an empty document yields an empty dict."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a mapping")
    return data


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def settings_path(explicit: Optional[str | Path] = None) -> Path:
    """Return the path settings are saved to."""
    if explicit is not None:
        return Path(explicit).expanduser()
    return _env_path() or user_settings_path()


def load_settings(
    path: Optional[str | Path] = None,
    *,
    dev_mode: bool = False,
) -> Settings:
    """Return validated :class:`Settings`.

    Args:
        path: Explicit settings file.  Falls back along the documented search
            order when ``None`` or missing.
        dev_mode: Runtime flag attached to the result (never read from disk).

    Returns:
        A :class:`Settings` object ready for downstream use.

    Raises:
        RuntimeError: When the YAML cannot be parsed or fails validation.
    """
    explicit = Path(path).expanduser() if path is not None else None
    resolved = _first_existing(explicit, _env_path(), user_settings_path())

    try:
        if resolved is None:
            with as_file(_DEFAULT_SETTINGS) as p:
                resolved = p
                data = _load_yaml(p)
        else:
            data = _load_yaml(resolved)
        data.pop("dev_mode", None)
        settings = Settings(**data, dev_mode=dev_mode)
    except Exception as exc:  # yaml.YAMLError, pydantic.ValidationError, OSError
        raise RuntimeError(f"Invalid settings – {exc}") from exc

    log.debug("settings.loaded", path=str(resolved), dev_mode=dev_mode)
    return settings


def save_settings(settings: Settings, path: Optional[str | Path] = None) -> Path:
    """Persist *settings* as YAML (atomically) and return the file written.

    Raises:
        OSError: When the file cannot be written.
    """
    dest = settings_path(path)
    data = settings.model_dump(mode="json")
    atomic_write_text(dest, yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
    log.info("settings.saved", path=str(dest))
    return dest


__all__ = ["ENV_SETTINGS", "user_settings_path", "settings_path", "load_settings", "save_settings"]
