"""Well-known locations of the generated PipeWire configuration."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import structlog

log = structlog.get_logger()

CONF_DIR = Path("pipewire") / "pipewire.conf.d"
CONF_NAME = "sink-virtual-surround-7.1-pwsurround.conf"
LEGACY_CONF_NAME = "sink-virtual-surround-7.1-hesuvi.conf"
STAGED_IR_DIR = "hrir"


def config_home() -> Path:
    """Return ``$XDG_CONFIG_HOME`` or ``~/.config``."""
    env = os.environ.get("XDG_CONFIG_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config"


def default_target_path() -> Path:
    """Return the production path of the generated sink configuration."""
    return config_home() / CONF_DIR / CONF_NAME


def dev_target_path() -> Path:
    """Return the throw-away path used in dev mode."""
    return Path(tempfile.gettempdir()) / "pwsurround-dev" / "surround.conf"


def migrate_legacy(target: Path) -> bool:
    """Rename a legacy configuration next to *target* to *target*.

    Returns:
        ``True`` when a file was renamed.  Failures are logged, not raised;
        the legacy file then simply stays where it was.
    """
    legacy = target.parent / LEGACY_CONF_NAME
    if not legacy.exists():
        return False
    if target.exists():
        log.info("config.legacy_present", legacy=str(legacy), target=str(target))
        return False
    try:
        legacy.rename(target)
    except OSError as exc:
        log.warning("config.legacy_rename_failed", legacy=str(legacy), error=str(exc))
        return False
    log.info("config.legacy_renamed", legacy=str(legacy), target=str(target))
    return True


__all__ = [
    "CONF_DIR",
    "CONF_NAME",
    "LEGACY_CONF_NAME",
    "STAGED_IR_DIR",
    "config_home",
    "default_target_path",
    "dev_target_path",
    "migrate_legacy",
]
