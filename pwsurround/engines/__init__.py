"""Restart engines."""

from .base import RestartEngine
from .null import NullEngine
from .systemd import SystemctlEngine

__all__ = ["RestartEngine", "NullEngine", "SystemctlEngine"]
