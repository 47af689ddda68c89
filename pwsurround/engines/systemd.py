"""``systemctl --user`` restart engine."""

from __future__ import annotations

import shutil
import subprocess
from typing import Sequence

import structlog

from pwsurround.errors import RestartFailed

from .base import RestartEngine

log = structlog.get_logger()

# systemctl: "unit not loaded / not installed".  The unit may legitimately be
# absent (e.g. no pipewire-pulse), which must not fail the whole apply.
_UNIT_NOT_LOADED = 5


class SystemctlEngine(RestartEngine):
    """Restart user units one at a time via ``systemctl --user restart``."""

    def __init__(self, systemctl: str = "systemctl") -> None:
        """Configure the engine.

        Args:
            systemctl: Executable name or path of ``systemctl``.
        """
        self.systemctl = systemctl

    def _executable(self, service: str) -> str:
        exe = shutil.which(self.systemctl)
        if not exe:
            raise RestartFailed(service, f"{self.systemctl} not found on $PATH")
        return exe

    def restart(self, services: Sequence[str], *, timeout: float) -> None:
        """Restart every unit in *services*, stopping at the first failure.

        Raises:
            RestartFailed: On timeout, a non-zero exit other than "unit not
                loaded", termination by signal, or a missing ``systemctl``.
        """
        for service in services:
            cmd = [self._executable(service), "--user", "restart", service]
            log.info("systemctl.restart", service=service, timeout=timeout)
            try:
                res = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
            except subprocess.TimeoutExpired as exc:
                log.error("systemctl.timeout", service=service, timeout=timeout)
                raise RestartFailed(
                    service, f"timed out after {timeout:g}s", timed_out=True
                ) from exc
            except OSError as exc:
                log.error("systemctl.exec_failed", service=service, error=str(exc))
                raise RestartFailed(service, str(exc)) from exc

            if res.returncode == 0:
                continue
            if res.returncode == _UNIT_NOT_LOADED:
                log.info("systemctl.unit_not_loaded", service=service)
                continue
            if res.returncode < 0:
                detail = f"terminated by signal {-res.returncode}"
            else:
                detail = f"exit status {res.returncode}"
                if res.stderr.strip():
                    detail += f": {res.stderr.strip()}"
            log.error("systemctl.failed", service=service, returncode=res.returncode)
            raise RestartFailed(service, detail, returncode=res.returncode)
