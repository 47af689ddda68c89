"""No-op restart engine used in dev mode."""

from __future__ import annotations

from typing import Sequence

import structlog

from .base import RestartEngine

log = structlog.get_logger()


class NullEngine(RestartEngine):
    """Log the request and leave the running services alone."""

    def restart(self, services: Sequence[str], *, timeout: float) -> None:
        log.info("restart.skipped", services=list(services), reason="dev mode")
