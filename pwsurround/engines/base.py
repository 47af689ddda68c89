"""Restart back-ends for the user's audio service stack."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class RestartEngine(ABC):
    """Abstract restart capability.

    Concrete implementations restart the audio services so that PipeWire
    re-reads its configuration.
    """

    @abstractmethod
    def restart(self, services: Sequence[str], *, timeout: float) -> None:
        """Restart *services* in the given order.

        Args:
            services: Unit names; later units may depend on earlier ones.
            timeout: Seconds allowed per unit before giving up.

        Raises:
            pwsurround.errors.RestartFailed: On timeout, non-zero exit or when
                the service manager cannot be invoked.
        """
        raise NotImplementedError
