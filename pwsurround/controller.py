"""
Apply / remove the virtual sink and restart the audio services.

:class:`ServiceController` is the only component that mutates the generated
configuration.  A non-blocking gate guarantees at most one apply/remove in
flight; a second caller gets :class:`~pwsurround.errors.OperationInProgress`
instead of interleaving writes.

A failed restart never rolls the file back.  The file on disk is the source
of truth and a later manual restart picks it up.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

import structlog

from pwsurround.config.schema import Settings
from pwsurround.engines import NullEngine, RestartEngine, SystemctlEngine
from pwsurround.errors import OperationInProgress
from pwsurround.io.wavinfo import file_checksum
from pwsurround.models import Catalog, CatalogEntry, ConfigState, DeviceOptions
from pwsurround.pipewire.paths import migrate_legacy
from pwsurround.pipewire.template import load_template, render, validate_device_name
from pwsurround.pipewire.writer import ConfigWriter

log = structlog.get_logger()

DEFAULT_SERVICES = ("pipewire", "wireplumber")
DEFAULT_TIMEOUT = 30.0


class ServiceController:
    """Serialise configuration changes and restart the audio stack."""

    def __init__(
        self,
        writer: ConfigWriter,
        engine: RestartEngine,
        *,
        services: Sequence[str] = DEFAULT_SERVICES,
        timeout: float = DEFAULT_TIMEOUT,
        stage_ir: bool = False,
    ) -> None:
        """Wire the controller.

        Args:
            writer: Persists the rendered document.
            engine: Restart capability (real ``systemctl`` or a test double).
            services: Units restarted in order; later units depend on earlier ones.
            timeout: Seconds allowed per unit restart.
            stage_ir: Copy the selected IR next to the configuration before
                rendering.
        """
        self.writer = writer
        self.engine = engine
        self.services = tuple(services)
        self.timeout = timeout
        self.stage_ir = stage_ir
        self._gate = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceController":
        """Build the production controller for *settings*."""
        writer = ConfigWriter(settings.target_path())
        migrate_legacy(writer.target)
        engine: RestartEngine = NullEngine() if settings.dev_mode else SystemctlEngine()
        return cls(
            writer,
            engine,
            services=settings.services,
            timeout=settings.restart_timeout,
            stage_ir=settings.stage_ir,
        )

    # ------------------------------------------------------------------ #
    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        if not self._gate.acquire(blocking=False):
            log.warning("controller.busy", operation=operation)
            raise OperationInProgress(
                f"Cannot {operation}: another apply/remove is still running"
            )
        try:
            yield
        finally:
            self._gate.release()

    @property
    def busy(self) -> bool:
        """``True`` while an apply/remove is in flight."""
        return self._gate.locked()

    def _restart(self) -> None:
        self.engine.restart(self.services, timeout=self.timeout)
        log.info("controller.restarted", services=list(self.services))

    # ------------------------------------------------------------------ #
    def apply_and_restart(self, text: str) -> None:
        """Persist *text* atomically, then restart the services.

        Raises:
            OperationInProgress: When another apply/remove is running.
            ConfigIOError: When the file cannot be written (nothing restarted).
            RestartFailed: When the restart fails; the file stays written.
        """
        with self._exclusive("apply"):
            self.writer.apply(text)
            self._restart()

    def remove_and_restart(self) -> None:
        """Delete the configuration (idempotently), then restart the services.

        Raises:
            OperationInProgress: When another apply/remove is running.
            ConfigIOError: When an existing file cannot be deleted.
            RestartFailed: When the restart fails; the file stays removed.
        """
        with self._exclusive("remove"):
            self.writer.remove()
            self._restart()

    def apply_selection(
        self,
        entry: CatalogEntry,
        *,
        device_name: str,
        wav_folder: Optional[Path] = None,
        template: Optional[str] = None,
    ) -> str:
        """Render the configuration for *entry*, persist it and restart.

        The device name is checked before the gate is taken, so an invalid
        name never blocks other callers.

        Returns:
            The rendered configuration text that was written.
        """
        validate_device_name(device_name)
        template_text = template if template is not None else load_template()

        options = DeviceOptions.for_entry(entry, device_name=device_name, wav_folder=wav_folder)

        with self._exclusive("apply"):
            if self.stage_ir:
                with self.writer.staged_ir(entry.absolute_path) as staged:
                    text = render(
                        template_text, options.model_copy(update={"ir_file_path": staged})
                    )
                    self.writer.apply(text)
            else:
                text = render(template_text, options)
                self.writer.apply(text)
            self._restart()

        log.info("controller.applied", entry=entry.relative_path, device=device_name)
        return text

    def status(self) -> ConfigState:
        """Return the current configuration state (fresh existence check)."""
        return self.writer.status()

    # ------------------------------------------------------------------ #
    def locate_configured(self, catalog: Catalog) -> Optional[CatalogEntry]:
        """Return the catalog entry the present configuration refers to.

        Matching is by absolute path first; for staged copies, by filename
        plus identical content.

        Raises:
            ConfigIOError: When the configuration exists but cannot be read.
        """
        configured = self.writer.configured_ir_path()
        if configured is None:
            return None

        entry = catalog.find_absolute(configured)
        if entry is not None:
            return entry

        candidates = [e for e in catalog.entries if e.filename == configured.name]
        if not candidates:
            return None
        try:
            wanted = file_checksum(configured)
        except OSError as exc:
            log.info("controller.configured_ir_unreadable", path=str(configured), error=str(exc))
            return None
        for candidate in candidates:
            try:
                if file_checksum(candidate.absolute_path) == wanted:
                    return candidate
            except OSError as exc:
                log.debug("controller.checksum_failed", path=str(candidate.absolute_path), error=str(exc))
        return None


__all__ = ["DEFAULT_SERVICES", "DEFAULT_TIMEOUT", "ServiceController"]
