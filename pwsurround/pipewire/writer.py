"""Persist and remove the generated PipeWire configuration file.

The file state on disk is the single source of truth: :meth:`ConfigWriter.status`
is recomputed from an existence check on every call and never cached.
"""

from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import structlog

from pwsurround.errors import ConfigIOError
from pwsurround.models import ConfigState
from pwsurround.pipewire.paths import STAGED_IR_DIR, default_target_path
from pwsurround.pipewire.template import extract_ir_path
from pwsurround.utils.fs import atomic_write_text

log = structlog.get_logger()


class ConfigWriter:
    """Atomic writer for one well-known configuration path."""

    def __init__(self, target: Path | None = None) -> None:
        """Bind the writer to *target* (defaults to the PipeWire user path)."""
        self.target = Path(target).expanduser() if target else default_target_path()

    def __repr__(self) -> str:
        return f"ConfigWriter(target={str(self.target)!r})"

    # ------------------------------------------------------------------ #
    def apply(self, text: str) -> None:
        """Write *text* to the target atomically.

        Raises:
            ConfigIOError: When the file cannot be written, including when
                *text* cannot be encoded as UTF-8.  The previous file, if any,
                is intact.
        """
        try:
            atomic_write_text(self.target, text)
        except OSError as exc:
            log.error("config.write_failed", path=str(self.target), error=str(exc))
            raise ConfigIOError("write", self.target, exc.strerror or str(exc)) from exc
        except UnicodeError as exc:
            log.error("config.encode_failed", path=str(self.target), error=str(exc))
            raise ConfigIOError("write", self.target, "content is not valid UTF-8") from exc
        log.info("config.written", path=str(self.target))

    def remove(self) -> None:
        """Delete the target; a missing file is a successful no-op.

        Raises:
            ConfigIOError: When an existing file cannot be deleted.
        """
        try:
            self.target.unlink()
        except FileNotFoundError:
            log.debug("config.remove_noop", path=str(self.target))
            return
        except OSError as exc:
            log.error("config.remove_failed", path=str(self.target), error=str(exc))
            raise ConfigIOError("remove", self.target, exc.strerror or str(exc)) from exc
        log.info("config.removed", path=str(self.target))

    def status(self) -> ConfigState:
        """Report presence of the target by existence check only."""
        if self.target.exists():
            return ConfigState.present_at(self.target)
        return ConfigState.absent(self.target)

    # ------------------------------------------------------------------ #
    def configured_ir_path(self) -> Optional[Path]:
        """Return the IR path referenced by the current file.

        Returns:
            The path, or ``None`` when the file is absent or carries no
            parseable ``filename`` entry.

        Raises:
            ConfigIOError: When the file exists but cannot be read.
        """
        try:
            text = self.target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigIOError("read", self.target, str(exc)) from exc
        return extract_ir_path(text)

    @property
    def staged_dir(self) -> Path:
        """Directory holding the staged copy of the selected IR file."""
        return self.target.parent / STAGED_IR_DIR

    @contextmanager
    def staged_ir(self, source: Path) -> Iterator[Path]:
        """Stage a copy of *source* for the configuration written in the body.

        The copy goes into a fresh temporary sibling of :attr:`staged_dir`.
        Only when the ``with`` body completes is that directory swapped in
        and the previous copy discarded; if the copy or the body fails, the
        temporary directory is removed and the previous copy stays in place,
        so the configuration on disk never points at a deleted file.

        Yields:
            Final absolute path of the copy, to be referenced by the configuration.

        Raises:
            ConfigIOError: When the copy or the final swap fails.
        """
        final_dir = self.staged_dir
        source = Path(source)
        try:
            final_dir.parent.mkdir(parents=True, exist_ok=True)
            pending = Path(tempfile.mkdtemp(prefix=f".{STAGED_IR_DIR}.", dir=final_dir.parent))
        except OSError as exc:
            log.error("config.stage_failed", source=str(source), error=str(exc))
            raise ConfigIOError("stage IR file into", final_dir, str(exc)) from exc

        try:
            shutil.copy2(source, pending / source.name)
        except OSError as exc:
            shutil.rmtree(pending, ignore_errors=True)
            log.error("config.stage_failed", source=str(source), error=str(exc))
            raise ConfigIOError("stage IR file into", final_dir, str(exc)) from exc

        try:
            yield (final_dir / source.name).resolve()
        except BaseException:
            shutil.rmtree(pending, ignore_errors=True)
            log.info("config.stage_discarded", source=str(source))
            raise

        self._swap_staged(pending, final_dir)
        log.info("config.staged", source=str(source), dest=str(final_dir / source.name))

    def _swap_staged(self, pending: Path, final_dir: Path) -> None:
        retired = pending.with_name(pending.name + ".old")
        moved_old = False
        try:
            if final_dir.exists():
                final_dir.rename(retired)
                moved_old = True
            pending.rename(final_dir)
        except OSError as exc:
            if moved_old and not final_dir.exists():
                retired.rename(final_dir)
            shutil.rmtree(pending, ignore_errors=True)
            log.error("config.stage_swap_failed", dir=str(final_dir), error=str(exc))
            raise ConfigIOError("stage IR file into", final_dir, str(exc)) from exc
        if moved_old:
            shutil.rmtree(retired, ignore_errors=True)


__all__ = ["ConfigWriter"]
