"""
Logging setup for *pwsurround*.

* Console records rendered by :class:`rich.logging.RichHandler`.
* Rotating **JSON** log file inside ``<config home>/pwsurround/logs/`` (or
  ``$PWSURROUND_LOG_DIR`` when set).
* A plain-text copy of the console output when ``--save-logfile`` is given.
* :class:`LogBuffer` keeps recent *pwsurround* records in memory so a front
  end can show a log panel.

Entry points call :func:`setup_logging` once, before the first event is logged.
"""

from __future__ import annotations

import atexit
import collections
import logging
import logging.handlers
import os
import threading
from pathlib import Path
from typing import List, Optional

import structlog
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

from pwsurround.pipewire.paths import config_home

__all__ = ["setup_logging", "LogBuffer", "log_dir"]

ENV_LOG_DIR = "PWSURROUND_LOG_DIR"


# --------------------------------------------------------------------------- #
# In-memory buffer                                                            #
# --------------------------------------------------------------------------- #
class LogBuffer(logging.Handler):
    """Keep the last *capacity* formatted records of the ``pwsurround`` tree.

    Records from other loggers (libraries, the root logger) are ignored.
    """

    def __init__(self, capacity: int = 500, level: int = logging.INFO, prefix: str = "pwsurround") -> None:
        super().__init__(level)
        self.prefix = prefix
        self._lines: collections.deque[str] = collections.deque(maxlen=capacity)
        self._guard = threading.Lock()
        self.setFormatter(logging.Formatter("%(message)s"))

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        return (name == self.prefix or name.startswith(self.prefix + ".")) and super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:  # logging must never raise into callers
            self.handleError(record)
            return
        with self._guard:
            self._lines.append(line)

    def lines(self) -> List[str]:
        """Return a snapshot of the buffered lines, oldest first."""
        with self._guard:
            return list(self._lines)

    def clear(self) -> None:
        with self._guard:
            self._lines.clear()

# --------------------------------------------------------------------------- #
# File handlers                                                               #
# --------------------------------------------------------------------------- #
def log_dir() -> Path:
    """Return ``$PWSURROUND_LOG_DIR`` or ``<config home>/pwsurround/logs``."""
    override = os.environ.get(ENV_LOG_DIR)
    return Path(override).expanduser() if override else config_home() / "pwsurround" / "logs"


def _json_log(level: int) -> logging.Handler:
    """Rotating ``pwsurround.log`` (2 MB x 4) under :func:`log_dir`.

    Records arrive already rendered as JSON by structlog.
    """
    target = log_dir()
    target.mkdir(parents=True, exist_ok=True)
    rotating = logging.handlers.RotatingFileHandler(
        target / "pwsurround.log", maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    rotating.setLevel(level)
    return rotating


def _text_mirror(path: Path, level: int) -> logging.Handler:
    """Append-mode copy of the console stream at *path*."""
    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    mirror = logging.FileHandler(path, mode="a", encoding="utf-8")
    mirror.setLevel(level)
    mirror.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(message)s"))
    atexit.register(mirror.close)
    return mirror


# --------------------------------------------------------------------------- #
# Entry point                                                                 #
# --------------------------------------------------------------------------- #
def setup_logging(
    *,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
    buffer: Optional[LogBuffer] = None,
    json_file: bool = True,
) -> None:
    """Route structlog events through the stdlib root logger.

    Console threshold is WARNING, INFO with *verbose*, DEBUG with *debug*.
    File handlers record from INFO (DEBUG with *debug*).

    Args:
        verbose: Lower the console threshold to INFO and render events as
            ``key=value`` text instead of JSON.
        debug: Lower every threshold to DEBUG.
        extra_text_log: Plain-text copy of the console stream.
        buffer: In-memory handler for a log panel.
        json_file: Keep the rotating JSON log under :func:`log_dir`.
    """
    if debug:
        console_level = file_level = logging.DEBUG
    else:
        console_level = logging.INFO if verbose else logging.WARNING
        file_level = logging.INFO

    console = RichHandler(
        level=console_level,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    handlers: list[logging.Handler] = [console]
    if json_file:
        handlers.append(_json_log(file_level))
    if extra_text_log is not None:
        handlers.append(_text_mirror(extra_text_log, console_level))
    if buffer is not None:
        handlers.append(buffer)

    # Handlers do the filtering; the root passes everything through.
    logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=handlers, force=True)

    renderer = (
        StructlogConsoleRenderer(colors=False)
        if verbose or debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min(console_level, file_level)),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )
