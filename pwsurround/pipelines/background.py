"""Run directory scans off the interactive path.

A :class:`BackgroundScanner` owns one worker thread.  Submitting a new scan
cancels the one in flight; only the newest scan may publish its catalog, so
callers never observe a mix of two scans or a half-built catalog.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Optional

import structlog

from pwsurround.errors import NoEntriesFound, RootNotFound, ScanCancelled
from pwsurround.models import Catalog
from pwsurround.pipelines.discovery import scan_directory

log = structlog.get_logger()

DoneCallback = Callable[[Optional[Catalog], Optional[BaseException]], None]


class BackgroundScanner:
    """Cancellable, single-flight wrapper around :func:`scan_directory`."""

    def __init__(
        self,
        *,
        on_done: DoneCallback | None = None,
        scan: Callable[..., Catalog] = scan_directory,
        **scan_kwargs: Any,
    ) -> None:
        """Prepare the worker.

        Args:
            on_done: Called with ``(catalog, None)`` or ``(None, error)`` when
                the newest scan finishes.  Runs on the worker thread.
            scan: Scan function; must accept ``cancel_event``.
            **scan_kwargs: Forwarded to *scan* (``extension``, ``priority_dir``).
        """
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pwsurround-scan")
        self._lock = threading.Lock()
        self._generation = 0
        self._cancel: threading.Event | None = None
        self._current: Catalog | None = None
        self._on_done = on_done
        self._scan = scan
        self._scan_kwargs = scan_kwargs

    # ------------------------------------------------------------------ #
    @property
    def current(self) -> Optional[Catalog]:
        """Catalog of the newest completed scan, ``None`` before the first one."""
        with self._lock:
            return self._current

    def submit(self, root: Path | str) -> "Future[Catalog]":
        """Start scanning *root*, cancelling any scan still running.

        Returns:
            Future resolving to the catalog, or raising the scan error
            (:class:`ScanCancelled` when superseded).
        """
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
            self._generation += 1
            generation = self._generation
            cancel = threading.Event()
            self._cancel = cancel
        log.debug("scan.submit", root=str(root), generation=generation)
        return self._executor.submit(self._run, generation, Path(root), cancel)

    def cancel(self) -> None:
        """Cancel the scan in flight, if any, without starting a new one."""
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
            self._generation += 1

    def shutdown(self) -> None:
        """Cancel outstanding work and join the worker thread."""
        self.cancel()
        self._executor.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> "BackgroundScanner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ------------------------------------------------------------------ #
    def _is_newest(self, generation: int) -> bool:
        return generation == self._generation

    def _run(self, generation: int, root: Path, cancel: threading.Event) -> Catalog:
        if cancel.is_set():
            raise ScanCancelled("scan superseded before it started")

        try:
            catalog = self._scan(root, cancel_event=cancel, **self._scan_kwargs)
        except ScanCancelled:
            log.info("scan.cancelled", root=str(root), generation=generation)
            raise
        except (RootNotFound, NoEntriesFound) as exc:
            # Recoverable: the visible catalog becomes empty.
            empty = Catalog(root=root, warnings=getattr(exc, "warnings", ()))
            self._publish(generation, empty, exc)
            raise
        except Exception as exc:
            # Any other failure still reaches on_done before propagating.
            self._publish(generation, None, exc)
            raise

        if not self._publish(generation, catalog, None):
            log.info("scan.discarded", root=str(root), generation=generation)
            raise ScanCancelled("scan superseded")
        return catalog

    def _publish(
        self,
        generation: int,
        catalog: Optional[Catalog],
        error: Optional[BaseException],
    ) -> bool:
        with self._lock:
            if not self._is_newest(generation):
                return False
            if catalog is not None:
                self._current = catalog
        if self._on_done is not None:
            self._on_done(catalog if error is None else None, error)
        return True


__all__ = ["BackgroundScanner"]
