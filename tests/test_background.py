import threading
from pathlib import Path

import pytest

from pwsurround.errors import NoEntriesFound, ScanCancelled
from pwsurround.models import Catalog
from pwsurround.pipelines import BackgroundScanner

from .utils import make_tree


def test_background_scan_publishes(tmp_path: Path):
    """Verify a completed scan becomes the current catalog and reaches the callback."""
    make_tree(tmp_path, ["HeSuVi/a.wav", "b.wav"])
    seen = []
    with BackgroundScanner(on_done=lambda cat, err: seen.append((cat, err))) as scanner:
        catalog = scanner.submit(tmp_path).result(timeout=30)
        assert scanner.current == catalog
    assert [e.relative_path for e in catalog.entries] == ["HeSuVi/a.wav", "b.wav"]
    assert seen == [(catalog, None)]


def test_newer_scan_supersedes_older(tmp_path: Path):
    """Verify only the newest scan publishes; the older one is cancelled."""
    started = threading.Event()
    release = threading.Event()

    def slow_scan(root, *, cancel_event, **kwargs):
        if root.name == "first":
            started.set()
            release.wait(10)
            if cancel_event.is_set():
                raise ScanCancelled("scan superseded")
        return Catalog(root=root)

    published = []
    with BackgroundScanner(scan=slow_scan, on_done=lambda c, e: published.append(c)) as scanner:
        first = scanner.submit(tmp_path / "first")
        assert started.wait(10)
        second = scanner.submit(tmp_path / "second")
        release.set()

        with pytest.raises(ScanCancelled):
            first.result(timeout=10)
        assert second.result(timeout=10).root == tmp_path / "second"
        assert scanner.current.root == tmp_path / "second"
    assert [c.root for c in published] == [tmp_path / "second"]


def test_empty_root_publishes_empty_catalog(tmp_path: Path):
    """Verify a recoverable scan error leaves an empty, rooted catalog visible."""
    errors = []
    with BackgroundScanner(on_done=lambda c, e: errors.append(e)) as scanner:
        fut = scanner.submit(tmp_path)
        with pytest.raises(NoEntriesFound):
            fut.result(timeout=30)
        assert scanner.current is not None
        assert len(scanner.current) == 0
    assert isinstance(errors[0], NoEntriesFound)


def test_unexpected_error_still_reaches_callback(tmp_path: Path):
    """Verify any scan failure is reported to on_done before the future fails."""

    def broken_scan(root, *, cancel_event, **kwargs):
        raise ValueError("undecodable name")

    seen = []
    with BackgroundScanner(scan=broken_scan, on_done=lambda c, e: seen.append((c, e))) as scanner:
        with pytest.raises(ValueError):
            scanner.submit(tmp_path).result(timeout=10)
    assert len(seen) == 1
    assert seen[0][0] is None
    assert isinstance(seen[0][1], ValueError)
