"""Pytest configuration for pwsurround tests."""

from pathlib import Path

import pytest

# The scanner reads headers through libsndfile and the helpers write real WAVs.
pytest.importorskip("soundfile")
pytest.importorskip("numpy")


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every user-level path (settings, logs, PipeWire config) into *tmp_path*."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("PWSURROUND_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("PWSURROUND_SETTINGS", raising=False)
    return config_home
