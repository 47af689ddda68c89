import subprocess

import pytest

from pwsurround.engines import NullEngine, SystemctlEngine
from pwsurround.engines import systemd
from pwsurround.errors import RestartFailed

from .utils import fake_run_factory


@pytest.fixture
def systemctl_on_path(monkeypatch):
    monkeypatch.setattr(systemd.shutil, "which", lambda name: f"/usr/bin/{name}")


def test_systemctl_builds_user_restart_commands(monkeypatch, systemctl_on_path):
    """Verify each unit is restarted via systemctl --user, in order."""
    calls = []
    monkeypatch.setattr(subprocess, "run", fake_run_factory(calls))
    SystemctlEngine().restart(["pipewire", "wireplumber"], timeout=30)
    assert calls == [
        ["/usr/bin/systemctl", "--user", "restart", "pipewire"],
        ["/usr/bin/systemctl", "--user", "restart", "wireplumber"],
    ]


def test_unit_not_loaded_is_ok(monkeypatch, systemctl_on_path):
    """Verify exit status 5 (unit not loaded) does not fail the restart."""
    calls = []
    monkeypatch.setattr(subprocess, "run", fake_run_factory(calls, {"pipewire-pulse": 5}))
    SystemctlEngine().restart(["pipewire-pulse", "wireplumber"], timeout=30)
    assert len(calls) == 2


def test_failure_stops_at_first_unit(monkeypatch, systemctl_on_path):
    """Verify a failing unit raises RestartFailed and later units are skipped."""
    calls = []
    monkeypatch.setattr(subprocess, "run", fake_run_factory(calls, {"pipewire": 1}))
    with pytest.raises(RestartFailed) as info:
        SystemctlEngine().restart(["pipewire", "wireplumber"], timeout=30)
    assert info.value.service == "pipewire"
    assert info.value.returncode == 1
    assert "boom" in str(info.value)
    assert len(calls) == 1


def test_timeout_raises(monkeypatch, systemctl_on_path):
    """Verify a hanging restart is reported as timed out."""

    def hang(cmd, **kwargs):
        assert kwargs["timeout"] == 0.5
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(subprocess, "run", hang)
    with pytest.raises(RestartFailed) as info:
        SystemctlEngine().restart(["pipewire"], timeout=0.5)
    assert info.value.timed_out


def test_missing_systemctl(monkeypatch):
    """Verify a missing systemctl binary raises RestartFailed."""
    monkeypatch.setattr(systemd.shutil, "which", lambda name: None)
    with pytest.raises(RestartFailed):
        SystemctlEngine().restart(["pipewire"], timeout=1)


def test_null_engine_does_nothing(monkeypatch):
    """Verify the dev-mode engine never spawns a process."""

    def boom(*a, **k):
        raise AssertionError("subprocess.run must not be called")

    monkeypatch.setattr(subprocess, "run", boom)
    NullEngine().restart(["pipewire"], timeout=1)
