from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from pwsurround.cli import main as cli_main
from pwsurround.engines import NullEngine
from pwsurround.errors import PwCliError, RestartFailed

from .test_pwcli import PWCLI_STDOUT
from .utils import make_tree


@pytest.fixture
def env(tmp_path: Path):
    """Settings file pointing at a scratch IR tree and configuration path."""
    irs = make_tree(tmp_path / "irs", ["HeSuVi/dh.wav", "Atmos.wav", "b/c.wav"])
    conf = tmp_path / "conf" / "surround.conf"
    settings = tmp_path / "settings.yaml"
    settings.write_text(yaml.safe_dump({"wav_directory": str(irs), "config_path": str(conf)}))
    return {"irs": irs, "conf": conf, "settings": settings}


def _invoke(env, *args):
    return CliRunner().invoke(cli_main, ["--settings", str(env["settings"]), "--dev", *args])


def test_help_lists_commands():
    """Verify every sub-command is registered."""
    result = CliRunner().invoke(cli_main, ["--help"])
    assert result.exit_code == 0
    for name in ("scan", "info", "apply", "remove", "status", "sinks", "rename"):
        assert name in result.output


def test_scan_lists_catalog_order(env):
    """Verify scan prints entries priority directory first."""
    result = _invoke(env, "scan")
    assert result.exit_code == 0, result.output
    lines = [ln for ln in result.output.splitlines() if ".wav" in ln]
    assert [ln.split()[2] for ln in lines] == ["HeSuVi/dh.wav", "Atmos.wav", "b/c.wav"]
    assert "Dolby Atmos" in result.output


def test_scan_filters(env):
    """Verify --search and --rate narrow the listing."""
    result = _invoke(env, "scan", "--search", "ATMOS")
    assert "1 of 3" in result.output
    result = _invoke(env, "scan", "--rate", "44100")
    assert "0 of 3" in result.output


def test_scan_empty_root(env, tmp_path: Path):
    """Verify an empty directory is reported and exits non-zero."""
    empty = tmp_path / "empty"
    empty.mkdir()
    result = _invoke(env, "scan", str(empty))
    assert result.exit_code == 1
    assert "No impulse-response files found" in result.output


def test_scan_remember(env, tmp_path: Path):
    """Verify --remember stores the scanned root in the settings file."""
    other = make_tree(tmp_path / "other", ["x.wav"])
    result = _invoke(env, "scan", str(other), "--remember")
    assert result.exit_code == 0, result.output
    saved = yaml.safe_load(env["settings"].read_text())
    assert Path(saved["wav_directory"]) == other.resolve()


def test_info(env):
    """Verify info describes known files and tolerates unknown ones."""
    result = _invoke(env, "info", "Atmos.wav")
    assert result.exit_code == 0
    assert "Headphones" in result.output
    result = _invoke(env, "info", "unknown_xyz.wav")
    assert result.exit_code == 0
    assert "No description known" in result.output


def test_apply_status_remove(env):
    """Verify the full apply → status → remove cycle."""
    result = _invoke(env, "apply", "HeSuVi/dh.wav", "--name", "Den")
    assert result.exit_code == 0, result.output
    text = env["conf"].read_text()
    assert 'node.description = "Den"' in text

    result = _invoke(env, "status")
    assert f"Present({env['conf']})" in result.output
    assert str((env["irs"] / "HeSuVi" / "dh.wav").resolve()) in result.output

    result = _invoke(env, "scan")
    marked = [ln for ln in result.output.splitlines() if ln.startswith("*")]
    assert len(marked) == 1 and "HeSuVi/dh.wav" in marked[0]

    result = _invoke(env, "remove")
    assert result.exit_code == 0
    assert not env["conf"].exists()
    assert "Absent" in _invoke(env, "status").output


def test_apply_unknown_entry(env):
    """Verify selecting a file outside the catalog writes nothing."""
    result = _invoke(env, "apply", "missing.wav")
    assert result.exit_code == 1
    assert not env["conf"].exists()


def test_apply_invalid_name(env):
    """Verify invalid device names, empty ones included, are rejected without writing."""
    for bad in ('bad "name"', "", "   "):
        result = _invoke(env, "apply", "Atmos.wav", "--name", bad)
        assert result.exit_code == 1, bad
        assert "Device name" in result.output
        assert not env["conf"].exists()


def test_apply_restart_failure_exit_code(env, monkeypatch):
    """Verify a failed restart keeps the file and exits with status 3."""

    def fail(self, services, *, timeout):
        raise RestartFailed("pipewire", "exit status 1", returncode=1)

    monkeypatch.setattr(NullEngine, "restart", fail)
    result = _invoke(env, "apply", "Atmos.wav")
    assert result.exit_code == 3
    assert env["conf"].exists()
    assert "Restart the audio services manually" in result.output


def test_rename(env):
    """Verify rename persists the name and rejects bad input."""
    assert _invoke(env, "rename", "Living Room").exit_code == 0
    assert yaml.safe_load(env["settings"].read_text())["virtual_device_name"] == "Living Room"

    assert _invoke(env, "rename", "--default").exit_code == 0
    saved = yaml.safe_load(env["settings"].read_text())
    assert saved["virtual_device_name"] == "Virtual Surround Sink"

    assert _invoke(env, "rename").exit_code == 2
    assert _invoke(env, "rename", "x", "--default").exit_code == 2
    assert _invoke(env, "rename", "   ").exit_code == 2


def test_sinks(env, monkeypatch):
    """Verify sinks lists foreign sinks and reports pw-cli problems."""
    from pwsurround.cli import sinks
    from pwsurround.io.pwcli import parse_pwcli_output

    monkeypatch.setattr(sinks, "list_audio_devices", lambda: parse_pwcli_output(PWCLI_STDOUT))
    result = _invoke(env, "sinks")
    assert result.exit_code == 0
    assert "Built-in Audio Analog Stereo" in result.output
    assert "effect_input" not in result.output
    assert "effect_input" in _invoke(env, "sinks", "--all").output

    def missing():
        raise PwCliError("pw-cli not found")

    monkeypatch.setattr(sinks, "list_audio_devices", missing)
    result = _invoke(env, "sinks")
    assert result.exit_code == 1
    assert "pw-cli not found" in result.output


def test_bad_settings_file(tmp_path: Path):
    """Verify an invalid settings file is reported cleanly."""
    bad = tmp_path / "bad.yaml"
    bad.write_text("services: []\n")
    result = CliRunner().invoke(cli_main, ["--settings", str(bad), "status"])
    assert result.exit_code == 1
    assert "Invalid settings" in result.output


def test_info_with_own_description_table(env, tmp_path: Path):
    """Verify a configured description table replaces the packaged one."""
    table = tmp_path / "table.csv"
    table.write_text(
        "HRIR;HRTF;Configuration;Description;Source;Credits;Points\n"
        f"room.wav;Living Room;Speakers;{'long text ' * 40};Own;Me;8\n"
    )
    settings = yaml.safe_load(env["settings"].read_text())
    settings["descriptions_file"] = str(table)
    env["settings"].write_text(yaml.safe_dump(settings))

    result = _invoke(env, "info", "room.wav")
    assert result.exit_code == 0, result.output
    assert "Living Room" in result.output
    assert "..." in result.output
    assert "..." not in _invoke(env, "info", "room.wav", "--full").output
    assert "No description known" in _invoke(env, "info", "Atmos.wav").output

    table.write_text("not;a;table\n")
    result = _invoke(env, "info", "room.wav")
    assert result.exit_code == 1
    assert "Cannot load descriptions" in result.output
