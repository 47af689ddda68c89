import subprocess

import pytest

from pwsurround.errors import PwCliError
from pwsurround.io import pwcli
from pwsurround.io.pwcli import filter_audio_sinks, list_audio_devices, parse_pwcli_output

PWCLI_STDOUT = """\
	id 0, type PipeWire:Interface:Core/4
 		object.serial = "0"
 		core.name = "pipewire-0"
	id 41, type PipeWire:Interface:Node/3
 		object.serial = "41"
 		node.name = "alsa_output.pci-0000_00_1f.3.analog-stereo"
 		node.description = "Built-in Audio Analog Stereo"
 		media.class = "Audio/Sink"
	id 57, type PipeWire:Interface:Node/3
 		node.name = "effect_input.virtual-surround-7.1-pwsurround"
 		node.description = "Virtual Surround Sink"
 		media.class = "Audio/Sink"
	id 58, type PipeWire:Interface:Node/3
 		node.name = "effect_output.virtual-surround-7.1-pwsurround"
 		media.class = "Stream/Output/Audio"
"""


def test_parse_objects():
    """Verify headers and quoted properties are parsed."""
    objs = parse_pwcli_output(PWCLI_STDOUT)
    assert [o["id"] for o in objs] == ["0", "41", "57", "58"]
    assert objs[1]["type"] == "PipeWire:Interface:Node/3"
    assert objs[1]["node.description"] == "Built-in Audio Analog Stereo"


def test_filter_skips_own_sink():
    """Verify only foreign audio sinks are kept."""
    sinks = filter_audio_sinks(parse_pwcli_output(PWCLI_STDOUT))
    assert [s["id"] for s in sinks] == ["41"]


def test_list_audio_devices(monkeypatch):
    """Verify pw-cli is invoked and its output parsed."""
    monkeypatch.setattr(pwcli.shutil, "which", lambda name: "/usr/bin/pw-cli")
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout=PWCLI_STDOUT, stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert len(list_audio_devices()) == 4
    assert calls == [["/usr/bin/pw-cli", "list-objects"]]


def test_list_audio_devices_errors(monkeypatch):
    """Verify a missing binary or failing call raises PwCliError."""
    monkeypatch.setattr(pwcli.shutil, "which", lambda name: None)
    with pytest.raises(PwCliError):
        list_audio_devices()

    monkeypatch.setattr(pwcli.shutil, "which", lambda name: "/usr/bin/pw-cli")
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout="", stderr="no daemon"),
    )
    with pytest.raises(PwCliError, match="no daemon"):
        list_audio_devices()


def test_list_audio_devices_unusable_process(monkeypatch):
    """Verify start-up failures and undecodable output become PwCliError."""
    monkeypatch.setattr(pwcli.shutil, "which", lambda name: "/usr/bin/pw-cli")

    def not_executable(cmd, **kwargs):
        raise PermissionError(13, "Permission denied", cmd[0])

    monkeypatch.setattr(subprocess, "run", not_executable)
    with pytest.raises(PwCliError, match="Could not run"):
        list_audio_devices()

    def garbled(cmd, **kwargs):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    monkeypatch.setattr(subprocess, "run", garbled)
    with pytest.raises(PwCliError, match="undecodable"):
        list_audio_devices()
