"""Thin wrapper around ``pw-cli list-objects``.

Used to show which real audio sinks exist next to the virtual one.  The
parser is a pure function so it can be tested without PipeWire running.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Dict, Iterable, List

import structlog

from pwsurround.errors import PwCliError
from pwsurround.pipewire.template import NODE_NAME_SUFFIX

log = structlog.get_logger()

AUDIO_SINK_CLASS = "Audio/Sink"


def _which_pwcli() -> str:
    """Return the absolute path to *pw-cli* or raise if it is not on *PATH*."""
    exe = shutil.which("pw-cli")
    if not exe:
        raise PwCliError("pw-cli not found on $PATH – install the PipeWire tools.")
    return exe


def parse_pwcli_output(output: str) -> List[Dict[str, str]]:
    """Parse ``pw-cli list-objects`` output into one dict per object.

    The expected shape is::

        id 36, type PipeWire:Interface:Node/3
            media.class = "Audio/Sink"
            node.name = "alsa_output.pci-0000_00_1f.3"

    Header lines yield the ``id`` and ``type`` keys; every indented
    ``key = value`` line adds a property with surrounding quotes stripped.

    Args:
        output: Raw stdout of ``pw-cli list-objects``.

    Returns:
        List of property mappings in output order.
    """
    objects: List[Dict[str, str]] = []
    current: Dict[str, str] | None = None

    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue

        if line.startswith("id ") and "type " in line:
            if current is not None:
                objects.append(current)
            current = {}
            id_part, _, type_part = line.partition(",")
            current["id"] = id_part.strip()[3:].strip()
            type_part = type_part.strip()
            if type_part.startswith("type "):
                current["type"] = type_part[5:].strip()
            continue

        if current is None:
            continue

        key, sep, value = line.partition("=")
        if not sep:
            log.warning("pwcli.unparsed_line", line=line)
            continue
        value = value.strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        current[key.strip()] = value

    if current is not None:
        objects.append(current)
    return objects


def list_audio_devices(timeout: float = 10.0) -> List[Dict[str, str]]:
    """Run ``pw-cli list-objects`` and return the parsed objects.

    Raises:
        PwCliError: When *pw-cli* is missing or cannot be started, times out,
            exits non-zero, or prints output that is not valid text.
    """
    cmd = [_which_pwcli(), "list-objects"]
    log.debug("pwcli.run", cmd=cmd)
    try:
        res = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise PwCliError(f"pw-cli did not answer within {timeout:g}s") from exc
    except OSError as exc:
        raise PwCliError(f"Could not run pw-cli: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise PwCliError(f"pw-cli printed undecodable output: {exc}") from exc
    if res.returncode != 0:
        raise PwCliError(
            f"pw-cli failed with status {res.returncode}: {res.stderr.strip()}"
        )
    return parse_pwcli_output(res.stdout)


def filter_audio_sinks(devices: Iterable[Dict[str, str]]) -> List[Dict[str, str]]:
    """Keep ``Audio/Sink`` objects, skipping the sink created by this tool."""
    own_node = f"effect_input.{NODE_NAME_SUFFIX}"
    return [
        dict(obj)
        for obj in devices
        if obj.get("media.class") == AUDIO_SINK_CLASS
        and obj.get("node.name") != own_node
    ]


__all__ = [
    "AUDIO_SINK_CLASS",
    "parse_pwcli_output",
    "list_audio_devices",
    "filter_audio_sinks",
]
