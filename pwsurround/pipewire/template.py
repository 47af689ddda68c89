"""Render the PipeWire filter-chain document for a virtual 7.1 sink.

Placeholders are ``{UPPER_SNAKE}`` tokens.  PipeWire's SPA-JSON syntax uses
braces too, but always around lowercase keys and whitespace, so the token
pattern below never matches real configuration content.

Rendering is a pure function of ``(template, options)``; substituted values
are never re-scanned, so a path that happens to contain ``{IR_FILE}`` cannot
trigger a second substitution.
"""

from __future__ import annotations

import json
import re
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Dict, List, Optional

from pwsurround.errors import InvalidDeviceName, InvalidIrPath, TemplateIncomplete
from pwsurround.models import DeviceOptions

# Appended after ``effect_input.`` / ``effect_output.`` to form node names.
NODE_NAME_SUFFIX = "virtual-surround-7.1-pwsurround"

CHANNEL_POSITIONS = ("FL", "FR", "FC", "LFE", "RL", "RR", "SL", "SR")

PLACEHOLDER_RE = re.compile(r"\{([A-Z][A-Z0-9_]*)\}")
_FILENAME_RE = re.compile(r'filename\s*=\s*("(?:[^"\\]|\\.)*")')
_FORBIDDEN_NAME_CHARS = re.compile(r'["\\\x00-\x1f\x7f]')


# --------------------------------------------------------------------------- #
# Value policies                                                              #
# --------------------------------------------------------------------------- #
def quote_spa_string(value: str) -> str:
    """Return *value* as a double-quoted SPA-JSON string literal.

    Backslashes, double quotes and control characters are escaped the JSON
    way, which PipeWire's parser understands; non-ASCII text is kept as is.
    """
    return json.dumps(value, ensure_ascii=False)


def validate_device_name(name: str) -> str:
    """Return *name* unchanged after checking it can be used verbatim.

    Raises:
        InvalidDeviceName: For an empty or whitespace-only name, or a name
            containing a double quote, a backslash or a control character.
    """
    if not name or not name.strip():
        raise InvalidDeviceName("Device name must not be empty")
    bad = _FORBIDDEN_NAME_CHARS.search(name)
    if bad:
        raise InvalidDeviceName(
            f"Device name contains an unsupported character: {bad.group(0)!r}"
        )
    return name


def ir_file_literal(path: Path) -> str:
    """Return *path* as a quoted SPA-JSON literal.

    Raises:
        InvalidIrPath: When the path holds undecodable bytes (lone surrogates
            from the filesystem encoding), which UTF-8 cannot carry.
    """
    text = str(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidIrPath(path) from exc
    return quote_spa_string(text)


def placeholder_values(options: DeviceOptions) -> Dict[str, str]:
    """Map every known placeholder to its rendered value for *options*."""
    return {
        "DEVICE_NAME": validate_device_name(options.device_name),
        "IR_FILE": ir_file_literal(options.ir_file_path),
        "NODE_NAME": NODE_NAME_SUFFIX,
        "AUDIO_CHANNELS": str(len(CHANNEL_POSITIONS)),
        "AUDIO_POSITION": " ".join(CHANNEL_POSITIONS),
    }


# --------------------------------------------------------------------------- #
# Rendering                                                                   #
# --------------------------------------------------------------------------- #
def render(template: str, options: DeviceOptions) -> str:
    """Substitute every placeholder in *template*.

    Args:
        template: Configuration text containing ``{UPPER_SNAKE}`` tokens.
        options: User selection (device name, IR path).

    Returns:
        Fully rendered configuration text.

    Raises:
        InvalidDeviceName: When the device name cannot be used.
        InvalidIrPath: When the IR path cannot be encoded as UTF-8.
        TemplateIncomplete: When the template carries a token this renderer
            does not know; signals a template/code mismatch.
    """
    values = placeholder_values(options)
    leftovers: List[str] = []

    def _sub(match: re.Match[str]) -> str:
        token = match.group(1)
        if token in values:
            return values[token]
        leftovers.append(match.group(0))
        return match.group(0)

    text = PLACEHOLDER_RE.sub(_sub, template)
    if leftovers:
        raise TemplateIncomplete(leftovers)
    return text


@lru_cache(maxsize=1)
def load_template() -> str:
    """Return the packaged ``virtual_device.conf.template`` text."""
    return files("pwsurround.resources").joinpath("virtual_device.conf.template").read_text(
        encoding="utf-8"
    )


def render_default(options: DeviceOptions) -> str:
    """Render *options* with the packaged template."""
    return render(load_template(), options)


def extract_ir_path(text: str) -> Optional[Path]:
    """Return the IR path referenced by the first ``filename = "..."`` entry.

    Args:
        text: A rendered configuration document.

    Returns:
        The decoded path, or ``None`` when no (valid) literal is present.
    """
    match = _FILENAME_RE.search(text)
    if match is None:
        return None
    try:
        return Path(json.loads(match.group(1)))
    except json.JSONDecodeError:
        return None


__all__ = [
    "NODE_NAME_SUFFIX",
    "CHANNEL_POSITIONS",
    "PLACEHOLDER_RE",
    "quote_spa_string",
    "validate_device_name",
    "placeholder_values",
    "render",
    "load_template",
    "render_default",
    "extract_ir_path",
]
