"""Test helpers for pwsurround modules."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

import numpy as np
import soundfile as sf

from pwsurround.engines import RestartEngine
from pwsurround.errors import RestartFailed


def make_wav(path: Path, sr: int = 48000, channels: int = 2, frames: int = 64) -> Path:
    """Write a short silent PCM WAV file.

    Args:
        path: Destination; parent directories are created.
        sr: Sample rate stored in the header.
        channels: Channel count stored in the header.
        frames: Number of frames of silence.

    Returns:
        *path*, for chaining.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(str(path), np.zeros((frames, channels), dtype="float32"), sr, subtype="PCM_16", format="WAV")
    return path


def make_tree(root: Path, rel_paths: Sequence[str], sr: int = 48000) -> Path:
    """Create one WAV file per relative path below *root*."""
    for rel in rel_paths:
        make_wav(root / rel, sr=sr)
    return root


class FakeEngine(RestartEngine):
    """Restart engine that records requests and can be told to fail."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[tuple[str, ...], float]] = []
        self.fail_on = fail_on

    def restart(self, services, *, timeout):
        self.calls.append((tuple(services), timeout))
        if self.fail_on is not None and self.fail_on in services:
            raise RestartFailed(self.fail_on, "exit status 1", returncode=1)


def fake_run_factory(calls: list[list[str]], returncodes: dict[str, int] | None = None):
    """Create a fake ``subprocess.run`` that records commands.

    Args:
        calls: Every command is appended here.
        returncodes: Return code per unit name (last argv element); default 0.
    """
    returncodes = returncodes or {}

    def _fake_run(cmd, **kwargs):
        calls.append(list(cmd))
        code = returncodes.get(cmd[-1], 0)
        return subprocess.CompletedProcess(cmd, code, stdout="", stderr="boom" if code else "")

    return _fake_run
