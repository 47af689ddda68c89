"""Utility functions to print formatted CLI messages."""

from __future__ import annotations

import click

__all__ = ["echo_banner", "echo_success", "echo_warning", "echo_entry"]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a step.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick."""
    click.secho(f"✓ {text}", fg="green")


def echo_warning(text: str) -> None:
    """Echo a yellow warning to stderr."""
    click.secho(f"! {text}", fg="yellow", err=True)


def echo_entry(relative_path: str, rate: str, name: str | None = None, *, marked: bool = False) -> None:
    """Echo one catalog row: marker, sample rate, path and optional HRTF name."""
    marker = "*" if marked else " "
    line = f"{marker} {rate:>9}  {relative_path}"
    if name:
        line += f"  [{name}]"
    click.echo(line)
