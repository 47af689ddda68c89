"""Delete the virtual-sink configuration and restart PipeWire."""

from __future__ import annotations

import click

from pwsurround.errors import RestartFailed, SurroundError
from pwsurround.utils.display import echo_success, echo_warning

from ._common import EXIT_RESTART_FAILED, controller_from


@click.command(name="remove")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Remove the virtual sink (a missing configuration is not an error)."""
    controller = controller_from(ctx)
    try:
        controller.remove_and_restart()
    except RestartFailed as exc:
        echo_warning(f"Configuration removed from {controller.writer.target}")
        echo_warning(f"{exc}. Restart the audio services manually.")
        ctx.exit(EXIT_RESTART_FAILED)
    except SurroundError as exc:
        raise click.ClickException(str(exc)) from exc

    echo_success("Virtual surround sink removed")
