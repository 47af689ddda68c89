"""Report whether the virtual-sink configuration is present."""

from __future__ import annotations

import click

from pwsurround.errors import ConfigIOError

from ._common import controller_from


@click.command(name="status")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Print ``Present(<path>)`` or ``Absent`` and the configured IR file."""
    controller = controller_from(ctx)
    state = controller.status()
    click.echo(str(state))
    if not state.present:
        return
    try:
        ir_path = controller.writer.configured_ir_path()
    except ConfigIOError as exc:
        raise click.ClickException(str(exc)) from exc
    if ir_path is not None:
        click.echo(f"IR file: {ir_path}")
