"""List the audio sinks PipeWire currently exposes (via ``pw-cli``)."""

from __future__ import annotations

import click

from pwsurround.errors import PwCliError
from pwsurround.io.pwcli import AUDIO_SINK_CLASS, filter_audio_sinks, list_audio_devices


@click.command(name="sinks")
@click.option("--all", "show_all", is_flag=True, help="Include the virtual sink's own input node.")
def cli(show_all: bool) -> None:
    """Show id, node name and description of every audio sink."""
    try:
        devices = list_audio_devices()
    except PwCliError as exc:
        raise click.ClickException(str(exc)) from exc

    if show_all:
        sinks = [d for d in devices if d.get("media.class") == AUDIO_SINK_CLASS]
    else:
        sinks = filter_audio_sinks(devices)
    if not sinks:
        click.echo("No audio sinks found")
        return
    for sink in sinks:
        name = sink.get("node.name", "?")
        description = sink.get("node.description", "")
        click.echo(f"{sink.get('id', '?'):>5}  {name}  {description}".rstrip())
