"""Show what is known about an HRIR file from the description table."""

from __future__ import annotations

import click

from pwsurround.utils.display import echo_banner

from ._common import resolver_from, settings_from


@click.command(name="info")
@click.argument("name")
@click.option("--full", is_flag=True, help="Print the whole description instead of a summary.")
@click.pass_context
def cli(ctx: click.Context, name: str, full: bool) -> None:
    """Describe the HRIR file NAME (a filename or a path ending in one)."""
    filename = name.replace("\\", "/").rsplit("/", 1)[-1]
    descriptor = resolver_from(settings_from(ctx)).resolve(filename)
    if descriptor is None:
        click.echo(f"No description known for {filename}")
        return

    echo_banner(f"{filename} – {descriptor.name}")
    rows = [
        ("Configuration", descriptor.configuration),
        ("Points", descriptor.points),
        ("Source", descriptor.source),
        ("Credits", descriptor.credits),
    ]
    for label, value in rows:
        if value:
            click.echo(f"{label + ':':<15}{value}")
    text = descriptor.description if full else descriptor.short_description()
    if text:
        click.echo()
        click.echo(text)
