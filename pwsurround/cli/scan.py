"""
List the impulse-response files found under a directory.

Entries are printed in catalog order with their sample rate, and tagged with
the HRTF name when the description table knows the filename.  The entry the
current PipeWire configuration points to is marked with ``*``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
import structlog

from pwsurround.config import save_settings
from pwsurround.errors import ConfigIOError

from pwsurround.utils.display import echo_banner, echo_entry, echo_success, echo_warning

from ._common import controller_from, resolver_from, scan_or_fail, settings_from

log = structlog.get_logger()


@click.command(name="scan")
@click.argument(
    "root",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option("--search", default="", help="Case-insensitive substring filter on the relative path.")
@click.option("--rate", type=int, help="Only list files with this sample rate (Hz).")
@click.option(
    "--remember",
    is_flag=True,
    help="Store ROOT as the default IR directory after a successful scan.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    root: Optional[Path],
    search: str,
    rate: Optional[int],
    remember: bool,
) -> None:
    """Scan ROOT (default: the configured IR directory) for HRIR files."""
    settings = settings_from(ctx)
    catalog = scan_or_fail(settings, root)
    shown = catalog.filtered(search=search, sample_rate=rate)

    try:
        configured = controller_from(ctx).locate_configured(catalog)
    except ConfigIOError as exc:
        echo_warning(str(exc))
        configured = None

    resolver = resolver_from(settings)
    echo_banner(f"{len(shown)} of {len(catalog)} file(s) in {catalog.root}")
    for entry in shown.entries:
        descriptor = resolver.annotate(entry)
        echo_entry(
            entry.relative_path,
            entry.sample_rate_label,
            descriptor.name if descriptor else None,
            marked=configured is not None and entry.relative_path == configured.relative_path,
        )

    if remember:
        updated = settings.model_copy(update={"wav_directory": catalog.root})
        try:
            dest = save_settings(updated, ctx.find_root().obj.get("settings_file"))
        except OSError as exc:
            raise click.ClickException(f"Could not save settings: {exc}") from exc
        echo_success(f"Remembered {catalog.root} in {dest}")

    log.debug("cli.scan", root=str(catalog.root), shown=len(shown), total=len(catalog))
