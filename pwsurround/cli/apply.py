"""
Write the virtual-sink configuration for one HRIR file and restart PipeWire.

Exit codes
----------
0  configuration written and services restarted
1  nothing written (unknown entry, bad name, I/O error, busy)
3  configuration written but the restart failed; restart manually
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
import structlog

from pwsurround.errors import RestartFailed, SurroundError
from pwsurround.utils.display import echo_success, echo_warning

from ._common import EXIT_RESTART_FAILED, controller_from, scan_or_fail, settings_from

log = structlog.get_logger()


@click.command(name="apply")
@click.argument("relative_path")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory RELATIVE_PATH is relative to (default: configured IR directory).",
)
@click.option("--name", "device_name", help="Sink name (default: configured name).")
@click.pass_context
def cli(
    ctx: click.Context,
    relative_path: str,
    root: Optional[Path],
    device_name: Optional[str],
) -> None:
    """Configure the virtual 7.1 sink to convolve with RELATIVE_PATH."""
    settings = settings_from(ctx)
    catalog = scan_or_fail(settings, root)

    entry = catalog.find(relative_path)
    if entry is None:
        raise click.ClickException(f"{relative_path} is not in the catalog of {catalog.root}")

    controller = controller_from(ctx)
    try:
        controller.apply_selection(
            entry,
            device_name=device_name if device_name is not None else settings.virtual_device_name,
            wav_folder=catalog.root,
        )
    except RestartFailed as exc:
        echo_warning(f"Configuration written to {controller.writer.target}")
        echo_warning(f"{exc}. Restart the audio services manually.")
        ctx.exit(EXIT_RESTART_FAILED)
    except SurroundError as exc:
        raise click.ClickException(str(exc)) from exc

    echo_success(f"Virtual surround sink now uses {entry.relative_path}")
    log.debug("cli.apply", target=str(controller.writer.target))
