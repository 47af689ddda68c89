"""Change the name of the virtual sink stored in the settings file.

The new name takes effect the next time ``apply`` writes the configuration.
"""

from __future__ import annotations

from typing import Optional

import click

from pwsurround.config import save_settings
from pwsurround.errors import InvalidDeviceName
from pwsurround.models import DEFAULT_DEVICE_NAME
from pwsurround.pipewire.template import validate_device_name
from pwsurround.utils.display import echo_success

from ._common import settings_from


@click.command(name="rename")
@click.argument("name", required=False)
@click.option("--default", "use_default", is_flag=True, help=f"Reset to “{DEFAULT_DEVICE_NAME}”.")
@click.pass_context
def cli(ctx: click.Context, name: Optional[str], use_default: bool) -> None:
    """Store NAME as the virtual sink name."""
    if use_default == (name is not None):
        raise click.UsageError("Give either NAME or --default")
    new_name = DEFAULT_DEVICE_NAME if use_default else name
    try:
        validate_device_name(new_name)
    except InvalidDeviceName as exc:
        raise click.BadParameter(str(exc), param_hint="NAME") from exc

    settings = settings_from(ctx).model_copy(update={"virtual_device_name": new_name})
    try:
        dest = save_settings(settings, ctx.find_root().obj.get("settings_file"))
    except OSError as exc:
        raise click.ClickException(f"Could not save settings: {exc}") from exc
    echo_success(f"Sink name set to “{new_name}” in {dest}. Run apply to use it.")
