"""Expose the project-wide Click group for the ``pwsurround-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires common global flags (settings file, verbosity, dev mode, logfile);
* sets up logging via :pyfunc:`pwsurround.utils.logging.setup_logging`;
* loads the settings YAML and stashes it in the Click context;
* registers every sub-command located in sibling modules lazily.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Dict

import click

from pwsurround import __version__
from pwsurround.config import load_settings
from pwsurround.utils.logging import setup_logging


class LazyGroup(click.Group):
    """Click group whose sub-commands are imported on first use.

    Each sub-command lives in its own module, imported the first time Click
    asks for it.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._pending: dict[str, tuple[str, str]] = {}

    def set_lazy_command(self, name: str, target: str) -> None:
        """Register *name* as ``"package.module:attribute"``."""
        module_name, _, attr = target.partition(":")
        self._pending[name] = (module_name, attr or "cli")

    def list_commands(self, ctx):  # noqa: D401 - Click signature
        return sorted({*super().list_commands(ctx), *self._pending})

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        if cmd_name not in self.commands and cmd_name in self._pending:
            module_name, attr = self._pending.pop(cmd_name)
            command = getattr(importlib.import_module(module_name), attr)
            self.add_command(command, name=cmd_name)
        return super().get_command(ctx, cmd_name)


_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


@click.group(
    cls=LazyGroup,
    context_settings=_CTX,
    help="""\b
pwsurround-cli – turn an HRIR WAV file into a PipeWire virtual 7.1 sink.
""",
)
@click.version_option(__version__)
@click.option(
    "--settings",
    "settings_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings YAML (default: $PWSURROUND_SETTINGS or ~/.config/pwsurround/settings.yaml).",
)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG-level console output.")
@click.option(
    "--dev",
    "dev_mode",
    is_flag=True,
    help="Write the configuration to a temporary path and skip service restarts.",
)
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401 – Click requires the callback to be named “main”.
    ctx: click.Context,
    settings_file: Path | None,
    verbose: bool,
    debug: bool,
    dev_mode: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *pwsurround-cli*.

    Args:
        ctx: Click runtime context that carries objects across sub-commands.
        settings_file: Explicit settings YAML.
        verbose: Emit INFO-level messages.
        debug: Emit DEBUG-level messages.
        dev_mode: Use a throw-away configuration path, no restarts.
        save_logfile: Optional plain-text log mirroring console output.
    """
    setup_logging(verbose=verbose, debug=debug, extra_text_log=save_logfile)

    try:
        settings = load_settings(settings_file, dev_mode=dev_mode)
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc

    ctx.obj = {
        "settings": settings,
        "settings_file": settings_file,
        "verbose": verbose,
        "debug": debug,
    }


main.set_lazy_command("scan", "pwsurround.cli.scan:cli")
main.set_lazy_command("info", "pwsurround.cli.info:cli")
main.set_lazy_command("apply", "pwsurround.cli.apply:cli")
main.set_lazy_command("remove", "pwsurround.cli.remove:cli")
main.set_lazy_command("status", "pwsurround.cli.status:cli")
main.set_lazy_command("sinks", "pwsurround.cli.sinks:cli")
main.set_lazy_command("rename", "pwsurround.cli.rename:cli")

cli = main
__all__: list[str] = ["main"]
