"""Helpers shared by the sub-commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from pwsurround.config.schema import Settings
from pwsurround.controller import ServiceController
from pwsurround.descriptions import MetadataResolver, load_descriptions
from pwsurround.errors import MetadataTableError, NoEntriesFound, RootNotFound
from pwsurround.models import Catalog
from pwsurround.pipelines.discovery import scan_directory
from pwsurround.utils.display import echo_warning

# Exit code used when the configuration was written but the restart failed.
EXIT_RESTART_FAILED = 3


def settings_from(ctx: click.Context) -> Settings:
    """Return the :class:`Settings` stored by the root command."""
    return ctx.find_root().obj["settings"]


def controller_from(ctx: click.Context) -> ServiceController:
    """Build a :class:`ServiceController` for the active settings."""
    return ServiceController.from_settings(settings_from(ctx))


def scan_or_fail(settings: Settings, root: Optional[Path] = None) -> Catalog:
    """Scan *root* (or the configured root) and print skipped-entry warnings.

    Raises:
        click.ClickException: When the root is missing or holds no candidates.
    """
    target = root if root is not None else settings.scan_root()
    try:
        catalog = scan_directory(
            target,
            extension=settings.extension,
            priority_dir=settings.priority_dir,
        )
    except (RootNotFound, NoEntriesFound) as exc:
        for warning in getattr(exc, "warnings", ()):
            echo_warning(str(warning))
        raise click.ClickException(str(exc)) from exc

    for warning in catalog.warnings:
        echo_warning(str(warning))
    return catalog


def resolver_from(settings: Settings) -> MetadataResolver:
    """Return a resolver over the configured description table.

    Raises:
        click.ClickException: When a configured table cannot be read or parsed.
    """
    if settings.descriptions_file is None:
        return MetadataResolver()
    try:
        return MetadataResolver(load_descriptions(settings.descriptions_file))
    except (OSError, UnicodeDecodeError, MetadataTableError) as exc:
        raise click.ClickException(
            f"Cannot load descriptions from {settings.descriptions_file}: {exc}"
        ) from exc
