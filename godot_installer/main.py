"""
Godot Installer — CLI entrypoint.

Usage:
    godot-installer install [VERSION]
    godot-installer uninstall [VERSION]
    godot-installer clean
    godot-installer list
    godot-installer help
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

import click

from godot_installer import __version__
from godot_installer.core.config.loader import Settings, load_settings
from godot_installer.core.errors import InstallerError
from godot_installer.core.observability.logging_config import (
    FILE_ENV,
    FILE_LEVEL_ENV,
    LEVEL_ENV,
    setup_logging,
)

logger = logging.getLogger(__name__)

PROG_NAME = "godot-installer"

_EPILOG = """\b
Examples:
    godot-installer install         # Install latest version
    godot-installer install 4.4.1   # Install specific version
    godot-installer list            # Show available versions
"""


class InstallerGroup(click.Group):
    """Command group that treats an unknown command as a plain failure (exit 1)."""

    def resolve_command(self, ctx: click.Context, args: list[str]):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            raise click.ClickException(
                f"Unknown command. Use '{PROG_NAME} help' for usage information"
            ) from e


@click.group(
    cls=InstallerGroup,
    invoke_without_command=True,
    epilog=_EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to config.yml (default: $XDG_CONFIG_HOME/godot-installer/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Godot Engine Installer — install, update and manage Godot releases."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get(LEVEL_ENV, "INFO")

    setup_logging(
        level=level,
        log_file=os.environ.get(FILE_ENV),
        log_file_level=os.environ.get(FILE_LEVEL_ENV),
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


def _settings(ctx: click.Context) -> Settings:
    return load_settings(ctx.obj.get("config_path"))


def _fail(error: InstallerError | OSError) -> NoReturn:
    logger.error("ERROR: %s", error)
    sys.exit(1)


# ── Install / remove ────────────────────────────────────────────


@cli.command()
@click.argument("version", required=False)
@click.pass_context
def install(ctx: click.Context, version: str | None) -> None:
    """Install Godot VERSION (latest if no version specified)."""
    from godot_installer.core.context import RunContext
    from godot_installer.core.use_cases.install import install_godot

    try:
        settings = _settings(ctx)
        with RunContext(settings) as run:
            install_godot(run, version)
    except (InstallerError, OSError) as e:
        _fail(e)


@cli.command()
@click.argument("version", required=False)
@click.pass_context
def uninstall(ctx: click.Context, version: str | None) -> None:
    """Remove Godot installations (all, or only VERSION)."""
    from godot_installer.core.context import RunContext
    from godot_installer.core.models.release import ReleaseVersion
    from godot_installer.core.services.maintenance import uninstall as uninstall_versions

    try:
        settings = _settings(ctx)
        target = ReleaseVersion.parse(version).text if version else None
        with RunContext(settings):
            uninstall_versions(settings, target)
    except (InstallerError, OSError) as e:
        _fail(e)


@cli.command()
@click.pass_context
def clean(ctx: click.Context) -> None:
    """Remove old versions except current."""
    from godot_installer.core.context import RunContext
    from godot_installer.core.services.maintenance import clean as clean_versions

    try:
        settings = _settings(ctx)
        with RunContext(settings):
            clean_versions(settings)
    except (InstallerError, OSError) as e:
        _fail(e)


# ── Observe ─────────────────────────────────────────────────────


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_versions(ctx: click.Context, as_json: bool) -> None:
    """Show available versions, newest first."""
    from godot_installer.core.services.release_index import ReleaseIndexClient
    from godot_installer.core.services.versions import list_published_versions

    try:
        settings = _settings(ctx)
        versions = list_published_versions(ReleaseIndexClient(settings))
    except (InstallerError, OSError) as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([v.text for v in versions], indent=2))
        return

    for v in versions:
        click.echo(v.text)


@cli.command("help")
@click.pass_context
def show_help(ctx: click.Context) -> None:
    """Show this help message."""
    click.echo(ctx.find_root().get_help())


def main() -> None:
    cli(prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
