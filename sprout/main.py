"""
Sprout — CLI entrypoint.

Usage:
    sprout install yonaskolb/XcodeGen@2.38.0 --global
    sprout run swiftlint --version
    sprout list
    sprout uninstall xcodegen
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from sprout import __version__
from sprout.core.observability.logging_config import (
    FILE_ENV_VAR,
    FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="sprout")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (streams build logs).")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config.yml (default: ~/.config/sprout/config.yml).",
)
@click.option(
    "--path",
    "path",
    type=click.Path(path_type=Path),
    default=None,
    help="Sprout root holding packages and metadata.",
)
@click.option(
    "--install-path",
    "install_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory for global command links.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
    path: Path | None,
    install_path: Path | None,
) -> None:
    """Sprout — build and install command-line tools from git repositories."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path
    ctx.obj["path"] = path
    ctx.obj["install_path"] = install_path

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV_VAR),
        log_file_level=os.environ.get(FILE_LEVEL_ENV_VAR),
        quiet_third_party=not debug,
    )


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the effective configuration and tool availability."""
    from sprout.adapters.languages import create_builder
    from sprout.adapters.vcs.git import GitAdapter
    from sprout.core.config.loader import ConfigError, load_config

    try:
        settings = load_config(
            ctx.obj.get("config_path"),
            overrides={"path": ctx.obj.get("path"), "install_path": ctx.obj.get("install_path")},
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    tools = {
        adapter.name: adapter.is_available()
        for adapter in (GitAdapter(), create_builder(settings.toolchain))
    }

    if as_json:
        data = settings.model_dump(mode="json")
        data["tools"] = tools
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("🌱 sprout configuration", fg="cyan", bold=True)
    click.echo(f"   Root:         {settings.path}")
    click.echo(f"   Packages:     {settings.packages_path}")
    click.echo(f"   Metadata:     {settings.metadata_path}")
    click.echo(f"   Install path: {settings.install_path}")
    click.echo(f"   Scratch:      {settings.scratch_path}")
    click.echo(f"   Default host: {settings.default_host}")
    click.echo(f"   Toolchain:    {settings.toolchain}")
    click.echo()
    for name, available in tools.items():
        icon = "✅" if available else "❌"
        click.echo(f"   {icon} {name}")


# ── Register package commands from sprout/ui/cli/ ───────────────

from sprout.ui.cli.packages import install, list_command, run, uninstall  # noqa: E402

cli.add_command(install)
cli.add_command(run)
cli.add_command(list_command)
cli.add_command(uninstall)


if __name__ == "__main__":
    cli()
