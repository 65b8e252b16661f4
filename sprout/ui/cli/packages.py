"""
CLI commands for installing, running, listing and removing packages.

Thin wrappers over ``sprout.core.use_cases.packages``.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from sprout.core.config.loader import ConfigError, load_config
from sprout.core.errors import SproutError
from sprout.core.use_cases.workspace import Workspace, build_workspace
from sprout.ui.cli.console import AssumeYes, ClickConfirmation, ClickReporter


def load_workspace(ctx: click.Context, assume_yes: bool = False, as_json: bool = False) -> Workspace:
    """Build the workspace from global options.

    ``ctx.obj`` may carry pre-built ``vcs`` / ``builder`` / ``runner``
    adapters (used by tests).
    """
    obj = ctx.obj
    config = load_config(
        obj.get("config_path"),
        overrides={"path": obj.get("path"), "install_path": obj.get("install_path")},
    )
    return build_workspace(
        config,
        reporter=ClickReporter(quiet=obj.get("quiet", False), to_stderr=as_json),
        confirmation=AssumeYes() if assume_yes else ClickConfirmation(),
        vcs=obj.get("vcs"),
        builder=obj.get("builder"),
        runner=obj.get("runner"),
    )


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn operation failures into a red message and exit code 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (SproutError, ConfigError) as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)

    return wrapper


# ── Install ─────────────────────────────────────────────────────


@click.command()
@click.argument("reference")
@click.option("--command", "-c", "command", default=None, help="Command name (default: repository name).")
@click.option("--update", "-u", is_flag=True, help="Rebuild even if this version is installed.")
@click.option("--global/--no-global", "-g", "global_install", default=False, help="Link the command into the install path.")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Overwrite foreign files without asking.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output result as JSON.")
@click.pass_context
@handle_errors
def install(
    ctx: click.Context,
    reference: str,
    command: str | None,
    update: bool,
    global_install: bool,
    assume_yes: bool,
    as_json: bool,
) -> None:
    """Install a package: OWNER/NAME[@VERSION] or GIT_URL[@VERSION]."""
    from sprout.core.use_cases.packages import install_package

    workspace = load_workspace(ctx, assume_yes=assume_yes, as_json=as_json)
    result = install_package(
        workspace,
        reference,
        command=command,
        update=update,
        global_install=global_install,
        verbose=ctx.obj.get("verbose", False),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))


# ── Run ─────────────────────────────────────────────────────────


@click.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.argument("reference")
@click.argument("arguments", nargs=-1, type=click.UNPROCESSED)
@click.option("--command", "-c", "command", default=None, help="Command name (default: repository name).")
@click.pass_context
@handle_errors
def run(ctx: click.Context, reference: str, arguments: tuple[str, ...], command: str | None) -> None:
    """Install a package if needed and run it with ARGUMENTS.

    REFERENCE may be a short name of an installed package.
    """
    from sprout.core.use_cases.packages import run_package

    workspace = load_workspace(ctx)
    exit_code = run_package(
        workspace,
        reference,
        list(arguments),
        command=command,
        verbose=ctx.obj.get("verbose", False),
    )
    sys.exit(exit_code)


# ── List ────────────────────────────────────────────────────────


@click.command(name="list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def list_command(ctx: click.Context, as_json: bool) -> None:
    """List installed packages and their versions."""
    from sprout.core.use_cases.packages import installed_packages

    workspace = load_workspace(ctx)
    packages = installed_packages(workspace)

    if as_json:
        click.echo(json.dumps(packages, indent=2))
        return

    if not packages:
        click.echo("🌱  No sprout packages installed")
        return

    click.secho("Installed sprout packages:", bold=True)
    for name, versions in packages.items():
        click.echo(f"  {name}")
        for version in versions:
            click.echo(f"    - {version}")


# ── Uninstall ───────────────────────────────────────────────────


@click.command()
@click.argument("name")
@click.option("--all", "remove_all", is_flag=True, help="Remove every package matching NAME.")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Answer yes to every question.")
@click.pass_context
@handle_errors
def uninstall(ctx: click.Context, name: str, remove_all: bool, assume_yes: bool) -> None:
    """Remove installed packages whose repository matches NAME."""
    from sprout.core.use_cases.packages import uninstall_package

    workspace = load_workspace(ctx, assume_yes=assume_yes)
    result = uninstall_package(workspace, name, remove_all=remove_all)

    if result.declined:
        click.secho("🌱  Nothing was uninstalled", fg="yellow")
