"""
Terminal collaborators — click-backed Reporter and Confirmation.
"""

from __future__ import annotations

import click

from sprout.adapters.base import Confirmation, Reporter

PREFIX = "🌱  "


class ClickReporter(Reporter):
    """Progress lines on stdout, problems on stderr.

    With ``to_stderr`` everything goes to stderr, keeping stdout clean
    for JSON output.
    """

    def __init__(self, quiet: bool = False, to_stderr: bool = False):
        self._quiet = quiet
        self._to_stderr = to_stderr

    def info(self, message: str) -> None:
        if not self._quiet:
            click.echo(f"{PREFIX}{message}", err=self._to_stderr)

    def success(self, message: str) -> None:
        click.secho(f"{PREFIX}{message}", fg="green", err=self._to_stderr)

    def warning(self, message: str) -> None:
        click.secho(f"{PREFIX}{message}", fg="yellow", err=True)

    def error(self, message: str) -> None:
        click.secho(f"{PREFIX}{message}", fg="red", err=True)


class ClickConfirmation(Confirmation):
    """Interactive yes/no prompt; defaults to no."""

    def ask(self, message: str) -> bool:
        return click.confirm(click.style(f"{PREFIX}{message}", fg="yellow"), default=False)


class AssumeYes(Confirmation):
    """Non-interactive confirmation for ``--yes``."""

    def ask(self, message: str) -> bool:
        return True
