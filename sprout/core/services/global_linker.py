"""
Global linker — expose one installed version at a shared location.

Replacing a link this tool created is silent. Anything else (a plain
file, somebody else's symlink) is only replaced after the user says so.
The package itself is already installed by the time this runs, so a
failed link is reported, not raised.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from sprout.adapters.base import Confirmation, Reporter
from sprout.core.models.install_status import InstallStatus
from sprout.core.services.install_status import inspect_install_status

logger = logging.getLogger(__name__)


@dataclass
class LinkResult:
    """What happened at the install location."""

    target: Path
    status: InstallStatus
    linked: bool = False
    declined: bool = False
    error: str | None = None

    @property
    def replaced_version(self) -> str | None:
        return self.status.version if self.status.is_managed else None


def remove_path(path: Path) -> None:
    """Best-effort removal of a file, symlink or directory."""
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
    except OSError as e:
        logger.debug("Could not remove %s: %s", path, e)


class GlobalLinker:
    """Creates ``install_path/<command>`` symlinks into the packages root."""

    def __init__(
        self,
        packages_root: Path,
        confirmation: Confirmation,
        reporter: Reporter,
    ):
        self.packages_root = packages_root
        self.confirmation = confirmation
        self.reporter = reporter

    def link(self, source: Path, target: Path, label: str) -> LinkResult:
        """Point ``target`` at ``source``.

        Args:
            source: Installed binary inside the packages root.
            target: Shared location, e.g. ``/usr/local/bin/tool``.
            label: ``"<command> <version>"`` for messages.
        """
        status = inspect_install_status(target, self.packages_root)
        result = LinkResult(target=target, status=status)

        if not status.is_safe_to_overwrite:
            question = f"{status.warning}\nOverwrite it with sprout's symlink?"
            if not self.confirmation.ask(question):
                logger.info("Link of %s declined by user", target)
                result.declined = True
                return result

        remove_path(target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug("Could not create %s: %s", target.parent, e)

        try:
            os.symlink(source, target)
        except OSError as e:
            logger.warning("Symlink %s → %s failed: %s", target, source, e)
            result.error = str(e)
            self.reporter.error(f"Could not install {label} in {target}")
            return result

        result.linked = True
        message = f"Linked {label} to {target.parent}"
        if result.replaced_version:
            message += f", replacing version {result.replaced_version}"
        self.reporter.success(f"{message}.")
        return result
