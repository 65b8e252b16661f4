"""
Git adapter — remote tag listing and shallow clones.

Uses the git CLI through the shell command adapter — never raw API calls.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from sprout.adapters.base import VersionControl
from sprout.adapters.shell.command import ShellCommandAdapter
from sprout.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(VersionControl):
    """Git version control operations.

    Operations:
        list_tags: ``git ls-remote --tags --refs URL``
        clone:     ``git clone --depth 1 -b REF URL DEST``
    """

    def __init__(self, runner: ShellCommandAdapter | None = None):
        self._runner = runner or ShellCommandAdapter()

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def list_tags(self, git_url: str) -> Receipt:
        logger.debug("Listing tags of %s", git_url)
        return self._runner.run(
            ["git", "ls-remote", "--tags", "--refs", git_url],
            adapter=self.name,
            operation="list_tags",
        )

    def clone(self, git_url: str, ref: str, destination: Path, verbose: bool = False) -> Receipt:
        logger.debug("Cloning %s@%s into %s", git_url, ref, destination)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                operation="clone",
                error=f"Cannot create {destination.parent}: {e}",
            )
        return self._runner.run(
            ["git", "clone", "--depth", "1", "-b", ref, git_url, str(destination)],
            cwd=destination.parent,
            verbose=verbose,
            adapter=self.name,
            operation="clone",
        )
