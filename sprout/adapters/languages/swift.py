"""
Swift adapter — Swift Package Manager release builds.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from sprout.adapters.base import Builder
from sprout.adapters.shell.command import ShellCommandAdapter
from sprout.core.models.action import Receipt

logger = logging.getLogger(__name__)


class SwiftBuilder(Builder):
    """Builds with ``swift build -c release``.

    Binaries land in ``.build/release/<product>``.
    """

    def __init__(self, runner: ShellCommandAdapter | None = None):
        self._runner = runner or ShellCommandAdapter()

    @property
    def name(self) -> str:
        return "swift"

    def is_available(self) -> bool:
        return shutil.which("swift") is not None

    def build(self, source_dir: Path, verbose: bool = False) -> Receipt:
        logger.debug("swift build in %s", source_dir)
        return self._runner.run(
            ["swift", "build", "-c", "release"],
            cwd=source_dir,
            verbose=verbose,
            adapter=self.name,
            operation="build",
        )

    def artifact_path(self, source_dir: Path, command: str) -> Path:
        return source_dir / ".build" / "release" / command
