"""
Cargo adapter — Rust release builds.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from sprout.adapters.base import Builder
from sprout.adapters.shell.command import ShellCommandAdapter
from sprout.core.models.action import Receipt

logger = logging.getLogger(__name__)


class CargoBuilder(Builder):
    """Builds with ``cargo build --release``; binaries land in ``target/release``."""

    def __init__(self, runner: ShellCommandAdapter | None = None):
        self._runner = runner or ShellCommandAdapter()

    @property
    def name(self) -> str:
        return "cargo"

    def is_available(self) -> bool:
        return shutil.which("cargo") is not None

    def build(self, source_dir: Path, verbose: bool = False) -> Receipt:
        logger.debug("cargo build in %s", source_dir)
        return self._runner.run(
            ["cargo", "build", "--release"],
            cwd=source_dir,
            verbose=verbose,
            adapter=self.name,
            operation="build",
        )

    def artifact_path(self, source_dir: Path, command: str) -> Path:
        return source_dir / "target" / "release" / command
