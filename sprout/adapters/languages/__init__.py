"""
Toolchain builders.

Each builder knows one build command and where that toolchain leaves
release binaries.
"""

from __future__ import annotations

from sprout.adapters.base import Builder
from sprout.adapters.languages.cargo import CargoBuilder
from sprout.adapters.languages.swift import SwiftBuilder
from sprout.adapters.shell.command import ShellCommandAdapter

BUILDERS: dict[str, type[SwiftBuilder] | type[CargoBuilder]] = {
    "swift": SwiftBuilder,
    "cargo": CargoBuilder,
}


def create_builder(toolchain: str, runner: ShellCommandAdapter | None = None) -> Builder:
    """Instantiate the builder registered for ``toolchain``."""
    try:
        builder_cls = BUILDERS[toolchain]
    except KeyError:
        valid = ", ".join(sorted(BUILDERS))
        raise ValueError(f"Unknown toolchain '{toolchain}'. Valid: {valid}") from None
    return builder_cls(runner)
