"""Adapters — bindings for version control, toolchains and the terminal.

Public re-exports for convenient access.
"""

from sprout.adapters.base import Adapter, Builder, Confirmation, Reporter, VersionControl
from sprout.adapters.mock import (
    MockBuilder,
    MockVersionControl,
    RecordingReporter,
    ScriptedConfirmation,
)

__all__ = [
    "Adapter",
    "Builder",
    "Confirmation",
    "MockBuilder",
    "MockVersionControl",
    "RecordingReporter",
    "Reporter",
    "ScriptedConfirmation",
    "VersionControl",
]
