"""
Adapter base — the protocol contract between the core and external tools.

The installer only talks to version control, toolchains and the
terminal through these interfaces, never directly to processes.
Swapping in the mocks from ``sprout.adapters.mock`` makes the whole
core testable without git, a compiler or a TTY.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from sprout.core.models.action import Receipt


class Adapter(ABC):
    """Abstract base class for all tool adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'git', 'swift')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available.

        Should be fast and never raise.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class VersionControl(Adapter):
    """Source fetching: tag listing and shallow checkouts."""

    @abstractmethod
    def list_tags(self, git_url: str) -> Receipt:
        """List remote tags.

        On success ``output`` holds raw ``<ref>\\t<tagPath>`` lines.
        """

    @abstractmethod
    def clone(self, git_url: str, ref: str, destination: Path, verbose: bool = False) -> Receipt:
        """Shallow, single-branch checkout of ``ref`` into ``destination``."""


class Builder(Adapter):
    """A toolchain that turns a checkout into a release binary."""

    @abstractmethod
    def build(self, source_dir: Path, verbose: bool = False) -> Receipt:
        """Build ``source_dir`` in release mode."""

    @abstractmethod
    def artifact_path(self, source_dir: Path, command: str) -> Path:
        """Where a successful build leaves the binary named ``command``."""


class Confirmation(ABC):
    """Yes/no question to the user."""

    @abstractmethod
    def ask(self, message: str) -> bool:
        """Return True if the user agrees."""


class Reporter(ABC):
    """One-way progress output. The core never branches on it."""

    @abstractmethod
    def info(self, message: str) -> None: ...

    @abstractmethod
    def success(self, message: str) -> None: ...

    @abstractmethod
    def warning(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...
