"""
InstallStatus — what currently occupies a global install location.

Computed fresh from the filesystem every time; never persisted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

StatusKind = Literal["missing", "file", "symlink", "managed"]


class InstallStatus(BaseModel):
    """Closed variant over missing / file / foreign symlink / managed symlink.

    ``target`` is set for symlinks, ``version`` only for managed links.
    """

    path: Path
    kind: StatusKind
    target: Path | None = None
    version: str | None = None

    @classmethod
    def missing(cls, path: Path) -> InstallStatus:
        return cls(path=path, kind="missing")

    @classmethod
    def file(cls, path: Path) -> InstallStatus:
        return cls(path=path, kind="file")

    @classmethod
    def symlink(cls, path: Path, target: Path) -> InstallStatus:
        return cls(path=path, kind="symlink", target=target)

    @classmethod
    def managed(cls, path: Path, target: Path, version: str) -> InstallStatus:
        return cls(path=path, kind="managed", target=target, version=version)

    @property
    def is_managed(self) -> bool:
        return self.kind == "managed"

    @property
    def is_safe_to_overwrite(self) -> bool:
        """True when replacing the path needs no confirmation."""
        return self.kind in ("missing", "managed")

    @property
    def warning(self) -> str | None:
        """Human-readable description of a foreign occupant, if any."""
        if self.kind == "file":
            return f"An executable that was not installed by sprout already exists at {self.path}."
        if self.kind == "symlink":
            return (
                f"An executable that was not installed by sprout already exists at "
                f"{self.path} that is symlinked to {self.target}."
            )
        return None
