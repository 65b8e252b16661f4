"""
Package model — one installable tool and where it lives on disk.

A Package is built per request from a ``LOCATOR[@VERSION]`` reference.
Its PackagePath is a pure function of the packages root and the
package, so the directory name stored in the metadata document always
maps back to the same layout:

    <packages_root>/<dir>/build/<version>/<command>
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel

DEFAULT_HOST = "https://github.com"


def guess_command_name(locator: str) -> str:
    """Derive a command name from a repository locator.

    ``owner/Tool.git`` → ``Tool``; ``git@host:owner/tool`` → ``tool``.
    """
    last = locator.rstrip("/").split("/")[-1]
    last = last.split(":")[-1]
    return last.split(".")[0]


def parse_reference(reference: str) -> tuple[str, str]:
    """Split ``LOCATOR[@VERSION]`` into ``(locator, version)``.

    The version is only split off at the last ``@`` when the text after
    it has no ``/`` or ``:``, so ssh locators like
    ``git@github.com:owner/repo.git`` keep their user part.
    """
    locator, sep, version = reference.rpartition("@")
    if not sep or not locator or "/" in version or ":" in version:
        return reference, ""
    return locator, version


class Package(BaseModel):
    """A (repository, version, command name) triple.

    ``version`` starts empty when the caller wants the latest release
    and is filled in by the installer once resolved.
    """

    repo: str
    version: str = ""
    name: str = ""

    def model_post_init(self, __context: object) -> None:
        if not self.name:
            self.name = guess_command_name(self.repo)

    @classmethod
    def from_reference(cls, reference: str, command: str | None = None) -> Package:
        """Build a package from a CLI-style ``LOCATOR[@VERSION]`` string."""
        repo, version = parse_reference(reference)
        return cls(repo=repo, version=version, name=command or "")

    @property
    def has_owner(self) -> bool:
        """Whether the locator carries an owner/name separator."""
        return "/" in self.repo

    @property
    def command_version(self) -> str:
        return f"{self.name} {self.version}"

    def git_url(self, default_host: str = DEFAULT_HOST) -> str:
        """The URL handed to version control for this package."""
        if "://" in self.repo or "@" in self.repo:
            return self.repo
        return f"{default_host.rstrip('/')}/{self.repo}.git"


def directory_name_for(git_url: str) -> str:
    """Local directory name for a git URL (scheme and ``.git`` dropped)."""
    name = git_url.split("://")[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    for char in ("/", ":", "@"):
        name = name.replace(char, "_")
    return name


def package_name_from_directory(directory_name: str) -> str:
    """Reverse of :func:`directory_name_for` for display purposes."""
    return directory_name.split("_")[-1]


@dataclass(frozen=True)
class PackagePath:
    """Derived filesystem layout for a package under the packages root."""

    packages_root: Path
    package: Package
    default_host: str = DEFAULT_HOST

    @property
    def git_url(self) -> str:
        return self.package.git_url(self.default_host)

    @property
    def repo_dir_name(self) -> str:
        """Checkout / package directory name, also stored in metadata."""
        return directory_name_for(self.git_url)

    @property
    def package_dir(self) -> Path:
        return self.packages_root / self.repo_dir_name

    @property
    def install_dir(self) -> Path:
        """Per-version directory holding the binary and its resources."""
        return self.package_dir / "build" / self.package.version

    @property
    def command_path(self) -> Path:
        return self.install_dir / self.package.name
