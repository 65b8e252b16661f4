"""
Inventory — list, look up and uninstall packages already on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from sprout.adapters.base import Confirmation, Reporter
from sprout.core.errors import AmbiguousPackageError, FilesystemError, PackageNotFoundError
from sprout.core.models.package import guess_command_name, package_name_from_directory
from sprout.core.persistence.metadata_store import MetadataStore
from sprout.core.services.global_linker import remove_path
from sprout.core.services.install_status import inspect_install_status, is_within

logger = logging.getLogger(__name__)


def list_packages(packages_root: Path, names: dict[str, str] | None = None) -> dict[str, list[str]]:
    """Installed versions per package name, both sorted.

    ``names`` maps package directory names to display names (see
    :func:`package_names`); directories missing from it fall back to
    the text after their last ``_``.
    """
    names = names or {}
    if not packages_root.is_dir():
        return {}

    versions_by_package: dict[str, list[str]] = {}
    try:
        package_dirs = sorted(p for p in packages_root.iterdir() if p.is_dir())
        for package_dir in package_dirs:
            build_dir = package_dir / "build"
            versions = sorted(p.name for p in build_dir.iterdir()) if build_dir.is_dir() else []
            name = names.get(package_dir.name) or package_name_from_directory(package_dir.name)
            versions_by_package.setdefault(name, []).extend(versions)
    except OSError as e:
        raise FilesystemError(f"Cannot list {packages_root}: {e}") from e

    return {name: sorted(versions) for name, versions in sorted(versions_by_package.items())}


def package_names(store: MetadataStore) -> dict[str, str]:
    """Directory name → command name guessed from the recorded repository."""
    return {directory: guess_command_name(git_url) for git_url, directory in store.read().packages.items()}


def find_unique_repository(store: MetadataStore, name: str) -> str:
    """The single repository matching ``name``.

    Raises:
        PackageNotFoundError: Nothing matches.
        AmbiguousPackageError: More than one repository matches.
    """
    matches = store.find_repositories(name)
    if not matches:
        raise PackageNotFoundError(name)
    if len(matches) > 1:
        raise AmbiguousPackageError(name, matches)
    return matches[0]


@dataclass
class UninstallResult:
    """What an uninstall removed."""

    name: str
    removed: dict[str, str] = field(default_factory=dict)
    unlinked: list[Path] = field(default_factory=list)
    declined: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "removed": sorted(self.removed),
            "unlinked": [str(p) for p in self.unlinked],
            "declined": self.declined,
        }


class Uninstaller:
    """Removes package directories, their metadata and their global links."""

    def __init__(
        self,
        packages_root: Path,
        install_path: Path,
        store: MetadataStore,
        confirmation: Confirmation,
        reporter: Reporter,
    ):
        self.packages_root = packages_root
        self.install_path = install_path
        self.store = store
        self.confirmation = confirmation
        self.reporter = reporter

    def uninstall(self, name: str, remove_all: bool = False) -> UninstallResult:
        """Uninstall every repository matching ``name``.

        Several matches are only removed together when ``remove_all`` is
        set or the user confirms the listed candidates.

        Raises:
            PackageNotFoundError: Nothing matches ``name``.
        """
        result = UninstallResult(name=name)
        matches = self.store.find_repositories(name)
        if not matches:
            raise PackageNotFoundError(name)

        if len(matches) > 1 and not remove_all:
            listing = "\n".join(f"  - {m}" for m in matches)
            question = f"{len(matches)} packages match '{name}':\n{listing}\nUninstall all of them?"
            if not self.confirmation.ask(question):
                logger.info("Uninstall of %d matches for %r declined", len(matches), name)
                result.declined = True
                return result

        result.removed = self.store.remove_packages(matches)
        for directory in result.removed.values():
            remove_path(self.packages_root / directory)

        if len(result.removed) == 1:
            self.reporter.success(f"{name} was uninstalled")
        else:
            self.reporter.success(
                f"{len(result.removed)} packages that matched the name '{name}' were uninstalled"
            )

        result.unlinked = self._unlink(name, list(result.removed.values()))
        return result

    def _unlink(self, name: str, directories: list[str]) -> list[Path]:
        """Remove global links left behind by the removed package directories.

        Every managed link in the install path that points into one of
        them is deleted, whatever its command name. A foreign occupant at
        ``install_path/<name>`` is only deleted after confirmation.
        """
        removed_dirs = [self.packages_root / directory for directory in directories]
        unlinked: list[Path] = []

        for entry in self._links():
            status = inspect_install_status(entry, self.packages_root)
            if not status.is_managed or status.target is None:
                continue
            if any(is_within(status.target, removed) for removed in removed_dirs):
                remove_path(entry)
                unlinked.append(entry)
            else:
                logger.debug("%s links to another package; keeping it", entry)

        named = self.install_path / name
        if named in unlinked:
            return unlinked

        status = inspect_install_status(named, self.packages_root)
        if status.kind in ("file", "symlink"):
            if self.confirmation.ask(f"{status.warning}\nDo you still wish to remove it?"):
                remove_path(named)
                unlinked.append(named)
        return unlinked

    def _links(self) -> list[Path]:
        """Symlinks currently in the install path."""
        if not self.install_path.is_dir():
            return []
        try:
            return sorted(p for p in self.install_path.iterdir() if p.is_symlink())
        except OSError as e:
            logger.warning("Cannot scan %s for links: %s", self.install_path, e)
            return []
