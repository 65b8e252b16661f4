"""
Package installer — resolve, fetch, build, install, record, link.

The full vertical slice from "install owner/tool" to a binary under
the packages root and an entry in the metadata document:

    1. resolve the version from remote tags (only when none was given)
    2. skip everything if that version's binary already exists
    3. shallow-clone the ref into a scratch checkout
    4. build it and verify the expected binary was produced
    5. copy the binary and any listed resources into build/<version>/
    6. record repository → directory in the metadata document
    7. optionally link it globally

The scratch checkout is removed on the way out, whatever happened.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from sprout.adapters.base import Builder, Reporter, VersionControl
from sprout.core.errors import (
    BuildFailedError,
    FilesystemError,
    InvalidCommandError,
    InvalidRepositoryError,
    RepositoryNotFoundError,
)
from sprout.core.models.package import DEFAULT_HOST, Package, PackagePath
from sprout.core.persistence.metadata_store import MetadataStore
from sprout.core.services.global_linker import GlobalLinker, LinkResult, remove_path
from sprout.core.services.version_resolver import Resolution, resolve_version

logger = logging.getLogger(__name__)

DEFAULT_RESOURCES_FILE = "Package.resources"


@dataclass
class InstallResult:
    """Outcome of one install request."""

    package: Package
    package_path: PackagePath
    resolution: Resolution | None = None
    already_installed: bool = False
    built: bool = False
    missing_resources: list[str] = field(default_factory=list)
    link: LinkResult | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "repo": self.package.repo,
            "name": self.package.name,
            "version": self.package.version,
            "command_path": str(self.package_path.command_path),
            "already_installed": self.already_installed,
            "built": self.built,
        }
        if self.resolution is not None:
            result["tags"] = self.resolution.tags
        if self.missing_resources:
            result["missing_resources"] = self.missing_resources
        if self.link is not None:
            result["link"] = {
                "target": str(self.link.target),
                "linked": self.link.linked,
                "declined": self.link.declined,
                "replaced_version": self.link.replaced_version,
                "error": self.link.error,
            }
        return result


def read_resource_manifest(manifest: Path) -> list[str]:
    """Relative resource paths listed one per line; blanks ignored.

    Raises:
        FilesystemError: The manifest can't be read or isn't UTF-8.
    """
    try:
        text = manifest.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(f"Cannot read resource manifest {manifest}: {e}") from e
    return [line.strip() for line in text.splitlines() if line.strip()]


class PackageInstaller:
    """Drives version control and the builder for one packages root.

    Args:
        packages_root: Directory holding one sub-directory per repository.
        install_path: Directory receiving global links.
        scratch_root: Where temporary checkouts are made.
        store: Metadata document owner.
        vcs: Version control collaborator.
        builder: Toolchain collaborator.
        linker: Global link step.
        reporter: Progress output.
    """

    def __init__(
        self,
        packages_root: Path,
        install_path: Path,
        scratch_root: Path,
        store: MetadataStore,
        vcs: VersionControl,
        builder: Builder,
        linker: GlobalLinker,
        reporter: Reporter,
        default_host: str = DEFAULT_HOST,
        resources_file: str = DEFAULT_RESOURCES_FILE,
    ):
        self.packages_root = packages_root
        self.install_path = install_path
        self.scratch_root = scratch_root
        self.store = store
        self.vcs = vcs
        self.builder = builder
        self.linker = linker
        self.reporter = reporter
        self.default_host = default_host
        self.resources_file = resources_file

    def package_path(self, package: Package) -> PackagePath:
        return PackagePath(self.packages_root, package, self.default_host)

    def install(
        self,
        package: Package,
        update: bool = False,
        global_install: bool = False,
        verbose: bool = False,
    ) -> InstallResult:
        """Install ``package``; see the module docstring for the steps.

        Raises:
            InvalidRepositoryError: Locator has no owner/name separator.
            RepositoryNotFoundError: Tags or clone couldn't be fetched.
            BuildFailedError: The builder failed.
            InvalidCommandError: No binary named after the command was built.
            FilesystemError: Copying into the packages root failed.
        """
        if not package.has_owner:
            raise InvalidRepositoryError(package.repo)

        package_path = self.package_path(package)
        result = InstallResult(package=package, package_path=package_path)

        if not package.version:
            result.resolution = self._resolve_latest(package, package_path)
            package_path = self.package_path(package)
            result.package_path = package_path

        if not update and package_path.command_path.exists():
            result.already_installed = True
            if global_install:
                result.link = self._link(package_path)
            else:
                self.reporter.success(f"{package.command_version} already installed")
            return result

        checkout = self.scratch_root / package_path.repo_dir_name
        try:
            self._fetch(package, package_path, checkout, verbose)
            self._build(package, checkout, verbose)
            result.missing_resources = self._install_files(package, package_path, checkout)
            self.store.record_package(package_path.git_url, package_path.repo_dir_name)
        finally:
            remove_path(checkout)

        result.built = True
        self.reporter.success(f"Installed {package.command_version}")

        if global_install:
            result.link = self._link(package_path)
        return result

    # ── Steps ───────────────────────────────────────────────────

    def _resolve_latest(self, package: Package, package_path: PackagePath) -> Resolution:
        self.reporter.info(f"Finding latest version of {package.name}")
        receipt = self.vcs.list_tags(package_path.git_url)
        if not receipt.ok:
            raise RepositoryNotFoundError(package_path.git_url, receipt.error)

        resolution = resolve_version(receipt.output)
        logger.info("Tags for %s: %s", package_path.git_url, ", ".join(resolution.tags) or "(none)")
        package.version = resolution.ref
        if resolution.used_fallback:
            self.reporter.info(f"No version tags found for {package.name}, using {package.version}")
        else:
            self.reporter.info(f"Resolved latest version of {package.name} to {package.version}")
        return resolution

    def _fetch(self, package: Package, package_path: PackagePath, checkout: Path, verbose: bool) -> None:
        try:
            self.scratch_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create {self.scratch_root}: {e}") from e
        remove_path(checkout)

        self.reporter.info(f"Cloning {package_path.git_url} {package.version}...")
        receipt = self.vcs.clone(package_path.git_url, package.version, checkout, verbose=verbose)
        if not receipt.ok:
            raise RepositoryNotFoundError(package_path.git_url, receipt.error)

    def _build(self, package: Package, checkout: Path, verbose: bool) -> None:
        self.reporter.info(f"Building {package.name}. This may take a few minutes...")
        receipt = self.builder.build(checkout, verbose=verbose)
        if not receipt.ok:
            raise BuildFailedError(package.name, receipt.error)
        logger.debug("Build of %s took %dms", package.name, receipt.duration_ms)

        if not self.builder.artifact_path(checkout, package.name).is_file():
            raise InvalidCommandError(package.name)

    def _install_files(self, package: Package, package_path: PackagePath, checkout: Path) -> list[str]:
        """Copy binary and resources; return resources that were listed but absent."""
        self.reporter.info(f"Installing {package.name}...")
        install_dir = package_path.install_dir
        manifest = checkout / self.resources_file
        resources = read_resource_manifest(manifest) if manifest.is_file() else []
        remove_path(install_dir)

        try:
            install_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.builder.artifact_path(checkout, package.name), package_path.command_path)
        except OSError as e:
            raise FilesystemError(f"Cannot install {package.name} into {install_dir}: {e}") from e

        if not resources:
            return []

        missing: list[str] = []
        self.reporter.info(f"Copying resources for {package.name}: {', '.join(resources)} ...")
        for resource in resources:
            source = checkout / resource
            if not source.exists():
                self.reporter.warning(f"resource {resource} doesn't exist")
                missing.append(resource)
                continue
            destination = install_dir / resource
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                if source.is_dir():
                    shutil.copytree(source, destination, symlinks=True)
                else:
                    shutil.copy2(source, destination)
            except OSError as e:
                raise FilesystemError(f"Cannot copy resource {resource}: {e}") from e
        return missing

    def _link(self, package_path: PackagePath) -> LinkResult:
        target = self.install_path / package_path.package.name
        return self.linker.link(package_path.command_path, target, package_path.package.command_version)
