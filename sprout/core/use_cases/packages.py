"""
Package use cases — install, run, list and uninstall from CLI input.

Thin layer over the core services: turns ``LOCATOR[@VERSION]`` strings
into Packages, looks up short names in the metadata document, and
launches installed binaries.
"""

from __future__ import annotations

import logging

from sprout.core.models.package import Package, parse_reference
from sprout.core.services.installer import InstallResult
from sprout.core.services.inventory import UninstallResult, find_unique_repository, list_packages, package_names
from sprout.core.use_cases.workspace import Workspace

logger = logging.getLogger(__name__)

RUN_ENV = {"SPROUT": "YES"}


def install_package(
    workspace: Workspace,
    reference: str,
    command: str | None = None,
    update: bool = False,
    global_install: bool = False,
    verbose: bool = False,
) -> InstallResult:
    """Install ``LOCATOR[@VERSION]``."""
    package = Package.from_reference(reference, command)
    return workspace.installer.install(
        package,
        update=update,
        global_install=global_install,
        verbose=verbose,
    )


def resolve_run_package(workspace: Workspace, reference: str, command: str | None = None) -> Package:
    """Package for ``run``; a bare name is looked up among installed repositories."""
    repo, version = parse_reference(reference)
    if "/" not in repo:
        command = command or repo
        repo = find_unique_repository(workspace.store, repo)
        logger.debug("Resolved %r to %s", reference, repo)
    return Package(repo=repo, version=version, name=command or "")


def run_package(
    workspace: Workspace,
    reference: str,
    arguments: list[str],
    command: str | None = None,
    verbose: bool = False,
) -> int:
    """Install if needed, then run the binary and return its exit code."""
    package = resolve_run_package(workspace, reference, command)
    result = workspace.installer.install(package, update=False, global_install=False, verbose=verbose)

    workspace.reporter.info(f"Running {package.command_version}...")
    cmd = [str(result.package_path.command_path), *arguments]
    return workspace.runner.run_interactive(cmd, env_overrides=RUN_ENV)


def installed_packages(workspace: Workspace) -> dict[str, list[str]]:
    """Installed versions keyed by package name."""
    return list_packages(workspace.config.packages_path, package_names(workspace.store))


def uninstall_package(workspace: Workspace, name: str, remove_all: bool = False) -> UninstallResult:
    return workspace.uninstaller.uninstall(name, remove_all=remove_all)
