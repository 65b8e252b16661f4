"""
Workspace — wire configuration and collaborators into the core services.

The CLI builds one Workspace per invocation; tests build one around the
mock adapters. Everything below it receives its collaborators instead
of creating them.
"""

from __future__ import annotations

from dataclasses import dataclass

from sprout.adapters.base import Builder, Confirmation, Reporter, VersionControl
from sprout.adapters.languages import create_builder
from sprout.adapters.shell.command import ShellCommandAdapter
from sprout.adapters.vcs.git import GitAdapter
from sprout.core.config.loader import SproutConfig
from sprout.core.persistence.metadata_store import MetadataStore
from sprout.core.services.global_linker import GlobalLinker
from sprout.core.services.installer import PackageInstaller
from sprout.core.services.inventory import Uninstaller


@dataclass
class Workspace:
    """Every service bound to one sprout root."""

    config: SproutConfig
    store: MetadataStore
    installer: PackageInstaller
    uninstaller: Uninstaller
    runner: ShellCommandAdapter
    reporter: Reporter


def build_workspace(
    config: SproutConfig,
    reporter: Reporter,
    confirmation: Confirmation,
    vcs: VersionControl | None = None,
    builder: Builder | None = None,
    runner: ShellCommandAdapter | None = None,
) -> Workspace:
    """Create the services for ``config``; real adapters unless given."""
    runner = runner or ShellCommandAdapter()
    vcs = vcs or GitAdapter(runner)
    builder = builder or create_builder(config.toolchain, runner)

    store = MetadataStore(config.metadata_path)
    linker = GlobalLinker(config.packages_path, confirmation, reporter)
    installer = PackageInstaller(
        packages_root=config.packages_path,
        install_path=config.install_path,
        scratch_root=config.scratch_path,
        store=store,
        vcs=vcs,
        builder=builder,
        linker=linker,
        reporter=reporter,
        default_host=config.default_host,
        resources_file=config.resources_file,
    )
    uninstaller = Uninstaller(
        packages_root=config.packages_path,
        install_path=config.install_path,
        store=store,
        confirmation=confirmation,
        reporter=reporter,
    )
    return Workspace(
        config=config,
        store=store,
        installer=installer,
        uninstaller=uninstaller,
        runner=runner,
        reporter=reporter,
    )
