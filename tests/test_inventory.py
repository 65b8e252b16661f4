"""
Tests for listing, looking up and uninstalling packages.
"""

import os
from pathlib import Path

import pytest

from sprout.adapters.mock import RecordingReporter, ScriptedConfirmation
from sprout.core.errors import AmbiguousPackageError, PackageNotFoundError
from sprout.core.persistence.metadata_store import MetadataStore
from sprout.core.services.inventory import Uninstaller, find_unique_repository, list_packages, package_names

ALPHA = "https://github.com/owner/alpha.git"
ALPHA_FORK = "https://github.com/fork/alpha.git"
BETA = "https://github.com/owner/beta.git"


def _fake_install(packages: Path, directory: str, *versions: str) -> None:
    name = directory.split("_")[-1]
    for version in versions:
        binary = packages / directory / "build" / version / name
        binary.parent.mkdir(parents=True)
        binary.write_text("#!/bin/sh\n")


class TestListPackages:
    def test_missing_root(self, tmp_path: Path):
        assert list_packages(tmp_path / "nope") == {}

    def test_versions_grouped_and_sorted(self, tmp_path: Path):
        _fake_install(tmp_path, "github.com_owner_beta", "2.0.0")
        _fake_install(tmp_path, "github.com_owner_alpha", "1.1.0", "1.0.0")
        assert list_packages(tmp_path) == {
            "alpha": ["1.0.0", "1.1.0"],
            "beta": ["2.0.0"],
        }

    def test_package_without_builds(self, tmp_path: Path):
        (tmp_path / "github.com_owner_empty").mkdir()
        assert list_packages(tmp_path) == {"empty": []}


class TestFindUniqueRepository:
    def test_unique(self, store: MetadataStore):
        store.record_package(ALPHA, "github.com_owner_alpha")
        store.record_package(BETA, "github.com_owner_beta")
        assert find_unique_repository(store, "alpha") == ALPHA

    def test_not_found(self, store: MetadataStore):
        with pytest.raises(PackageNotFoundError, match="'gamma' package was not found"):
            find_unique_repository(store, "gamma")

    def test_ambiguous(self, store: MetadataStore):
        store.record_package(ALPHA, "github.com_owner_alpha")
        store.record_package(ALPHA_FORK, "github.com_fork_alpha")
        with pytest.raises(AmbiguousPackageError) as excinfo:
            find_unique_repository(store, "alpha")
        assert excinfo.value.candidates == sorted([ALPHA, ALPHA_FORK])


class TestUninstaller:
    def _setup(self, sprout_config, store, answers=None):
        packages = sprout_config.packages_path
        _fake_install(packages, "github.com_owner_alpha", "1.0.0")
        _fake_install(packages, "github.com_fork_alpha", "0.1.0")
        _fake_install(packages, "github.com_owner_beta", "2.0.0")
        store.record_package(ALPHA, "github.com_owner_alpha")
        store.record_package(ALPHA_FORK, "github.com_fork_alpha")
        store.record_package(BETA, "github.com_owner_beta")

        confirmation = ScriptedConfirmation(answers=answers)
        reporter = RecordingReporter()
        uninstaller = Uninstaller(packages, sprout_config.install_path, store, confirmation, reporter)
        return uninstaller, confirmation, reporter

    def test_single_match(self, sprout_config, store):
        uninstaller, confirmation, reporter = self._setup(sprout_config, store)

        result = uninstaller.uninstall("beta")

        assert result.removed == {BETA: "github.com_owner_beta"}
        assert not (sprout_config.packages_path / "github.com_owner_beta").exists()
        assert BETA not in store.read().packages
        assert confirmation.questions == []
        assert reporter.texts("success") == ["beta was uninstalled"]

    def test_not_found(self, sprout_config, store):
        uninstaller, _, _ = self._setup(sprout_config, store)
        with pytest.raises(PackageNotFoundError):
            uninstaller.uninstall("gamma")

    def test_multiple_matches_declined(self, sprout_config, store):
        uninstaller, confirmation, _ = self._setup(sprout_config, store, answers=[False])

        result = uninstaller.uninstall("alpha")

        assert result.declined
        assert result.removed == {}
        assert "Uninstall all of them?" in confirmation.questions[0]
        assert len(store.read().packages) == 3
        assert (sprout_config.packages_path / "github.com_owner_alpha").exists()

    def test_multiple_matches_confirmed(self, sprout_config, store):
        uninstaller, _, reporter = self._setup(sprout_config, store, answers=[True])

        result = uninstaller.uninstall("alpha")

        assert sorted(result.removed) == sorted([ALPHA, ALPHA_FORK])
        assert store.read().packages == {BETA: "github.com_owner_beta"}
        assert "2 packages that matched the name 'alpha' were uninstalled" in reporter.texts("success")

    def test_remove_all_skips_question(self, sprout_config, store):
        uninstaller, confirmation, _ = self._setup(sprout_config, store)
        result = uninstaller.uninstall("alpha", remove_all=True)
        assert len(result.removed) == 2
        assert confirmation.questions == []

    def test_managed_link_removed(self, sprout_config, store):
        uninstaller, _, _ = self._setup(sprout_config, store)
        link = sprout_config.install_path / "beta"
        link.parent.mkdir(parents=True)
        os.symlink(
            sprout_config.packages_path / "github.com_owner_beta" / "build" / "2.0.0" / "beta",
            link,
        )

        result = uninstaller.uninstall("beta")

        assert result.unlinked == [link]
        assert not link.is_symlink()

    def test_link_to_other_package_kept(self, sprout_config, store):
        uninstaller, _, _ = self._setup(sprout_config, store)
        link = sprout_config.install_path / "alpha"
        link.parent.mkdir(parents=True)
        os.symlink(
            sprout_config.packages_path / "github.com_owner_alpha" / "build" / "1.0.0" / "alpha",
            link,
        )

        result = uninstaller.uninstall("fork/alpha")

        assert result.removed == {ALPHA_FORK: "github.com_fork_alpha"}
        assert result.unlinked == []
        assert link.is_symlink()

    def test_foreign_file_needs_confirmation(self, sprout_config, store):
        uninstaller, confirmation, _ = self._setup(sprout_config, store, answers=[False])
        foreign = sprout_config.install_path / "beta"
        foreign.parent.mkdir(parents=True)
        foreign.write_text("theirs")

        result = uninstaller.uninstall("beta")

        assert result.removed
        assert result.unlinked == []
        assert foreign.read_text() == "theirs"
        assert "Do you still wish to remove it?" in confirmation.questions[0]

    def test_to_dict(self, sprout_config, store):
        uninstaller, _, _ = self._setup(sprout_config, store)
        data = uninstaller.uninstall("beta").to_dict()
        assert data == {"name": "beta", "removed": [BETA], "unlinked": [], "declined": False}

    def test_link_named_after_underscored_repo_removed(self, sprout_config, store):
        packages = sprout_config.packages_path
        binary = packages / "github.com_owner_swift_format" / "build" / "1.0.0" / "swift_format"
        binary.parent.mkdir(parents=True)
        binary.write_text("#!/bin/sh\n")
        store.record_package("https://github.com/owner/swift_format.git", "github.com_owner_swift_format")
        link = sprout_config.install_path / "swift_format"
        link.parent.mkdir(parents=True)
        os.symlink(binary, link)
        uninstaller = Uninstaller(
            packages, sprout_config.install_path, store, ScriptedConfirmation(), RecordingReporter()
        )

        result = uninstaller.uninstall("swift_format")

        assert result.unlinked == [link]
        assert not link.is_symlink()

    def test_link_with_custom_command_name_removed(self, sprout_config, store):
        packages = sprout_config.packages_path
        binary = packages / "github.com_owner_tool" / "build" / "1.0.0" / "tool-cli"
        binary.parent.mkdir(parents=True)
        binary.write_text("#!/bin/sh\n")
        store.record_package("https://github.com/owner/tool.git", "github.com_owner_tool")
        link = sprout_config.install_path / "tool-cli"
        link.parent.mkdir(parents=True)
        os.symlink(binary, link)
        confirmation = ScriptedConfirmation()
        uninstaller = Uninstaller(packages, sprout_config.install_path, store, confirmation, RecordingReporter())

        result = uninstaller.uninstall("tool")

        assert result.unlinked == [link]
        assert not link.is_symlink()
        assert confirmation.questions == []


class TestPackageNames:
    def test_names_from_recorded_repositories(self, tmp_path: Path, store: MetadataStore):
        packages = tmp_path / "packages"
        _fake_install(packages, "github.com_owner_swift_format", "0.50.0")
        store.record_package("https://github.com/owner/swift_format.git", "github.com_owner_swift_format")

        assert package_names(store) == {"github.com_owner_swift_format": "swift_format"}
        assert list_packages(packages, package_names(store)) == {"swift_format": ["0.50.0"]}
