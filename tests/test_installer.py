"""
Tests for the package installer — resolve, fetch, build, install, record, link.
"""

import os
from pathlib import Path

import pytest

from sprout.adapters.mock import MockBuilder, MockVersionControl, RecordingReporter, ScriptedConfirmation
from sprout.core.config.loader import SproutConfig
from sprout.core.errors import (
    BuildFailedError,
    FilesystemError,
    InvalidCommandError,
    InvalidRepositoryError,
    RepositoryNotFoundError,
)
from sprout.core.models.package import Package
from sprout.core.persistence.metadata_store import MetadataStore
from sprout.core.services.global_linker import GlobalLinker
from sprout.core.services.installer import PackageInstaller

GIT_URL = "https://github.com/owner/tool.git"
DIR_NAME = "github.com_owner_tool"


def _installer(
    config: SproutConfig,
    vcs: MockVersionControl | None = None,
    builder: MockBuilder | None = None,
    answers: list[bool] | None = None,
) -> tuple[PackageInstaller, RecordingReporter, ScriptedConfirmation]:
    reporter = RecordingReporter()
    confirmation = ScriptedConfirmation(answers=answers)
    installer = PackageInstaller(
        packages_root=config.packages_path,
        install_path=config.install_path,
        scratch_root=config.scratch_path,
        store=MetadataStore(config.metadata_path),
        vcs=vcs or MockVersionControl(),
        builder=builder or MockBuilder(produces=["tool"]),
        linker=GlobalLinker(config.packages_path, confirmation, reporter),
        reporter=reporter,
    )
    return installer, reporter, confirmation


class TestInstall:
    def test_installs_latest_version(self, installer, store, vcs, builder, sprout_config):
        result = installer.install(Package(repo="owner/tool"))

        assert result.package.version == "v1.3.0"
        assert result.built
        assert not result.already_installed
        assert vcs.list_calls == [GIT_URL]
        assert vcs.clone_calls == [(GIT_URL, "v1.3.0", sprout_config.scratch_path / DIR_NAME)]
        assert builder.build_count == 1

        command_path = sprout_config.packages_path / DIR_NAME / "build" / "v1.3.0" / "tool"
        assert result.package_path.command_path == command_path
        assert command_path.is_file()
        assert os.access(command_path, os.X_OK)
        assert store.read().packages == {GIT_URL: DIR_NAME}

    def test_scratch_checkout_removed(self, installer, sprout_config):
        installer.install(Package(repo="owner/tool"))
        assert not (sprout_config.scratch_path / DIR_NAME).exists()

    def test_no_tags_uses_default_branch(self, sprout_config):
        installer, reporter, _ = _installer(sprout_config, vcs=MockVersionControl(tags_output=""))
        result = installer.install(Package(repo="owner/tool"))
        assert result.package.version == "master"
        assert result.resolution.used_fallback
        assert "No version tags found for tool, using master" in reporter.texts("info")

    def test_explicit_version_skips_tag_listing(self, installer, vcs):
        result = installer.install(Package(repo="owner/tool", version="1.2.0"))
        assert vcs.list_calls == []
        assert result.resolution is None
        assert vcs.clone_calls[0][1] == "1.2.0"

    def test_second_install_is_a_no_op(self, installer, store, vcs, builder, reporter):
        installer.install(Package(repo="owner/tool", version="1.2.0"))
        before = store.path.read_bytes()

        result = installer.install(Package(repo="owner/tool", version="1.2.0"))

        assert result.already_installed
        assert not result.built
        assert vcs.clone_count == 1
        assert builder.build_count == 1
        assert store.path.read_bytes() == before
        assert "tool 1.2.0 already installed" in reporter.texts("success")

    def test_update_rebuilds(self, installer, vcs, builder):
        installer.install(Package(repo="owner/tool", version="1.2.0"))
        installer.install(Package(repo="owner/tool", version="1.2.0"), update=True)
        assert vcs.clone_count == 2
        assert builder.build_count == 2

    def test_versions_side_by_side(self, installer, sprout_config):
        installer.install(Package(repo="owner/tool", version="1.0.0"))
        installer.install(Package(repo="owner/tool", version="1.2.0"))
        builds = sprout_config.packages_path / DIR_NAME / "build"
        assert sorted(p.name for p in builds.iterdir()) == ["1.0.0", "1.2.0"]

    def test_git_url_locator(self, sprout_config):
        installer, _, _ = _installer(sprout_config)
        result = installer.install(Package(repo="git@example.com:team/tool.git", version="1.0.0"))
        assert result.package_path.repo_dir_name == "git_example.com_team_tool"
        assert installer.store.read().packages == {"git@example.com:team/tool.git": "git_example.com_team_tool"}


class TestInstallFailures:
    def test_invalid_repository(self, installer, vcs):
        with pytest.raises(InvalidRepositoryError):
            installer.install(Package(repo="tool"))
        assert vcs.list_calls == []

    def test_tag_listing_failure(self, sprout_config):
        installer, _, _ = _installer(sprout_config, vcs=MockVersionControl(fail_list=True))
        with pytest.raises(RepositoryNotFoundError, match="no such remote"):
            installer.install(Package(repo="owner/tool"))

    def test_clone_failure(self, sprout_config):
        installer, _, _ = _installer(sprout_config, vcs=MockVersionControl(fail_clone=True))
        with pytest.raises(RepositoryNotFoundError):
            installer.install(Package(repo="owner/tool", version="9.9.9"))

        assert not (sprout_config.scratch_path / DIR_NAME).exists()
        assert not sprout_config.metadata_path.exists()

    def test_build_failure(self, sprout_config):
        builder = MockBuilder(fail=True, diagnostic="error: cannot find 'Foo' in scope")
        installer, _, _ = _installer(sprout_config, builder=builder)

        with pytest.raises(BuildFailedError, match="cannot find 'Foo'"):
            installer.install(Package(repo="owner/tool", version="1.0.0"))

        assert not (sprout_config.scratch_path / DIR_NAME).exists()
        assert not (sprout_config.packages_path / DIR_NAME).exists()
        assert not sprout_config.metadata_path.exists()

    def test_missing_artifact(self, sprout_config):
        installer, _, _ = _installer(sprout_config, builder=MockBuilder(produces=["other"]))

        with pytest.raises(InvalidCommandError, match="'tool'"):
            installer.install(Package(repo="owner/tool", version="1.0.0"))

        assert not (sprout_config.packages_path / DIR_NAME).exists()
        assert not sprout_config.metadata_path.exists()

    def test_command_override(self, sprout_config):
        installer, _, _ = _installer(sprout_config, builder=MockBuilder(produces=["tool-cli"]))
        result = installer.install(Package(repo="owner/tool", version="1.0.0", name="tool-cli"))
        assert result.package_path.command_path.name == "tool-cli"
        assert result.package_path.command_path.is_file()


class TestResources:
    def test_resources_copied_and_missing_reported(self, sprout_config):
        vcs = MockVersionControl(
            files={
                "Package.resources": "share/templates\nREADME.md\n\nmissing.txt\n",
                "share/templates/default.yml": "template",
                "README.md": "readme",
            }
        )
        installer, reporter, _ = _installer(sprout_config, vcs=vcs)

        result = installer.install(Package(repo="owner/tool", version="1.0.0"))

        install_dir = result.package_path.install_dir
        assert (install_dir / "share" / "templates" / "default.yml").read_text() == "template"
        assert (install_dir / "README.md").read_text() == "readme"
        assert result.missing_resources == ["missing.txt"]
        assert reporter.texts("warning") == ["resource missing.txt doesn't exist"]

    def test_undecodable_manifest(self, sprout_config):
        vcs = MockVersionControl(files={"Package.resources": b"\xff\xfeconfig\n"})
        installer, _, _ = _installer(sprout_config, vcs=vcs)

        with pytest.raises(FilesystemError, match="resource manifest"):
            installer.install(Package(repo="owner/tool", version="1.0.0"))

        assert not (sprout_config.packages_path / DIR_NAME / "build" / "1.0.0" / "tool").exists()
        assert not (sprout_config.scratch_path / DIR_NAME).exists()
        assert not sprout_config.metadata_path.exists()

    def test_no_manifest(self, installer):
        result = installer.install(Package(repo="owner/tool", version="1.0.0"))
        assert result.missing_resources == []


class TestGlobalInstall:
    def test_links_after_install(self, installer, sprout_config):
        result = installer.install(Package(repo="owner/tool", version="1.0.0"), global_install=True)

        target = sprout_config.install_path / "tool"
        assert result.link is not None
        assert result.link.linked
        assert Path(os.readlink(target)) == result.package_path.command_path

    def test_already_installed_still_links(self, installer, vcs, sprout_config):
        installer.install(Package(repo="owner/tool", version="1.0.0"))
        result = installer.install(Package(repo="owner/tool", version="1.0.0"), global_install=True)

        assert result.already_installed
        assert result.link.linked
        assert vcs.clone_count == 1
        assert (sprout_config.install_path / "tool").is_symlink()

    def test_declined_overwrite_keeps_package(self, sprout_config):
        installer, _, confirmation = _installer(sprout_config, answers=[False])
        target = sprout_config.install_path / "tool"
        target.parent.mkdir(parents=True)
        target.write_text("someone else's tool")

        result = installer.install(Package(repo="owner/tool", version="1.0.0"), global_install=True)

        assert result.link.declined
        assert target.read_text() == "someone else's tool"
        assert len(confirmation.questions) == 1
        assert result.package_path.command_path.is_file()
        assert installer.store.read().packages == {GIT_URL: DIR_NAME}

    def test_to_dict(self, installer):
        result = installer.install(Package(repo="owner/tool"), global_install=True)
        data = result.to_dict()
        assert data["repo"] == "owner/tool"
        assert data["version"] == "v1.3.0"
        assert data["built"] is True
        assert data["link"]["linked"] is True
        assert "v1.3.0" in data["tags"]
