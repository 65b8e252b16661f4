"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from sprout.adapters.mock import MockBuilder, MockVersionControl, RecordingReporter, ScriptedConfirmation
from sprout.core.config.loader import SproutConfig
from sprout.core.persistence.metadata_store import MetadataStore
from sprout.core.services.global_linker import GlobalLinker
from sprout.core.services.installer import PackageInstaller

TAGS_OUTPUT = (
    "1111111111111111111111111111111111111111\trefs/tags/1.0.0\n"
    "2222222222222222222222222222222222222222\trefs/tags/1.2.0\n"
    "3333333333333333333333333333333333333333\trefs/tags/v1.3.0\n"
    "4444444444444444444444444444444444444444\trefs/tags/beta\n"
)


@pytest.fixture
def sprout_config(tmp_path: Path) -> SproutConfig:
    """Config with every path inside the test's temp directory."""
    return SproutConfig(
        path=tmp_path / "lib",
        install_path=tmp_path / "bin",
        scratch_path=tmp_path / "scratch",
    )


@pytest.fixture
def store(sprout_config: SproutConfig) -> MetadataStore:
    return MetadataStore(sprout_config.metadata_path)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def confirmation() -> ScriptedConfirmation:
    return ScriptedConfirmation()


@pytest.fixture
def vcs() -> MockVersionControl:
    return MockVersionControl(tags_output=TAGS_OUTPUT)


@pytest.fixture
def builder() -> MockBuilder:
    return MockBuilder(produces=["tool"])


@pytest.fixture
def installer(
    sprout_config: SproutConfig,
    store: MetadataStore,
    vcs: MockVersionControl,
    builder: MockBuilder,
    confirmation: ScriptedConfirmation,
    reporter: RecordingReporter,
) -> PackageInstaller:
    """Installer wired to mocks and temp paths."""
    return PackageInstaller(
        packages_root=sprout_config.packages_path,
        install_path=sprout_config.install_path,
        scratch_root=sprout_config.scratch_path,
        store=store,
        vcs=vcs,
        builder=builder,
        linker=GlobalLinker(sprout_config.packages_path, confirmation, reporter),
        reporter=reporter,
    )


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's config file and SPROUT_* variables out of tests."""
    for var in (
        "SPROUT_CONFIG",
        "SPROUT_PATH",
        "SPROUT_INSTALL_PATH",
        "SPROUT_LOG_LEVEL",
        "SPROUT_LOG_FILE",
        "SPROUT_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
