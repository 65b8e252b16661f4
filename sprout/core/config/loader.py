"""
Configuration loader — reads config.yml into a SproutConfig.

Resolution order, later entries winning:

    built-in defaults
    < YAML file (--config > SPROUT_CONFIG > ~/.config/sprout/config.yml)
    < SPROUT_PATH / SPROUT_INSTALL_PATH env vars
    < --path / --install-path CLI options
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sprout.core.models.package import DEFAULT_HOST
from sprout.core.persistence.metadata_store import default_metadata_path

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SPROUT_CONFIG"
DEFAULT_CONFIG_FILE = Path("~/.config/sprout/config.yml")

_ENV_OVERRIDES = {
    "SPROUT_PATH": "path",
    "SPROUT_INSTALL_PATH": "install_path",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or an explicit file is missing."""


class SproutConfig(BaseModel):
    """Effective settings for one invocation."""

    model_config = ConfigDict(extra="forbid")

    path: Path = Path("/usr/local/lib/sprout")
    install_path: Path = Path("/usr/local/bin")
    scratch_path: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()) / "sprout")
    default_host: str = DEFAULT_HOST
    toolchain: Literal["swift", "cargo"] = "swift"
    resources_file: str = "Package.resources"

    @property
    def packages_path(self) -> Path:
        return self.path / "packages"

    @property
    def metadata_path(self) -> Path:
        return default_metadata_path(self.path)

    def absolute(self) -> SproutConfig:
        """Copy with every path expanded and made absolute."""
        return self.model_copy(
            update={
                "path": self.path.expanduser().absolute(),
                "install_path": self.install_path.expanduser().absolute(),
                "scratch_path": self.scratch_path.expanduser().absolute(),
            }
        )


def find_config_file(explicit: Path | None = None) -> tuple[Path | None, bool]:
    """Locate the config file.

    Returns:
        ``(path, required)``. ``required`` is True when the user named the
        file (option or env var), so its absence is an error.
    """
    if explicit is not None:
        return explicit, True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    default = DEFAULT_CONFIG_FILE.expanduser()
    return (default if default.is_file() else None), False


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The file may wrap everything under a "sprout" key or be flat
    if isinstance(data.get("sprout"), dict):
        data = data["sprout"]
    return data


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> SproutConfig:
    """Load and validate the effective configuration.

    Args:
        config_path: Explicit config file (``--config``).
        overrides: CLI-level overrides; ``None`` values are ignored.

    Raises:
        ConfigError: Explicit file missing, or invalid contents.
    """
    path, required = find_config_file(config_path)
    data: dict[str, Any] = {}

    if path is not None:
        if not path.is_file():
            if required:
                raise ConfigError(f"Config file not found: {path}")
        else:
            logger.debug("Loading config from %s", path)
            data = _read_yaml(path)

    for env_var, key in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        config = SproutConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    config = config.absolute()
    logger.info("Using sprout root %s, links in %s", config.path, config.install_path)
    return config
