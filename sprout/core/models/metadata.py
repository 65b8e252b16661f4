"""
Metadata — the persisted map of installed repositories.

Serialized to ``<path>/metadata.json``:

    {"packages": {"https://github.com/owner/tool.git": "github.com_owner_tool"}}

The document is read whole, changed in memory and written back whole.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Metadata(BaseModel):
    """Mapping from git URL to local package directory name."""

    # Unknown top-level keys are kept so a read/write cycle is lossless.
    model_config = ConfigDict(extra="allow")

    packages: dict[str, str] = Field(default_factory=dict)

    def record(self, git_url: str, directory_name: str) -> None:
        """Set (or overwrite) the entry for a repository."""
        self.packages[git_url] = directory_name

    def matching(self, fragment: str) -> list[str]:
        """All repository keys containing ``fragment``, case-insensitively."""
        needle = fragment.lower()
        return sorted(key for key in self.packages if needle in key.lower())
