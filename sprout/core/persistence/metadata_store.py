"""
Metadata store — locked, atomic read/write of ``metadata.json``.

The document is always replaced whole: write to a temp file in the same
directory, then ``os.replace`` it into place, so a crash mid-write can
never leave a half-written document behind.

Read-modify-write cycles run inside :meth:`MetadataStore.transaction`,
which holds an exclusive ``flock`` on a ``metadata.json.lock`` sidecar.
Two sprout processes installing at the same time therefore serialize
instead of losing each other's entries. The sidecar is never replaced,
so the lock handle stays valid across the rename.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import ValidationError

from sprout.core.errors import CorruptMetadataError, FilesystemError
from sprout.core.models.metadata import Metadata

logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"
_LOCK_SUFFIX = ".lock"


def default_metadata_path(root: Path) -> Path:
    """Get the metadata document path under a sprout root."""
    return root / METADATA_FILE


class MetadataStore:
    """Sole owner of the metadata document.

    Use one instance per process; all mutations go through
    :meth:`transaction`.
    """

    def __init__(self, path: Path):
        self.path = path

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + _LOCK_SUFFIX)

    # ── Whole-document I/O ──────────────────────────────────────

    def read(self) -> Metadata:
        """Load the document; an absent file is an empty document.

        Raises:
            CorruptMetadataError: The file exists but isn't the expected JSON.
            FilesystemError: The file exists but can't be read.
        """
        if not self.path.exists():
            logger.debug("No metadata at %s — starting empty", self.path)
            return Metadata()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"Cannot read {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptMetadataError(self.path, str(e)) from e

        if not isinstance(data, dict) or "packages" not in data:
            raise CorruptMetadataError(self.path, "expected an object with a 'packages' mapping")

        try:
            metadata = Metadata.model_validate(data)
        except ValidationError as e:
            raise CorruptMetadataError(self.path, str(e)) from e

        logger.debug("Loaded metadata from %s (%d packages)", self.path, len(metadata.packages))
        return metadata

    def write(self, metadata: Metadata) -> None:
        """Replace the document atomically.

        Raises:
            FilesystemError: Directory creation, temp write or rename failed.
        """
        content = json.dumps(metadata.model_dump(mode="json"), indent=2, sort_keys=True) + "\n"

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=".metadata_",
                suffix=".tmp",
            )
        except OSError as e:
            raise FilesystemError(f"Cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            logger.error("Failed to save metadata to %s: %s", self.path, e)
            raise FilesystemError(f"Cannot write {self.path}: {e}") from e

        logger.debug("Metadata saved to %s", self.path)

    @contextmanager
    def transaction(self) -> Iterator[Metadata]:
        """Locked read-modify-write; the yielded document is written back on exit.

        Nothing is written if the block raises.
        """
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            lock_handle = self.lock_path.open("a+", encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"Cannot lock {self.path}: {e}") from e

        with lock_handle:
            fcntl.flock(lock_handle.fileno(), fcntl.LOCK_EX)
            try:
                metadata = self.read()
                yield metadata
                self.write(metadata)
            finally:
                fcntl.flock(lock_handle.fileno(), fcntl.LOCK_UN)

    # ── Queries and mutations ───────────────────────────────────

    def record_package(self, git_url: str, directory_name: str) -> None:
        """Set the mapping for one repository (idempotent)."""
        with self.transaction() as metadata:
            metadata.record(git_url, directory_name)
        logger.info("Recorded %s → %s", git_url, directory_name)

    def find_repository(self, fragment: str) -> str | None:
        """First repository whose key contains ``fragment`` (case-insensitive).

        Callers that must not guess use :meth:`find_repositories`.
        """
        matches = self.find_repositories(fragment)
        return matches[0] if matches else None

    def find_repositories(self, fragment: str) -> list[str]:
        """Every repository key matching ``fragment``, sorted."""
        return self.read().matching(fragment)

    def remove_packages(self, git_urls: list[str]) -> dict[str, str]:
        """Drop entries and return the removed ``{git_url: directory}`` pairs."""
        removed: dict[str, str] = {}
        with self.transaction() as metadata:
            for git_url in git_urls:
                directory = metadata.packages.pop(git_url, None)
                if directory is not None:
                    removed[git_url] = directory
        logger.info("Removed %d metadata entries", len(removed))
        return removed
