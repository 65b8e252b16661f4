"""
Error taxonomy for install, run and uninstall operations.

Every error aborts the current operation and reaches the CLI with its
reason. None are retried. Non-fatal conditions (missing resource,
failed link, declined prompt) are reported, not raised.
"""

from __future__ import annotations


class SproutError(Exception):
    """Base class for all sprout operation failures."""


class InvalidRepositoryError(SproutError):
    """Locator has no owner/name separator."""

    def __init__(self, repo: str):
        self.repo = repo
        super().__init__(f"Invalid repository '{repo}': expected OWNER/NAME or a git URL")


class RepositoryNotFoundError(SproutError):
    """Tag listing or clone failed."""

    def __init__(self, git_url: str, detail: str | None = None):
        self.git_url = git_url
        self.detail = detail
        message = f"Repository not found: {git_url}"
        if detail:
            message += f"\n{detail}"
        super().__init__(message)


class PackageNotFoundError(SproutError):
    """A name fragment matched no installed repository."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' package was not found")


class AmbiguousPackageError(SproutError):
    """A name fragment matched more than one installed repository."""

    def __init__(self, name: str, candidates: list[str]):
        self.name = name
        self.candidates = candidates
        listing = "\n".join(f"  - {c}" for c in candidates)
        super().__init__(
            f"'{name}' matches {len(candidates)} packages, be more specific:\n{listing}"
        )


class InvalidCommandError(SproutError):
    """Build succeeded but produced no binary with the command's name."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Couldn't find command '{command}' in the build output")


class BuildFailedError(SproutError):
    """The builder reported failure."""

    def __init__(self, name: str, diagnostic: str | None = None):
        self.name = name
        self.diagnostic = diagnostic
        message = f"Failed to build {name}"
        if diagnostic:
            message += f"\n{diagnostic}"
        super().__init__(message)


class CorruptMetadataError(SproutError):
    """The metadata document exists but does not parse."""

    def __init__(self, path: object, detail: str):
        self.path = path
        super().__init__(f"Corrupt metadata at {path}: {detail}")


class FilesystemError(SproutError):
    """A filesystem operation the operation depends on failed."""
