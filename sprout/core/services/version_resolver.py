"""
Version resolver — pick the newest release from a remote tag listing (pure).

Input is the raw output of ``git ls-remote --tags --refs``:

    3f2a...\trefs/tags/1.2.0
    9b1c...\trefs/tags/v1.3.0

Tags that don't look like versions are ignored, never an error. When
nothing usable remains the default branch is used instead.
No I/O, no subprocess.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

DEFAULT_BRANCH = "master"

_VERSION_RE = re.compile(
    r"^[vV]?"
    r"(?P<major>0|[1-9]\d*)"
    r"(?:\.(?P<minor>0|[1-9]\d*))?"
    r"(?:\.(?P<patch>0|[1-9]\d*))?"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

# (major, minor, patch, is_release, prerelease identifiers)
VersionKey = tuple[int, int, int, int, tuple[tuple[int, int | str], ...]]


@dataclass
class Resolution:
    """Outcome of a resolution, with the tags seen along the way."""

    ref: str
    tags: list[str] = field(default_factory=list)
    versions: dict[VersionKey, str] = field(default_factory=dict)

    @property
    def used_fallback(self) -> bool:
        """True when no tag qualified and the default branch was chosen."""
        return not self.versions


def parse_tag_names(raw_output: str) -> list[str]:
    """Extract tag names (final path segment) from ls-remote output."""
    tags: list[str] = []
    for line in raw_output.splitlines():
        line = line.strip()
        if not line:
            continue
        tag_path = line.split("\t")[-1].strip()
        name = tag_path.rsplit("/", 1)[-1]
        if name:
            tags.append(name)
    return tags


def _identifier_key(identifier: str) -> tuple[int, int | str]:
    # Numeric identifiers sort below alphanumeric ones.
    if identifier.isdigit():
        return (0, int(identifier))
    return (1, identifier)


def parse_version(tag: str) -> VersionKey | None:
    """Turn a tag into a sortable version key, or None if it isn't one.

    ``1``, ``1.2``, ``1.2.3``, ``v1.2.3``, ``1.2.3-beta.1`` and
    ``1.2.3+build`` all parse; missing components count as zero. Build
    metadata does not affect ordering.
    """
    match = _VERSION_RE.match(tag.strip())
    if match is None:
        return None

    major = int(match.group("major"))
    minor = int(match.group("minor") or 0)
    patch = int(match.group("patch") or 0)
    pre = match.group("pre")

    if pre is None:
        return (major, minor, patch, 1, ())
    return (major, minor, patch, 0, tuple(_identifier_key(p) for p in pre.split(".")))


def _preferred(existing: str, candidate: str) -> str:
    """Pick one of two tags naming the same version, order-independently."""
    def rank(tag: str) -> tuple[bool, str]:
        return (tag[:1] in ("v", "V"), tag)

    return min(existing, candidate, key=rank)


def convert_tags_to_version_map(tags: list[str]) -> dict[VersionKey, str]:
    """Map each parseable version to the tag that spells it."""
    versions: dict[VersionKey, str] = {}
    for tag in tags:
        key = parse_version(tag)
        if key is None:
            continue
        if key in versions:
            versions[key] = _preferred(versions[key], tag)
        else:
            versions[key] = tag
    return versions


def resolve_version(raw_output: str, fallback: str = DEFAULT_BRANCH) -> Resolution:
    """Choose the ref to install from raw tag-listing output.

    Returns the tag of the greatest parseable version, or ``fallback``
    when the listing is empty or contains no version-like tags.
    """
    tags = parse_tag_names(raw_output)
    versions = convert_tags_to_version_map(tags)

    if not versions:
        return Resolution(ref=fallback, tags=tags)

    latest = max(versions)
    return Resolution(ref=versions[latest], tags=tags, versions=versions)
