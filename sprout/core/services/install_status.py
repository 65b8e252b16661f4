"""
Install status inspection — classify what sits at a global install path.

Purely evaluative: looks at the filesystem, never changes it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sprout.core.models.install_status import InstallStatus

logger = logging.getLogger(__name__)


def _symlink_destination(path: Path) -> Path:
    """Absolute destination of ``path`` (one level, like ``readlink``)."""
    destination = Path(os.readlink(path))
    if not destination.is_absolute():
        destination = path.parent / destination
    return Path(os.path.normpath(destination))


def is_within(path: Path, root: Path) -> bool:
    for candidate in {path, path.resolve()}:
        for base in {root.absolute(), root.resolve()}:
            if candidate.is_relative_to(base):
                return True
    return False


def inspect_install_status(path: Path, packages_root: Path) -> InstallStatus:
    """Classify ``path`` relative to the packages root.

    - symlink into ``packages_root`` → managed, version = parent dir name
    - any other symlink → symlink (foreign)
    - anything else that exists → file
    - otherwise → missing
    """
    if path.is_symlink():
        destination = _symlink_destination(path)
        if is_within(destination, packages_root):
            status = InstallStatus.managed(path, destination, destination.parent.name)
        else:
            status = InstallStatus.symlink(path, destination)
    elif path.exists():
        status = InstallStatus.file(path)
    else:
        status = InstallStatus.missing(path)

    logger.debug("Install status of %s: %s", path, status.kind)
    return status
