"""
Domain models — Pydantic types for sprout.

All models are re-exported here for convenient access:

    from sprout.core.models import Package, PackagePath, Metadata, InstallStatus, Receipt
"""

from sprout.core.models.action import Receipt
from sprout.core.models.install_status import InstallStatus
from sprout.core.models.metadata import Metadata
from sprout.core.models.package import (
    Package,
    PackagePath,
    directory_name_for,
    guess_command_name,
    package_name_from_directory,
    parse_reference,
)

__all__ = [
    # install_status.py
    "InstallStatus",
    # metadata.py
    "Metadata",
    # package.py
    "Package",
    "PackagePath",
    # action.py
    "Receipt",
    "directory_name_for",
    "guess_command_name",
    "package_name_from_directory",
    "parse_reference",
]
