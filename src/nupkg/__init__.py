"""Package archives: reading ``.nupkg`` files and building new ones."""

from .builder import (
    FrameworkAssemblyReference,
    FrameworkReferenceSet,
    PackageBuilder,
    PackageReferenceSet,
    resolve_package_path,
)
from .errors import InvalidPackageArchiveError, PackageError, PackageValidationError
from .files import InMemoryPackageFile, PackageFile, PhysicalPackageFile, normalize_package_path
from .reader import PackageArchiveReader
from .validation import (
    determine_minimum_schema_version,
    is_valid_package_id,
    validate_package,
    validate_package_id,
)

__all__ = [
    "FrameworkAssemblyReference",
    "FrameworkReferenceSet",
    "InMemoryPackageFile",
    "InvalidPackageArchiveError",
    "PackageArchiveReader",
    "PackageBuilder",
    "PackageError",
    "PackageFile",
    "PackageReferenceSet",
    "PackageValidationError",
    "PhysicalPackageFile",
    "determine_minimum_schema_version",
    "is_valid_package_id",
    "normalize_package_path",
    "resolve_package_path",
    "validate_package",
    "validate_package_id",
]
