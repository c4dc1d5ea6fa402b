"""Nuspec manifest model, reader and writer."""

from .dependencies import (
    FrameworkSpecificGroup,
    PackageDependencyGroup,
    PackageDependencyInfo,
    PackageIdentity,
)
from .license import LicenseMetadata, LicenseType
from .models import (
    ContentFileEntry,
    Dependency,
    DependencyGroup,
    FrameworkAssembly,
    FrameworkReferenceGroup,
    ManifestFile,
    Metadata,
    Nuspec,
    NuspecError,
    PackageType,
    ReferenceGroup,
    Repository,
)
from .reader import read_nuspec
from .writer import write_nuspec

__all__ = [
    "ContentFileEntry",
    "Dependency",
    "DependencyGroup",
    "FrameworkAssembly",
    "FrameworkReferenceGroup",
    "FrameworkSpecificGroup",
    "LicenseMetadata",
    "LicenseType",
    "ManifestFile",
    "Metadata",
    "Nuspec",
    "NuspecError",
    "PackageDependencyGroup",
    "PackageDependencyInfo",
    "PackageIdentity",
    "PackageType",
    "ReferenceGroup",
    "Repository",
    "read_nuspec",
    "write_nuspec",
]
