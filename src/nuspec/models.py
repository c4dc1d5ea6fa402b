"""Data models for nuspec manifests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from versioning.version import NuGetVersion
from versioning.version_range import VersionRange

from .license import LicenseMetadata

# Control characters plus the characters Windows rejects in paths.
INVALID_SOURCE_CHARACTERS = frozenset(
    [chr(code) for code in range(0x20)] + ['"', "<", ">", "|"]
)
INVALID_REFERENCE_FILE_CHARACTERS = INVALID_SOURCE_CHARACTERS | frozenset(":*?\\/")
INVALID_TARGET_CHARACTERS = INVALID_REFERENCE_FILE_CHARACTERS - frozenset("\\/")


class NuspecError(ValueError):
    """Raised when a nuspec document cannot be read or is inconsistent."""


@dataclass
class Dependency:
    """A package dependency; ``version`` None means any version."""
    id: str
    version: Optional[VersionRange] = None
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)

    @property
    def has_include_exclude(self) -> bool:
        return bool(self.include or self.exclude)


@dataclass
class DependencyGroup:
    """``<group targetFramework=...>`` under ``<dependencies>``; empty framework means any."""
    target_framework: str = ""
    dependencies: List[Dependency] = field(default_factory=list)


@dataclass
class ReferenceGroup:
    """``<group>`` under ``<references>``: assembly file names per framework."""
    target_framework: str = ""
    files: List[str] = field(default_factory=list)


@dataclass
class FrameworkReferenceGroup:
    """``<group>`` under ``<frameworkReferences>``: shared framework names."""
    target_framework: str = ""
    names: List[str] = field(default_factory=list)


@dataclass
class FrameworkAssembly:
    """``<frameworkAssembly>``: a GAC assembly needed for the listed frameworks."""
    assembly_name: str
    target_framework: str = ""


@dataclass
class ContentFileEntry:
    """``<contentFiles><files .../></contentFiles>`` entry."""
    include: str
    exclude: str = ""
    build_action: str = ""
    copy_to_output: str = ""
    flatten: str = ""


@dataclass
class PackageType:
    name: str
    version: Optional[NuGetVersion] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageType):
            return NotImplemented
        return self.name.lower() == other.name.lower() and self.version == other.version

    def __hash__(self) -> int:
        return hash((self.name.lower(), self.version))


@dataclass
class Repository:
    type: str = ""
    url: str = ""
    branch: str = ""
    commit: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.type or self.url or self.branch or self.commit)


@dataclass
class ManifestFile:
    """``<file src=... target=... exclude=...>`` entry of the ``<files>`` section."""
    src: str
    target: str = ""
    exclude: str = ""

    def validate(self) -> List[str]:
        """Return human-readable problems with this entry, empty when valid."""
        errors: List[str] = []
        if not self.src.strip():
            errors.append("Missing required metadata: Source")
        elif any(ch in INVALID_SOURCE_CHARACTERS for ch in self.src):
            errors.append(f"Source contains invalid characters: {self.src!r}")
        if self.target and any(ch in INVALID_TARGET_CHARACTERS for ch in self.target):
            errors.append(f"Target contains invalid characters: {self.target!r}")
        if self.exclude and any(ch in INVALID_SOURCE_CHARACTERS for ch in self.exclude):
            errors.append(f"Exclude contains invalid characters: {self.exclude!r}")
        return errors


@dataclass
class Metadata:
    """Contents of the ``<metadata>`` element.

    Free-text fields are kept as written; ``version`` stays a string so that a
    manifest with an unparsable version can still be read and reported.
    """
    # pylint: disable=too-many-instance-attributes
    id: str = ""
    version: str = ""
    title: str = ""
    authors: str = ""
    owners: str = ""
    require_license_acceptance: bool = False
    emit_require_license_acceptance: bool = True
    development_dependency: bool = False
    license: Optional[LicenseMetadata] = None
    license_url: str = ""
    project_url: str = ""
    icon_url: str = ""
    icon: str = ""
    readme: str = ""
    description: str = ""
    summary: str = ""
    release_notes: str = ""
    copyright: str = ""
    language: str = ""
    tags: str = ""
    serviceable: bool = False
    repository: Optional[Repository] = None
    package_types: List[PackageType] = field(default_factory=list)
    min_client_version: str = ""
    dependency_groups: List[DependencyGroup] = field(default_factory=list)
    # dependencies listed directly under <dependencies>, outside any group
    dependencies: List[Dependency] = field(default_factory=list)
    framework_assemblies: List[FrameworkAssembly] = field(default_factory=list)
    reference_groups: List[ReferenceGroup] = field(default_factory=list)
    references: List[str] = field(default_factory=list)
    framework_reference_groups: List[FrameworkReferenceGroup] = field(default_factory=list)
    content_files: List[ContentFileEntry] = field(default_factory=list)


@dataclass
class Nuspec:
    """A parsed ``.nuspec`` document."""
    metadata: Metadata = field(default_factory=Metadata)
    namespace: str = ""
    files: List[ManifestFile] = field(default_factory=list)
