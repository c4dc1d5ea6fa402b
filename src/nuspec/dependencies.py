"""Framework-resolved views over nuspec dependency and reference sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from constants import Constants
from frameworks.framework import ANY, Framework
from frameworks.name_provider import NameProvider
from frameworks.parser import parse_framework
from versioning.models import VersionParseError
from versioning.version import NuGetVersion

from .models import Dependency, Nuspec, NuspecError


@dataclass(frozen=True)
class PackageIdentity:
    id: str
    version: Optional[NuGetVersion] = None

    @property
    def has_version(self) -> bool:
        return self.version is not None

    def __str__(self) -> str:
        if self.version is None:
            return self.id
        return f"{self.id} {self.version}"


@dataclass
class PackageDependencyGroup:
    """Dependencies that apply to one target framework."""
    target_framework: Framework
    packages: List[Dependency] = field(default_factory=list)

    @property
    def has_include_exclude(self) -> bool:
        return any(dep.has_include_exclude for dep in self.packages)


@dataclass
class FrameworkSpecificGroup:
    """Items (assembly names, file paths) that apply to one target framework.

    ``_._`` placeholder items are dropped and recorded in ``has_empty_folder``.
    """
    target_framework: Framework
    items: List[str] = field(default_factory=list)
    has_empty_folder: bool = False

    @classmethod
    def from_items(cls, target_framework: Framework, items: List[str]) -> "FrameworkSpecificGroup":
        group = cls(target_framework)
        marker = Constants.EMPTY_FOLDER_MARKER
        for item in items:
            if item == marker or item.endswith("/" + marker):
                group.has_empty_folder = True
                continue
            group.items.append(item)
        return group


def _framework(text: str, provider: Optional[NameProvider]) -> Framework:
    if not text or not text.strip():
        return ANY
    return parse_framework(text.strip(), provider)


@dataclass
class PackageDependencyInfo:
    """Identity plus the framework-grouped dependencies of a package."""
    identity: PackageIdentity
    dependency_groups: List[PackageDependencyGroup] = field(default_factory=list)
    framework_reference_groups: List[FrameworkSpecificGroup] = field(default_factory=list)

    @classmethod
    def from_nuspec(
        cls, nuspec: Nuspec, provider: Optional[NameProvider] = None
    ) -> "PackageDependencyInfo":
        """Resolve dependency groups and framework assemblies of ``nuspec``.

        When the manifest has ``<group>`` elements, dependencies outside any
        group are ignored; otherwise they form a single group for ``Any``.

        Raises:
            NuspecError: when the package version does not parse.
        """
        meta = nuspec.metadata
        version = None
        if meta.version:
            try:
                version = NuGetVersion.parse(meta.version)
            except VersionParseError as exc:
                raise NuspecError(
                    f"package '{meta.id}' has an invalid version '{meta.version}'"
                ) from exc
        info = cls(PackageIdentity(meta.id, version))

        if meta.dependency_groups:
            for group in meta.dependency_groups:
                info.dependency_groups.append(
                    PackageDependencyGroup(
                        _framework(group.target_framework, provider), list(group.dependencies)
                    )
                )
        elif meta.dependencies:
            info.dependency_groups.append(PackageDependencyGroup(ANY, list(meta.dependencies)))

        by_framework: Dict[Framework, List[str]] = {}
        for assembly in meta.framework_assemblies:
            targets = [t for t in assembly.target_framework.split(",") if t.strip()] or [""]
            for target in targets:
                by_framework.setdefault(_framework(target, provider), []).append(
                    assembly.assembly_name
                )
        info.framework_reference_groups = [
            FrameworkSpecificGroup.from_items(framework, items)
            for framework, items in by_framework.items()
        ]
        return info
