"""Assemble ``.nupkg`` archives from a manifest and files on disk."""

from __future__ import annotations

import glob
import hashlib
import logging
import os
import posixpath
import re
import uuid
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List, Optional, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from frameworks.framework import ANY, Framework
from frameworks.name_provider import NameProvider
from frameworks.parser import parse_framework
from nuspec.dependencies import PackageDependencyGroup, PackageDependencyInfo
from nuspec.license import LicenseMetadata
from nuspec.models import (
    ContentFileEntry,
    DependencyGroup,
    FrameworkAssembly,
    FrameworkReferenceGroup,
    ManifestFile,
    Metadata,
    Nuspec,
    PackageType,
    ReferenceGroup,
    Repository,
)
from nuspec.schema import get_schema_namespace
from nuspec.writer import write_nuspec
from versioning.models import VersionParseError
from versioning.version import NuGetVersion

from .errors import PackageError, PackageValidationError
from .files import PackageFile, PhysicalPackageFile
from .validation import determine_minimum_schema_version, validate_package, validate_reference_names

logger = logging.getLogger(__name__)

ZIP_MIN_DATE = datetime(1980, 1, 1, tzinfo=timezone.utc)
ZIP_MAX_DATE = datetime(2107, 12, 31, 23, 59, 58, tzinfo=timezone.utc)


@dataclass
class FrameworkAssemblyReference:
    """A GAC assembly required on the listed frameworks; empty means all."""
    assembly_name: str
    supported_frameworks: List[Framework] = field(default_factory=list)


@dataclass
class FrameworkReferenceSet:
    """Shared framework names referenced for one target framework."""
    target_framework: Framework
    names: List[str] = field(default_factory=list)


@dataclass
class PackageReferenceSet:
    """Assembly file names exposed as references for one target framework."""
    target_framework: Framework
    references: List[str] = field(default_factory=list)

    def validate(self) -> List[str]:
        return validate_reference_names(self.references)


def _has_wildcard(path: str) -> bool:
    return "*" in path or "?" in path


def _to_posix(path: str) -> str:
    return path.replace("\\", "/")


def _wildcard_to_regex(pattern: str) -> "re.Pattern[str]":
    """Translate a ``**``/``*``/``?`` wildcard into an anchored, case-insensitive regex."""
    out = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(out) + "$", re.IGNORECASE)


def _split_search(base_path: str, source: str) -> Tuple[str, str]:
    """Split ``source`` into the directory to search and the wildcard part below it."""
    segments = source.split("/")
    for index, segment in enumerate(segments):
        if _has_wildcard(segment):
            prefix = "/".join(segments[:index])
            return os.path.normpath(os.path.join(base_path, prefix)), "/".join(segments[index:])
    full = os.path.normpath(os.path.join(base_path, source))
    if os.path.isdir(full):
        return full, "**/*"
    return os.path.dirname(full), os.path.basename(full)


def resolve_package_path(search_dir: str, pattern: str, full_path: str, target: str) -> str:
    """Path inside the package for a file found by searching ``pattern``.

    Wildcard searches keep the part of the path below ``search_dir``. A plain
    file whose extension matches the target's is renamed to the target.
    Anything else keeps its file name under ``target``.
    """
    target = _to_posix(target).strip("/")
    if _has_wildcard(pattern) and full_path.startswith(search_dir):
        package_path = _to_posix(os.path.relpath(full_path, search_dir))
    elif (
        target
        and not _has_wildcard(pattern)
        and posixpath.splitext(pattern)[1].lower() == posixpath.splitext(target)[1].lower()
    ):
        return target
    else:
        package_path = os.path.basename(full_path)
    return posixpath.join(target, package_path) if target else package_path


def _zip_timestamp(value: datetime) -> Tuple[int, int, int, int, int, int]:
    value = value.astimezone(timezone.utc)
    return (value.year, value.month, value.day, value.hour, value.minute, value.second)


def _relationship_id(target: str) -> str:
    return "R" + hashlib.sha512(target.encode("utf-8")).hexdigest()[:16]


def _xml_bytes(root: ET.Element) -> bytes:
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


class PackageBuilder:
    """Collects package metadata and files, validates them and writes a ``.nupkg``.

    Metadata mirrors the ``<metadata>`` section of a nuspec, with parsed
    versions and frameworks in place of strings. ``provider`` is used both to
    read framework names and to write them back, so custom mappings survive
    the round trip.
    """

    # pylint: disable=too-many-instance-attributes
    def __init__(
        self,
        include_empty_directories: bool = False,
        deterministic: bool = False,
        provider: Optional[NameProvider] = None,
    ) -> None:
        self.include_empty_directories = include_empty_directories
        self.deterministic = deterministic
        self.provider = provider

        self.id = ""
        self.version: Optional[NuGetVersion] = None
        self.title = ""
        self.authors: List[str] = []
        self.owners: List[str] = []
        self.description = ""
        self.summary = ""
        self.release_notes = ""
        self.copyright = ""
        self.language = ""
        self.tags: List[str] = []
        self.icon = ""
        self.icon_url = ""
        self.readme = ""
        self.project_url = ""
        self.license_url = ""
        self.license: Optional[LicenseMetadata] = None
        self.require_license_acceptance = False
        self.emit_require_license_acceptance = True
        self.development_dependency = False
        self.serviceable = False
        self.repository: Optional[Repository] = None
        self.package_types: List[PackageType] = []
        self.min_client_version: Optional[NuGetVersion] = None

        self.files: List[PackageFile] = []
        self.dependency_groups: List[PackageDependencyGroup] = []
        self.framework_references: List[FrameworkAssemblyReference] = []
        self.framework_reference_groups: List[FrameworkReferenceSet] = []
        self.package_assembly_references: List[PackageReferenceSet] = []
        self.content_files: List[ContentFileEntry] = []

    def add_files(self, base_path: str, source: str, target: str = "", exclude: str = "") -> None:
        """Add the files matching ``source`` below ``base_path``.

        Args:
            base_path: Directory relative sources are resolved against.
            source: File path, directory, or wildcard (``*``, ``?``, ``**``).
            target: Folder (or file name) inside the package.
            exclude: ``;``-separated wildcards of source files to skip.

        Raises:
            PackageError: when a plain file source does not exist.
        """
        source = _to_posix(source)
        search_dir, pattern = _split_search(base_path, source)
        found = self._search(search_dir, pattern, target)

        if self.include_empty_directories:
            found = [
                f for f in found
                if posixpath.basename(f.path) != Constants.EMPTY_FOLDER_MARKER
                or f.target_framework is not None
            ]
        found = self._exclude(found, base_path, exclude)

        is_dir = os.path.isdir(os.path.join(base_path, source))
        if not _has_wildcard(source) and not is_dir and not found and not exclude.strip():
            raise PackageError(f"{source} file not found")
        self.files.extend(found)

        if is_debug_enabled(logger):
            logger.debug(
                "Added package files",
                extra=extra_context(
                    event="add",
                    component="builder",
                    action="add_files",
                    target=source,
                    count=len(found),
                ),
            )

    def _search(self, search_dir: str, pattern: str, target: str) -> List[PhysicalPackageFile]:
        results: List[PhysicalPackageFile] = []
        pattern_path = os.path.join(search_dir, pattern)
        for match in sorted(glob.glob(pattern_path, recursive="**" in pattern)):
            if os.path.isfile(match):
                results.append(
                    PhysicalPackageFile(
                        match,
                        resolve_package_path(search_dir, pattern, match, target),
                        self.provider,
                    )
                )
            elif self.include_empty_directories and os.path.isdir(match) and not os.listdir(match):
                package_path = resolve_package_path(search_dir, pattern, match, target)
                results.append(
                    PhysicalPackageFile(
                        match,
                        posixpath.join(package_path, Constants.EMPTY_FOLDER_MARKER),
                        self.provider,
                    )
                )
        return results

    @staticmethod
    def _exclude(
        found: List[PhysicalPackageFile], base_path: str, exclude: str
    ) -> List[PhysicalPackageFile]:
        if not exclude.strip():
            return found
        regexes = []
        for item in exclude.split(";"):
            item = _to_posix(item.strip())
            if not item:
                continue
            full = _to_posix(os.path.normpath(os.path.join(base_path, item)))
            regexes.append(_wildcard_to_regex(full))
        return [
            f for f in found
            if not any(rx.match(_to_posix(os.path.normpath(f.source_path))) for rx in regexes)
        ]

    def populate_files(self, base_path: str, manifest_files: List[ManifestFile]) -> None:
        """Add the files named by ``<file>`` entries of a nuspec.

        Raises:
            PackageValidationError: when an entry has an invalid source or target.
        """
        errors: List[str] = []
        for item in manifest_files:
            errors.extend(item.validate())
        if errors:
            raise PackageValidationError(errors)
        for item in manifest_files:
            self.add_files(base_path, item.src, item.target, item.exclude)

    def populate_from_nuspec(self, nuspec: Nuspec, provider: Optional[NameProvider] = None) -> None:
        """Copy the metadata of ``nuspec`` into this builder.

        A ``provider`` given here replaces the builder's own.

        Raises:
            PackageError: when the version or min client version does not parse.
        """
        if provider is not None:
            self.provider = provider
        provider = self.provider
        meta = nuspec.metadata
        self.id = meta.id
        try:
            self.version = NuGetVersion.parse(meta.version) if meta.version else None
            self.min_client_version = (
                NuGetVersion.parse(meta.min_client_version) if meta.min_client_version else None
            )
        except VersionParseError as exc:
            raise PackageError(f"'{meta.id}' has an invalid version: {exc}") from exc

        self.title = meta.title
        self.authors = [a.strip() for a in meta.authors.split(",") if a.strip()]
        self.owners = [o.strip() for o in meta.owners.split(",") if o.strip()]
        self.description = meta.description
        self.summary = meta.summary
        self.release_notes = meta.release_notes
        self.copyright = meta.copyright
        self.language = meta.language
        self.tags = meta.tags.split()
        self.icon = meta.icon
        self.icon_url = meta.icon_url
        self.readme = meta.readme
        self.project_url = meta.project_url
        self.license_url = meta.license_url
        self.license = meta.license
        self.require_license_acceptance = meta.require_license_acceptance
        self.emit_require_license_acceptance = meta.emit_require_license_acceptance
        self.development_dependency = meta.development_dependency
        self.serviceable = meta.serviceable
        self.repository = meta.repository
        self.package_types = list(meta.package_types)
        self.content_files = list(meta.content_files)

        info = PackageDependencyInfo.from_nuspec(nuspec, provider)
        self.dependency_groups = info.dependency_groups

        for assembly in meta.framework_assemblies:
            frameworks = [
                parse_framework(t.strip(), provider)
                for t in assembly.target_framework.split(",")
                if t.strip()
            ]
            self.framework_references.append(
                FrameworkAssemblyReference(assembly.assembly_name, frameworks)
            )
        for group in meta.framework_reference_groups:
            self.framework_reference_groups.append(
                FrameworkReferenceSet(
                    _framework_or_any(group.target_framework, provider), list(group.names)
                )
            )
        if meta.references:
            self.package_assembly_references.append(PackageReferenceSet(ANY, list(meta.references)))
        for ref_group in meta.reference_groups:
            self.package_assembly_references.append(
                PackageReferenceSet(
                    _framework_or_any(ref_group.target_framework, provider), list(ref_group.files)
                )
            )

    def to_nuspec(self) -> Nuspec:
        """Build the manifest written into the package."""
        meta = Metadata(
            id=self.id,
            version=self.version.to_normalized_string() if self.version is not None else "",
            title=self.title,
            authors=",".join(self.authors),
            owners=",".join(self.owners),
            require_license_acceptance=self.require_license_acceptance,
            emit_require_license_acceptance=self.emit_require_license_acceptance,
            development_dependency=self.development_dependency,
            license=self.license,
            license_url=self.license_url,
            project_url=self.project_url,
            icon_url=self.icon_url,
            icon=self.icon,
            readme=self.readme,
            description=self.description,
            summary=self.summary,
            release_notes=self.release_notes,
            copyright=self.copyright,
            language=self.language,
            tags=" ".join(self.tags),
            serviceable=self.serviceable,
            repository=self.repository,
            package_types=list(self.package_types),
            min_client_version=str(self.min_client_version) if self.min_client_version else "",
            content_files=list(self.content_files),
        )

        groups = self.dependency_groups
        if (
            len(groups) == 1
            and not groups[0].target_framework.is_specific
            and not groups[0].has_include_exclude
        ):
            meta.dependencies = list(groups[0].packages)
        else:
            meta.dependency_groups = [
                DependencyGroup(_folder(g.target_framework, self.provider), list(g.packages))
                for g in groups
            ]

        meta.framework_assemblies = [
            FrameworkAssembly(
                ref.assembly_name,
                ",".join(_folder(f, self.provider) for f in ref.supported_frameworks),
            )
            for ref in self.framework_references
        ]
        meta.framework_reference_groups = [
            FrameworkReferenceGroup(_folder(g.target_framework, self.provider), list(g.names))
            for g in self.framework_reference_groups
        ]
        refs = self.package_assembly_references
        if len(refs) == 1 and not refs[0].target_framework.is_specific:
            meta.references = list(refs[0].references)
        else:
            meta.reference_groups = [
                ReferenceGroup(_folder(r.target_framework, self.provider), list(r.references))
                for r in refs
            ]
        return Nuspec(metadata=meta)

    def validate(self) -> List[str]:
        return validate_package(self)

    def save(self, stream: BinaryIO) -> None:
        """Validate and write the package as a zip archive to ``stream``.

        Raises:
            PackageError: when the package has neither files nor dependencies.
            PackageValidationError: when validation reports any problem.
        """
        if not self.files and not any(g.packages for g in self.dependency_groups):
            raise PackageError("cannot create a package that has no dependencies nor content")
        errors = self.validate()
        if errors:
            raise PackageValidationError(errors)

        with Timer() as timer:
            schema_version = determine_minimum_schema_version(self.files, self.dependency_groups)
            manifest_path = f"{self.id}{Constants.MANIFEST_EXTENSION}"
            psmdcp_path = f"{Constants.CORE_PROPERTIES_DIR}{self._psmdcp_name()}.psmdcp"
            now = ZIP_MIN_DATE if self.deterministic else datetime.now(timezone.utc)

            with zipfile.ZipFile(stream, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                self._write_entry(archive, Constants.PACKAGE_RELATIONSHIP_PATH,
                                  self._relationships_xml(manifest_path, psmdcp_path), now)
                self._write_entry(
                    archive,
                    manifest_path,
                    write_nuspec(self.to_nuspec(), get_schema_namespace(schema_version)),
                    now,
                )
                extensions, without_extension = self._write_files(archive)
                self._write_entry(archive, Constants.CONTENT_TYPES_PATH,
                                  self._content_types_xml(extensions, without_extension), now)
                self._write_entry(archive, psmdcp_path, self._core_properties_xml(), now)

        if is_debug_enabled(logger):
            logger.debug(
                "Wrote package",
                extra=extra_context(
                    event="write",
                    component="builder",
                    action="save",
                    target=self.id,
                    version=str(self.version),
                    count=len(self.files),
                    duration_ms=timer.duration_ms(),
                ),
            )

    @staticmethod
    def _write_entry(archive: zipfile.ZipFile, name: str, data: bytes, when: datetime) -> None:
        info = zipfile.ZipInfo(name, date_time=_zip_timestamp(when))
        info.compress_type = zipfile.ZIP_DEFLATED
        archive.writestr(info, data)

    def _write_files(self, archive: zipfile.ZipFile) -> Tuple[List[str], List[str]]:
        extensions: Dict[str, str] = {}
        without_extension: List[str] = []
        adjusted: List[str] = []
        for item in self.files:
            if item.path.lower().endswith(Constants.MANIFEST_EXTENSION):
                continue
            entry_name = posixpath.normpath(item.path)
            when = item.last_write_time
            if self.deterministic:
                when = ZIP_MIN_DATE
            elif when < ZIP_MIN_DATE:
                adjusted.append(
                    f"Timestamp for '{entry_name}' ({when:%Y-%m-%d}) is before minimum. "
                    f"Adjusted to {ZIP_MIN_DATE:%Y-%m-%d}."
                )
                when = ZIP_MIN_DATE
            elif when > ZIP_MAX_DATE:
                adjusted.append(
                    f"Timestamp for '{entry_name}' ({when:%Y-%m-%d}) is after maximum. "
                    f"Adjusted to {ZIP_MAX_DATE:%Y-%m-%d}."
                )
                when = ZIP_MAX_DATE
            with item.open() as fh:
                self._write_entry(archive, entry_name, fh.read(), when)

            ext = posixpath.splitext(entry_name)[1]
            if ext:
                extensions.setdefault(ext[1:].lower(), ext[1:])
            else:
                without_extension.append("/" + entry_name)

        if adjusted:
            logger.warning(
                "The zip format supports a limited date range. The following files are outside "
                "the supported range:\n%s",
                "\n".join(adjusted),
                extra=extra_context(event="write", component="builder", count=len(adjusted)),
            )
        return sorted(extensions.values(), key=str.lower), without_extension

    def _psmdcp_name(self) -> str:
        if not self.deterministic:
            return uuid.uuid4().hex
        digest = hashlib.sha512()
        for item in self.files:
            with item.open() as fh:
                digest.update(fh.read())
        return digest.hexdigest()[:32]

    @staticmethod
    def _relationships_xml(manifest_path: str, psmdcp_path: str) -> bytes:
        root = ET.Element("Relationships", {"xmlns": Constants.RELATIONSHIPS_NAMESPACE})
        for rel_type, path in (
            (Constants.RELATIONSHIP_TYPE_MANIFEST, manifest_path),
            (Constants.RELATIONSHIP_TYPE_CORE_PROPERTIES, psmdcp_path),
        ):
            target = "/" + path.lstrip("/")
            ET.SubElement(
                root, "Relationship", {"Type": rel_type, "Target": target, "Id": _relationship_id(target)}
            )
        return _xml_bytes(root)

    @staticmethod
    def _content_types_xml(extensions: List[str], without_extension: List[str]) -> bytes:
        root = ET.Element("Types", {"xmlns": Constants.CONTENT_TYPES_NAMESPACE})
        ET.SubElement(
            root, "Default", {"Extension": "rels", "ContentType": Constants.RELATIONSHIP_CONTENT_TYPE}
        )
        ET.SubElement(
            root, "Default", {"Extension": "psmdcp", "ContentType": Constants.CORE_PROPERTIES_CONTENT_TYPE}
        )
        defaults = ["nuspec"] + [e for e in extensions if e.lower() not in ("rels", "psmdcp", "nuspec")]
        for ext in defaults:
            ET.SubElement(root, "Default", {"Extension": ext, "ContentType": Constants.DEFAULT_CONTENT_TYPE})
        for part_name in without_extension:
            ET.SubElement(
                root, "Override", {"PartName": part_name, "ContentType": Constants.DEFAULT_CONTENT_TYPE}
            )
        return _xml_bytes(root)

    def _core_properties_xml(self) -> bytes:
        root = ET.Element(
            "cp:coreProperties",
            {
                "xmlns:cp": Constants.CORE_PROPERTIES_NAMESPACE,
                "xmlns:dc": Constants.DC_NAMESPACE,
                "xmlns:dcterms": Constants.DCTERMS_NAMESPACE,
                "xmlns:xsi": Constants.XSI_NAMESPACE,
            },
        )
        for tag, value in (
            ("dc:creator", ", ".join(self.authors)),
            ("dc:description", self.description),
            ("dc:identifier", self.id),
            ("cp:version", str(self.version) if self.version is not None else ""),
            ("cp:keywords", " ".join(self.tags)),
            ("cp:lastModifiedBy", Constants.CREATOR),
        ):
            ET.SubElement(root, tag).text = value
        return _xml_bytes(root)


def _folder(framework: Framework, provider: Optional[NameProvider]) -> str:
    if not framework.is_specific:
        return ""
    return framework.short_folder_name(provider)


def _framework_or_any(text: str, provider: Optional[NameProvider]) -> Framework:
    if not text.strip():
        return ANY
    return parse_framework(text.strip(), provider)
