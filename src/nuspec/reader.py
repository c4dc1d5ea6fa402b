"""Read ``.nuspec`` manifests into ``Nuspec`` models."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from typing import IO, List, Optional, Union

from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import VersionParseError
from versioning.version import NuGetVersion
from versioning.version_range import VersionRange

from .license import LICENSE_EMPTY_VERSION, LicenseMetadata, LicenseType
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

logger = logging.getLogger(__name__)

NuspecSource = Union[bytes, str, "os.PathLike[str]", IO[bytes]]


def _read_source(source: NuspecSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if hasattr(source, "read"):
        return source.read()  # type: ignore[union-attr]
    try:
        with open(source, "rb") as fh:  # type: ignore[arg-type]
            return fh.read()
    except OSError as exc:
        raise NuspecError(f"Couldn't read nuspec file {source}: {exc}") from exc


def _text(parent: ET.Element, name: str) -> str:
    return (parent.findtext(name) or "").strip()


def _bool(parent: ET.Element, name: str) -> bool:
    return _text(parent, name).lower() == "true"


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_dependency(element: ET.Element) -> Dependency:
    dep_id = (element.get("id") or "").strip()
    if not dep_id:
        raise NuspecError("dependency is missing the required 'id' attribute")
    version_text = (element.get("version") or "").strip()
    version_range = None
    if version_text:
        try:
            version_range = VersionRange.parse(version_text)
        except VersionParseError as exc:
            raise NuspecError(
                f"dependency '{dep_id}' has an invalid version range '{version_text}'"
            ) from exc
    return Dependency(
        id=dep_id,
        version=version_range,
        include=_split_list(element.get("include")),
        exclude=_split_list(element.get("exclude")),
    )


def _parse_license(element: ET.Element) -> LicenseMetadata:
    type_text = (element.get("type") or "").strip().lower()
    try:
        license_type = LicenseType(type_text)
    except ValueError as exc:
        raise NuspecError(f"unsupported license type '{element.get('type')}'") from exc
    version = LICENSE_EMPTY_VERSION
    version_text = (element.get("version") or "").strip()
    if version_text:
        try:
            version = NuGetVersion.parse(version_text)
        except VersionParseError as exc:
            raise NuspecError(f"invalid license version '{version_text}'") from exc
    return LicenseMetadata(license_type, (element.text or "").strip(), version)


def _parse_package_types(element: ET.Element) -> List[PackageType]:
    types: List[PackageType] = []
    for item in element.findall("packageType"):
        name = (item.get("name") or "").strip()
        if not name:
            raise NuspecError("packageType is missing the required 'name' attribute")
        version_text = (item.get("version") or "").strip()
        version = None
        if version_text:
            try:
                version = NuGetVersion.parse(version_text)
            except VersionParseError as exc:
                raise NuspecError(
                    f"package type '{name}' has an invalid version '{version_text}'"
                ) from exc
        types.append(PackageType(name, version))
    return types


def _parse_metadata(element: ET.Element) -> Metadata:
    # pylint: disable=too-many-locals
    meta = Metadata(
        id=_text(element, "id"),
        version=_text(element, "version"),
        title=_text(element, "title"),
        authors=_text(element, "authors"),
        owners=_text(element, "owners"),
        require_license_acceptance=_bool(element, "requireLicenseAcceptance"),
        emit_require_license_acceptance=element.find("requireLicenseAcceptance") is not None,
        development_dependency=_bool(element, "developmentDependency"),
        license_url=_text(element, "licenseUrl"),
        project_url=_text(element, "projectUrl"),
        icon_url=_text(element, "iconUrl"),
        icon=_text(element, "icon"),
        readme=_text(element, "readme"),
        description=_text(element, "description"),
        summary=_text(element, "summary"),
        release_notes=_text(element, "releaseNotes"),
        copyright=_text(element, "copyright"),
        language=_text(element, "language"),
        tags=_text(element, "tags"),
        serviceable=_bool(element, "serviceable"),
        min_client_version=(element.get("minClientVersion") or "").strip(),
    )

    license_el = element.find("license")
    if license_el is not None:
        meta.license = _parse_license(license_el)

    repo_el = element.find("repository")
    if repo_el is not None:
        meta.repository = Repository(
            type=repo_el.get("type", ""),
            url=repo_el.get("url", ""),
            branch=repo_el.get("branch", ""),
            commit=repo_el.get("commit", ""),
        )

    types_el = element.find("packageTypes")
    if types_el is not None:
        meta.package_types = _parse_package_types(types_el)

    deps_el = element.find("dependencies")
    if deps_el is not None:
        for group_el in deps_el.findall("group"):
            meta.dependency_groups.append(
                DependencyGroup(
                    target_framework=(group_el.get("targetFramework") or "").strip(),
                    dependencies=[_parse_dependency(d) for d in group_el.findall("dependency")],
                )
            )
        meta.dependencies = [_parse_dependency(d) for d in deps_el.findall("dependency")]

    assemblies_el = element.find("frameworkAssemblies")
    if assemblies_el is not None:
        for item in assemblies_el.findall("frameworkAssembly"):
            meta.framework_assemblies.append(
                FrameworkAssembly(
                    assembly_name=(item.get("assemblyName") or "").strip(),
                    target_framework=(item.get("targetFramework") or "").strip(),
                )
            )

    refs_el = element.find("references")
    if refs_el is not None:
        for group_el in refs_el.findall("group"):
            meta.reference_groups.append(
                ReferenceGroup(
                    target_framework=(group_el.get("targetFramework") or "").strip(),
                    files=[(r.get("file") or "").strip() for r in group_el.findall("reference")],
                )
            )
        meta.references = [(r.get("file") or "").strip() for r in refs_el.findall("reference")]

    fw_refs_el = element.find("frameworkReferences")
    if fw_refs_el is not None:
        for group_el in fw_refs_el.findall("group"):
            meta.framework_reference_groups.append(
                FrameworkReferenceGroup(
                    target_framework=(group_el.get("targetFramework") or "").strip(),
                    names=[
                        (r.get("name") or "").strip()
                        for r in group_el.findall("frameworkReference")
                    ],
                )
            )

    content_el = element.find("contentFiles")
    if content_el is not None:
        for item in content_el.findall("files"):
            meta.content_files.append(
                ContentFileEntry(
                    include=item.get("include", ""),
                    exclude=item.get("exclude", ""),
                    build_action=item.get("buildAction", ""),
                    copy_to_output=item.get("copyToOutput", ""),
                    flatten=item.get("flatten", ""),
                )
            )
    return meta


def read_nuspec(source: NuspecSource) -> Nuspec:
    """Parse a nuspec document.

    Args:
        source: Raw bytes, a binary file object, or a path to a ``.nuspec`` file.

    Returns:
        Nuspec: The parsed manifest; ``namespace`` holds the document's schema URI.

    Raises:
        NuspecError: when the document is not well-formed or lacks ``<metadata>``.
    """
    data = _read_source(source)
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise NuspecError(f"Couldn't parse nuspec XML: {exc}") from exc

    namespace = ""
    if root.tag.startswith("{"):
        namespace = root.tag[1:].split("}", 1)[0]
    # Remove namespace for easier parsing
    for elem in root.iter():
        if "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]

    if root.tag != "package":
        raise NuspecError(f"unexpected nuspec root element <{root.tag}>")
    meta_el = root.find("metadata")
    if meta_el is None:
        raise NuspecError("nuspec is missing the required <metadata> element")

    nuspec = Nuspec(metadata=_parse_metadata(meta_el), namespace=namespace)
    files_el = root.find("files")
    if files_el is not None:
        for item in files_el.findall("file"):
            nuspec.files.append(
                ManifestFile(
                    src=item.get("src", ""),
                    target=item.get("target", ""),
                    exclude=item.get("exclude", ""),
                )
            )

    if is_debug_enabled(logger):
        logger.debug(
            "Read nuspec",
            extra=extra_context(
                event="parse",
                component="nuspec",
                action="read",
                target=nuspec.metadata.id,
                version=nuspec.metadata.version,
                count=len(nuspec.metadata.dependency_groups),
            ),
        )
    return nuspec
