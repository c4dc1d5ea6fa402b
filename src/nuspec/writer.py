"""Serialize ``Nuspec`` models back to XML."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, Optional

from constants import Constants
from versioning.version_range import ALL

from .license import LicenseType
from .models import Dependency, Metadata, Nuspec
from .schema import SCHEMA_VERSION_V1


def _add(parent: ET.Element, tag: str, text: str = "", **attrs: str) -> ET.Element:
    element = ET.SubElement(parent, tag, {k: v for k, v in attrs.items() if v})
    if text:
        element.text = text
    return element


def _add_text(parent: ET.Element, tag: str, value: str) -> None:
    if value and value.strip():
        _add(parent, tag, value)


def _dependency_element(parent: ET.Element, dependency: Dependency) -> None:
    attrs: Dict[str, str] = {"id": dependency.id}
    if dependency.version is not None and dependency.version != ALL:
        attrs["version"] = dependency.version.to_legacy_short_string()
    if dependency.include:
        attrs["include"] = ",".join(dependency.include)
    if dependency.exclude:
        attrs["exclude"] = ",".join(dependency.exclude)
    _add(parent, "dependency", **attrs)


def _write_dependencies(parent: ET.Element, meta: Metadata) -> None:
    if not meta.dependency_groups and not meta.dependencies:
        return
    deps_el = _add(parent, "dependencies")
    if not meta.dependency_groups:
        for dependency in meta.dependencies:
            _dependency_element(deps_el, dependency)
        return
    if meta.dependencies:
        group_el = _add(deps_el, "group")
        for dependency in meta.dependencies:
            _dependency_element(group_el, dependency)
    for group in meta.dependency_groups:
        group_el = _add(deps_el, "group", targetFramework=group.target_framework)
        for dependency in group.dependencies:
            _dependency_element(group_el, dependency)


def _write_references(parent: ET.Element, meta: Metadata) -> None:
    if not meta.reference_groups and not meta.references:
        return
    refs_el = _add(parent, "references")
    if not meta.reference_groups:
        for file_name in meta.references:
            _add(refs_el, "reference", file=file_name)
        return
    if meta.references:
        group_el = _add(refs_el, "group")
        for file_name in meta.references:
            _add(group_el, "reference", file=file_name)
    for group in meta.reference_groups:
        group_el = _add(refs_el, "group", targetFramework=group.target_framework)
        for file_name in group.files:
            _add(group_el, "reference", file=file_name)


def _is_symbols_package(meta: Metadata) -> bool:
    return any(t.name.lower() == Constants.SYMBOLS_PACKAGE_TYPE.lower() for t in meta.package_types)


def _write_metadata(root: ET.Element, meta: Metadata) -> None:
    # pylint: disable=too-many-branches
    meta_el = _add(root, "metadata", minClientVersion=meta.min_client_version)
    _add(meta_el, "id", meta.id)
    _add_text(meta_el, "version", meta.version)
    _add_text(meta_el, "title", meta.title)

    if not _is_symbols_package(meta):
        _add_text(meta_el, "authors", meta.authors)
        _add_text(meta_el, "owners", meta.owners)
        if meta.development_dependency:
            _add(meta_el, "developmentDependency", "true")
        if meta.emit_require_license_acceptance:
            _add(
                meta_el,
                "requireLicenseAcceptance",
                "true" if meta.require_license_acceptance else "false",
            )
        license_url = meta.license_url
        if meta.license is not None:
            attrs = {"type": meta.license.type.value}
            if meta.license.type == LicenseType.EXPRESSION and not meta.license.has_default_version:
                attrs["version"] = str(meta.license.version)
            _add(meta_el, "license", meta.license.license, **attrs)
            license_url = meta.license.license_url
        _add_text(meta_el, "licenseUrl", license_url)
        _add_text(meta_el, "icon", meta.icon)
        _add_text(meta_el, "readme", meta.readme)

    _add_text(meta_el, "projectUrl", meta.project_url)
    _add_text(meta_el, "iconUrl", meta.icon_url)
    _add_text(meta_el, "description", meta.description)
    _add_text(meta_el, "summary", meta.summary)
    _add_text(meta_el, "releaseNotes", meta.release_notes)
    _add_text(meta_el, "copyright", meta.copyright)
    _add_text(meta_el, "language", meta.language)
    _add_text(meta_el, "tags", meta.tags)
    if meta.serviceable:
        _add(meta_el, "serviceable", "true")

    if meta.package_types:
        types_el = _add(meta_el, "packageTypes")
        for package_type in meta.package_types:
            version = str(package_type.version) if package_type.version is not None else ""
            _add(types_el, "packageType", name=package_type.name, version=version)

    if meta.repository is not None and not meta.repository.is_empty:
        _add(
            meta_el,
            "repository",
            type=meta.repository.type,
            url=meta.repository.url,
            branch=meta.repository.branch,
            commit=meta.repository.commit,
        )

    _write_dependencies(meta_el, meta)
    _write_references(meta_el, meta)

    if meta.framework_reference_groups:
        fw_refs_el = _add(meta_el, "frameworkReferences")
        for group in meta.framework_reference_groups:
            group_el = _add(fw_refs_el, "group", targetFramework=group.target_framework)
            for name in group.names:
                _add(group_el, "frameworkReference", name=name)

    if meta.framework_assemblies:
        assemblies_el = _add(meta_el, "frameworkAssemblies")
        for assembly in meta.framework_assemblies:
            _add(
                assemblies_el,
                "frameworkAssembly",
                assemblyName=assembly.assembly_name,
                targetFramework=assembly.target_framework,
            )

    if meta.content_files:
        content_el = _add(meta_el, "contentFiles")
        for entry in meta.content_files:
            _add(
                content_el,
                "files",
                include=entry.include,
                exclude=entry.exclude,
                buildAction=entry.build_action,
                copyToOutput=entry.copy_to_output,
                flatten=entry.flatten,
            )


def build_nuspec_element(nuspec: Nuspec, namespace: Optional[str] = None) -> ET.Element:
    """Build the ``<package>`` element tree for ``nuspec``."""
    root = ET.Element("package", {"xmlns": namespace or nuspec.namespace or SCHEMA_VERSION_V1})
    _write_metadata(root, nuspec.metadata)
    if nuspec.files:
        files_el = _add(root, "files")
        for item in nuspec.files:
            _add(files_el, "file", src=item.src, target=item.target, exclude=item.exclude)
    return root


def write_nuspec(nuspec: Nuspec, namespace: Optional[str] = None) -> bytes:
    """Serialize ``nuspec`` to indented UTF-8 XML with a declaration.

    Args:
        nuspec: The manifest to write.
        namespace: Schema namespace overriding ``nuspec.namespace``.
    """
    root = build_nuspec_element(nuspec, namespace)
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)
