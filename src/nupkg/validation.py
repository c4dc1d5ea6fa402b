"""Checks run on a package builder before an archive is written."""

from __future__ import annotations

import logging
import posixpath
import re
from typing import TYPE_CHECKING, Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from frameworks.errors import FrameworkError
from frameworks.framework import Framework
from frameworks.name_provider import NameProvider
from nuspec.dependencies import PackageDependencyGroup
from nuspec.license import LicenseType
from nuspec.models import INVALID_REFERENCE_FILE_CHARACTERS
from nuspec.schema import (
    DEFAULT_SCHEMA_VERSION,
    TARGET_FRAMEWORK_SUPPORT_VERSION,
    XDT_TRANSFORMATION_VERSION,
)
from versioning.version import EMPTY_VERSION

from .files import PackageFile, normalize_package_path

if TYPE_CHECKING:
    from .builder import PackageBuilder

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^\w+([.-]\w+)*$")


def is_valid_package_id(package_id: str) -> bool:
    if not package_id or not package_id.strip():
        return False
    return _ID_RE.match(package_id) is not None


def validate_package_id(package_id: str) -> Optional[str]:
    """Return the problem with ``package_id``, or None when it is usable."""
    if len(package_id) > Constants.MAX_PACKAGE_ID_LENGTH:
        return f"id must not exceed {Constants.MAX_PACKAGE_ID_LENGTH} characters."
    if not is_valid_package_id(package_id):
        return (
            f"the package ID '{package_id}' contains invalid characters. Examples of valid "
            "package IDs include 'MyPackage' and 'MyPackage.Sample'."
        )
    return None


def _is_symbols_package(builder: "PackageBuilder") -> bool:
    return any(
        t.name.lower() == Constants.SYMBOLS_PACKAGE_TYPE.lower() for t in builder.package_types
    )


def _extension(path: str) -> str:
    return posixpath.splitext(path)[1].lower()


def _find_file(path: str, files: Iterable[PackageFile]) -> Optional[PackageFile]:
    wanted = normalize_package_path(path).lower()
    for item in files:
        if item.path.lower() == wanted:
            return item
    return None


def _missing_platform_versions(
    frameworks: Iterable[Optional[Framework]], provider: Optional[NameProvider] = None
) -> Optional[str]:
    names: List[str] = []
    for framework in frameworks:
        if framework is None or not framework.has_platform:
            continue
        if framework.platform_version == EMPTY_VERSION:
            try:
                names.append(framework.short_folder_name(provider))
            except FrameworkError as exc:
                return str(exc)
    if names:
        return f"some dependency group TFMs are missing a platform version: {','.join(names)}"
    return None


def _validate_metadata(builder: "PackageBuilder") -> List[str]:
    errors: List[str] = []
    if not builder.id.strip():
        errors.append("id is required.")
    else:
        problem = validate_package_id(builder.id)
        if problem:
            errors.append(problem)
    if builder.version is None:
        errors.append("version is required.")
    if not _is_symbols_package(builder) and not any(a.strip() for a in builder.authors):
        errors.append("authors is required.")
    if not builder.description.strip():
        errors.append("description is required.")

    if builder.require_license_acceptance:
        if not builder.license_url and builder.license is None:
            errors.append(
                "enabling license acceptance requires a license or a licenseUrl to be "
                "specified. The licenseUrl will be deprecated, consider using the license "
                "metadata."
            )
        if not builder.emit_require_license_acceptance:
            errors.append(
                "emitRequireLicenseAcceptance must not be set to false if "
                "RequireLicenseAcceptance is set to true."
            )
    if (
        builder.license_url
        and builder.license is not None
        and builder.license_url.lower() != builder.license.license_url.lower()
    ):
        errors.append("the licenseUrl and license elements cannot be used together.")

    for reference_set in builder.package_assembly_references:
        errors.extend(reference_set.validate())
    return errors


def _validate_dependencies(builder: "PackageBuilder") -> List[str]:
    errors: List[str] = []
    for group in builder.dependency_groups:
        for dependency in group.packages:
            problem = validate_package_id(dependency.id)
            if problem:
                errors.append(problem)
    problem = _missing_platform_versions(
        (g.target_framework for g in builder.dependency_groups), builder.provider
    )
    if problem:
        errors.append(problem)
    return errors


def _validate_dependency_groups(builder: "PackageBuilder") -> List[str]:
    errors: List[str] = []
    for group in builder.dependency_groups:
        seen = set()
        for dependency in group.packages:
            key = dependency.id.lower()
            if key in seen:
                errors.append(f"'{builder.id}' already has a dependency defined for '{dependency.id}'.")
            seen.add(key)
            version_range = dependency.version
            if version_range is None or not version_range.has_lower_and_upper_bounds:
                continue
            low, high = version_range.min_version, version_range.max_version
            exclusive = not (version_range.is_min_inclusive and version_range.is_max_inclusive)
            if low > high or (low == high and exclusive):
                errors.append(f"dependency '{dependency.id}' has an invalid version.")
    return errors


def _validate_files_unique(builder: "PackageBuilder") -> List[str]:
    seen = set()
    duplicates = set()
    for item in builder.files:
        if not item.path.strip():
            continue
        if item.path in seen:
            duplicates.add(item.path)
        seen.add(item.path)
    if duplicates:
        return [
            "attempted to pack multiple files into the same location(s). The following "
            f"destinations were used multiple times: {', '.join(sorted(duplicates))}"
        ]
    return []


def _validate_reference_assemblies(builder: "PackageBuilder") -> List[str]:
    errors: List[str] = []
    problem = _missing_platform_versions(
        (s.target_framework for s in builder.package_assembly_references), builder.provider
    )
    if problem:
        errors.append(problem)

    lib_files = {
        posixpath.basename(item.path).lower()
        for item in builder.files
        if item.path.lower().startswith("lib/")
    }
    for reference_set in builder.package_assembly_references:
        for reference in reference_set.references:
            candidates = [reference] + [
                reference + ext for ext in Constants.REFERENCE_ASSEMBLY_EXTENSIONS
            ]
            if not any(c.lower() in lib_files for c in candidates):
                errors.append(
                    f"invalid assembly reference '{reference}'. Ensure that a file named "
                    f"'{reference}' exists in the lib directory"
                )
    return errors


def _validate_framework_assemblies(builder: "PackageBuilder") -> List[str]:
    errors: List[str] = []
    frameworks: List[Framework] = []
    for reference in builder.framework_references:
        frameworks.extend(reference.supported_frameworks)
    for problem in (
        _missing_platform_versions(frameworks, builder.provider),
        _missing_platform_versions(
            (g.target_framework for g in builder.framework_reference_groups), builder.provider
        ),
    ):
        if problem:
            errors.append(problem)
    return errors


def _validate_license_file(builder: "PackageBuilder") -> List[str]:
    license_meta = builder.license
    if _is_symbols_package(builder) or license_meta is None:
        return []
    if license_meta.type != LicenseType.FILE:
        return []
    if _extension(license_meta.license) not in Constants.LICENSE_FILE_EXTENSIONS:
        return [
            f"the license file '{license_meta.license}' has an invalid extension. "
            "Valid options are .txt, .md or none"
        ]
    if _find_file(license_meta.license, builder.files) is None:
        return [f"the license file '{license_meta.license}' does not exist in the package"]
    return []


def _validate_icon_file(builder: "PackageBuilder") -> List[str]:
    icon = builder.icon
    if _is_symbols_package(builder) or not icon.strip():
        return []
    if _extension(icon) not in Constants.ICON_FILE_EXTENSIONS:
        return [
            f"the 'icon' element '{icon}' has an invalid file extension. "
            "Valid options are .png, .jpg or .jpeg"
        ]
    icon_file = _find_file(icon, builder.files)
    if icon_file is None:
        return [f"the icon file '{icon}' does not exist in the package"]
    if icon_file.size > Constants.MAX_ICON_FILE_SIZE:
        return ["the icon file size must not exceed 1 megabyte"]
    if icon_file.size == 0:
        return ["the icon file is empty"]
    return []


def _validate_readme_file(builder: "PackageBuilder") -> List[str]:
    readme = builder.readme
    if _is_symbols_package(builder) or not readme.strip():
        return []
    if _extension(readme) != Constants.README_EXTENSION:
        return [f"the readme file '{readme}' has an invalid extension. It must end in .md"]
    readme_file = _find_file(readme, builder.files)
    if readme_file is None:
        return [f"the readme file '{readme}' does not exist in the package"]
    if readme_file.size == 0:
        return [f"the readme file '{readme}' is empty"]
    return []


_CHECKS = (
    _validate_dependencies,
    _validate_files_unique,
    _validate_reference_assemblies,
    _validate_framework_assemblies,
    _validate_license_file,
    _validate_icon_file,
    _validate_readme_file,
    _validate_dependency_groups,
    _validate_metadata,
)


def validate_package(builder: "PackageBuilder") -> List[str]:
    """Run every package check and collect the problems found.

    Args:
        builder: The builder to inspect; nothing on it is modified.

    Returns:
        list: Human-readable messages, empty when the package can be written.
    """
    errors: List[str] = []
    for check in _CHECKS:
        errors.extend(check(builder))
    if is_debug_enabled(logger):
        logger.debug(
            "Validated package",
            extra=extra_context(
                event="validate",
                component="nupkg",
                action="validate_package",
                target=builder.id,
                outcome="invalid" if errors else "valid",
                count=len(errors),
            ),
        )
    return errors


def validate_reference_names(references: Iterable[str]) -> List[str]:
    """Problems with the file names of an assembly reference set."""
    errors: List[str] = []
    for reference in references:
        if not reference.strip():
            errors.append("The required element File is missing from the manifest.")
        elif any(ch in INVALID_REFERENCE_FILE_CHARACTERS for ch in reference):
            errors.append(f"Assembly reference '{reference}' contains invalid characters.")
    return errors


def _has_content_files_v2(files: Iterable[PackageFile]) -> bool:
    return any(item.path.startswith("contentFiles/") for item in files)


def _has_include_exclude(groups: Iterable[PackageDependencyGroup]) -> bool:
    return any(group.has_include_exclude for group in groups)


def _has_xdt_transform(files: Iterable[PackageFile]) -> bool:
    return any(
        item.path.lower().startswith("content/")
        and item.path.lower().endswith((".install.xdt", ".uninstall.xdt"))
        for item in files
    )


def _requires_framework_folders(files: Iterable[PackageFile]) -> bool:
    files = list(files)
    for item in files:
        framework = item.target_framework
        if framework is None or not framework.is_specific:
            continue
        if item.path.lower().startswith(("content/", "tools/")):
            return True
    return any(
        item.target_framework is not None
        and item.path.lower().startswith("lib/")
        and item.effective_path == Constants.EMPTY_FOLDER_MARKER
        for item in files
    )


def determine_minimum_schema_version(
    files: Iterable[PackageFile], dependency_groups: Iterable[PackageDependencyGroup]
) -> int:
    """Lowest nuspec schema version able to describe the package contents."""
    files = list(files)
    if (
        _has_content_files_v2(files)
        or _has_include_exclude(dependency_groups)
        or _has_xdt_transform(files)
    ):
        return XDT_TRANSFORMATION_VERSION
    if _requires_framework_folders(files):
        return TARGET_FRAMEWORK_SUPPORT_VERSION
    return DEFAULT_SCHEMA_VERSION

