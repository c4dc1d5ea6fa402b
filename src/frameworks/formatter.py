"""Render ``Framework`` values as short folder names and full monikers."""

from __future__ import annotations

from typing import Optional

from versioning.version import NuGetVersion

from .errors import NoShortNameMappingError, UnresolvablePortableProfileError
from .framework import Framework
from .name_provider import NameProvider, get_default_provider


def display_version(version: NuGetVersion) -> str:
    """``major.minor`` plus patch and revision when they carry information."""
    text = f"{version.major}.{version.minor}"
    if version.patch > 0 or version.revision > 0:
        text += f".{version.patch}"
    if version.revision > 0:
        text += f".{version.revision}"
    return text


def get_short_folder_name(framework: Framework, provider: Optional[NameProvider] = None) -> str:
    """Short folder name, e.g. ``net45``, ``net8.0-windows10.0`` or ``portable-net45+win8``.

    Raises:
        NoShortNameMappingError: when no short identifier can be derived.
        UnresolvablePortableProfileError: for a portable framework whose profile
            does not resolve to any frameworks.
    """
    if not framework.is_specific:
        return framework.identifier.lower()

    provider = provider or get_default_provider()
    framework = provider.get_short_name_replacement(framework)

    if framework.is_net5_era:
        short_identifier = "net"
    else:
        short_identifier = provider.get_short_identifier(framework.identifier) or "".join(
            ch for ch in framework.identifier if ch.isalnum()
        )
    if not short_identifier:
        raise NoShortNameMappingError(
            f"no short name mapping for framework identifier '{framework.identifier}'",
            framework.identifier,
        )

    result = short_identifier
    if any(framework.version.parts()):
        result += provider.get_version_string(framework.identifier, framework.version)

    if framework.is_pcl:
        result += "-" + _portable_suffix(framework, provider)
    elif framework.is_net5_era:
        if framework.has_platform:
            result += "-" + framework.platform.lower()
            if any(framework.platform_version.parts()):
                result += display_version(framework.platform_version)
    elif framework.has_profile:
        short_profile = provider.get_short_profile(framework.identifier, framework.profile)
        result += "-" + (short_profile or framework.profile)

    return result.lower()


def _portable_suffix(framework: Framework, provider: NameProvider) -> str:
    if not framework.profile:
        raise UnresolvablePortableProfileError(
            f"portable framework '{framework!r}' has no profile", framework.identifier
        )
    frameworks = provider.get_portable_frameworks_with_include(framework.profile, False)
    if not frameworks:
        raise UnresolvablePortableProfileError(
            f"cannot resolve portable profile '{framework.profile}'", framework.profile
        )
    names = [get_short_folder_name(member, provider) for member in frameworks]
    return "+".join(sorted(names, key=str.lower))


def get_dotnet_framework_name(framework: Framework, provider: Optional[NameProvider] = None) -> str:
    """Full moniker, e.g. ``.NETFramework,Version=v4.5,Profile=Client``."""
    provider = provider or get_default_provider()
    framework = provider.get_full_name_replacement(framework)
    if not framework.is_specific:
        return f"{framework.identifier},Version=v0.0"
    result = f"{framework.identifier},Version=v{display_version(framework.version)}"
    if framework.has_profile:
        result += f",Profile={framework.profile}"
    return result
