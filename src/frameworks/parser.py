"""Parse framework strings into ``Framework`` values.

Three textual forms are understood:

* short folder names such as ``net45``, ``netstandard2.0``, ``net8.0-windows10.0``
  or ``portable-net45+win8``;
* long names such as ``.NETFramework,Version=v4.5,Profile=Client``;
* package paths such as ``lib/net45/foo.dll`` whose second segment is a framework.

``parse_framework`` never raises on bad input and returns ``UNSUPPORTED``;
``parse_framework_strict`` raises a ``FrameworkError`` subclass instead.
"""

from __future__ import annotations

import logging
import string
from typing import Dict, Optional, Tuple
from urllib.parse import unquote

from common.logging_utils import extra_context, is_debug_enabled
from constants import KnownFolders
from versioning.models import VersionParseError
from versioning.version import EMPTY_VERSION, NuGetVersion

from . import known
from .constants import SPECIAL_NAMES, FrameworkIdentifiers
from .errors import (
    FrameworkError,
    InvalidPortableFrameworksError,
    InvalidProfileCharactersError,
    InvalidVersionFragmentError,
    MalformedTokenError,
    UnknownIdentifierError,
)
from .framework import AGNOSTIC, ANY, UNSUPPORTED, Framework
from .name_provider import NameProvider, get_default_provider

logger = logging.getLogger(__name__)

_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)
_PROFILE_CHARS = _LETTERS | _DIGITS | frozenset(".+-")

_SINGLETONS = {
    ANY.identifier.lower(): ANY,
    AGNOSTIC.identifier.lower(): AGNOSTIC,
    UNSUPPORTED.identifier.lower(): UNSUPPORTED,
}

_KNOWN_ROOTS = {folder.value.lower() for folder in KnownFolders}


def _common_frameworks() -> Dict[str, Framework]:
    table: Dict[str, Framework] = {
        "dotnet": known.DOTNET50,
        "dotnet50": known.DOTNET50,
        "dotnet5.0": known.DOTNET50,
        "net40": known.NET4,
        "net4": known.NET4,
        "net403": known.NET403,
        "net45": known.NET45,
        "net451": known.NET451,
        "net452": known.NET452,
        "net46": known.NET46,
        "net461": known.NET461,
        "net462": known.NET462,
        "net463": known.NET463,
        "net47": known.NET47,
        "net471": known.NET471,
        "net472": known.NET472,
        "net48": known.NET48,
        "net481": known.NET481,
        "win8": known.WIN8,
        "win81": known.WIN81,
        "netstandard": known.NETSTANDARD,
        "netcoreapp1.0": known.NETCOREAPP10,
        "netcoreapp1.1": known.NETCOREAPP11,
        "netcoreapp2.0": known.NETCOREAPP20,
        "netcoreapp2.1": known.NETCOREAPP21,
        "netcoreapp21": known.NETCOREAPP21,
        "netcoreapp2.2": known.NETCOREAPP22,
        "netcoreapp3.0": known.NETCOREAPP30,
        "netcoreapp30": known.NETCOREAPP30,
        "netcoreapp3.1": known.NETCOREAPP31,
        "netcoreapp31": known.NETCOREAPP31,
        "net9.0": known.NET90,
        "net10.0": known.NET10_0,
    }
    standards = [
        known.NETSTANDARD10,
        known.NETSTANDARD11,
        known.NETSTANDARD12,
        known.NETSTANDARD13,
        known.NETSTANDARD14,
        known.NETSTANDARD15,
        known.NETSTANDARD16,
        known.NETSTANDARD17,
    ]
    for minor, framework in enumerate(standards):
        table[f"netstandard1.{minor}"] = framework
        table[f"netstandard1{minor}"] = framework
    for minor, framework in enumerate((known.NETSTANDARD20, known.NETSTANDARD21)):
        table[f"netstandard2.{minor}"] = framework
        table[f"netstandard2{minor}"] = framework
    for major, framework in (
        (5, known.NET50),
        (6, known.NET60),
        (7, known.NET70),
        (8, known.NET80),
    ):
        for prefix in ("net", "netcoreapp"):
            table[f"{prefix}{major}.0"] = framework
            table[f"{prefix}{major}0"] = framework
    return table


_COMMON_FRAMEWORKS = _common_frameworks()

_DEPRECATED_FRAMEWORKS = {
    "45": known.NET45,
    "4.5": known.NET45,
    "40": known.NET4,
    "4.0": known.NET4,
    "4": known.NET4,
    "35": known.NET35,
    "3.5": known.NET35,
    "20": known.NET2,
    "2": known.NET2,
    "2.0": known.NET2,
}


class FrameworkName:
    """``<identifier>, Version=[v]<version>[, Profile=<profile>]`` split into parts.

    The version is mandatory and no other keys are accepted. A version
    without a dot gains ``.0``. The identifier is kept as written;
    ``parse_framework_name`` resolves it against a provider.
    """

    __slots__ = ("identifier", "version", "profile")

    def __init__(self, identifier: str, version: NuGetVersion, profile: str = "") -> None:
        self.identifier = identifier
        self.version = version
        self.profile = profile

    @classmethod
    def parse(cls, framework_name: str) -> "FrameworkName":
        """Parse a long framework name.

        Raises:
            MalformedTokenError: on a structural problem.
            InvalidVersionFragmentError: when the version does not parse.
        """
        if not framework_name or not framework_name.strip():
            raise MalformedTokenError("frameworkName cannot be empty", framework_name or "")
        parts = framework_name.split(",")
        if len(parts) not in (2, 3):
            raise MalformedTokenError(
                "frameworkName must have 2 or 3 components", framework_name
            )
        identifier = parts[0].strip()
        if not identifier:
            raise MalformedTokenError(
                "frameworkName identifier cannot be empty", framework_name
            )

        version_text: Optional[str] = None
        profile = ""
        for part in parts[1:]:
            if "=" not in part:
                raise MalformedTokenError(f"invalid component: {part!r}", framework_name)
            key, value = part.split("=", 1)
            key = key.strip()
            value = value.strip()
            if key.lower() == "version":
                if value[:1] in ("v", "V"):
                    value = value[1:]
                if "." not in value:
                    value += ".0"
                version_text = value
            elif key.lower() == "profile":
                profile = value
            else:
                raise MalformedTokenError(f"invalid key: {key!r}", framework_name)
        if version_text is None:
            raise MalformedTokenError(
                "frameworkName must contain a version", framework_name
            )
        try:
            version = NuGetVersion.parse(version_text)
        except VersionParseError as exc:
            raise InvalidVersionFragmentError(
                f"invalid version: {exc}", framework_name
            ) from exc
        return cls(identifier, version, profile)

    def __repr__(self) -> str:
        return (
            f"FrameworkName(identifier={self.identifier!r}, "
            f"version={str(self.version)!r}, profile={self.profile!r})"
        )


def parse_framework(token: str, provider: Optional[NameProvider] = None) -> Framework:
    """Parse a short folder name or long framework name.

    Failures are folded into ``UNSUPPORTED``.
    """
    try:
        return parse_framework_strict(token, provider)
    except FrameworkError as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "Framework token resolved to Unsupported",
                extra=extra_context(
                    event="parse",
                    component="frameworks",
                    action="parse_framework",
                    target=token,
                    outcome="unsupported",
                    reason=str(exc),
                ),
            )
        return UNSUPPORTED


def parse_framework_strict(token: str, provider: Optional[NameProvider] = None) -> Framework:
    """Parse a framework string, raising on anything unresolvable.

    Raises:
        MalformedTokenError: the token has no valid structure.
        UnknownIdentifierError: the identifier is not a known framework.
        InvalidVersionFragmentError: the version or platform version is invalid.
        InvalidProfileCharactersError: the profile has characters outside ``[A-Za-z0-9.+-]``.
        InvalidPortableFrameworksError: a portable list names a framework with a profile.
    """
    if token is None:
        raise MalformedTokenError("framework token cannot be None")
    provider = provider or get_default_provider()
    if "," in token:
        return parse_framework_name(token, provider)
    return _parse_folder(token, provider)


def _special(token: str) -> Optional[Framework]:
    return _SINGLETONS.get(token.strip().lower())


def _raw_parse(token: str) -> Tuple[str, str, str]:
    """Split ``token`` into identifier, version text and profile text."""
    length = len(token)
    pos = 0
    while pos < length and (token[pos] in _LETTERS or token[pos] == "."):
        pos += 1
    if pos == 0:
        raise MalformedTokenError(f"framework '{token}' must start with a letter", token)
    identifier = token[:pos]

    start = pos
    while pos < length and (token[pos] in _DIGITS or token[pos] == "."):
        pos += 1
    version = token[start:pos]

    profile = ""
    if pos < length:
        if token[pos] != "-":
            raise MalformedTokenError(
                f"unexpected character {token[pos]!r} in framework '{token}'", token
            )
        profile = token[pos + 1:]
        if not profile:
            raise MalformedTokenError(f"framework '{token}' has an empty profile", token)
        invalid = sorted({ch for ch in profile if ch not in _PROFILE_CHARS})
        if invalid:
            raise InvalidProfileCharactersError(
                f"profile '{profile}' of framework '{token}' contains invalid characters: "
                + "".join(invalid),
                token,
            )
    return identifier, version, profile


def _split_platform(suffix: str) -> Tuple[str, str]:
    pos = 0
    while pos < len(suffix) and (suffix[pos] in _LETTERS or suffix[pos] == "."):
        pos += 1
    if pos == 0:
        return suffix, ""
    return suffix[:pos], suffix[pos:]


def _parse_folder(token: str, provider: NameProvider) -> Framework:
    # pylint: disable=too-many-return-statements
    if "%" in token:
        token = unquote(token)

    special = _special(token)
    if special is not None:
        return special

    common = _COMMON_FRAMEWORKS.get(token.lower())
    if common is not None:
        return common

    try:
        short_identifier, version_text, suffix = _raw_parse(token)
    except MalformedTokenError:
        deprecated = _DEPRECATED_FRAMEWORKS.get(token.lower())
        if deprecated is not None:
            return deprecated
        raise

    identifier = provider.get_identifier(short_identifier)
    if identifier is None:
        raise UnknownIdentifierError(
            f"unknown framework identifier '{short_identifier}' in '{token}'", token
        )

    version = provider.get_version(version_text) if version_text else EMPTY_VERSION

    if version.major >= 5 and identifier.lower() in (
        FrameworkIdentifiers.NET.lower(),
        FrameworkIdentifiers.NET_CORE_APP.lower(),
    ):
        platform, platform_text = _split_platform(suffix) if suffix else ("", "")
        platform_version = (
            provider.get_platform_version(platform_text) if platform_text else EMPTY_VERSION
        )
        return Framework(
            FrameworkIdentifiers.NET_CORE_APP,
            version,
            platform=platform,
            platform_version=platform_version,
        )

    if identifier.lower() == FrameworkIdentifiers.PORTABLE.lower() and suffix:
        return Framework(identifier, version, _portable_profile(suffix, provider))

    profile = provider.get_profile(identifier, suffix) if suffix else ""
    if profile is None:
        profile = suffix
    return Framework(identifier, version, profile)


def _portable_profile(suffix: str, provider: NameProvider) -> str:
    number = provider.try_get_portable_profile_number(suffix)
    if number is not None:
        return f"Profile{number}"
    frameworks = provider.get_portable_frameworks(suffix)
    number = provider.get_portable_profile(frameworks)
    if number == -1:
        return suffix
    return f"Profile{number}"


def parse_framework_name(text: str, provider: Optional[NameProvider] = None) -> Framework:
    """Parse ``Identifier,Version=vX.Y[,Profile=Z]``.

    A special first component (``Any``, ``Agnostic``, ``Unsupported``) wins
    over the rest. Otherwise the text is split by ``FrameworkName.parse`` and
    the identifier is resolved through the provider's synonyms; unknown
    identifiers are kept as written.

    Raises:
        MalformedTokenError: when the components are not ``FrameworkName`` shaped.
        InvalidVersionFragmentError: when the version does not parse.
        InvalidPortableFrameworksError: when a portable profile contains ``-``.
    """
    provider = provider or get_default_provider()
    special = _special(text.split(",", 1)[0].strip())
    if special is not None:
        return special

    name = FrameworkName.parse(text)
    identifier = provider.get_identifier(name.identifier) or name.identifier
    profile = name.profile
    if identifier.lower() == FrameworkIdentifiers.PORTABLE.lower() and "-" in profile:
        raise InvalidPortableFrameworksError(
            f"invalid portable frameworks '{profile}'. "
            "A hyphen may not be in any of the portable framework names",
            text,
        )
    return Framework(identifier, name.version, profile)


def parse_framework_folder_name(
    path: str, strict: bool = False, provider: Optional[NameProvider] = None
) -> Tuple[Optional[Framework], str]:
    """Resolve the framework folder of a package path.

    ``lib/net45/sub/foo.dll`` gives ``(net45, "sub/foo.dll")``. Backslashes are
    treated as separators and the returned path always uses ``/``.

    Args:
        path: Package-relative file path.
        strict: Raise instead of falling back to ``ANY`` or ``None``.
        provider: Name provider, the default one when omitted.

    Returns:
        tuple: ``(framework, effective_path)``. ``framework`` is None when the
        path is not under a known root folder.

    Raises:
        FrameworkError: in strict mode, when there is no known root or the
        framework segment does not resolve to a specific framework.
    """
    normalized = path.replace("\\", "/").lstrip("/")
    root, sep, rest = normalized.partition("/")
    if not sep or root.lower() not in _KNOWN_ROOTS:
        if strict:
            raise MalformedTokenError(f"'{path}' is not under a known package folder", path)
        return None, normalized

    folder, sep, remainder = rest.partition("/")
    if not sep or not folder:
        if strict:
            raise FrameworkError(f"'{path}' has no target framework folder", path)
        return ANY, rest

    framework = parse_framework(folder, provider)
    if framework.is_specific:
        return framework, remainder
    if strict:
        raise FrameworkError(
            f"'{folder}' in '{path}' is not a specific target framework", folder
        )
    return ANY, rest
