"""The target framework identity value."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from versioning.version import EMPTY_VERSION, NuGetVersion

from .constants import FrameworkIdentifiers, FrameworkSpecialNames

if TYPE_CHECKING:
    from .name_provider import NameProvider


class FrameworkKind(Enum):
    """Tag separating concrete frameworks from the special identities."""
    SPECIFIC = "specific"
    ANY = "any"
    AGNOSTIC = "agnostic"
    UNSUPPORTED = "unsupported"


_KIND_BY_NAME = {
    FrameworkSpecialNames.ANY.lower(): FrameworkKind.ANY,
    FrameworkSpecialNames.AGNOSTIC.lower(): FrameworkKind.AGNOSTIC,
    FrameworkSpecialNames.UNSUPPORTED.lower(): FrameworkKind.UNSUPPORTED,
}


class Framework:
    """Immutable target framework: identifier, version, profile or platform.

    Frameworks from the .NET 5 era (``.NETCoreApp`` 5.0 and later) carry a
    platform and platform version; older frameworks carry a profile. The field
    that does not apply is always cleared.
    """

    __slots__ = (
        "_identifier",
        "_version",
        "_profile",
        "_platform",
        "_platform_version",
        "_is_net5_era",
        "_kind",
        "_moniker",
    )

    def __init__(
        self,
        identifier: str,
        version: Optional[NuGetVersion] = None,
        profile: Optional[str] = None,
        platform: Optional[str] = None,
        platform_version: Optional[NuGetVersion] = None,
    ) -> None:
        if identifier is None:
            raise ValueError("framework identifier is required")
        version = version if version is not None else EMPTY_VERSION
        self._identifier = identifier
        self._version = version
        self._is_net5_era = (
            identifier.lower() == FrameworkIdentifiers.NET_CORE_APP.lower() and version.major >= 5
        )
        if self._is_net5_era:
            self._profile = ""
            self._platform = platform or ""
            self._platform_version = (
                platform_version if platform_version is not None else EMPTY_VERSION
            )
        else:
            self._profile = profile or ""
            self._platform = ""
            self._platform_version = EMPTY_VERSION
        self._kind = _KIND_BY_NAME.get(identifier.lower(), FrameworkKind.SPECIFIC)
        self._moniker: Optional[str] = None

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def version(self) -> NuGetVersion:
        return self._version

    @property
    def profile(self) -> str:
        return self._profile

    @property
    def platform(self) -> str:
        return self._platform

    @property
    def platform_version(self) -> NuGetVersion:
        return self._platform_version

    @property
    def kind(self) -> FrameworkKind:
        return self._kind

    @property
    def is_net5_era(self) -> bool:
        return self._is_net5_era

    @property
    def has_profile(self) -> bool:
        return bool(self._profile)

    @property
    def has_platform(self) -> bool:
        return bool(self._platform)

    @property
    def is_any(self) -> bool:
        return self._kind == FrameworkKind.ANY

    @property
    def is_agnostic(self) -> bool:
        return self._kind == FrameworkKind.AGNOSTIC

    @property
    def is_unsupported(self) -> bool:
        return self._kind == FrameworkKind.UNSUPPORTED

    @property
    def is_specific(self) -> bool:
        return self._kind == FrameworkKind.SPECIFIC

    @property
    def is_pcl(self) -> bool:
        """Portable class library framework (``.NETPortable`` below 5.0)."""
        return (
            self._identifier.lower() == FrameworkIdentifiers.PORTABLE.lower()
            and self._version.major < 5
        )

    def short_folder_name(self, provider: Optional["NameProvider"] = None) -> str:
        """Short folder name such as ``net8.0`` or ``portable-net45+win8``."""
        from .formatter import get_short_folder_name  # pylint: disable=import-outside-toplevel

        return get_short_folder_name(self, provider)

    def full_moniker(self, provider: Optional["NameProvider"] = None) -> str:
        """Long form such as ``.NETFramework,Version=v4.5``.

        The default-provider result is cached on the instance.
        """
        if provider is not None:
            from .formatter import get_dotnet_framework_name  # pylint: disable=import-outside-toplevel

            return get_dotnet_framework_name(self, provider)
        if self._moniker is None:
            from .formatter import get_dotnet_framework_name  # pylint: disable=import-outside-toplevel

            self._moniker = get_dotnet_framework_name(self)
        return self._moniker

    def _identity(self):
        return (
            self._identifier.lower(),
            self._version,
            self._profile.lower(),
            self._platform.lower(),
            self._platform_version,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Framework):
            return NotImplemented
        if self.is_unsupported or other.is_unsupported:
            return False
        return self._identity() == other._identity()

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        parts = [self._identifier, f"Version={self._version}"]
        if self._profile:
            parts.append(f"Profile={self._profile}")
        if self._platform:
            parts.append(f"Platform={self._platform}{self._platform_version}")
        return f"Framework({', '.join(parts)})"

    def __str__(self) -> str:
        return self.full_moniker()


ANY = Framework(FrameworkSpecialNames.ANY)
AGNOSTIC = Framework(FrameworkSpecialNames.AGNOSTIC)
UNSUPPORTED = Framework(FrameworkSpecialNames.UNSUPPORTED)
