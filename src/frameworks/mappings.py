"""Static framework mapping tables.

Every table is an ordered list of pairs; when the name provider merges several
sources the first entry for a key wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from versioning.version import NuGetVersion

from . import known
from .constants import FrameworkIdentifiers as Ids
from .framework import Framework


@dataclass
class FrameworkMappings:
    """Identifier, profile and equivalence mappings for one source."""
    # (synonym, identifier)
    identifier_synonyms: List[Tuple[str, str]] = field(default_factory=list)
    # (identifier, short name)
    identifier_short_names: List[Tuple[str, str]] = field(default_factory=list)
    # (identifier, short profile, profile)
    profile_short_names: List[Tuple[str, str, str]] = field(default_factory=list)
    equivalent_frameworks: List[Tuple[Framework, Framework]] = field(default_factory=list)
    short_name_replacements: List[Tuple[Framework, Framework]] = field(default_factory=list)
    full_name_replacements: List[Tuple[Framework, Framework]] = field(default_factory=list)


@dataclass
class PortableFrameworkMappings:
    """Portable class library profile membership."""
    # (profile number, required frameworks)
    profile_frameworks: List[Tuple[int, List[Framework]]] = field(default_factory=list)
    # (profile number, frameworks that may be listed without changing the profile)
    profile_optional_frameworks: List[Tuple[int, List[Framework]]] = field(default_factory=list)


def _identifier_synonyms() -> List[Tuple[str, str]]:
    return [
        ("NETFramework", Ids.NET),
        (".NET", Ids.NET),
        ("NETCore", Ids.NET_CORE),
        ("NETPortable", Ids.PORTABLE),
        ("asp.net", Ids.ASP_NET),
        ("asp.netcore", Ids.ASP_NET_CORE),
        ("Xamarin.PlayStationThree", Ids.XAMARIN_PLAYSTATION3),
        ("XamarinPlayStationThree", Ids.XAMARIN_PLAYSTATION3),
        ("Xamarin.PlayStationFour", Ids.XAMARIN_PLAYSTATION4),
        ("XamarinPlayStationFour", Ids.XAMARIN_PLAYSTATION4),
        ("XamarinPlayStationVita", Ids.XAMARIN_PLAYSTATION_VITA),
    ]


def _identifier_short_names() -> List[Tuple[str, str]]:
    return [
        (Ids.NET_CORE_APP, "netcoreapp"),
        (Ids.NET_STANDARD_APP, "netstandardapp"),
        (Ids.NET_STANDARD, "netstandard"),
        (Ids.NET_PLATFORM, "dotnet"),
        (Ids.NET, "net"),
        (Ids.NET_MICRO, "netmf"),
        (Ids.SILVERLIGHT, "sl"),
        (Ids.PORTABLE, "portable"),
        (Ids.WINDOWS_PHONE, "wp"),
        (Ids.WINDOWS_PHONE_APP, "wpa"),
        (Ids.WINDOWS, "win"),
        (Ids.ASP_NET, "aspnet"),
        (Ids.ASP_NET_CORE, "aspnetcore"),
        (Ids.NATIVE, "native"),
        (Ids.MONO_ANDROID, "monoandroid"),
        (Ids.MONO_TOUCH, "monotouch"),
        (Ids.MONO_MAC, "monomac"),
        (Ids.XAMARIN_IOS, "xamarinios"),
        (Ids.XAMARIN_MAC, "xamarinmac"),
        (Ids.XAMARIN_PLAYSTATION3, "xamarinpsthree"),
        (Ids.XAMARIN_PLAYSTATION4, "xamarinpsfour"),
        (Ids.XAMARIN_PLAYSTATION_VITA, "xamarinpsvita"),
        (Ids.XAMARIN_WATCH_OS, "xamarinwatchos"),
        (Ids.XAMARIN_TV_OS, "xamarintvos"),
        (Ids.XAMARIN_XBOX360, "xamarinxboxthreesixty"),
        (Ids.XAMARIN_XBOX_ONE, "xamarinxboxone"),
        (Ids.DNX, "dnx"),
        (Ids.DNX_CORE, "dnxcore"),
        (Ids.NET_CORE, "netcore"),
        (Ids.WINRT, "winrt"),
        (Ids.UAP, "uap"),
        (Ids.TIZEN, "tizen"),
        (Ids.NANO_FRAMEWORK, "netnano"),
    ]


def _profile_short_names() -> List[Tuple[str, str, str]]:
    return [
        (Ids.NET, "Client", "Client"),
        (Ids.NET, "CF", "CompactFramework"),
        (Ids.NET, "Full", ""),
        (Ids.SILVERLIGHT, "WP", "WindowsPhone"),
        (Ids.SILVERLIGHT, "WP71", "WindowsPhone71"),
    ]


def _v(major: int, minor: int = 0) -> NuGetVersion:
    return NuGetVersion(major, minor)


def _equivalent_frameworks() -> List[Tuple[Framework, Framework]]:
    winrt45 = Framework(Ids.WINRT, _v(4, 5))
    return [
        # uap <-> uap10.0
        (Framework(Ids.UAP), known.UAP10),
        # win <-> win8
        (Framework(Ids.WINDOWS), known.WIN8),
        # win8 <-> netcore45 <-> winrt45
        (known.NETCORE45, known.WIN8),
        (known.NETCORE45, winrt45),
        # netcore <-> netcore45, winrt <-> winrt45
        (Framework(Ids.NET_CORE), known.NETCORE45),
        (Framework(Ids.WINRT), winrt45),
        # win81 <-> netcore451
        (known.WIN81, known.NETCORE451),
        # wp <-> wp7 and the Silverlight phone profiles
        (Framework(Ids.WINDOWS_PHONE), known.WP7),
        (known.WP7, Framework(Ids.SILVERLIGHT, _v(3), "WindowsPhone")),
        (Framework(Ids.WINDOWS_PHONE, _v(7, 1)), Framework(Ids.SILVERLIGHT, _v(4), "WindowsPhone71")),
        (known.WP8, Framework(Ids.SILVERLIGHT, _v(8), "WindowsPhone")),
        (known.WP81, Framework(Ids.SILVERLIGHT, _v(8, 1), "WindowsPhone")),
        # wpa <-> wpa81
        (Framework(Ids.WINDOWS_PHONE_APP), known.WPA81),
        # tizen <-> tizen3
        (Framework(Ids.TIZEN), known.TIZEN3),
        # dnx <-> dnx45, dnxcore <-> dnxcore50
        (known.DNX, known.DNX45),
        (known.DNXCORE, known.DNXCORE50),
        # dotnet <-> dotnet50
        (known.DOTNET, known.DOTNET50),
        # aspnet and aspnetcore
        (known.ASPNET, known.ASPNET50),
        (known.ASPNETCORE, known.ASPNETCORE50),
        (known.DNX45, known.ASPNET50),
        (known.DNXCORE50, known.ASPNETCORE50),
    ]


def _portable_profiles() -> List[Tuple[int, List[Framework]]]:
    k = known
    return [
        # v4.6
        (31, [k.WIN81, k.WP81]),
        (32, [k.WIN81, k.WPA81]),
        (44, [k.NET451, k.WIN81]),
        (84, [k.WP81, k.WPA81]),
        (151, [k.NET451, k.WIN81, k.WPA81]),
        (157, [k.WIN81, k.WP81, k.WPA81]),
        # v4.5
        (7, [k.NET45, k.WIN8]),
        (49, [k.NET45, k.WP8]),
        (78, [k.NET45, k.WIN8, k.WP8]),
        (111, [k.NET45, k.WIN8, k.WPA81]),
        (259, [k.NET45, k.WIN8, k.WPA81, k.WP8]),
        # v4.0
        (2, [k.NET4, k.WIN8, k.SL4, k.WP7]),
        (3, [k.NET4, k.SL4]),
        (4, [k.NET45, k.SL4, k.WIN8, k.WP7]),
        (5, [k.NET4, k.WIN8]),
        (6, [k.NET403, k.WIN8]),
        (14, [k.NET4, k.SL5]),
        (18, [k.NET403, k.SL4]),
        (19, [k.NET403, k.SL5]),
        (23, [k.NET45, k.SL4]),
        (24, [k.NET45, k.SL5]),
        (36, [k.NET4, k.SL4, k.WIN8, k.WP8]),
        (37, [k.NET4, k.SL5, k.WIN8]),
        (41, [k.NET403, k.SL4, k.WIN8]),
        (42, [k.NET403, k.SL5, k.WIN8]),
        (46, [k.NET45, k.SL4, k.WIN8]),
        (47, [k.NET45, k.SL5, k.WIN8]),
        (88, [k.NET4, k.SL4, k.WIN8, k.WP75]),
        (92, [k.NET4, k.WIN8, k.WPA81]),
        (95, [k.NET403, k.SL4, k.WIN8, k.WP7]),
        (96, [k.NET403, k.SL4, k.WIN8, k.WP75]),
        (102, [k.NET403, k.WIN8, k.WPA81]),
        (104, [k.NET45, k.SL4, k.WIN8, k.WP75]),
        (136, [k.NET4, k.SL5, k.WIN8, k.WP8]),
        (143, [k.NET403, k.SL4, k.WIN8, k.WP8]),
        (147, [k.NET403, k.SL5, k.WIN8, k.WP8]),
        (154, [k.NET45, k.SL4, k.WIN8, k.WP8]),
        (158, [k.NET45, k.SL5, k.WIN8, k.WP8]),
        (225, [k.NET4, k.SL5, k.WIN8, k.WPA81]),
        (240, [k.NET403, k.SL5, k.WIN8, k.WPA81]),
        (255, [k.NET45, k.SL5, k.WIN8, k.WPA81]),
        (328, [k.NET4, k.SL5, k.WIN8, k.WPA81, k.WP8]),
        (336, [k.NET403, k.SL5, k.WIN8, k.WPA81, k.WP8]),
        (344, [k.NET45, k.SL5, k.WIN8, k.WPA81, k.WP8]),
    ]


_PROFILES_WITH_OPTIONAL_FRAMEWORKS = (
    5, 6, 7, 14, 19, 24, 37, 42, 44, 47, 49, 78, 92, 102, 111,
    136, 147, 151, 158, 225, 255, 259, 328, 336, 344,
)


def _optional_frameworks() -> List[Framework]:
    return [
        Framework(Ids.MONO_ANDROID, _v(0)),
        Framework(Ids.MONO_TOUCH, _v(0)),
        Framework(Ids.XAMARIN_IOS, _v(0)),
        Framework(Ids.XAMARIN_MAC, _v(0)),
        Framework(Ids.XAMARIN_TV_OS, _v(0)),
        Framework(Ids.XAMARIN_WATCH_OS, _v(0)),
    ]


def default_framework_mappings() -> FrameworkMappings:
    """Built-in identifier, profile and equivalence mappings."""
    return FrameworkMappings(
        identifier_synonyms=_identifier_synonyms(),
        identifier_short_names=_identifier_short_names(),
        profile_short_names=_profile_short_names(),
        equivalent_frameworks=_equivalent_frameworks(),
        short_name_replacements=[(known.DOTNET50, known.DOTNET)],
        full_name_replacements=[(known.DOTNET, known.DOTNET50)],
    )


def default_portable_mappings() -> PortableFrameworkMappings:
    """Built-in portable class library profile table."""
    optional = _optional_frameworks()
    return PortableFrameworkMappings(
        profile_frameworks=_portable_profiles(),
        profile_optional_frameworks=[
            (number, list(optional)) for number in _PROFILES_WITH_OPTIONAL_FRAMEWORKS
        ],
    )
