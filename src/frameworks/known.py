"""Well-known framework values."""

from versioning.version import EMPTY_VERSION, NuGetVersion

from .constants import FrameworkIdentifiers as Ids
from .framework import Framework


def _fw(identifier: str, major: int = 0, minor: int = 0, patch: int = 0) -> Framework:
    if (major, minor, patch) == (0, 0, 0):
        return Framework(identifier, EMPTY_VERSION)
    return Framework(identifier, NuGetVersion(major, minor, patch))


NET2 = _fw(Ids.NET, 2)
NET35 = _fw(Ids.NET, 3, 5)
NET4 = _fw(Ids.NET, 4)
NET403 = _fw(Ids.NET, 4, 0, 3)
NET45 = _fw(Ids.NET, 4, 5)
NET451 = _fw(Ids.NET, 4, 5, 1)
NET452 = _fw(Ids.NET, 4, 5, 2)
NET46 = _fw(Ids.NET, 4, 6)
NET461 = _fw(Ids.NET, 4, 6, 1)
NET462 = _fw(Ids.NET, 4, 6, 2)
NET463 = _fw(Ids.NET, 4, 6, 3)
NET47 = _fw(Ids.NET, 4, 7)
NET471 = _fw(Ids.NET, 4, 7, 1)
NET472 = _fw(Ids.NET, 4, 7, 2)
NET48 = _fw(Ids.NET, 4, 8)
NET481 = _fw(Ids.NET, 4, 8, 1)

NETCORE45 = _fw(Ids.NET_CORE, 4, 5)
NETCORE451 = _fw(Ids.NET_CORE, 4, 5, 1)
# Not .NET 5; that is NET50 (.NETCoreApp 5.0).
NETCORE50 = _fw(Ids.NET_CORE, 5)

WIN8 = _fw(Ids.WINDOWS, 8)
WIN81 = _fw(Ids.WINDOWS, 8, 1)
WIN10 = _fw(Ids.WINDOWS, 10)

SL4 = _fw(Ids.SILVERLIGHT, 4)
SL5 = _fw(Ids.SILVERLIGHT, 5)

WP7 = _fw(Ids.WINDOWS_PHONE, 7)
WP75 = _fw(Ids.WINDOWS_PHONE, 7, 5)
WP8 = _fw(Ids.WINDOWS_PHONE, 8)
WP81 = _fw(Ids.WINDOWS_PHONE, 8, 1)
WPA81 = _fw(Ids.WINDOWS_PHONE_APP, 8, 1)

TIZEN3 = _fw(Ids.TIZEN, 3)
TIZEN4 = _fw(Ids.TIZEN, 4)
TIZEN6 = _fw(Ids.TIZEN, 6)

ASPNET = _fw(Ids.ASP_NET)
ASPNETCORE = _fw(Ids.ASP_NET_CORE)
ASPNET50 = _fw(Ids.ASP_NET, 5)
ASPNETCORE50 = _fw(Ids.ASP_NET_CORE, 5)

DNX = _fw(Ids.DNX)
DNX45 = _fw(Ids.DNX, 4, 5)
DNX452 = _fw(Ids.DNX, 4, 5, 2)
DNXCORE = _fw(Ids.DNX_CORE)
DNXCORE50 = _fw(Ids.DNX_CORE, 5)

DOTNET = _fw(Ids.NET_PLATFORM)
DOTNET50 = _fw(Ids.NET_PLATFORM, 5)
DOTNET51 = _fw(Ids.NET_PLATFORM, 5, 1)
DOTNET52 = _fw(Ids.NET_PLATFORM, 5, 2)
DOTNET53 = _fw(Ids.NET_PLATFORM, 5, 3)
DOTNET54 = _fw(Ids.NET_PLATFORM, 5, 4)
DOTNET55 = _fw(Ids.NET_PLATFORM, 5, 5)
DOTNET56 = _fw(Ids.NET_PLATFORM, 5, 6)

NETSTANDARD = _fw(Ids.NET_STANDARD)
NETSTANDARD10 = _fw(Ids.NET_STANDARD, 1, 0)
NETSTANDARD11 = _fw(Ids.NET_STANDARD, 1, 1)
NETSTANDARD12 = _fw(Ids.NET_STANDARD, 1, 2)
NETSTANDARD13 = _fw(Ids.NET_STANDARD, 1, 3)
NETSTANDARD14 = _fw(Ids.NET_STANDARD, 1, 4)
NETSTANDARD15 = _fw(Ids.NET_STANDARD, 1, 5)
NETSTANDARD16 = _fw(Ids.NET_STANDARD, 1, 6)
NETSTANDARD17 = _fw(Ids.NET_STANDARD, 1, 7)
NETSTANDARD20 = _fw(Ids.NET_STANDARD, 2, 0)
NETSTANDARD21 = _fw(Ids.NET_STANDARD, 2, 1)

NETSTANDARDAPP15 = _fw(Ids.NET_STANDARD_APP, 1, 5)

UAP10 = _fw(Ids.UAP, 10)

NETCOREAPP10 = _fw(Ids.NET_CORE_APP, 1, 0)
NETCOREAPP11 = _fw(Ids.NET_CORE_APP, 1, 1)
NETCOREAPP20 = _fw(Ids.NET_CORE_APP, 2, 0)
NETCOREAPP21 = _fw(Ids.NET_CORE_APP, 2, 1)
NETCOREAPP22 = _fw(Ids.NET_CORE_APP, 2, 2)
NETCOREAPP30 = _fw(Ids.NET_CORE_APP, 3, 0)
NETCOREAPP31 = _fw(Ids.NET_CORE_APP, 3, 1)

NET50 = _fw(Ids.NET_CORE_APP, 5)
NET60 = _fw(Ids.NET_CORE_APP, 6)
NET70 = _fw(Ids.NET_CORE_APP, 7)
NET80 = _fw(Ids.NET_CORE_APP, 8)
NET90 = _fw(Ids.NET_CORE_APP, 9)
NET10_0 = _fw(Ids.NET_CORE_APP, 10)

NATIVE = _fw(Ids.NATIVE)
