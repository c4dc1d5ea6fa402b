"""NuGet versions, floating versions and version ranges."""

from .float_range import FloatRange
from .models import FloatBehavior, VersionParseError
from .version import EMPTY_VERSION, NuGetVersion
from .version_range import ALL, VersionRange

__all__ = [
    "ALL",
    "EMPTY_VERSION",
    "FloatBehavior",
    "FloatRange",
    "NuGetVersion",
    "VersionParseError",
    "VersionRange",
]
