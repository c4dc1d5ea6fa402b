"""Version ranges in NuGet interval notation.

    1.0          -> 1.0 <= x
    (,1.0]       -> x <= 1.0
    (,1.0)       -> x < 1.0
    [1.0]        -> x == 1.0
    (1.0,)       -> 1.0 < x
    (1.0, 2.0)   -> 1.0 < x < 2.0
    [1.0, 2.0]   -> 1.0 <= x <= 2.0
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from common.logging_utils import extra_context, is_debug_enabled

from .cache import ParseCache
from .float_range import FloatRange
from .formatter import format_range
from .models import FloatBehavior, VersionParseError
from .version import NuGetVersion

logger = logging.getLogger(__name__)

_range_cache = ParseCache()


class VersionRange:
    """A lower/upper bounded set of versions with an optional float range."""

    def __init__(
        self,
        min_version: Optional[NuGetVersion] = None,
        max_version: Optional[NuGetVersion] = None,
        include_min: bool = True,
        include_max: bool = False,
        float_range: Optional[FloatRange] = None,
        original_string: Optional[str] = None,
    ) -> None:
        if float_range is not None and min_version is None:
            raise VersionParseError("min_version is required when float_range is given")
        self.min_version = min_version
        self.max_version = max_version
        self._include_min = include_min
        self._include_max = include_max
        self.float_range = float_range
        self.original_string = original_string

    @property
    def has_lower_bound(self) -> bool:
        return self.min_version is not None

    @property
    def has_upper_bound(self) -> bool:
        return self.max_version is not None

    @property
    def has_lower_and_upper_bounds(self) -> bool:
        return self.has_lower_bound and self.has_upper_bound

    @property
    def is_min_inclusive(self) -> bool:
        return self.has_lower_bound and self._include_min

    @property
    def is_max_inclusive(self) -> bool:
        return self.has_upper_bound and self._include_max

    @property
    def is_floating(self) -> bool:
        return self.float_range is not None and self.float_range.float_behavior != FloatBehavior.NONE

    @classmethod
    def parse(cls, value: str, allow_floating: bool = True) -> "VersionRange":
        """Parse a range string.

        Args:
            value (str): Range in interval notation, a bare version, or a float.
            allow_floating (bool): Accept ``*`` in the minimum version.

        Returns:
            VersionRange: The parsed range.

        Raises:
            VersionParseError: when ``value`` is not a valid range.
        """
        result = cls.try_parse(value, allow_floating)
        if result is None:
            raise VersionParseError(f"'{value}' is not a valid version string")
        return result

    @classmethod
    def try_parse(cls, value: Optional[str], allow_floating: bool = True) -> Optional["VersionRange"]:
        """Parse a range string, returning None on failure."""
        # pylint: disable=too-many-return-statements, too-many-branches
        if value is None:
            return None
        trimmed = value.strip()
        if not trimmed:
            return None
        cached = _range_cache.get((trimmed, allow_floating))
        if cached is not None:
            return cached

        if allow_floating and trimmed == "*":
            result = cls(
                NuGetVersion(0, 0, 0),
                None,
                True,
                True,
                FloatRange.parse(trimmed),
                value,
            )
            _range_cache.put((trimmed, allow_floating), result)
            return result

        max_string = ""
        if trimmed[0] in "([":
            include_min = trimmed[0] == "["
            if trimmed[-1] not in ")]" or len(trimmed) < 2:
                return None
            include_max = trimmed[-1] == "]"
            parts = trimmed[1:-1].split(",")
            if len(parts) > 2 or all(part == "" for part in parts):
                return None
            # (1.0.0] and [1.0.0) are invalid
            if len(parts) == 1 and not (include_min and include_max):
                return None
            min_string = parts[0]
            max_string = parts[1] if len(parts) == 2 else parts[0]
        else:
            include_min = True
            include_max = False
            min_string = trimmed

        min_version: Optional[NuGetVersion] = None
        max_version: Optional[NuGetVersion] = None
        float_range: Optional[FloatRange] = None

        if min_string.strip():
            if allow_floating and "*" in min_string:
                float_range = FloatRange.try_parse(min_string.strip())
                if float_range is None:
                    if is_debug_enabled(logger):
                        logger.debug(
                            "Rejected floating range",
                            extra=extra_context(
                                event="parse_failed", component="versioning", target=value
                            ),
                        )
                    return None
                min_version = float_range.min_version
            else:
                min_version = NuGetVersion.try_parse(min_string.strip())
                if min_version is None:
                    return None

        # the maximum never floats
        if max_string.strip():
            max_version = NuGetVersion.try_parse(max_string.strip())
            if max_version is None:
                return None

        if min_version is not None and max_version is not None:
            if min_version > max_version:
                return None
            if min_version == max_version and include_min != include_max:
                return None

        result = cls(min_version, max_version, include_min, include_max, float_range, value)
        _range_cache.put((trimmed, allow_floating), result)
        return result

    def satisfies(self, version: Optional[NuGetVersion]) -> bool:
        """True if ``version`` lies within the bounds. Metadata is ignored."""
        if version is None:
            return False
        if self.has_lower_bound:
            if self.is_min_inclusive:
                if self.min_version > version:
                    return False
            elif self.min_version >= version:
                return False
        if self.has_upper_bound:
            if self.is_max_inclusive:
                if self.max_version < version:
                    return False
            elif self.max_version <= version:
                return False
        return True

    def does_range_satisfy(self, lower: NuGetVersion, upper: NuGetVersion) -> bool:
        """True if this range overlaps the inclusive window ``[lower, upper]``."""
        if self.has_lower_and_upper_bounds:
            window = VersionRange(lower, upper, True, True)
            return window.satisfies(self.min_version) or window.satisfies(self.max_version)
        return self.satisfies(lower) or self.satisfies(upper)

    def find_best_match(self, versions: Iterable[NuGetVersion]) -> Optional[NuGetVersion]:
        """Pick the preferred version from ``versions``.

        Non-floating ranges prefer the lowest satisfying version; floating ranges
        prefer the highest version inside the float window.
        """
        candidates = [v for v in versions if self.satisfies(v)]
        if not candidates:
            return None
        if self.is_floating:
            floating = [v for v in candidates if self.float_range.satisfies(v)]
            if floating:
                return max(floating)
        return min(candidates)

    def to_normalized_string(self) -> str:
        return format_range("N", self)

    def pretty_print(self) -> str:
        return format_range("P", self)

    def to_legacy_string(self) -> str:
        return format_range("D", self)

    def to_legacy_short_string(self) -> str:
        return format_range("T", self)

    def __str__(self) -> str:
        return self.to_normalized_string()

    def __repr__(self) -> str:
        return f"VersionRange('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionRange):
            return NotImplemented
        return (
            self.min_version == other.min_version
            and self.max_version == other.max_version
            and self.is_min_inclusive == other.is_min_inclusive
            and self.is_max_inclusive == other.is_max_inclusive
            and self._float_key() == other._float_key()
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.min_version,
                self.max_version,
                self.is_min_inclusive,
                self.is_max_inclusive,
                self._float_key(),
            )
        )

    def _float_key(self):
        if not self.is_floating:
            return None
        return self.float_range


ALL = VersionRange(None, None, True, True)
