"""Floating version notation (``1.*``, ``1.0.0-beta*``, ``*-*``)."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import FloatBehavior, VersionParseError
from .version import NuGetVersion

_PRERELEASE_BY_PARTS = {
    1: FloatBehavior.PRERELEASE_MAJOR,
    2: FloatBehavior.PRERELEASE_MINOR,
    3: FloatBehavior.PRERELEASE_PATCH,
    4: FloatBehavior.PRERELEASE_REVISION,
}

_STABLE_BY_PARTS = {
    2: FloatBehavior.MINOR,
    3: FloatBehavior.PATCH,
    4: FloatBehavior.REVISION,
}


def _count_parts(text: str) -> int:
    if not text.strip():
        return 1
    return text.count(".") + 1


class FloatRange:
    """The floating portion of a version range."""

    def __init__(
        self,
        float_behavior: FloatBehavior,
        min_version: Optional[NuGetVersion] = None,
        release_prefix: Optional[str] = None,
    ) -> None:
        if min_version is None:
            min_version = NuGetVersion(
                0, 0, 0, release_labels=None if float_behavior == FloatBehavior.NONE else ["0"]
            )
        self.float_behavior = float_behavior
        self.min_version = min_version
        if release_prefix is None and min_version.is_prerelease:
            # fall back to the actual label when no prefix was given
            release_prefix = min_version.release
        if float_behavior == FloatBehavior.ABSOLUTE_LATEST and not release_prefix:
            release_prefix = ""
        self.original_release_prefix = release_prefix or ""

    @property
    def has_min_version(self) -> bool:
        return self.min_version is not None

    @classmethod
    def parse(cls, value: str) -> "FloatRange":
        result = cls.try_parse(value)
        if result is None:
            raise VersionParseError(f"{value} is not a valid float range string")
        return result

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional["FloatRange"]:
        """Parse a floating version, returning None when it is invalid."""
        # pylint: disable=too-many-return-statements, too-many-branches
        if value is None or not value.strip():
            return None
        first_star = value.find("*")
        last_star = value.rfind("*")
        release_prefix: Optional[str] = None

        if len(value) == 1 and first_star == 0:
            return cls(FloatBehavior.MAJOR, NuGetVersion(0, 0, 0))
        if value.lower() == "*-*":
            return cls(FloatBehavior.ABSOLUTE_LATEST, NuGetVersion.parse("0.0.0-0"))

        if first_star != last_star and last_star != -1 and "+" not in value:
            dash = value.find("-")
            # both stars must sit at ``x.*-pre*`` positions
            if dash == -1 or last_star != len(value) - 1 or first_star != dash - 1:
                return None
            stable = value[: dash - 1] + "0"
            behavior = _PRERELEASE_BY_PARTS.get(_count_parts(stable), FloatBehavior.NONE)
            release_prefix = value[dash + 1 : -1]
            release_part = release_prefix
            if not release_prefix or release_prefix.endswith("."):
                release_part += "0"
            version = NuGetVersion.try_parse(stable + "-" + release_part)
            if version is None:
                return None
            return cls(behavior, version, release_prefix)

        if last_star == len(value) - 1 and "+" not in value:
            actual = value[:-1]
            if "-" not in value:
                actual += "0"
                behavior = _STABLE_BY_PARTS.get(_count_parts(actual), FloatBehavior.NONE)
            else:
                behavior = FloatBehavior.PRERELEASE
                if value.find("-") == value.rfind("-"):
                    release_prefix = actual[value.rfind("-") + 1 :]
                    if not release_prefix or actual.endswith("."):
                        # ``1.0.0-*``: an empty label is not a valid version
                        actual += "0"
                    elif actual.endswith("-"):
                        actual += "-"
            version = NuGetVersion.try_parse(actual)
            if version is None:
                return None
            return cls(behavior, version, release_prefix)

        version = NuGetVersion.try_parse(value)
        if version is None:
            return None
        return cls(FloatBehavior.NONE, version)

    def satisfies(self, version: NuGetVersion) -> bool:
        """True if ``version`` falls inside the float window above the minimum."""
        # pylint: disable=too-many-return-statements
        behavior = self.float_behavior
        if behavior == FloatBehavior.ABSOLUTE_LATEST:
            return True
        if behavior == FloatBehavior.MAJOR:
            return not version.is_prerelease
        if behavior in (
            FloatBehavior.PRERELEASE_MAJOR,
            FloatBehavior.PRERELEASE_MINOR,
            FloatBehavior.PRERELEASE_PATCH,
            FloatBehavior.PRERELEASE_REVISION,
        ):
            if version.is_prerelease and not version.release.lower().startswith(
                self.original_release_prefix.lower()
            ):
                return False
            return self._same_prefix(version, behavior)
        if behavior == FloatBehavior.PRERELEASE:
            if version.parts() != self.min_version.parts():
                return False
            if not version.is_prerelease:
                return True
            return version.release.lower().startswith(self.original_release_prefix.lower())
        if version.is_prerelease:
            return False
        if behavior == FloatBehavior.NONE:
            return version == self.min_version
        return self._same_prefix(version, behavior)

    def _same_prefix(self, version: NuGetVersion, behavior: FloatBehavior) -> bool:
        floor = self.min_version
        if behavior in (FloatBehavior.MINOR, FloatBehavior.PRERELEASE_MINOR):
            return version.major == floor.major
        if behavior in (FloatBehavior.PATCH, FloatBehavior.PRERELEASE_PATCH):
            return (version.major, version.minor) == (floor.major, floor.minor)
        if behavior in (FloatBehavior.REVISION, FloatBehavior.PRERELEASE_REVISION):
            return (version.major, version.minor, version.patch) == (
                floor.major,
                floor.minor,
                floor.patch,
            )
        return True

    def find_best_match(self, versions: Iterable[NuGetVersion]) -> Optional[NuGetVersion]:
        """Highest version at or above the minimum that lies within the float window."""
        best: Optional[NuGetVersion] = None
        for version in versions:
            if version < self.min_version or not self.satisfies(version):
                continue
            if best is None or version > best:
                best = version
        return best

    def __str__(self) -> str:
        # pylint: disable=too-many-return-statements
        floor = self.min_version
        prefix = self.original_release_prefix
        behavior = self.float_behavior
        if behavior == FloatBehavior.NONE:
            return floor.to_normalized_string()
        if behavior == FloatBehavior.PRERELEASE:
            return f"{floor.major}.{floor.minor}.{floor.patch}" + (
                f".{floor.revision}" if floor.is_legacy_version else ""
            ) + f"-{prefix}*"
        if behavior == FloatBehavior.REVISION:
            return f"{floor.major}.{floor.minor}.{floor.patch}.*"
        if behavior == FloatBehavior.PATCH:
            return f"{floor.major}.{floor.minor}.*"
        if behavior == FloatBehavior.MINOR:
            return f"{floor.major}.*"
        if behavior == FloatBehavior.MAJOR:
            return "*"
        if behavior == FloatBehavior.PRERELEASE_REVISION:
            return f"{floor.major}.{floor.minor}.{floor.patch}.*-{prefix}*"
        if behavior == FloatBehavior.PRERELEASE_PATCH:
            return f"{floor.major}.{floor.minor}.*-{prefix}*"
        if behavior == FloatBehavior.PRERELEASE_MINOR:
            return f"{floor.major}.*-{prefix}*"
        if behavior == FloatBehavior.PRERELEASE_MAJOR:
            return f"*-{prefix}*"
        return "*-*"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FloatRange):
            return NotImplemented
        return (
            self.float_behavior == other.float_behavior
            and self.min_version == other.min_version
            and self.original_release_prefix == other.original_release_prefix
        )

    def __hash__(self) -> int:
        return hash((self.float_behavior, self.min_version, self.original_release_prefix))

    def __repr__(self) -> str:
        return f"FloatRange('{self}')"
