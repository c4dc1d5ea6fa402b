"""Data models for NuGet versioning."""

from enum import Enum


class FloatBehavior(Enum):
    """Floating behavior of a version range minimum."""
    NONE = "none"  # lowest version, no float
    PRERELEASE = "prerelease"  # highest matching pre-release label
    REVISION = "revision"  # x.y.z.*
    PATCH = "patch"  # x.y.*
    MINOR = "minor"  # x.*
    MAJOR = "major"  # *
    ABSOLUTE_LATEST = "absolute_latest"  # *-*
    PRERELEASE_REVISION = "prerelease_revision"  # x.y.z.*-*
    PRERELEASE_PATCH = "prerelease_patch"  # x.y.*-*
    PRERELEASE_MINOR = "prerelease_minor"  # x.*-*
    PRERELEASE_MAJOR = "prerelease_major"  # *-rc.*


class VersionParseError(ValueError):
    """Raised when a version, float range or version range string is invalid."""
