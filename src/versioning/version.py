"""NuGet version value: SemVer 2.0 plus the legacy fourth (revision) part.

Ordering follows SemVer precedence over ``major.minor.patch``, then the
revision, then case-insensitive release labels. Build metadata never affects
ordering or equality.
"""

from __future__ import annotations

import functools
import re
from typing import List, Optional, Tuple

import semantic_version

from .cache import ParseCache
from .models import VersionParseError

MAX_PART_VALUE = 2147483647

_PART_RE = re.compile(r"^\s*(\d+)\s*$")
_IDENTIFIER_RE = re.compile(r"^[0-9A-Za-z-]+$")

_version_cache = ParseCache()


def _parse_sections(value: str) -> Tuple[Optional[str], Optional[List[str]], str]:
    """Split ``value`` into (version, release labels, metadata).

    A trailing ``-`` or ``+`` with nothing after it stays part of the section
    it ends, which later fails validation.
    """
    version_string: Optional[str] = None
    labels: Optional[List[str]] = None
    metadata = ""
    dash_pos = -1
    plus_pos = -1
    last = len(value) - 1
    for i, ch in enumerate(value):
        end = i == last
        if version_string is None:
            if end or ch in "-+":
                version_string = value[: i + (1 if end else 0)]
                dash_pos = i
                if ch == "+":
                    plus_pos = i
        elif plus_pos < 0 and (end or ch == "+"):
            label = value[dash_pos + 1 : i + (1 if end else 0)]
            labels = label.split(".")
            plus_pos = i
        elif end:
            metadata = value[plus_pos + 1 :]
    return version_string, labels, metadata


def _parse_numeric_parts(text: str) -> Optional[Tuple[int, int, int, int]]:
    """Parse 1-4 dot separated non-negative int32 parts, padding with zeros."""
    if not text or not text.strip():
        return None
    pieces = text.split(".")
    if len(pieces) > 4:
        return None
    numbers = []
    for piece in pieces:
        match = _PART_RE.match(piece)
        if not match:
            return None
        number = int(match.group(1))
        if number > MAX_PART_VALUE:
            return None
        numbers.append(number)
    while len(numbers) < 4:
        numbers.append(0)
    return numbers[0], numbers[1], numbers[2], numbers[3]


def is_valid_part(part: str, allow_leading_zeros: bool) -> bool:
    """Return True for a valid SemVer identifier (release label or metadata piece)."""
    if not part or not _IDENTIFIER_RE.match(part):
        return False
    if not allow_leading_zeros and part.isdigit() and len(part) > 1 and part[0] == "0":
        return False
    return True


@functools.total_ordering
class NuGetVersion:
    """Immutable NuGet version."""

    __slots__ = (
        "_major",
        "_minor",
        "_patch",
        "_revision",
        "_release_labels",
        "_metadata",
        "_original",
        "_semver",
    )

    def __init__(
        self,
        major: int,
        minor: int = 0,
        patch: int = 0,
        revision: int = 0,
        release_labels: Optional[List[str]] = None,
        metadata: Optional[str] = None,
        original_version: Optional[str] = None,
    ) -> None:
        for part in (major, minor, patch, revision):
            if part < 0 or part > MAX_PART_VALUE:
                raise VersionParseError(f"version part out of range: {part}")
        labels = tuple(release_labels or ())
        for label in labels:
            if not is_valid_part(label, False):
                raise VersionParseError(f"invalid release label: {label!r}")
        if metadata:
            for piece in metadata.split("."):
                if not is_valid_part(piece, True):
                    raise VersionParseError(f"invalid metadata: {metadata!r}")
        self._major = major
        self._minor = minor
        self._patch = patch
        self._revision = revision
        self._release_labels = labels
        self._metadata = metadata or ""
        self._original = original_version
        # Prerelease precedence only; the numeric parts are compared separately
        # so the revision sorts ahead of the labels.
        self._semver = semantic_version.Version(
            major=0,
            minor=0,
            patch=0,
            prerelease=tuple(label.lower() for label in labels),
        )

    @classmethod
    def parse(cls, value: str) -> "NuGetVersion":
        """Parse a version string.

        Args:
            value (str): Version such as ``1.0``, ``1.2.3.4`` or ``1.0.0-rc.1+sha``.

        Returns:
            NuGetVersion: Parsed version.

        Raises:
            VersionParseError: when ``value`` is empty or not a valid version.
        """
        if value is None or not str(value).strip():
            raise VersionParseError("argument cannot be null or empty")
        cached = _version_cache.get(value)
        if cached is not None:
            return cached
        version_string, labels, metadata = _parse_sections(value.strip())
        if version_string is None:
            raise VersionParseError(f"'{value}' is not a valid version string")
        numbers = _parse_numeric_parts(version_string)
        if numbers is None:
            raise VersionParseError(f"'{value}' is not a valid version string")
        if labels is not None and not all(is_valid_part(label, False) for label in labels):
            raise VersionParseError(f"'{value}' is not a valid version string")
        if metadata and not all(is_valid_part(p, True) for p in metadata.split(".")):
            raise VersionParseError(f"'{value}' is not a valid version string")
        version = cls(
            numbers[0],
            numbers[1],
            numbers[2],
            numbers[3],
            release_labels=labels,
            metadata=metadata,
            original_version=value,
        )
        _version_cache.put(value, version)
        return version

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional["NuGetVersion"]:
        """Parse ``value`` or return None when it is not a valid version."""
        try:
            return cls.parse(value)  # type: ignore[arg-type]
        except VersionParseError:
            return None

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> int:
        return self._minor

    @property
    def patch(self) -> int:
        return self._patch

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def release_labels(self) -> Tuple[str, ...]:
        return self._release_labels

    @property
    def release(self) -> str:
        """Joined release labels, ``""`` for stable versions."""
        return ".".join(self._release_labels)

    @property
    def metadata(self) -> str:
        return self._metadata

    @property
    def original_version(self) -> Optional[str]:
        return self._original

    @property
    def is_prerelease(self) -> bool:
        return bool(self._release_labels)

    @property
    def is_legacy_version(self) -> bool:
        return self._revision > 0

    @property
    def is_semver2(self) -> bool:
        return len(self._release_labels) > 1 or bool(self._metadata)

    @property
    def has_metadata(self) -> bool:
        return bool(self._metadata)

    def parts(self) -> Tuple[int, int, int, int]:
        return self._major, self._minor, self._patch, self._revision

    def without_metadata(self) -> "NuGetVersion":
        if not self._metadata:
            return self
        return NuGetVersion(
            self._major, self._minor, self._patch, self._revision, list(self._release_labels)
        )

    def _key(self):
        return (self._major, self._minor, self._patch, self._revision, self._semver)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "NuGetVersion") -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(
            (
                self._major,
                self._minor,
                self._patch,
                self._revision,
                tuple(label.lower() for label in self._release_labels),
            )
        )

    def to_normalized_string(self) -> str:
        """``major.minor.patch[.revision][-labels]`` without metadata."""
        text = f"{self._major}.{self._minor}.{self._patch}"
        if self.is_legacy_version:
            text += f".{self._revision}"
        if self._release_labels:
            text += "-" + self.release
        return text

    def to_full_string(self) -> str:
        """Normalized string including ``+metadata`` when present."""
        text = self.to_normalized_string()
        if self._metadata:
            text += "+" + self._metadata
        return text

    def __str__(self) -> str:
        return self.to_normalized_string()

    def __repr__(self) -> str:
        return f"NuGetVersion('{self.to_full_string()}')"


EMPTY_VERSION = NuGetVersion(0, 0, 0)
