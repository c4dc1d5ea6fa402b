"""Name provider: resolves identifiers, profiles, versions and portable profiles.

A provider is built once from one or more mapping sources and is read-only
afterwards. ``get_default_provider()`` returns the shared instance built from
the built-in tables.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from versioning.models import VersionParseError
from versioning.version import NuGetVersion

from .constants import (
    DECIMAL_POINT_FRAMEWORKS,
    PORTABLE_PROFILE_PREFIX,
    SINGLE_DIGIT_VERSION_FRAMEWORKS,
)
from .errors import InvalidPortableFrameworksError, InvalidVersionFragmentError
from .framework import Framework
from .mappings import (
    FrameworkMappings,
    PortableFrameworkMappings,
    default_framework_mappings,
    default_portable_mappings,
)

logger = logging.getLogger(__name__)

Permutation = Tuple[Framework, ...]


class NameProvider:
    """Lookup hub over the framework mapping tables."""

    # pylint: disable=too-many-instance-attributes, too-many-public-methods

    def __init__(
        self,
        mappings: Optional[Sequence[FrameworkMappings]] = None,
        portable_mappings: Optional[Sequence[PortableFrameworkMappings]] = None,
    ) -> None:
        # lower-cased synonym or short name -> identifier
        self._identifier_synonyms: Dict[str, str] = {}
        # lower-cased identifier -> canonical identifier
        self._identifiers: Dict[str, str] = {}
        # lower-cased identifier -> short name, lower-cased short name -> identifier
        self._identifier_to_short: Dict[str, str] = {}
        self._short_to_identifier: Dict[str, str] = {}
        # (lower identifier, lower token) -> profile / short profile
        self._profile_short_to_long: Dict[Tuple[str, str], str] = {}
        self._profile_long_to_short: Dict[Tuple[str, str], str] = {}
        self._equivalents: Dict[Framework, List[Framework]] = {}
        self._short_name_rewrites: List[Tuple[Framework, Framework]] = []
        self._full_name_rewrites: List[Tuple[Framework, Framework]] = []
        self._portable_profiles: Dict[int, List[Framework]] = {}
        self._portable_optional: Dict[int, List[Framework]] = {}
        self._permutation_cache: Dict[int, List[Permutation]] = {}
        self._permutation_lock = threading.Lock()

        for mapping in mappings or []:
            self._add_mappings(mapping)
        for portable in portable_mappings or []:
            self._add_portable_mappings(portable)

    def _add_mappings(self, mapping: FrameworkMappings) -> None:
        self._add_equivalent_frameworks(mapping.equivalent_frameworks)
        for synonym, identifier in mapping.identifier_synonyms:
            self._identifier_synonyms.setdefault(synonym.lower(), identifier)
            self._identifiers.setdefault(identifier.lower(), identifier)
        for identifier, short in mapping.identifier_short_names:
            self._identifiers.setdefault(identifier.lower(), identifier)
            self._identifier_synonyms.setdefault(short.lower(), identifier)
            self._identifier_to_short.setdefault(identifier.lower(), short)
            self._short_to_identifier.setdefault(short.lower(), identifier)
        for identifier, short, profile in mapping.profile_short_names:
            self._profile_short_to_long.setdefault((identifier.lower(), short.lower()), profile)
            self._profile_long_to_short.setdefault((identifier.lower(), profile.lower()), short)
        self._short_name_rewrites.extend(mapping.short_name_replacements)
        self._full_name_rewrites.extend(mapping.full_name_replacements)

    def _add_portable_mappings(self, portable: PortableFrameworkMappings) -> None:
        for number, frameworks in portable.profile_frameworks:
            self._portable_profiles.setdefault(number, list(frameworks))
        for number, frameworks in portable.profile_optional_frameworks:
            self._portable_optional.setdefault(number, list(frameworks))

    def _add_equivalent_frameworks(self, pairs: Sequence[Tuple[Framework, Framework]]) -> None:
        """Register two-way equivalences, closing the relation transitively."""
        for left, right in pairs:
            remaining = [left, right]
            seen: List[Framework] = []
            while remaining:
                current = remaining.pop()
                if current in seen:
                    continue
                seen.append(current)
                if current in self._equivalents:
                    remaining.extend(self._equivalents[current])
                else:
                    self._equivalents[current] = []
            for framework in seen:
                bucket = self._equivalents[framework]
                for other in seen:
                    if other != framework and other not in bucket:
                        bucket.append(other)

    def get_identifier(self, token: str) -> Optional[str]:
        """Canonical identifier for a synonym, short name or identifier."""
        if not token:
            return None
        key = token.lower()
        if key in self._identifier_synonyms:
            return self._identifier_synonyms[key]
        return self._identifiers.get(key)

    def get_short_identifier(self, identifier: str) -> Optional[str]:
        """Short folder name for ``identifier``, e.g. ``.NETFramework`` -> ``net``."""
        if not identifier:
            return None
        return self._identifier_to_short.get(identifier.lower())

    def get_profile(self, identifier: str, short_profile: str) -> Optional[str]:
        """Long profile for ``short_profile`` within ``identifier``.

        Returns the canonical spelling when ``short_profile`` already is a long
        profile, or None when the token is unknown for that identifier.
        """
        key = (identifier.lower(), short_profile.lower())
        if key in self._profile_short_to_long:
            return self._profile_short_to_long[key]
        if key in self._profile_long_to_short:
            return self._canonical_profile(identifier, short_profile)
        return None

    def _canonical_profile(self, identifier: str, profile: str) -> str:
        for (ident, _short), long_name in self._profile_short_to_long.items():
            if ident == identifier.lower() and long_name.lower() == profile.lower():
                return long_name
        return profile

    def get_short_profile(self, identifier: str, profile: str) -> Optional[str]:
        """Short profile for ``profile`` within ``identifier``."""
        return self._profile_long_to_short.get((identifier.lower(), profile.lower()))

    def get_version(self, text: str) -> NuGetVersion:
        """Parse a framework version fragment.

        Dotted text is parsed as is. A compact digit run is expanded one digit
        per part after padding to two digits and truncating to four:
        ``451`` -> ``4.5.1``, ``8`` -> ``8.0``, ``81233`` -> ``8.1.2.3``.

        Raises:
            InvalidVersionFragmentError: when ``text`` is empty or invalid.
        """
        value = (text or "").strip()
        if not value:
            raise InvalidVersionFragmentError("version is empty", text or "")
        if "." not in value:
            if len(value) < 2:
                value += "0"
            value = ".".join(value[:4])
        try:
            return NuGetVersion.parse(value)
        except VersionParseError as exc:
            raise InvalidVersionFragmentError(f"invalid version: {text}", text) from exc

    def get_platform_version(self, text: str) -> NuGetVersion:
        """Parse a platform version; ``.0`` is appended when there is no dot."""
        value = (text or "").strip()
        if not value:
            raise InvalidVersionFragmentError("platform version is empty", text or "")
        if "." not in value:
            value += ".0"
        try:
            return NuGetVersion.parse(value)
        except VersionParseError as exc:
            raise InvalidVersionFragmentError(f"invalid platform version: {text}", text) from exc

    @staticmethod
    def get_version_string(identifier: str, version: NuGetVersion) -> str:
        """Short-folder version text for ``identifier`` (``45``, ``8.0``, ``10``)."""
        parts = list(version.parts())
        if not any(parts):
            return ""
        ident = (identifier or "").lower()
        min_count = 1 if ident in SINGLE_DIGIT_VERSION_FRAMEWORKS else 2
        while len(parts) > min_count and parts[-1] == 0:
            parts.pop()
        if ident in DECIMAL_POINT_FRAMEWORKS or any(p > 9 for p in parts):
            if len(parts) < 2:
                parts.append(0)
            return ".".join(str(p) for p in parts)
        return "".join(str(p) for p in parts)

    def get_short_name_replacement(self, framework: Framework) -> Framework:
        for source, target in self._short_name_rewrites:
            if source == framework:
                return target
        return framework

    def get_full_name_replacement(self, framework: Framework) -> Framework:
        for source, target in self._full_name_rewrites:
            if source == framework:
                return target
        return framework

    def get_equivalent_frameworks(self, framework: Framework) -> List[Framework]:
        """``framework`` followed by every framework equivalent to it."""
        results = [framework]
        to_process = [framework]
        while to_process:
            current = to_process.pop()
            for other in self._equivalents.get(current, []):
                if other not in results:
                    results.append(other)
                    to_process.append(other)
        return results

    def remove_duplicate_frameworks(self, frameworks: Sequence[Framework]) -> List[Framework]:
        """Drop frameworks equivalent to one already listed (``win+win8`` -> ``win``)."""
        result: List[Framework] = []
        existing: List[Framework] = []
        for framework in frameworks:
            if framework in existing:
                continue
            result.append(framework)
            existing.extend(self.get_equivalent_frameworks(framework))
        return result

    def get_equivalent_permutations(self, frameworks: Sequence[Framework]) -> List[Permutation]:
        """Every combination of the frameworks with equivalents substituted.

        ex: net4+win8 -> net4+win8, net4+netcore45, net4+win, ...
        """
        if not frameworks:
            return []
        head, tail = frameworks[0], list(frameworks[1:])
        options = list(self._equivalents.get(head, [])) + [head]
        tail_permutations = self.get_equivalent_permutations(tail) if tail else [()]
        return [perm + (option,) for option in options for perm in tail_permutations]

    def _profile_permutations(self, number: int) -> List[Permutation]:
        with self._permutation_lock:
            cached = self._permutation_cache.get(number)
            if cached is not None:
                return cached
        required = self._portable_profiles.get(number, [])
        if len(required) > int(Constants.MAX_PORTABLE_PROFILE_ARITY):
            logger.warning(
                "Skipping portable Profile%s: %d frameworks exceeds the limit of %s",
                number,
                len(required),
                Constants.MAX_PORTABLE_PROFILE_ARITY,
            )
            permutations: List[Permutation] = []
        else:
            permutations = self.get_equivalent_permutations(required)
        with self._permutation_lock:
            self._permutation_cache[number] = permutations
        return permutations

    @staticmethod
    def try_get_portable_profile_number(profile: str) -> Optional[int]:
        """``Profile259`` -> 259; None for anything else."""
        if not profile or not profile.lower().startswith(PORTABLE_PROFILE_PREFIX):
            return None
        digits = profile[len(PORTABLE_PROFILE_PREFIX):]
        if not digits.isdigit():
            return None
        return int(digits)

    def get_portable_frameworks(self, short_profiles: str) -> List[Framework]:
        """Parse a ``+`` separated list of short framework names.

        Members are parsed leniently: an unknown name becomes ``UNSUPPORTED``
        rather than an error, even when the enclosing token is parsed with
        ``parse_framework_strict``. Such a list matches no profile number.

        Raises:
            InvalidPortableFrameworksError: when a listed framework has a profile.
        """
        from .parser import parse_framework  # pylint: disable=import-outside-toplevel

        result: List[Framework] = []
        for name in short_profiles.split("+"):
            name = name.strip()
            if not name:
                continue
            framework = parse_framework(name, self)
            if framework.has_profile:
                raise InvalidPortableFrameworksError(
                    f"invalid portable frameworks '{short_profiles}'. "
                    "A hyphen may not be in any of the portable framework names",
                    short_profiles,
                )
            result.append(framework)
        return result

    def get_portable_frameworks_with_include(
        self, profile: str, include_optional: bool = True
    ) -> List[Framework]:
        """Frameworks of a ``ProfileNNN`` name or of a ``+`` separated list."""
        number = self.try_get_portable_profile_number(profile)
        if number is None:
            return self.get_portable_frameworks(profile)
        frameworks = list(self._portable_profiles.get(number, []))
        if include_optional:
            frameworks.extend(self._portable_optional.get(number, []))
        return frameworks

    def get_optional_frameworks(self, number: int) -> List[Framework]:
        return list(self._portable_optional.get(number, []))

    def get_portable_profile(self, frameworks: Optional[Sequence[Framework]]) -> int:
        """Infer the portable profile number for a set of frameworks, -1 if none."""
        if frameworks is None:
            return -1
        unique = self.remove_duplicate_frameworks(frameworks)
        for number, required in self._portable_profiles.items():
            # the required set must not be larger than the input
            if len(required) > len(unique):
                continue
            optional = self._portable_optional.get(number, [])
            reduced = [fw for fw in unique if not _is_optional(fw, optional)]
            for permutation in self._profile_permutations(number):
                if len(permutation) != len(reduced):
                    continue
                if all(fw in permutation for fw in reduced):
                    return number
        return -1

    @property
    def portable_profile_numbers(self) -> List[int]:
        return list(self._portable_profiles)


def _is_optional(framework: Framework, optional: Sequence[Framework]) -> bool:
    for candidate in optional:
        if (
            candidate.identifier.lower() == framework.identifier.lower()
            and candidate.profile.lower() == framework.profile.lower()
            and framework.version >= candidate.version
        ):
            return True
    return False


_default_provider: Optional[NameProvider] = None
_default_provider_lock = threading.Lock()


def get_default_provider() -> NameProvider:
    """Shared provider over the built-in tables, built on first use."""
    global _default_provider  # pylint: disable=global-statement
    provider = _default_provider
    if provider is not None:
        return provider
    with _default_provider_lock:
        if _default_provider is None:
            with Timer() as t:
                built = NameProvider([default_framework_mappings()], [default_portable_mappings()])
            if is_debug_enabled(logger):
                logger.debug(
                    "Built default framework name provider",
                    extra=extra_context(
                        event="init",
                        component="frameworks",
                        action="build_provider",
                        count=len(built.portable_profile_numbers),
                        duration_ms=t.duration_ms(),
                    ),
                )
            _default_provider = built
        return _default_provider
