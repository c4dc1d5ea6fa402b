"""Tests for NuGetVersion parsing, ordering and formatting."""

import pytest

from versioning import NuGetVersion, VersionParseError
from versioning.cache import ParseCache


class TestParse:
    """Parsing version strings."""

    def test_short_version_is_padded(self):
        version = NuGetVersion.parse("1.0")
        assert version.parts() == (1, 0, 0, 0)
        assert str(version) == "1.0.0"
        assert version.original_version == "1.0"

    def test_legacy_revision(self):
        version = NuGetVersion.parse("1.2.3.4")
        assert version.revision == 4
        assert version.is_legacy_version
        assert str(version) == "1.2.3.4"

    def test_release_labels_and_metadata(self):
        version = NuGetVersion.parse("1.0.0-rc.1+sha.abc")
        assert version.release_labels == ("rc", "1")
        assert version.release == "rc.1"
        assert version.metadata == "sha.abc"
        assert version.is_prerelease
        assert version.is_semver2
        assert version.to_normalized_string() == "1.0.0-rc.1"
        assert version.to_full_string() == "1.0.0-rc.1+sha.abc"

    def test_metadata_without_release(self):
        version = NuGetVersion.parse("2.1.0+build5")
        assert not version.is_prerelease
        assert version.has_metadata
        assert version.without_metadata().to_full_string() == "2.1.0"

    def test_surrounding_whitespace(self):
        assert NuGetVersion.parse("  1.2.3  ") == NuGetVersion(1, 2, 3)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "   ",
            "a.b",
            "1.0.0.0.0",
            "1.0.0-",
            "1.0.0+",
            "1.0.0-01",
            "1.0.0-beta_1",
            "-1.0",
            "2147483648.0",
        ],
    )
    def test_invalid_versions(self, value):
        with pytest.raises(VersionParseError):
            NuGetVersion.parse(value)

    def test_try_parse(self):
        assert NuGetVersion.try_parse("nope") is None
        assert NuGetVersion.try_parse(None) is None
        assert NuGetVersion.try_parse("3.0") == NuGetVersion(3)

    def test_constructor_validates_parts(self):
        with pytest.raises(VersionParseError):
            NuGetVersion(-1)
        with pytest.raises(VersionParseError):
            NuGetVersion(1, release_labels=["bad label"])


class TestOrdering:
    """SemVer precedence plus the revision part."""

    def test_precedence(self):
        ordered = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-beta",
            "1.0.0-rc.2",
            "1.0.0-rc.10",
            "1.0.0",
            "1.0.0.1",
            "1.0.1",
            "2.0.0",
        ]
        versions = [NuGetVersion.parse(v) for v in ordered]
        assert sorted(reversed(versions)) == versions

    def test_labels_compare_case_insensitively(self):
        upper = NuGetVersion.parse("1.0.0-BETA")
        lower = NuGetVersion.parse("1.0.0-beta")
        assert upper == lower
        assert hash(upper) == hash(lower)

    def test_metadata_is_ignored(self):
        assert NuGetVersion.parse("1.0.0+a") == NuGetVersion.parse("1.0.0+b")

    def test_trailing_zero_parts_are_equal(self):
        assert NuGetVersion.parse("1.0") == NuGetVersion.parse("1.0.0.0")

    def test_comparison_with_other_types(self):
        assert NuGetVersion(1) != "1.0.0"


class TestParseCache:
    """The bounded memo behind the parsers."""

    def test_cache_clears_when_full(self):
        cache = ParseCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        assert len(cache) == 2
        cache.put("c", 3)
        assert len(cache) == 1
        assert cache.get("a") is None
        assert cache.get("c") == 3

    def test_default_bound_follows_constants(self, monkeypatch):
        from constants import Constants

        monkeypatch.setattr(Constants, "PARSE_CACHE_MAX_ENTRIES", 7)
        assert ParseCache().max_entries == 7

    def test_parse_returns_cached_instance(self):
        assert NuGetVersion.parse("5.6.7-cached") is NuGetVersion.parse("5.6.7-cached")
