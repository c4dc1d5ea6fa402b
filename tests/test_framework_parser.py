"""Tests for target framework parsing."""

import pytest

from frameworks import (
    ANY,
    Framework,
    FrameworkError,
    FrameworkName,
    InvalidPortableFrameworksError,
    InvalidProfileCharactersError,
    InvalidVersionFragmentError,
    MalformedTokenError,
    UnknownIdentifierError,
    parse_framework,
    parse_framework_folder_name,
    parse_framework_name,
    parse_framework_strict,
)
from frameworks import known
from frameworks.constants import FrameworkIdentifiers
from versioning import EMPTY_VERSION, NuGetVersion


class TestParseFolderName:
    """Short folder names such as net45 or net8.0-windows10.0."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("net45", known.NET45),
            ("NET45", known.NET45),
            ("net4.5", known.NET45),
            ("net403", known.NET403),
            ("net40", known.NET4),
            ("netstandard2.0", known.NETSTANDARD20),
            ("netstandard20", known.NETSTANDARD20),
            ("netcoreapp3.1", known.NETCOREAPP31),
            ("net8.0", known.NET80),
            ("netcoreapp5.0", known.NET50),
            ("win8", known.WIN8),
            ("wpa81", known.WPA81),
        ],
    )
    def test_known_folder_names(self, token, expected):
        """Common tokens resolve to the well-known framework values."""
        assert parse_framework(token) == expected

    def test_net5_era_platform(self):
        """net5+ folder names carry a platform and platform version."""
        fw = parse_framework("net8.0-windows10.0")
        assert fw.identifier == FrameworkIdentifiers.NET_CORE_APP
        assert fw.version == NuGetVersion(8, 0)
        assert fw.platform == "windows"
        assert fw.platform_version == NuGetVersion(10, 0)
        assert fw.profile == ""

    def test_net5_era_platform_without_version(self):
        """A platform without digits keeps an empty platform version."""
        fw = parse_framework("net5.0-android")
        assert fw.platform == "android"
        assert fw.platform_version == EMPTY_VERSION

    def test_platform_dropped_before_net5_era(self):
        """Only .NETCoreApp 5.0 and later keep a platform."""
        fw = Framework(
            FrameworkIdentifiers.NET,
            NuGetVersion(8, 0),
            platform="windows",
            platform_version=NuGetVersion(10, 0),
        )
        assert fw.platform == ""
        assert fw.platform_version == EMPTY_VERSION
        assert not fw.has_platform

    def test_net5_era_construction_keeps_platform(self):
        fw = Framework(
            FrameworkIdentifiers.NET_CORE_APP,
            NuGetVersion(8, 0),
            profile="Client",
            platform="windows",
            platform_version=NuGetVersion(10, 0),
        )
        assert fw.platform == "windows"
        assert fw.platform_version == NuGetVersion(10, 0)
        assert fw.profile == ""
        assert fw == parse_framework("net8.0-windows10.0")

    def test_profile_short_name_is_expanded(self):
        """net45-client maps the short profile to its long name."""
        fw = parse_framework("net45-client")
        assert fw.identifier == FrameworkIdentifiers.NET
        assert fw.profile == "Client"

    def test_full_profile_is_empty(self):
        """The Full profile is the framework without a profile."""
        assert parse_framework("net45-full") == known.NET45

    def test_portable_framework_list(self):
        """portable-net45+win8 resolves to its profile number."""
        fw = parse_framework("portable-net45+win8")
        assert fw.identifier == FrameworkIdentifiers.PORTABLE
        assert fw.profile == "Profile7"
        assert fw.is_pcl

    def test_portable_profile_number(self):
        """portable-ProfileNNN keeps the profile as given."""
        fw = parse_framework("portable-Profile259")
        assert fw.profile == "Profile259"

    def test_portable_member_with_profile_rejected(self):
        """A portable member cannot carry its own profile."""
        with pytest.raises(InvalidPortableFrameworksError):
            parse_framework_strict("portable-net45-client+win8")

    def test_special_names(self):
        """any, agnostic and unsupported map to the special frameworks."""
        assert parse_framework("any").is_any
        assert parse_framework("Agnostic").is_agnostic
        assert parse_framework("unsupported").is_unsupported

    def test_deprecated_numeric_tokens(self):
        """Bare version numbers are read as .NET Framework versions."""
        assert parse_framework("45") == known.NET45
        assert parse_framework("3.5") == known.NET35

    def test_percent_escaped_token(self):
        """URL-escaped tokens are unescaped before parsing."""
        assert parse_framework("net45%2Dclient").profile == "Client"


class TestParseErrors:
    """Strict parsing raises typed errors; lenient parsing returns Unsupported."""

    def test_unknown_identifier_strict(self):
        """An unknown short identifier raises UnknownIdentifierError."""
        with pytest.raises(UnknownIdentifierError) as excinfo:
            parse_framework_strict("foo45")
        assert excinfo.value.token == "foo45"

    def test_unknown_identifier_lenient(self):
        """parse_framework folds failures into Unsupported."""
        assert parse_framework("foo45").is_unsupported

    def test_invalid_profile_characters(self):
        """Profiles only accept letters, digits, '.', '+' and '-'."""
        with pytest.raises(InvalidProfileCharactersError):
            parse_framework_strict("net45-cl!ent")

    def test_malformed_token(self):
        """A token that starts with a digit and is not a known version is malformed."""
        with pytest.raises(MalformedTokenError):
            parse_framework_strict("9x")

    def test_empty_profile(self):
        with pytest.raises(MalformedTokenError):
            parse_framework_strict("net45-")

    def test_errors_share_base_class(self):
        """Every parse error is a FrameworkError and a ValueError."""
        with pytest.raises(FrameworkError):
            parse_framework_strict("foo45")
        with pytest.raises(ValueError):
            parse_framework_strict("foo45")

    def test_unsupported_is_not_equal_to_itself(self):
        """Unsupported frameworks never compare equal."""
        assert parse_framework("foo45") != parse_framework("foo45")


class TestParseFrameworkName:
    """Long names such as .NETFramework,Version=v4.5."""

    def test_long_name(self):
        """Identifier and version are read from the components."""
        assert parse_framework(".NETFramework,Version=v4.5") == known.NET45

    def test_long_name_with_profile(self):
        """The Profile component is kept."""
        fw = parse_framework(".NETFramework,Version=v4.5,Profile=Client")
        assert fw.profile == "Client"
        assert fw.version == NuGetVersion(4, 5)

    def test_synonym_identifier_and_bare_major(self):
        """Synonyms resolve and a bare major version gains a minor part."""
        assert parse_framework_name("NETFramework,Version=4") == known.NET4

    def test_net5_era_long_name(self):
        """.NETCoreApp 8.0 in long form equals net8.0."""
        assert parse_framework(".NETCoreApp,Version=v8.0") == known.NET80

    def test_unknown_identifier_kept(self):
        """Identifiers missing from the tables are kept as written."""
        fw = parse_framework_name("Contoso.Runtime,Version=v2.0")
        assert fw.identifier == "Contoso.Runtime"
        assert fw.version == NuGetVersion(2, 0)

    def test_invalid_version(self):
        """A version that does not parse raises InvalidVersionFragmentError."""
        with pytest.raises(InvalidVersionFragmentError):
            parse_framework_strict(".NETFramework,Version=vabc")

    def test_portable_profile_with_hyphen(self):
        """Portable profiles in long form may not contain a hyphen."""
        with pytest.raises(InvalidPortableFrameworksError):
            parse_framework_strict(".NETPortable,Version=v0.0,Profile=net45-win8")

    @pytest.mark.parametrize(
        "text,message",
        [
            (".NETFramework,Culture=en", "invalid key"),
            (".NETFramework,Profile=Client", "must contain a version"),
            (".NETFramework,Version=v4.5,", "invalid component"),
            (".NETFramework,Version=v4.5,Profile=Client,Extra=1", "2 or 3 components"),
        ],
    )
    def test_structural_errors(self, text, message):
        """Long names follow the FrameworkName component rules."""
        with pytest.raises(MalformedTokenError, match=message):
            parse_framework_strict(text)
        assert parse_framework(text).is_unsupported

    def test_special_first_component(self):
        """Any/Agnostic/Unsupported short-circuit the remaining components."""
        assert parse_framework_strict("Any,Version=v0.0").is_any
        assert parse_framework_strict("Agnostic,Whatever").is_agnostic


class TestFrameworkNameParse:
    """The strict three-part long name."""

    def test_parse_components(self):
        """Whitespace around components is ignored."""
        name = FrameworkName.parse(".NETFramework, Version=v4.5, Profile=Client")
        assert name.identifier == ".NETFramework"
        assert name.version == NuGetVersion(4, 5)
        assert name.profile == "Client"

    def test_bare_major_gains_minor(self):
        assert FrameworkName.parse("NETFramework,Version=4").version == NuGetVersion(4, 0)

    def test_requires_version(self):
        """A single component is rejected."""
        with pytest.raises(MalformedTokenError, match="2 or 3 components"):
            FrameworkName.parse(".NETFramework")

    def test_rejects_unknown_key(self):
        """Only Version and Profile keys are accepted."""
        with pytest.raises(MalformedTokenError, match="invalid key"):
            FrameworkName.parse(".NETFramework,Culture=en")

    def test_rejects_missing_equals(self):
        """Components must be key=value pairs."""
        with pytest.raises(MalformedTokenError, match="invalid component"):
            FrameworkName.parse(".NETFramework,v4.5")


class TestParseFrameworkFolderName:
    """Framework segments inside package paths."""

    def test_framework_folder(self):
        """lib/net45/foo.dll resolves the net45 segment."""
        assert parse_framework_folder_name("lib/net45/foo.dll") == (known.NET45, "foo.dll")

    def test_nested_path_is_kept(self):
        """Everything below the framework folder is the effective path."""
        fw, rest = parse_framework_folder_name("lib/net45/sub/foo.dll")
        assert fw == known.NET45
        assert rest == "sub/foo.dll"

    def test_backslashes_are_normalized(self):
        """Windows separators are accepted."""
        assert parse_framework_folder_name("lib\\net45\\foo.dll") == (known.NET45, "foo.dll")

    def test_file_directly_under_root(self):
        """A file without a framework folder applies to any framework."""
        fw, rest = parse_framework_folder_name("lib/foo.dll")
        assert fw is ANY
        assert rest == "foo.dll"

    def test_file_directly_under_root_strict(self):
        """Strict mode requires a framework folder below the root."""
        with pytest.raises(FrameworkError, match="no target framework folder"):
            parse_framework_folder_name("lib/foo.dll", strict=True)

    def test_unknown_root(self):
        """Paths outside the known roots have no framework."""
        assert parse_framework_folder_name("other/net45/foo.dll") == (None, "other/net45/foo.dll")

    def test_unknown_root_strict(self):
        """Strict mode rejects paths outside the known roots."""
        with pytest.raises(MalformedTokenError):
            parse_framework_folder_name("other/net45/foo.dll", strict=True)

    def test_non_framework_folder(self):
        """A folder that is not a framework stays part of the effective path."""
        fw, rest = parse_framework_folder_name("lib/notaframework/foo.dll")
        assert fw is ANY
        assert rest == "notaframework/foo.dll"

    def test_non_framework_folder_strict(self):
        """Strict mode requires a specific framework segment."""
        with pytest.raises(FrameworkError):
            parse_framework_folder_name("lib/notaframework/foo.dll", strict=True)
