"""Tests for config file loading and config-driven providers."""

import json
import os

import pytest

from cli_config import (
    ConfigError,
    apply_config_overrides,
    build_provider_from_config,
    load_config,
)
from constants import Constants
from frameworks import Framework, parse_framework
from frameworks import known
from versioning import NuGetVersion

CONFIG_YAML = """
frameworks:
  synonyms:
    ContosoRT: Contoso.Runtime
  short_names:
    Contoso.Runtime: contoso
  profiles:
    - {identifier: Contoso.Runtime, short: srv, profile: Server}
  equivalents:
    - [contoso1.0, net45]
settings:
  PARSE_CACHE_MAX_ENTRIES: 42
"""


def _write(tmp_path, name, text):
    path = os.path.join(str(tmp_path), name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestLoadConfig:
    """Reading and validating config files."""

    def test_yaml(self, tmp_path):
        cfg = load_config(_write(tmp_path, "tfmkit.yml", CONFIG_YAML))
        assert cfg["frameworks"]["short_names"] == {"Contoso.Runtime": "contoso"}
        assert cfg["settings"]["PARSE_CACHE_MAX_ENTRIES"] == 42

    def test_json(self, tmp_path):
        data = {"settings": {"MAX_PORTABLE_PROFILE_ARITY": 4}}
        cfg = load_config(_write(tmp_path, "tfmkit.json", json.dumps(data)))
        assert cfg == data

    def test_empty_file(self, tmp_path):
        assert load_config(_write(tmp_path, "empty.yml", "")) == {}

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(os.path.join(str(tmp_path), "missing.yml"))

    def test_no_default_file(self, monkeypatch):
        monkeypatch.setattr(Constants, "DEFAULT_CONFIG_PATHS", [])
        assert load_config() == {}

    def test_default_file(self, tmp_path, monkeypatch):
        path = _write(tmp_path, "tfmkit.yml", "settings: {PARSE_CACHE_MAX_ENTRIES: 9}\n")
        monkeypatch.setattr(Constants, "DEFAULT_CONFIG_PATHS", [path])
        assert load_config() == {"settings": {"PARSE_CACHE_MAX_ENTRIES": 9}}

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(_write(tmp_path, "list.yml", "- a\n- b\n"))

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Failed to load config"):
            load_config(_write(tmp_path, "bad.yml", "frameworks: [unclosed\n"))

    def test_schema_violation(self, tmp_path):
        path = _write(tmp_path, "bad.yml", "settings:\n  PARSE_CACHE_MAX_ENTRIES: 0\n")
        with pytest.raises(ConfigError, match="settings/PARSE_CACHE_MAX_ENTRIES"):
            load_config(path)

    def test_unknown_section(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(_write(tmp_path, "bad.yml", "registries: {}\n"))


class TestProviderFromConfig:
    """Framework mappings added by the ``frameworks`` section."""

    def test_no_section_gives_builtin_tables(self):
        provider = build_provider_from_config({})
        assert provider.get_short_identifier(".NETFramework") == "net"
        assert provider.get_identifier("contoso") is None

    def test_short_names_and_synonyms(self, tmp_path):
        provider = build_provider_from_config(
            load_config(_write(tmp_path, "tfmkit.yml", CONFIG_YAML))
        )
        assert provider.get_identifier("contoso") == "Contoso.Runtime"
        assert provider.get_identifier("ContosoRT") == "Contoso.Runtime"
        assert provider.get_profile("Contoso.Runtime", "srv") == "Server"
        assert parse_framework("contoso1.0", provider).short_folder_name(provider) == "contoso10"

    def test_equivalents(self, tmp_path):
        provider = build_provider_from_config(
            load_config(_write(tmp_path, "tfmkit.yml", CONFIG_YAML))
        )
        contoso = Framework("Contoso.Runtime", NuGetVersion(1, 0))
        assert contoso in provider.get_equivalent_frameworks(known.NET45)

    def test_invalid_equivalent(self):
        cfg = {"frameworks": {"equivalents": [["nosuchthing1.0", "net45"]]}}
        with pytest.raises(ConfigError, match="Invalid equivalent framework pair"):
            build_provider_from_config(cfg)


class TestConfigOverrides:
    """``settings`` values copied onto Constants."""

    def test_apply(self, monkeypatch):
        monkeypatch.setattr(Constants, "PARSE_CACHE_MAX_ENTRIES", Constants.PARSE_CACHE_MAX_ENTRIES)
        monkeypatch.setattr(
            Constants, "MAX_PORTABLE_PROFILE_ARITY", Constants.MAX_PORTABLE_PROFILE_ARITY
        )
        apply_config_overrides(
            {"settings": {"PARSE_CACHE_MAX_ENTRIES": 3, "MAX_PORTABLE_PROFILE_ARITY": 5}}
        )
        assert Constants.PARSE_CACHE_MAX_ENTRIES == 3
        assert Constants.MAX_PORTABLE_PROFILE_ARITY == 5

    def test_no_settings(self):
        before = Constants.PARSE_CACHE_MAX_ENTRIES
        apply_config_overrides({})
        assert Constants.PARSE_CACHE_MAX_ENTRIES == before
