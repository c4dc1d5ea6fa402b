"""Configuration file loading for the CLI.

A config file (YAML, or JSON by extension) may add framework mappings on top
of the built-in tables and override a few runtime tunables:

.. code-block:: yaml

    frameworks:
      synonyms:
        NETFx: .NETFramework
      short_names:
        Contoso.Runtime: contoso
      profiles:
        - {identifier: .NETFramework, short: Srv, profile: Server}
      equivalents:
        - [contoso1.0, net45]
    settings:
      PARSE_CACHE_MAX_ENTRIES: 1000
      MAX_PORTABLE_PROFILE_ARITY: 6
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml
from jsonschema import Draft7Validator

from constants import Constants
from frameworks.errors import FrameworkError
from frameworks.mappings import (
    FrameworkMappings,
    default_framework_mappings,
    default_portable_mappings,
)
from frameworks.name_provider import NameProvider
from frameworks.parser import parse_framework_strict

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a config file cannot be read or fails validation."""


CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "frameworks": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "synonyms": {
                    "type": "object",
                    "additionalProperties": {"type": "string", "minLength": 1},
                },
                "short_names": {
                    "type": "object",
                    "additionalProperties": {"type": "string", "minLength": 1},
                },
                "profiles": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "additionalProperties": False,
                        "required": ["identifier", "short", "profile"],
                        "properties": {
                            "identifier": {"type": "string", "minLength": 1},
                            "short": {"type": "string", "minLength": 1},
                            "profile": {"type": "string"},
                        },
                    },
                },
                "equivalents": {
                    "type": "array",
                    "items": {
                        "type": "array",
                        "minItems": 2,
                        "maxItems": 2,
                        "items": {"type": "string", "minLength": 1},
                    },
                },
            },
        },
        "settings": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "PARSE_CACHE_MAX_ENTRIES": {"type": "integer", "minimum": 1},
                "MAX_PORTABLE_PROFILE_ARITY": {"type": "integer", "minimum": 1},
            },
        },
    },
}


def _find_default_config() -> Optional[str]:
    for candidate in Constants.DEFAULT_CONFIG_PATHS:
        path = os.path.expanduser(candidate)
        if os.path.isfile(path):
            return path
    return None


def validate_config(cfg: Dict[str, Any]) -> None:
    """Validate a loaded config dict and raise on the first error.

    Raises:
        ConfigError: when ``cfg`` does not match ``CONFIG_SCHEMA``.
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    errs = sorted(validator.iter_errors(cfg), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ConfigError(f"Invalid config at '{path}': {first.message}")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load and validate a config file.

    Args:
        path: Explicit file path. When omitted the first existing default
            location is used; no file at all yields an empty config.

    Returns:
        dict: The validated configuration.

    Raises:
        ConfigError: when the file is missing, unreadable or invalid.
    """
    if path is None:
        path = _find_default_config()
        if path is None:
            return {}
    elif not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    validate_config(data)
    logger.debug("Loaded config from %s", path)
    return data


def _mappings_from_config(section: Dict[str, Any]) -> FrameworkMappings:
    """Identifier and profile entries of the ``frameworks`` section."""
    mappings = FrameworkMappings()
    for synonym, identifier in (section.get("synonyms") or {}).items():
        mappings.identifier_synonyms.append((synonym, identifier))
    for identifier, short in (section.get("short_names") or {}).items():
        mappings.identifier_short_names.append((identifier, short))
    for entry in section.get("profiles") or []:
        mappings.profile_short_names.append(
            (entry["identifier"], entry["short"], entry["profile"])
        )
    return mappings


def _equivalents_from_config(section: Dict[str, Any], provider: NameProvider):
    pairs = []
    for left, right in section.get("equivalents") or []:
        try:
            pair = (
                parse_framework_strict(left, provider),
                parse_framework_strict(right, provider),
            )
        except FrameworkError as exc:
            raise ConfigError(f"Invalid equivalent framework pair [{left}, {right}]: {exc}") from exc
        pairs.append(pair)
    return pairs


def build_provider_from_config(cfg: Dict[str, Any]) -> NameProvider:
    """Name provider over the built-in tables plus the ``frameworks`` section.

    Built-in entries win over config entries with the same key.
    """
    mappings = [default_framework_mappings()]
    section = cfg.get("frameworks")
    if section:
        extra = _mappings_from_config(section)
        # equivalents may use the identifiers declared by this same section
        lookup = NameProvider(mappings + [extra], [default_portable_mappings()])
        extra.equivalent_frameworks.extend(_equivalents_from_config(section, lookup))
        mappings.append(extra)
    return NameProvider(mappings, [default_portable_mappings()])


def apply_config_overrides(cfg: Dict[str, Any]) -> None:
    """Copy ``settings`` values onto ``Constants``."""
    for key, value in (cfg.get("settings") or {}).items():
        setattr(Constants, key, value)
        logger.debug("Config override %s=%s", key, value)
