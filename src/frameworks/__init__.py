"""Target framework moniker resolution: parsing, formatting and equivalence."""

from .errors import (
    FrameworkError,
    InvalidPortableFrameworksError,
    InvalidProfileCharactersError,
    InvalidVersionFragmentError,
    MalformedTokenError,
    NoShortNameMappingError,
    UnknownIdentifierError,
    UnresolvablePortableProfileError,
)
from .formatter import get_dotnet_framework_name, get_short_folder_name
from .framework import AGNOSTIC, ANY, UNSUPPORTED, Framework, FrameworkKind
from .mappings import (
    FrameworkMappings,
    PortableFrameworkMappings,
    default_framework_mappings,
    default_portable_mappings,
)
from .name_provider import NameProvider, get_default_provider
from .parser import (
    FrameworkName,
    parse_framework,
    parse_framework_folder_name,
    parse_framework_name,
    parse_framework_strict,
)

__all__ = [
    "AGNOSTIC",
    "ANY",
    "UNSUPPORTED",
    "Framework",
    "FrameworkError",
    "FrameworkKind",
    "FrameworkMappings",
    "FrameworkName",
    "InvalidPortableFrameworksError",
    "InvalidProfileCharactersError",
    "InvalidVersionFragmentError",
    "MalformedTokenError",
    "NameProvider",
    "NoShortNameMappingError",
    "PortableFrameworkMappings",
    "UnknownIdentifierError",
    "UnresolvablePortableProfileError",
    "default_framework_mappings",
    "default_portable_mappings",
    "get_default_provider",
    "get_dotnet_framework_name",
    "get_short_folder_name",
    "parse_framework",
    "parse_framework_folder_name",
    "parse_framework_name",
    "parse_framework_strict",
]
