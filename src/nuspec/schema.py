"""Nuspec XML schema namespaces, one per manifest schema version."""

from __future__ import annotations

from .models import NuspecError

SCHEMA_VERSION_V1 = "http://schemas.microsoft.com/packaging/2010/07/nuspec.xsd"
SCHEMA_VERSION_V2 = "http://schemas.microsoft.com/packaging/2011/08/nuspec.xsd"
SCHEMA_VERSION_V3 = "http://schemas.microsoft.com/packaging/2011/10/nuspec.xsd"
SCHEMA_VERSION_V4 = "http://schemas.microsoft.com/packaging/2012/06/nuspec.xsd"
SCHEMA_VERSION_V5 = "http://schemas.microsoft.com/packaging/2013/01/nuspec.xsd"
SCHEMA_VERSION_V6 = "http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd"

# Index + 1 is the schema version.
SCHEMA_NAMESPACES = (
    SCHEMA_VERSION_V1,
    SCHEMA_VERSION_V2,
    SCHEMA_VERSION_V3,
    SCHEMA_VERSION_V4,
    SCHEMA_VERSION_V5,
    SCHEMA_VERSION_V6,
)

DEFAULT_SCHEMA_VERSION = 1
# <dependency include/exclude>, contentFiles and .xdt transforms
XDT_TRANSFORMATION_VERSION = 6
# framework folders under content/ and tools/, empty lib folders
TARGET_FRAMEWORK_SUPPORT_VERSION = 4


def get_version_from_namespace(namespace: str) -> int:
    """Schema version for ``namespace``; unknown namespaces count as version 1."""
    for index, known in enumerate(SCHEMA_NAMESPACES):
        if known == namespace:
            return index + 1
    return DEFAULT_SCHEMA_VERSION


def get_schema_namespace(version: int) -> str:
    """Namespace URI for schema ``version`` (1-6).

    Raises:
        NuspecError: for any other version.
    """
    if version <= 0 or version > len(SCHEMA_NAMESPACES):
        raise NuspecError(f"unknown schema version '{version}'")
    return SCHEMA_NAMESPACES[version - 1]


def is_known_schema(namespace: str) -> bool:
    return any(known.lower() == (namespace or "").lower() for known in SCHEMA_NAMESPACES)
