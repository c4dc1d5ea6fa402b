"""License metadata carried by a nuspec ``<license>`` element."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote

from constants import Constants
from versioning.version import NuGetVersion

# Version of the license expression grammar assumed when none is declared.
LICENSE_EMPTY_VERSION = NuGetVersion(1, 0, 0)


class LicenseType(Enum):
    """Whether the license points to a file in the package or is an SPDX expression."""
    FILE = "file"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class LicenseMetadata:
    """A package license: a file path or an expression such as ``MIT OR Apache-2.0``."""
    type: LicenseType
    license: str
    version: NuGetVersion = field(default=LICENSE_EMPTY_VERSION)

    @property
    def license_url(self) -> str:
        """URL written to ``<licenseUrl>`` for clients that predate ``<license>``."""
        if self.type == LicenseType.FILE:
            return Constants.LICENSE_DEPRECATION_URL
        return Constants.LICENSE_SERVICE_URL + quote(self.license, safe="()+")

    @property
    def has_default_version(self) -> bool:
        return self.version == LICENSE_EMPTY_VERSION
