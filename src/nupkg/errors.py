"""Exceptions raised while reading or building package archives."""

from typing import List, Optional


class PackageError(ValueError):
    """Base error for package archive operations."""


class PackageValidationError(PackageError):
    """The package builder found one or more problems; see ``messages``."""

    def __init__(self, messages: Optional[List[str]] = None) -> None:
        self.messages = list(messages or [])
        super().__init__("\n".join(self.messages) or "package validation failed")


class InvalidPackageArchiveError(PackageError):
    """The input is not a readable ``.nupkg`` archive."""
