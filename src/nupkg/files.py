"""Files that go into a package, backed by disk or memory."""

from __future__ import annotations

import io
import os
from datetime import datetime, timezone
from typing import BinaryIO, Optional, Protocol, Tuple

from frameworks.framework import Framework
from frameworks.name_provider import NameProvider
from frameworks.parser import parse_framework_folder_name


class PackageFile(Protocol):
    """A file placed at ``path`` inside the package."""

    @property
    def path(self) -> str: ...

    @property
    def effective_path(self) -> str: ...

    @property
    def target_framework(self) -> Optional[Framework]: ...

    @property
    def last_write_time(self) -> datetime: ...

    @property
    def size(self) -> int: ...

    def open(self) -> BinaryIO: ...


def normalize_package_path(path: str) -> str:
    """Forward slashes, no leading ``./`` or ``/``."""
    value = path.replace("\\", "/")
    if value.startswith("./"):
        value = value[2:]
    return value.lstrip("/")


def _resolve(path: str, provider: Optional[NameProvider]) -> Tuple[Optional[Framework], str]:
    return parse_framework_folder_name(path, provider=provider)


class PhysicalPackageFile:
    """Package file whose content is read from ``source_path`` on demand.

    A directory source stands for an empty folder marker and reads as zero bytes.
    """

    def __init__(
        self, source_path: str, target_path: str, provider: Optional[NameProvider] = None
    ) -> None:
        self.source_path = source_path
        self._path = normalize_package_path(target_path)
        self._framework, self._effective_path = _resolve(self._path, provider)

    @property
    def path(self) -> str:
        return self._path

    @property
    def effective_path(self) -> str:
        return self._effective_path

    @property
    def target_framework(self) -> Optional[Framework]:
        return self._framework

    @property
    def last_write_time(self) -> datetime:
        return datetime.fromtimestamp(os.stat(self.source_path).st_mtime, tz=timezone.utc)

    @property
    def size(self) -> int:
        if os.path.isdir(self.source_path):
            return 0
        return os.path.getsize(self.source_path)

    def open(self) -> BinaryIO:
        if os.path.isdir(self.source_path):
            return io.BytesIO(b"")
        return open(self.source_path, "rb")

    def __repr__(self) -> str:
        return f"PhysicalPackageFile({self.source_path!r} -> {self._path!r})"


class InMemoryPackageFile:
    """Package file with fixed content."""

    def __init__(
        self,
        target_path: str,
        content: bytes = b"",
        last_write_time: Optional[datetime] = None,
        provider: Optional[NameProvider] = None,
    ) -> None:
        self._path = normalize_package_path(target_path)
        self._content = content
        self._last_write_time = last_write_time or datetime.now(timezone.utc)
        self._framework, self._effective_path = _resolve(self._path, provider)

    @property
    def path(self) -> str:
        return self._path

    @property
    def effective_path(self) -> str:
        return self._effective_path

    @property
    def target_framework(self) -> Optional[Framework]:
        return self._framework

    @property
    def last_write_time(self) -> datetime:
        return self._last_write_time

    @property
    def size(self) -> int:
        return len(self._content)

    def open(self) -> BinaryIO:
        return io.BytesIO(self._content)

    def __repr__(self) -> str:
        return f"InMemoryPackageFile({self._path!r}, {len(self._content)} bytes)"
