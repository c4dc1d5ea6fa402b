"""Read ``.nupkg`` archives: file listing, manifest and supported frameworks."""

from __future__ import annotations

import io
import logging
import os
import threading
import zipfile
from typing import IO, List, Optional, Union

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from frameworks.framework import Framework
from frameworks.name_provider import NameProvider
from frameworks.parser import parse_framework_folder_name
from nuspec.dependencies import PackageDependencyInfo
from nuspec.models import Nuspec
from nuspec.reader import read_nuspec

from .errors import InvalidPackageArchiveError

logger = logging.getLogger(__name__)

PackageSource = Union[bytes, str, "os.PathLike[str]", IO[bytes]]


def _load(source: PackageSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if hasattr(source, "read"):
        return source.read()  # type: ignore[union-attr]
    try:
        with open(source, "rb") as fh:  # type: ignore[arg-type]
            return fh.read()
    except OSError as exc:
        raise InvalidPackageArchiveError(f"Couldn't read package {source}: {exc}") from exc


class PackageArchiveReader:
    """Read-only view of a package archive.

    The archive is loaded into memory on construction. The manifest is parsed
    on first use and cached; concurrent callers share a single parse.
    """

    def __init__(self, source: PackageSource, provider: Optional[NameProvider] = None) -> None:
        data = _load(source)
        if not data:
            raise InvalidPackageArchiveError("package is empty")
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as exc:
            raise InvalidPackageArchiveError(f"not a valid package archive: {exc}") from exc

        self._provider = provider
        self._names = [info.filename for info in self._zip.infolist() if not info.is_dir()]
        try:
            self._nuspec_name = self._find_nuspec()
        except InvalidPackageArchiveError:
            self._zip.close()
            raise
        self._nuspec: Optional[Nuspec] = None
        self._lock = threading.Lock()

    def _find_nuspec(self) -> str:
        # Only a manifest at the archive root counts.
        for name in self._names:
            if "/" not in name and name.lower().endswith(Constants.MANIFEST_EXTENSION):
                return name
        raise InvalidPackageArchiveError("no .nuspec file found in the .nupkg archive")

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "PackageArchiveReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def nuspec(self) -> Nuspec:
        """Return the parsed manifest, reading it on the first call."""
        with self._lock:
            if self._nuspec is None:
                self._nuspec = read_nuspec(self._zip.read(self._nuspec_name))
            return self._nuspec

    def get_files(self) -> List[str]:
        return list(self._names)

    def get_files_from_dir(self, folder: str) -> List[str]:
        """Files whose path starts with ``folder/``, compared case-insensitively."""
        prefix = folder.strip("/").lower() + "/"
        return [name for name in self._names if name.lower().startswith(prefix)]

    def read_file(self, name: str) -> bytes:
        try:
            return self._zip.read(name)
        except KeyError as exc:
            raise InvalidPackageArchiveError(f"'{name}' not found in package") from exc

    def get_supported_frameworks(self) -> List[Framework]:
        """Distinct specific frameworks named by file paths and dependency groups.

        Order follows first appearance: file paths first, then the manifest's
        dependency groups.
        """
        found: List[Framework] = []
        for name in self._names:
            framework, _ = parse_framework_folder_name(name, provider=self._provider)
            if framework is not None and framework.is_specific and framework not in found:
                found.append(framework)

        for group in self.get_dependency_info().dependency_groups:
            if group.target_framework.is_specific and group.target_framework not in found:
                found.append(group.target_framework)

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved supported frameworks",
                extra=extra_context(
                    event="resolve",
                    component="nupkg",
                    action="supported_frameworks",
                    target=self._nuspec_name,
                    count=len(found),
                ),
            )
        return found

    def get_dependency_info(self) -> PackageDependencyInfo:
        return PackageDependencyInfo.from_nuspec(self.nuspec(), self._provider)
