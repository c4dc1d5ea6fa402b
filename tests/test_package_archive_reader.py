"""Tests for reading package archives."""

import io
import os
import zipfile

import pytest

from frameworks import known
from nupkg import InMemoryPackageFile, InvalidPackageArchiveError, PackageArchiveReader, PackageBuilder
from nuspec import Dependency, PackageDependencyGroup, PackageIdentity
from versioning import NuGetVersion


def _package_bytes():
    b = PackageBuilder(deterministic=True)
    b.id = "Contoso.Utils"
    b.version = NuGetVersion.parse("1.2.0")
    b.authors = ["Alice"]
    b.description = "Helpers."
    b.files.append(InMemoryPackageFile("lib/net45/Contoso.Utils.dll", b"MZ45"))
    b.files.append(InMemoryPackageFile("lib/netstandard2.0/Contoso.Utils.dll", b"MZ20"))
    b.files.append(InMemoryPackageFile("content/readme.txt", b"hello"))
    b.dependency_groups = [
        PackageDependencyGroup(known.NET45, [Dependency("Newtonsoft.Json")]),
        PackageDependencyGroup(known.NET80, []),
    ]
    buffer = io.BytesIO()
    b.save(buffer)
    return buffer.getvalue()


def _zip_bytes(entries):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def reader():
    with PackageArchiveReader(_package_bytes()) as package:
        yield package


class TestPackageArchiveReader:
    """Reading back a built package."""

    def test_nuspec(self, reader):
        meta = reader.nuspec().metadata
        assert meta.id == "Contoso.Utils"
        assert meta.version == "1.2.0"
        assert reader.nuspec() is reader.nuspec()

    def test_files(self, reader):
        files = reader.get_files()
        assert "Contoso.Utils.nuspec" in files
        assert "lib/net45/Contoso.Utils.dll" in files

    def test_files_from_dir(self, reader):
        assert reader.get_files_from_dir("LIB/") == [
            "lib/net45/Contoso.Utils.dll",
            "lib/netstandard2.0/Contoso.Utils.dll",
        ]
        assert reader.get_files_from_dir("tools") == []

    def test_read_file(self, reader):
        assert reader.read_file("lib/netstandard2.0/Contoso.Utils.dll") == b"MZ20"
        with pytest.raises(InvalidPackageArchiveError, match="'nope.txt' not found in package"):
            reader.read_file("nope.txt")

    def test_supported_frameworks(self, reader):
        """File folders come first, then dependency groups not already seen."""
        assert reader.get_supported_frameworks() == [
            known.NET45,
            known.NETSTANDARD20,
            known.NET80,
        ]

    def test_dependency_info(self, reader):
        info = reader.get_dependency_info()
        assert info.identity == PackageIdentity("Contoso.Utils", NuGetVersion(1, 2))
        assert info.dependency_groups[0].packages == [Dependency("Newtonsoft.Json")]

    def test_read_from_path(self, tmp_path):
        path = os.path.join(str(tmp_path), "Contoso.Utils.1.2.0.nupkg")
        with open(path, "wb") as f:
            f.write(_package_bytes())
        with PackageArchiveReader(path) as package:
            assert package.nuspec().metadata.id == "Contoso.Utils"

    def test_read_from_stream(self):
        with PackageArchiveReader(io.BytesIO(_package_bytes())) as package:
            assert package.nuspec().metadata.id == "Contoso.Utils"


class TestInvalidArchives:
    """Inputs that are not usable packages."""

    def test_empty(self):
        with pytest.raises(InvalidPackageArchiveError, match="package is empty"):
            PackageArchiveReader(b"")

    def test_not_a_zip(self):
        with pytest.raises(InvalidPackageArchiveError, match="not a valid package archive"):
            PackageArchiveReader(b"definitely not a zip")

    def test_no_manifest(self):
        with pytest.raises(InvalidPackageArchiveError, match="no .nuspec file found"):
            PackageArchiveReader(_zip_bytes({"lib/net45/a.dll": b"MZ"}))

    def test_nested_manifest_is_ignored(self):
        with pytest.raises(InvalidPackageArchiveError):
            PackageArchiveReader(_zip_bytes({"content/other.nuspec": b"<package />"}))

    def test_missing_path(self, tmp_path):
        with pytest.raises(InvalidPackageArchiveError, match="Couldn't read package"):
            PackageArchiveReader(os.path.join(str(tmp_path), "missing.nupkg"))

    def test_archive_closed_when_manifest_missing(self, monkeypatch):
        data = _zip_bytes({"lib/net45/a.dll": b"MZ"})
        closed = []
        original = zipfile.ZipFile.close

        def close(archive):
            closed.append(archive)
            original(archive)

        monkeypatch.setattr(zipfile.ZipFile, "close", close)
        with pytest.raises(InvalidPackageArchiveError):
            PackageArchiveReader(data)
        assert closed
        assert closed[0].fp is None
