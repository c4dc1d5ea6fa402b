"""Tests for nuspec reading, writing and dependency resolution."""

import os
import tempfile
import xml.etree.ElementTree as ET

import pytest

from frameworks import ANY
from frameworks import known
from nuspec import (
    Dependency,
    DependencyGroup,
    FrameworkSpecificGroup,
    LicenseMetadata,
    LicenseType,
    ManifestFile,
    Metadata,
    Nuspec,
    NuspecError,
    PackageDependencyInfo,
    PackageIdentity,
    PackageType,
    read_nuspec,
    write_nuspec,
)
from nuspec.schema import (
    SCHEMA_VERSION_V1,
    SCHEMA_VERSION_V6,
    get_schema_namespace,
    get_version_from_namespace,
    is_known_schema,
)
from versioning import NuGetVersion, VersionRange

SAMPLE_NUSPEC = b"""<?xml version="1.0" encoding="utf-8"?>
<package xmlns="http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd">
  <metadata minClientVersion="3.3">
    <id>Contoso.Utils</id>
    <version>1.2.3-beta</version>
    <title>Contoso Utilities</title>
    <authors>Alice, Bob</authors>
    <owners>Contoso</owners>
    <requireLicenseAcceptance>false</requireLicenseAcceptance>
    <license type="expression">MIT</license>
    <licenseUrl>https://licenses.nuget.org/MIT</licenseUrl>
    <projectUrl>https://example.com/utils</projectUrl>
    <description>Helpers for Contoso apps.</description>
    <tags>utils helpers</tags>
    <repository type="git" url="https://example.com/utils.git" commit="abc123" />
    <packageTypes>
      <packageType name="Dependency" />
    </packageTypes>
    <dependencies>
      <group targetFramework="net45">
        <dependency id="Newtonsoft.Json" version="[12.0,14.0)" />
      </group>
      <group targetFramework="netstandard2.0">
        <dependency id="System.Memory" version="4.5.4" exclude="Build,Analyzers" />
      </group>
    </dependencies>
    <references>
      <reference file="Contoso.Utils.dll" />
    </references>
    <frameworkAssemblies>
      <frameworkAssembly assemblyName="System.Net.Http" targetFramework="net45" />
    </frameworkAssemblies>
    <contentFiles>
      <files include="any/any/readme.txt" buildAction="None" copyToOutput="true" />
    </contentFiles>
  </metadata>
  <files>
    <file src="bin/Release/*.dll" target="lib/net45" exclude="**/*.pdb" />
  </files>
</package>
"""


@pytest.fixture
def sample():
    return read_nuspec(SAMPLE_NUSPEC)


def _strip(tag):
    return tag.split("}", 1)[-1]


class TestReadNuspec:
    """Parsing nuspec documents."""

    def test_metadata(self, sample):
        meta = sample.metadata
        assert sample.namespace == SCHEMA_VERSION_V6
        assert meta.id == "Contoso.Utils"
        assert meta.version == "1.2.3-beta"
        assert meta.authors == "Alice, Bob"
        assert meta.min_client_version == "3.3"
        assert meta.tags == "utils helpers"
        assert not meta.require_license_acceptance
        assert meta.emit_require_license_acceptance

    def test_license_and_repository(self, sample):
        meta = sample.metadata
        assert meta.license == LicenseMetadata(LicenseType.EXPRESSION, "MIT")
        assert meta.license.has_default_version
        assert meta.repository.type == "git"
        assert meta.repository.commit == "abc123"
        assert meta.package_types == [PackageType("dependency")]

    def test_dependency_groups(self, sample):
        groups = sample.metadata.dependency_groups
        assert [g.target_framework for g in groups] == ["net45", "netstandard2.0"]
        json_dep = groups[0].dependencies[0]
        assert json_dep.id == "Newtonsoft.Json"
        assert json_dep.version == VersionRange.parse("[12.0,14.0)")
        memory_dep = groups[1].dependencies[0]
        assert memory_dep.exclude == ["Build", "Analyzers"]
        assert memory_dep.has_include_exclude
        assert sample.metadata.dependencies == []

    def test_references_assemblies_and_content(self, sample):
        meta = sample.metadata
        assert meta.references == ["Contoso.Utils.dll"]
        assert meta.framework_assemblies[0].assembly_name == "System.Net.Http"
        assert meta.framework_assemblies[0].target_framework == "net45"
        assert meta.content_files[0].include == "any/any/readme.txt"
        assert meta.content_files[0].copy_to_output == "true"

    def test_files_section(self, sample):
        assert sample.files == [ManifestFile("bin/Release/*.dll", "lib/net45", "**/*.pdb")]

    def test_missing_require_license_acceptance(self):
        nuspec = read_nuspec(
            b"<package><metadata><id>A</id><version>1.0</version></metadata></package>"
        )
        assert nuspec.namespace == ""
        assert not nuspec.metadata.emit_require_license_acceptance

    def test_read_from_path(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "Contoso.Utils.nuspec")
            with open(path, "wb") as f:
                f.write(SAMPLE_NUSPEC)
            assert read_nuspec(path).metadata.id == "Contoso.Utils"

    @pytest.mark.parametrize(
        "document,message",
        [
            (b"<package><metadata>", "Couldn't parse"),
            (b"<other />", "unexpected nuspec root"),
            (b"<package />", "missing the required <metadata>"),
            (
                b"<package><metadata><dependencies><dependency version='1.0'/>"
                b"</dependencies></metadata></package>",
                "missing the required 'id'",
            ),
            (
                b"<package><metadata><dependencies><dependency id='A' version='[abc'/>"
                b"</dependencies></metadata></package>",
                "invalid version range",
            ),
            (
                b"<package><metadata><license type='url'>x</license></metadata></package>",
                "unsupported license type",
            ),
        ],
    )
    def test_invalid_documents(self, document, message):
        with pytest.raises(NuspecError, match=message):
            read_nuspec(document)

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(NuspecError, match="Couldn't read nuspec file"):
                read_nuspec(os.path.join(tmpdir, "missing.nuspec"))


class TestWriteNuspec:
    """Serializing manifests back to XML."""

    def test_round_trip(self, sample):
        assert read_nuspec(write_nuspec(sample)) == sample

    def test_declaration_and_namespace(self, sample):
        data = write_nuspec(sample, SCHEMA_VERSION_V1)
        assert data.startswith(b"<?xml")
        root = ET.fromstring(data)
        assert root.tag == "{%s}package" % SCHEMA_VERSION_V1

    def test_dependency_version_uses_short_form(self, sample):
        root = ET.fromstring(write_nuspec(sample))
        versions = [
            el.get("version") for el in root.iter() if _strip(el.tag) == "dependency"
        ]
        assert versions == ["[12.0.0, 14.0.0)", "4.5.4"]

    def test_license_url_follows_license(self):
        meta = Metadata(
            id="A",
            version="1.0.0",
            license=LicenseMetadata(LicenseType.FILE, "LICENSE.txt"),
        )
        root = ET.fromstring(write_nuspec(Nuspec(metadata=meta)))
        texts = {_strip(el.tag): el.text for el in root.iter()}
        assert texts["license"] == "LICENSE.txt"
        assert texts["licenseUrl"] == "https://aka.ms/deprecateLicenseUrl"

    def test_symbols_package_omits_authors(self):
        meta = Metadata(
            id="A",
            version="1.0.0",
            authors="Alice",
            package_types=[PackageType("SymbolsPackage")],
        )
        root = ET.fromstring(write_nuspec(Nuspec(metadata=meta)))
        tags = {_strip(el.tag) for el in root.iter()}
        assert "authors" not in tags
        assert "requireLicenseAcceptance" not in tags

    def test_ungrouped_dependencies_next_to_groups(self):
        meta = Metadata(id="A", version="1.0.0")
        meta.dependencies = [Dependency("B")]
        meta.dependency_groups = [
            DependencyGroup("net45", [Dependency("C")])
        ]
        root = ET.fromstring(write_nuspec(Nuspec(metadata=meta)))
        groups = [el for el in root.iter() if _strip(el.tag) == "group"]
        assert groups[0].get("targetFramework") is None
        assert groups[1].get("targetFramework") == "net45"


class TestLicense:
    """License metadata URLs."""

    def test_expression_url_is_escaped(self):
        lic = LicenseMetadata(LicenseType.EXPRESSION, "MIT OR Apache-2.0")
        assert lic.license_url == "https://licenses.nuget.org/MIT%20OR%20Apache-2.0"

    def test_non_default_version(self):
        lic = LicenseMetadata(LicenseType.EXPRESSION, "MIT", NuGetVersion(2, 0))
        assert not lic.has_default_version


class TestSchema:
    """Schema namespaces by version."""

    def test_version_from_namespace(self):
        assert get_version_from_namespace(SCHEMA_VERSION_V6) == 6
        assert get_version_from_namespace("urn:unknown") == 1

    def test_namespace_from_version(self):
        assert get_schema_namespace(1) == SCHEMA_VERSION_V1
        with pytest.raises(NuspecError):
            get_schema_namespace(7)

    def test_is_known_schema(self):
        assert is_known_schema(SCHEMA_VERSION_V6.upper())
        assert not is_known_schema("")


class TestManifestFile:
    """Validation of <file> entries."""

    def test_valid_entry(self):
        assert ManifestFile("bin/*.dll", "lib/net45").validate() == []

    def test_missing_source(self):
        assert ManifestFile("").validate() == ["Missing required metadata: Source"]

    def test_invalid_target(self):
        errors = ManifestFile("a.dll", "lib/<net45>").validate()
        assert len(errors) == 1
        assert errors[0].startswith("Target contains invalid characters")


class TestDependencyInfo:
    """Framework-resolved dependency groups."""

    def test_groups_are_resolved(self, sample):
        info = PackageDependencyInfo.from_nuspec(sample)
        assert info.identity == PackageIdentity("Contoso.Utils", NuGetVersion.parse("1.2.3-beta"))
        assert [g.target_framework for g in info.dependency_groups] == [
            known.NET45,
            known.NETSTANDARD20,
        ]
        assert info.dependency_groups[1].has_include_exclude
        assert info.framework_reference_groups == [
            FrameworkSpecificGroup(known.NET45, ["System.Net.Http"])
        ]

    def test_ungrouped_dependencies_apply_to_any(self):
        meta = Metadata(id="A", version="1.0", dependencies=[Dependency("B")])
        info = PackageDependencyInfo.from_nuspec(Nuspec(metadata=meta))
        assert len(info.dependency_groups) == 1
        assert info.dependency_groups[0].target_framework is ANY

    def test_invalid_package_version(self):
        meta = Metadata(id="A", version="not-a-version")
        with pytest.raises(NuspecError, match="invalid version"):
            PackageDependencyInfo.from_nuspec(Nuspec(metadata=meta))

    def test_identity_str(self):
        assert str(PackageIdentity("A", NuGetVersion(1))) == "A 1.0.0"
        assert str(PackageIdentity("A")) == "A"

    def test_empty_folder_marker(self):
        group = FrameworkSpecificGroup.from_items(ANY, ["a.dll", "lib/net45/_._"])
        assert group.items == ["a.dll"]
        assert group.has_empty_folder
