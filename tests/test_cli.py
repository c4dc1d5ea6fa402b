"""Tests for the tfmkit command line."""

import io
import json
import logging
import os
from unittest.mock import patch

import pytest

from constants import Constants, ExitCodes
from frameworks import known
from nupkg import InMemoryPackageFile, PackageArchiveReader, PackageBuilder
from nuspec import Dependency, PackageDependencyGroup
from tfmkit import main
from versioning import NuGetVersion

NUSPEC = """<?xml version="1.0" encoding="utf-8"?>
<package>
  <metadata>
    <id>Contoso.Tools</id>
    <version>0.4.0</version>
    <authors>Alice</authors>
    <description>{description}</description>
  </metadata>
  <files>
    <file src="bin/*.dll" target="lib/net45" />
  </files>
</package>
"""


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch):
    """Keep environment, config lookup and root handlers local to each test."""
    monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")
    # set first so the variable is removed again on undo
    monkeypatch.setenv(Constants.ENV_LOG_FILE, "")
    monkeypatch.delenv(Constants.ENV_LOG_FILE)
    monkeypatch.setattr(Constants, "DEFAULT_CONFIG_PATHS", [])
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _run(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code, capsys.readouterr().out


def _json(out):
    return json.loads(out)


def _write_project(tmp_path, description="A tool."):
    base = str(tmp_path)
    os.makedirs(os.path.join(base, "bin"))
    with open(os.path.join(base, "bin", "Contoso.Tools.dll"), "wb") as f:
        f.write(b"MZ")
    nuspec = os.path.join(base, "Contoso.Tools.nuspec")
    with open(nuspec, "w", encoding="utf-8") as f:
        f.write(NUSPEC.format(description=description))
    return nuspec


class TestFrameworkCommand:
    """``tfmkit framework``."""

    def test_describe(self, capsys):
        code, out = _run(["framework", "net45", "netstandard2.0"], capsys)
        assert code == ExitCodes.SUCCESS.value
        results = _json(out)
        assert [r["token"] for r in results] == ["net45", "netstandard2.0"]
        assert results[0]["identifier"] == ".NETFramework"
        assert results[0]["short_folder_name"] == "net45"
        assert results[0]["full_moniker"] == ".NETFramework,Version=v4.5"
        assert results[1]["short_folder_name"] == "netstandard2.0"

    def test_unknown_token_is_unsupported(self, capsys):
        code, out = _run(["framework", "bogus"], capsys)
        assert code == ExitCodes.SUCCESS.value
        result = _json(out)[0]
        assert not result["is_specific"]
        assert result["short_folder_name"] is None

    def test_strict_rejects_unknown_token(self, capsys):
        code, out = _run(["framework", "--strict", "bogus"], capsys)
        assert code == ExitCodes.INVALID_INPUT.value
        assert out == ""


class TestProfileCommand:
    """``tfmkit profile``."""

    def test_known_profile(self, capsys):
        code, out = _run(["profile", "net45", "win8"], capsys)
        assert code == ExitCodes.SUCCESS.value
        assert _json(out) == {
            "frameworks": ["net45", "win8"],
            "profile": "Profile7",
            "profile_number": 7,
        }

    def test_no_profile(self, capsys):
        code, out = _run(["profile", "net8.0"], capsys)
        assert code == ExitCodes.SUCCESS.value
        assert _json(out)["profile"] is None

    def test_invalid_token(self, capsys):
        code, _ = _run(["profile", "net45", "bogus"], capsys)
        assert code == ExitCodes.INVALID_INPUT.value


class TestRangeCommand:
    """``tfmkit range``."""

    def test_range(self, capsys):
        code, out = _run(
            ["range", "[1.0,2.0)", "--version", "1.5", "--version", "2.0", "--version", "1.1"],
            capsys,
        )
        assert code == ExitCodes.SUCCESS.value
        result = _json(out)
        assert result["formatted"] == "[1.0.0, 2.0.0)"
        assert result["pretty"] == "(>= 1.0.0 && < 2.0.0)"
        assert result["satisfies"] == {"1.5.0": True, "2.0.0": False, "1.1.0": True}
        assert result["best_match"] == "1.1.0"

    def test_format_option(self, capsys):
        code, out = _run(["range", "1.0", "--format", "P"], capsys)
        assert code == ExitCodes.SUCCESS.value
        assert _json(out)["formatted"] == "(>= 1.0.0)"
        assert _json(out)["best_match"] is None

    def test_invalid_range(self, capsys):
        code, _ = _run(["range", "(1.0)"], capsys)
        assert code == ExitCodes.INVALID_INPUT.value

    def test_invalid_version(self, capsys):
        code, _ = _run(["range", "1.0", "--version", "one"], capsys)
        assert code == ExitCodes.INVALID_INPUT.value


class TestInspectCommand:
    """``tfmkit inspect``."""

    def test_inspect(self, tmp_path, capsys):
        b = PackageBuilder()
        b.id = "Contoso.Utils"
        b.version = NuGetVersion(1, 2)
        b.authors = ["Alice"]
        b.description = "Helpers."
        b.files.append(InMemoryPackageFile("lib/net45/Contoso.Utils.dll", b"MZ"))
        b.dependency_groups = [
            PackageDependencyGroup(known.NET45, [Dependency("Newtonsoft.Json")])
        ]
        path = os.path.join(str(tmp_path), "Contoso.Utils.1.2.0.nupkg")
        buffer = io.BytesIO()
        b.save(buffer)
        with open(path, "wb") as f:
            f.write(buffer.getvalue())

        code, out = _run(["inspect", path], capsys)
        assert code == ExitCodes.SUCCESS.value
        result = _json(out)
        assert result["id"] == "Contoso.Utils"
        assert result["version"] == "1.2.0"
        assert result["supported_frameworks"] == ["net45"]
        assert result["dependency_groups"] == [
            {
                "target_framework": ".NETFramework,Version=v4.5",
                "dependencies": [{"id": "Newtonsoft.Json", "range": None}],
            }
        ]
        assert "lib/net45/Contoso.Utils.dll" in result["files"]

    def test_missing_package(self, tmp_path, capsys):
        code, _ = _run(["inspect", os.path.join(str(tmp_path), "none.nupkg")], capsys)
        assert code == ExitCodes.FILE_ERROR.value


class TestPackCommand:
    """``tfmkit pack``."""

    def test_pack(self, tmp_path, capsys):
        nuspec = _write_project(tmp_path)
        output = os.path.join(str(tmp_path), "out.nupkg")
        code, out = _run(["pack", nuspec, "--output", output, "--deterministic"], capsys)
        assert code == ExitCodes.SUCCESS.value
        assert _json(out) == {"package": output, "files": 1}
        with PackageArchiveReader(output) as reader:
            assert reader.nuspec().metadata.id == "Contoso.Tools"
            assert reader.read_file("lib/net45/Contoso.Tools.dll") == b"MZ"

    def test_deterministic_packs_match(self, tmp_path, capsys):
        nuspec = _write_project(tmp_path)
        first = os.path.join(str(tmp_path), "first.nupkg")
        second = os.path.join(str(tmp_path), "second.nupkg")
        _run(["pack", nuspec, "-o", first, "--deterministic"], capsys)
        _run(["pack", nuspec, "-o", second, "--deterministic"], capsys)
        with open(first, "rb") as a, open(second, "rb") as b:
            assert a.read() == b.read()

    def test_validation_failure_removes_output(self, tmp_path, capsys):
        nuspec = _write_project(tmp_path, description="")
        output = os.path.join(str(tmp_path), "out.nupkg")
        code, _ = _run(["pack", nuspec, "-o", output], capsys)
        assert code == ExitCodes.INVALID_INPUT.value
        assert not os.path.exists(output)

    def test_write_failure(self, tmp_path, capsys):
        nuspec = _write_project(tmp_path)
        output = os.path.join(str(tmp_path), "out.nupkg")
        with patch("nupkg.builder.PackageBuilder.save", side_effect=OSError("disk full")):
            code, out = _run(["pack", nuspec, "-o", output], capsys)
        assert code == ExitCodes.FILE_ERROR.value
        assert out == ""

    def test_missing_nuspec(self, tmp_path, capsys):
        code, _ = _run(["pack", os.path.join(str(tmp_path), "none.nuspec")], capsys)
        assert code == ExitCodes.FILE_ERROR.value


class TestGlobalOptions:
    """Options shared by every command."""

    def test_missing_config(self, tmp_path, capsys):
        missing = os.path.join(str(tmp_path), "missing.yml")
        code, _ = _run(["--config", missing, "framework", "net45"], capsys)
        assert code == ExitCodes.FILE_ERROR.value

    def test_config_short_names(self, tmp_path, capsys):
        config = os.path.join(str(tmp_path), "tfmkit.yml")
        with open(config, "w", encoding="utf-8") as f:
            f.write("frameworks:\n  short_names:\n    Contoso.Runtime: contoso\n")
        code, out = _run(["--config", config, "framework", "contoso2.0"], capsys)
        assert code == ExitCodes.SUCCESS.value
        assert _json(out)[0]["identifier"] == "Contoso.Runtime"
        assert _json(out)[0]["short_folder_name"] == "contoso20"

    def test_pack_with_config_short_names(self, tmp_path, capsys):
        config = os.path.join(str(tmp_path), "tfmkit.yml")
        with open(config, "w", encoding="utf-8") as f:
            f.write("frameworks:\n  short_names:\n    Contoso.Runtime: contoso\n")
        nuspec = _write_project(tmp_path)
        with open(nuspec, encoding="utf-8") as f:
            text = f.read()
        text = text.replace(
            "  </metadata>",
            '    <dependencies>\n'
            '      <group targetFramework="contoso1.0">\n'
            '        <dependency id="Contoso.Core" version="1.0.0" />\n'
            '      </group>\n'
            '    </dependencies>\n'
            '  </metadata>',
        )
        with open(nuspec, "w", encoding="utf-8") as f:
            f.write(text)
        output = os.path.join(str(tmp_path), "out.nupkg")

        code, _ = _run(["-c", config, "pack", nuspec, "-o", output], capsys)
        assert code == ExitCodes.SUCCESS.value
        with PackageArchiveReader(output) as reader:
            groups = reader.nuspec().metadata.dependency_groups
            assert [g.target_framework for g in groups] == ["contoso10"]

    def test_log_file(self, tmp_path, capsys):
        log_file = os.path.join(str(tmp_path), "tfmkit.log")
        code, _ = _run(["--logfile", log_file, "--loglevel", "debug", "framework", "net45"], capsys)
        assert code == ExitCodes.SUCCESS.value
        with open(log_file, encoding="utf-8") as f:
            assert "CLI start" in f.read()
