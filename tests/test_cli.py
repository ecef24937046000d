"""Tests for the projscan command line."""

from __future__ import annotations

import json
import os
import tempfile

from click.testing import CliRunner

from projscan.cli import cli
from projscan.output import build_result
from projscan.dotnet.evaluation import Err
from projscan.dotnet.project import ProjectFile

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")
LEGACY_PATH = os.path.join(FIXTURES_DIR, "legacy_project", "Legacy.csproj")
SDK_PATH = os.path.join(FIXTURES_DIR, "sdk_project", "Sdk.csproj")
BROKEN_PATH = os.path.join(FIXTURES_DIR, "malformed", "Broken.csproj")
SLN_PATH = os.path.join(FIXTURES_DIR, "solution", "App.sln")


class TestBuildResult:
    def test_fields(self):
        project = ProjectFile(SDK_PATH, evaluator=lambda path, config: Err(RuntimeError("off")))
        result = build_result(project)

        assert result["strategy"] == "markup"
        assert result["style"] == "sdk"
        assert result["target_frameworks"] == ["net6.0", "net472"]
        assert result["packages"][0] == {"name": "Newtonsoft.Json", "version": "13.0.3"}
        assert len(result["sources"]) == 2
        assert result["errors"] == []

    def test_package_error_reported(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "App.csproj")
            with open(path, "w") as f:
                f.write('<Project Sdk="Microsoft.NET.Sdk"><ItemGroup>'
                        '<PackageReference Include="Serilog"/></ItemGroup></Project>')
            project = ProjectFile(path, evaluator=lambda path, config: Err(RuntimeError("off")))
            result = build_result(project)

            assert result["packages"] == []
            assert "Version" in result["errors"][0]


class TestInspectCommand:
    def test_json_output(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", LEGACY_PATH, "--no-evaluation", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        project = data["projects"][0]
        assert project["style"] == "legacy"
        assert project["references"][:2] == ["System", "System.Xml"]
        assert project["target_frameworks"] == []

    def test_table_output(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", SDK_PATH, "--no-evaluation"])

        assert result.exit_code == 0, result.output
        assert "Sdk.csproj" in result.output
        assert "net6.0" in result.output

    def test_write_output_file(self):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = os.path.join(tmpdir, "out", "projects.json")
            result = runner.invoke(cli, ["inspect", SDK_PATH, "--no-evaluation", "-o", output_path, "--quiet"])

            assert result.exit_code == 0, result.output
            assert result.output == ""
            with open(output_path) as f:
                data = json.load(f)
            assert data["projects"][0]["strategy"] == "markup"

    def test_solution_skips_unreadable_projects(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", SLN_PATH, "--no-evaluation", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        names = [os.path.basename(p["path"]) for p in data["projects"]]
        assert names == ["Sdk.csproj", "Legacy.csproj"]

    def test_malformed_project_fails(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", BROKEN_PATH, "--no-evaluation"])

        assert result.exit_code != 0
        assert "Broken.csproj" in result.output

    def test_extension_option(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", SDK_PATH, "--no-evaluation", "--extension", ".md", "--json"])

        assert result.exit_code == 0, result.output
        sources = json.loads(result.stdout)["projects"][0]["sources"]
        assert [os.path.basename(s) for s in sources] == ["README.md"]
