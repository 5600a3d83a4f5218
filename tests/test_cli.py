"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from docnav.cli import cli

NAVIGATION = """
sections:
  - items:
      - label: Overview
        path: /docs/
  - title: Guides
    items:
      - label: OIDC
        path: /docs/guides/oidc-auth
      - label: Missing
        path: /docs/guides/missing
"""


@pytest.fixture
def project(tmp_path: Path, docs_dir: Path) -> Path:
    """Create a project with config and navigation definition."""
    (tmp_path / "navigation.yaml").write_text(NAVIGATION)
    (tmp_path / "docnav.toml").write_text(
        '[docs]\npath_prefix = "/docs"\n\n[navigation]\ndefinition = "navigation.yaml"\n',
    )
    return tmp_path


class TestCheckCommand:
    """Tests for the check command."""

    def test_reports_broken_links(self, project: Path) -> None:
        """Fail and list every broken link."""
        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-c", str(project / "docnav.toml")])

        assert result.exit_code == 1
        assert "1 broken link(s)" in result.output
        assert 'Guides: "Missing" -> /docs/guides/missing' in result.output

    def test_no_strict_warns_and_succeeds(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-c", str(project / "docnav.toml"), "--no-strict"])

        assert result.exit_code == 0
        assert "Collected 5 documents" in result.output
        assert "Navigation: 3 links, 1 broken" in result.output

    def test_valid_navigation(self, project: Path) -> None:
        (project / "navigation.yaml").write_text(NAVIGATION.replace("/docs/guides/missing", "/docs/guides/monitoring"))

        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-c", str(project / "docnav.toml")])

        assert result.exit_code == 0
        assert "Navigation: 3 links, all valid" in result.output

    def test_navigation_override(self, project: Path) -> None:
        other = project / "other.json"
        other.write_text(json.dumps([{"items": [{"label": "A", "path": "/docs/guides/oidc-auth"}]}]))

        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-c", str(project / "docnav.toml"), "-n", str(other)])

        assert result.exit_code == 0
        assert "Navigation: 1 links, all valid" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("[docs]\nworkers = 0\n")

        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "docs.workers must be a positive integer" in result.output

    def test_missing_source_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docnav.toml"
        config_file.write_text('[docs]\nsource_dir = "nowhere"\n')

        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "Source directory not found" in result.output


class TestBuildCommand:
    """Tests for the build command."""

    def test_writes_outputs(self, project: Path) -> None:
        out_dir = project / "out"

        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["build", "-c", str(project / "docnav.toml"), "-o", str(out_dir), "--no-strict"],
        )

        assert result.exit_code == 0
        collection = json.loads((out_dir / "collection.json").read_text())
        assert [entry["path"] for entry in collection][0] == "/docs"
        navigation = json.loads((out_dir / "navigation.json").read_text())
        assert navigation["sections"][1]["title"] == "Guides"
        assert navigation["sections"][1]["items"][1]["resolved"] is False

    def test_fails_without_writing(self, project: Path) -> None:
        out_dir = project / "out"

        runner = CliRunner()
        result = runner.invoke(cli, ["build", "-c", str(project / "docnav.toml"), "-o", str(out_dir)])

        assert result.exit_code == 1
        assert not out_dir.exists()


class TestListCommand:
    """Tests for the list command."""

    def test_lists_documents(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["list", "-c", str(project / "docnav.toml")])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "/docs\tOverview\tindex.md"
        assert "/docs/guides/monitoring\t\tguides/monitoring.md" in lines
