"""Unit tests for CLI functionality."""

import json

import pytest
from click.testing import CliRunner

from site_critic import __version__
from site_critic.artifact import WebsiteArtifact
from site_critic.cli import cli
from site_critic.config import CONFIG_FILENAME


@pytest.fixture
def runner():
    return CliRunner()


class TestMainCLI:
    """Test main CLI group functionality."""

    def test_cli_help(self, runner):
        """Test CLI help output."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "assess" in result.output
        assert "improve" in result.output

    def test_cli_version(self, runner):
        """Test CLI version option."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_path(self, runner, tmp_path):
        """Test that a nonexistent directory is a usage error."""
        result = runner.invoke(cli, ["assess", str(tmp_path / "missing")])

        assert result.exit_code == 2
        assert "does not exist" in result.output


class TestAssessCommand:
    """Tests for the assess command."""

    def test_text_report(self, runner, site_dir):
        """Test the default terminal summary."""
        result = runner.invoke(cli, ["assess", str(site_dir), "--no-color"])

        assert result.exit_code == 0
        assert result.output.startswith("Verdict: Excellent")
        assert "Issues (2):" in result.output

    def test_json_report(self, runner, site_dir):
        """Test that JSON output parses and names the report type."""
        result = runner.invoke(cli, ["assess", str(site_dir), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["report_type"] == "assessment"
        assert data["verdict"] == "Excellent"

    def test_markdown_to_file(self, runner, site_dir, tmp_path):
        """Test that -o writes the report instead of printing it."""
        out = tmp_path / "report.md"

        result = runner.invoke(
            cli, ["assess", str(site_dir), "--format", "markdown", "-o", str(out)]
        )

        assert result.exit_code == 0
        assert result.output == ""
        assert out.read_text(encoding="utf-8").startswith("# Website Quality Report")

    def test_text_to_file_is_uncolored(self, runner, site_dir, tmp_path):
        """Test that a text report written to disk has no escape codes."""
        out = tmp_path / "report.txt"

        runner.invoke(cli, ["assess", str(site_dir), "-o", str(out)])

        content = out.read_text(encoding="utf-8")
        assert content.startswith("Verdict: Excellent")
        assert "\033[" not in content

    def test_quality_gate(self, runner, site_dir):
        """Test that a verdict below --fail-under exits with code 2."""
        passing = runner.invoke(cli, ["assess", str(site_dir), "--fail-under", "Good"])
        failing = runner.invoke(
            cli, ["assess", str(site_dir), "--fail-under", "WorldClass"]
        )

        assert passing.exit_code == 0
        assert failing.exit_code == 2

    def test_bare_site_without_business_file(self, runner, bare_site_dir):
        """Test that business.json is optional."""
        result = runner.invoke(cli, ["assess", str(bare_site_dir), "--quiet", "--no-color"])

        assert result.exit_code == 0
        assert result.output.startswith("Verdict: ")
        assert len(result.output.strip().splitlines()) == 1

    def test_industry_option(self, runner, site_dir):
        """Test that a known industry preset is accepted."""
        result = runner.invoke(cli, ["assess", str(site_dir), "--industry", "creative"])

        assert result.exit_code == 0

    def test_unknown_industry(self, runner, site_dir):
        """Test that an unknown industry preset is rejected by click."""
        result = runner.invoke(cli, ["assess", str(site_dir), "--industry", "mining"])

        assert result.exit_code == 2

    def test_invalid_config_file(self, runner, site_dir):
        """Test that an invalid config file exits with code 1."""
        (site_dir / CONFIG_FILENAME).write_text(json.dumps({"unknownKey": 1}))

        result = runner.invoke(cli, ["assess", str(site_dir), "--no-color"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Invalid CriticConfig" in result.output

    def test_no_pages(self, runner, tmp_path):
        """Test that a directory without pages exits with code 1."""
        result = runner.invoke(cli, ["assess", str(tmp_path), "--no-color"])

        assert result.exit_code == 1
        assert "No HTML pages" in result.output


class TestImproveCommand:
    """Tests for the improve command."""

    def test_improve_and_write(self, runner, site_dir, tmp_path):
        """Test that the repaired site is written to --write."""
        out = tmp_path / "improved"

        result = runner.invoke(
            cli,
            [
                "improve",
                str(site_dir),
                "--target",
                "80",
                "--min-category",
                "9.5",
                "--write",
                str(out),
                "--no-color",
            ],
        )

        assert result.exit_code == 0
        assert result.output.startswith("Session: improve_")
        assert "converged (TargetReached), 2 iteration(s)" in result.output
        improved = WebsiteArtifact.from_directory(out)
        assert 'name="description"' in improved.get_page("index.html").markup
        # The source directory is left as it was
        assert 'name="description"' not in (site_dir / "index.html").read_text()

    def test_improve_json(self, runner, site_dir):
        """Test the session JSON report."""
        result = runner.invoke(
            cli, ["improve", str(site_dir), "--format", "json", "--max-iterations", "1"]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["report_type"] == "improvement_session"
        # The default bar is already met by the fixture site
        assert data["termination_reason"] == "TargetReached"
        assert data["iterations"] == []

    def test_iteration_cap_from_cli(self, runner, site_dir):
        """Test that --max-iterations overrides the session config."""
        result = runner.invoke(
            cli,
            [
                "improve",
                str(site_dir),
                "--target",
                "99.5",
                "--max-iterations",
                "1",
                "--format",
                "json",
            ],
        )

        data = json.loads(result.output)
        assert data["config"]["max_iterations"] == 1
        assert data["termination_reason"] == "MaxIterationsReached"
        assert len(data["iterations"]) == 1

    def test_invalid_target(self, runner, site_dir):
        """Test that an out-of-range target exits with code 1."""
        result = runner.invoke(
            cli, ["improve", str(site_dir), "--target", "150", "--no-color"]
        )

        assert result.exit_code == 1
        assert "Invalid SessionConfig" in result.output

    def test_session_config_from_file(self, runner, site_dir):
        """Test that session settings are read from the config file."""
        (site_dir / CONFIG_FILENAME).write_text(
            json.dumps({"session": {"targetScore": 99.5, "maxIterations": 1}})
        )

        result = runner.invoke(cli, ["improve", str(site_dir), "--format", "json"])

        data = json.loads(result.output)
        assert data["config"]["target_score"] == 99.5
        assert len(data["iterations"]) == 1

    def test_unwritable_output_directory(self, runner, site_dir, tmp_path, monkeypatch):
        """Test that a failed --write exits with code 1 and an error message."""

        def refuse(self, root):
            raise PermissionError(13, "Permission denied", str(root))

        monkeypatch.setattr(WebsiteArtifact, "write_directory", refuse)

        result = runner.invoke(
            cli,
            ["improve", str(site_dir), "--write", str(tmp_path / "out"), "--no-color"],
        )

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Cannot write improved site" in result.output
