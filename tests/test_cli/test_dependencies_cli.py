"""Tests for the deps CLI commands."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from github_issue_dashboard.cli.main import app
from github_issue_dashboard.dependencies.models import IssueWithDependencies

ENV = {"NO_COLOR": "1", "TERM": "dumb", "DASHBOARD_LOG_LEVEL": "WARNING"}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner(env=ENV)


@pytest.fixture
def issues_file(tmp_path: Path) -> Path:
    path = tmp_path / "issues.json"
    path.write_text(
        json.dumps(
            [
                {
                    "issueNumber": 1,
                    "repository": "acme/app",
                    "title": "Frontend",
                    "dependencies": [{"type": "depends_on", "issueNumber": 2}],
                },
                {
                    "issueNumber": 2,
                    "repository": "acme/app",
                    "title": "API",
                    "dependencies": [{"type": "depends_on", "issueNumber": 3}],
                },
            ]
        )
    )
    return path


class TestParseCommand:
    def test_parse_json(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["deps", "parse", "--body", "Depends on: #4\nBlocks: #5", "-F", "json"]
        )

        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert [d["issueNumber"] for d in output["dependencies"]] == [4, 5]
        assert output["validation"]["isValid"] is True

    def test_parse_table(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["deps", "parse", "--body", "Blocks: #5"])

        assert result.exit_code == 0
        assert "#5" in result.stdout
        assert "No dependency problems found" in result.stdout

    def test_parse_from_stdin(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["deps", "parse", "-F", "json"], input="Depends on: #8\n"
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["dependencies"][0]["issueNumber"] == 8

    def test_parse_self_reference(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["deps", "parse", "--body", "Depends on: #3", "-i", "3"]
        )

        assert "Issue cannot depend on itself: #3" in result.stdout

    def test_body_and_file_conflict(self, runner: CliRunner, tmp_path: Path) -> None:
        body_file = tmp_path / "body.md"
        body_file.write_text("Blocks: #1")

        result = runner.invoke(
            app, ["deps", "parse", "--body", "x", "--file", str(body_file)]
        )

        assert result.exit_code == 1
        assert "not both" in result.stdout


class TestGraphCommand:
    def test_graph_from_file(self, runner: CliRunner, issues_file: Path) -> None:
        result = runner.invoke(app, ["deps", "graph", "--file", str(issues_file)])

        assert result.exit_code == 0
        assert "Max level: 2" in result.stdout
        assert "No cycles detected" in result.stdout

    def test_graph_json_and_output_file(
        self, runner: CliRunner, issues_file: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "out" / "graph.json"

        result = runner.invoke(
            app,
            [
                "deps",
                "graph",
                "--file",
                str(issues_file),
                "--output",
                str(output),
                "-F",
                "table",
            ],
        )

        assert result.exit_code == 0
        saved = json.loads(output.read_text())
        assert saved["metadata"]["totalNodes"] == 3
        assert saved["graph"]["edges"][0]["from"] == 1

    def test_graph_needs_a_source(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["deps", "graph"])

        assert result.exit_code == 1
        assert "Provide --file" in result.stdout

    def test_graph_invalid_file(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('[{"issueNumber": "x"}]')

        result = runner.invoke(app, ["deps", "graph", "--file", str(bad)])

        assert result.exit_code == 1
        assert "Invalid data" in result.stdout

    def test_graph_from_github(self, runner: CliRunner) -> None:
        records = [
            IssueWithDependencies(
                issue_number=1,
                repository="acme/app",
                dependencies=[],
            )
        ]
        with (
            patch("github_issue_dashboard.cli.dependencies.GitHubClient") as client,
            patch(
                "github_issue_dashboard.cli.dependencies."
                "collect_repository_dependencies",
                return_value=records,
            ) as collect,
        ):
            result = runner.invoke(
                app, ["deps", "graph", "--org", "acme", "--repo", "app", "-s", "all"]
            )

        assert result.exit_code == 0
        collect.assert_called_once_with(
            client.return_value, "acme", "app", state="all", limit=100
        )


class TestValidateAndMarkdown:
    @pytest.fixture
    def deps_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "deps.json"
        path.write_text(
            json.dumps(
                [
                    {"type": "depends_on", "issueNumber": 3, "description": "API"},
                    {"type": "blocks", "issueNumber": 4},
                ]
            )
        )
        return path

    def test_validate_ok(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["deps", "validate", "--file", str(deps_file)])

        assert result.exit_code == 0

    def test_validate_self_reference_fails(
        self, runner: CliRunner, deps_file: Path
    ) -> None:
        result = runner.invoke(
            app, ["deps", "validate", "--file", str(deps_file), "-i", "4"]
        )

        assert result.exit_code == 1
        assert "Issue cannot depend on itself: #4" in result.stdout

    def test_markdown_from_file(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["deps", "markdown", "--file", str(deps_file)])

        assert result.exit_code == 0
        assert "## Dependencies" in result.stdout
        assert "- #3 (API)" in result.stdout
        assert "**Blocks:**" in result.stdout

    def test_markdown_from_body(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["deps", "markdown", "--body", "Blocks: #9"])

        assert result.exit_code == 0
        assert "- #9" in result.stdout


def test_show_reports_missing_token(runner: CliRunner) -> None:
    with patch(
        "github_issue_dashboard.cli.dependencies.GitHubClient",
        side_effect=ValueError("GitHub token is required"),
    ):
        result = runner.invoke(
            app, ["deps", "show", "-o", "acme", "-r", "app", "-i", "1"]
        )

    assert result.exit_code == 1
    assert "GitHub token is required" in result.stdout


def test_show_issue(runner: CliRunner) -> None:
    record = IssueWithDependencies(
        issue_number=1,
        repository="acme/app",
        title="Login",
        dependencies=[{"type": "depends_on", "issueNumber": 2}],
    )
    with (
        patch("github_issue_dashboard.cli.dependencies.GitHubClient"),
        patch(
            "github_issue_dashboard.cli.dependencies.collect_issue_dependencies",
            return_value=record,
        ),
    ):
        result = runner.invoke(
            app, ["deps", "show", "-o", "acme", "-r", "app", "-i", "1", "-F", "json"]
        )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["dependencies"][0]["issueNumber"] == 2
