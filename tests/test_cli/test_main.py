"""Test main CLI functionality."""

from unittest.mock import patch

from typer.testing import CliRunner

from github_issue_dashboard.cli.main import app

runner = CliRunner(env={"NO_COLOR": "1", "TERM": "dumb"})


def test_version_command() -> None:
    """Test version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "GitHub Issue Dashboard v" in result.stdout


def test_invalid_config_exits() -> None:
    """Test that a bad log level is reported before any command runs."""
    result = runner.invoke(app, ["version"], env={"DASHBOARD_LOG_LEVEL": "LOUD"})
    assert result.exit_code == 1
    assert "Invalid DASHBOARD_LOG_LEVEL" in result.stdout


def test_serve_runs_uvicorn() -> None:
    """Test that serve hands the app to uvicorn with the configured address."""
    with patch("uvicorn.run") as mock_run:
        result = runner.invoke(app, ["serve", "--port", "9123"])

    assert result.exit_code == 0
    mock_run.assert_called_once()
    kwargs = mock_run.call_args.kwargs
    assert kwargs["port"] == 9123
    assert kwargs["host"] == "127.0.0.1"
