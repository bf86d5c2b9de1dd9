"""Tests for dashboard configuration."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from github_issue_dashboard.config import DashboardConfig


class TestDashboardConfig:
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self) -> None:
        config = DashboardConfig()

        assert config.github_token is None
        assert config.webhook_secret is None
        assert config.data_dir == Path("data")
        assert config.time_tracking_file == Path("data") / "time_tracking.json"
        assert config.log_level == "INFO"
        assert config.numeric_log_level == logging.INFO
        assert config.port == 8000
        assert config.parse_cache_ttl == 1800
        assert config.graph_cache_ttl == 900
        assert config.level_by_number is False
        assert not config.is_github_configured()
        config.validate()

    @patch.dict(
        os.environ,
        {
            "GITHUB_TOKEN": "token",
            "GITHUB_WEBHOOK_SECRET": "hook",
            "DASHBOARD_DATA_DIR": "/tmp/dash",
            "DASHBOARD_LOG_LEVEL": "debug",
            "DASHBOARD_PORT": "9000",
            "DASHBOARD_LEVEL_BY_NUMBER": "yes",
        },
        clear=True,
    )
    def test_environment_overrides(self) -> None:
        config = DashboardConfig()

        assert config.is_github_configured()
        assert config.data_dir == Path("/tmp/dash")
        assert config.log_level == "DEBUG"
        assert config.port == 9000
        assert config.level_by_number is True
        assert config.webhook_secret == "hook"

    @patch.dict(os.environ, {"DASHBOARD_PORT": "eighty"}, clear=True)
    def test_invalid_integer(self) -> None:
        with pytest.raises(ValueError, match="DASHBOARD_PORT must be an integer"):
            DashboardConfig()

    @patch.dict(os.environ, {"DASHBOARD_LOG_LEVEL": "LOUD"}, clear=True)
    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError, match="Invalid DASHBOARD_LOG_LEVEL"):
            DashboardConfig().validate()

    @patch.dict(os.environ, {"DASHBOARD_GRAPH_CACHE_TTL": "0"}, clear=True)
    def test_invalid_ttl(self) -> None:
        with pytest.raises(ValueError, match="GRAPH_CACHE_TTL must be greater than 0"):
            DashboardConfig().validate()
