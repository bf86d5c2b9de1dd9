"""Configuration for the issue dashboard."""

import logging
import os
from pathlib import Path

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")


class DashboardConfig:
    """Configuration class for the dashboard service and CLI."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.github_token: str | None = os.getenv("GITHUB_TOKEN")
        self.webhook_secret: str | None = os.getenv("GITHUB_WEBHOOK_SECRET") or None
        self.data_dir: Path = Path(os.getenv("DASHBOARD_DATA_DIR", "data"))
        self.log_level: str = os.getenv("DASHBOARD_LOG_LEVEL", "INFO").upper()
        self.log_file: str | None = os.getenv("DASHBOARD_LOG_FILE") or None
        self.host: str = os.getenv("DASHBOARD_HOST", "127.0.0.1")
        self.port: int = _env_int("DASHBOARD_PORT", 8000)
        self.parse_cache_ttl: int = _env_int("DASHBOARD_PARSE_CACHE_TTL", 1800)
        self.graph_cache_ttl: int = _env_int("DASHBOARD_GRAPH_CACHE_TTL", 900)
        self.level_by_number: bool = (
            os.getenv("DASHBOARD_LEVEL_BY_NUMBER", "false").strip().lower()
            in _TRUE_VALUES
        )

    @property
    def time_tracking_file(self) -> Path:
        """Location of the persisted time tracking state."""
        return self.data_dir / "time_tracking.json"

    def is_github_configured(self) -> bool:
        """Check if a GitHub token is available."""
        return bool(self.github_token)

    def validate(self) -> None:
        """Validate configuration and raise error if invalid."""
        if self.log_level not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid DASHBOARD_LOG_LEVEL '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        if not 0 < self.port < 65536:
            raise ValueError(f"DASHBOARD_PORT must be 1-65535, got {self.port}")
        if self.parse_cache_ttl <= 0:
            raise ValueError("DASHBOARD_PARSE_CACHE_TTL must be greater than 0")
        if self.graph_cache_ttl <= 0:
            raise ValueError("DASHBOARD_GRAPH_CACHE_TTL must be greater than 0")

    @property
    def numeric_log_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)
