"""Tests for duration parsing and formatting."""

import pytest

from github_issue_dashboard.time_tracking.durations import (
    format_duration,
    parse_duration,
)


class TestParseDuration:
    @pytest.mark.parametrize(
        "text, minutes",
        [
            ("30m", 30),
            ("2h", 120),
            ("1h 30m", 90),
            ("1h30m", 90),
            ("1H 5M", 65),
            ("90", 90),
            ("  45m ", 45),
        ],
    )
    def test_valid(self, text: str, minutes: int) -> None:
        assert parse_duration(text) == minutes

    @pytest.mark.parametrize("text", ["", "abc", "1.5h", "h", "30s", "-5"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(text)

    @pytest.mark.parametrize("text", ["0", "0m", "0h 0m"])
    def test_zero_rejected(self, text: str) -> None:
        with pytest.raises(ValueError, match="greater than zero"):
            parse_duration(text)


class TestFormatDuration:
    @pytest.mark.parametrize(
        "minutes, expected",
        [(0, "0m"), (45, "45m"), (60, "1h"), (90, "1h 30m"), (605, "10h 5m")],
    )
    def test_format(self, minutes: int, expected: str) -> None:
        assert format_duration(minutes) == expected
