"""Time tracking sessions, entries and reports."""

from .durations import format_duration, parse_duration
from .models import (
    ReportPeriod,
    TimeEntry,
    TimeEntryFilter,
    TimeEntryUpdate,
    TimeReport,
    TimeSession,
    TimeSummary,
    TimeTrackingSnapshot,
)
from .report import build_report, classify_period, summarize
from .session_manager import TimeSessionManager

__all__ = [
    "TimeSessionManager",
    "TimeSession",
    "TimeEntry",
    "TimeEntryFilter",
    "TimeEntryUpdate",
    "TimeSummary",
    "TimeReport",
    "ReportPeriod",
    "TimeTrackingSnapshot",
    "build_report",
    "classify_period",
    "summarize",
    "format_duration",
    "parse_duration",
]
