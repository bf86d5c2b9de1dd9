"""Data models for time tracking."""

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import Field, PositiveInt, field_validator

from ..schema import DashboardModel

PeriodType = Literal["day", "week", "month", "custom"]


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class _TimestampedModel(DashboardModel):
    @field_validator(
        "start_time",
        "end_time",
        "created_at",
        "updated_at",
        check_fields=False,
    )
    @classmethod
    def _normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class TimeSession(_TimestampedModel):
    """A live time tracking session for one user on one issue."""

    id: str = Field(default_factory=new_id)
    issue_number: PositiveInt
    repository: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    description: str | None = None
    start_time: datetime
    is_active: bool = Field(True, description="False while the session is paused")

    def matches(self, issue_number: int, repository: str, user_id: str) -> bool:
        return (
            self.issue_number == issue_number
            and self.repository == repository
            and self.user_id == user_id
        )


class TimeEntry(_TimestampedModel):
    """A closed record of time spent on an issue."""

    id: str = Field(default_factory=new_id)
    issue_number: PositiveInt
    repository: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    duration: int = Field(..., ge=0, description="Duration in minutes")
    tags: list[str] | None = None
    is_active: Literal[False] = False
    created_at: datetime
    updated_at: datetime | None = None


class TimeEntryUpdate(_TimestampedModel):
    """Fields that may be changed on an existing entry."""

    description: str | None = None
    tags: list[str] | None = None
    duration: PositiveInt | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


class TimeEntryFilter(DashboardModel):
    """Criteria for selecting time entries. Unset fields match everything."""

    issue_number: int | None = None
    repository: str | None = None
    user_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    tags: list[str] | None = Field(None, description="Match entries with any tag")

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_dates(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    def matches(self, entry: TimeEntry) -> bool:
        if self.issue_number is not None and entry.issue_number != self.issue_number:
            return False
        if self.repository and entry.repository != self.repository:
            return False
        if self.user_id and entry.user_id != self.user_id:
            return False
        if self.start_date and entry.start_time < self.start_date:
            return False
        if self.end_date and entry.start_time > self.end_date:
            return False
        if self.tags and not set(self.tags) & set(entry.tags or []):
            return False
        return True


class TimeSummary(DashboardModel):
    """Aggregate statistics over a set of time entries."""

    total_minutes: int = 0
    total_hours: float = 0
    entries_count: int = 0
    average_session_minutes: int = 0
    longest_session_minutes: int = 0
    shortest_session_minutes: int = 0
    active_days: int = 0


class ReportPeriod(DashboardModel):
    type: PeriodType
    start: datetime
    end: datetime


class TimeReport(DashboardModel):
    """Summary of a period plus per-issue, per-user and per-day breakdowns."""

    summary: TimeSummary
    by_issue: dict[str, TimeSummary] = Field(
        default_factory=dict, description="Keyed by owner/repo#number"
    )
    by_user: dict[str, TimeSummary] = Field(default_factory=dict)
    by_day: dict[str, TimeSummary] = Field(default_factory=dict)
    period: ReportPeriod


class TimeTrackingSnapshot(DashboardModel):
    """Live sessions and closed entries, as persisted between CLI runs."""

    sessions: list[TimeSession] = Field(default_factory=list)
    entries: list[TimeEntry] = Field(default_factory=list)
