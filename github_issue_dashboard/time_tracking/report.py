"""Aggregation of time entries into summaries and reports."""

import math
from collections import defaultdict
from collections.abc import Callable, Hashable, Iterable
from datetime import datetime

from .models import (
    PeriodType,
    ReportPeriod,
    TimeEntry,
    TimeReport,
    TimeSummary,
    ensure_utc,
)

SECONDS_PER_DAY = 24 * 60 * 60


def summarize(entries: Iterable[TimeEntry]) -> TimeSummary:
    """Compute summary statistics for a set of entries.

    ``active_days`` counts distinct UTC calendar dates of entry start times.
    An empty input gives an all-zero summary.
    """
    entries = list(entries)
    if not entries:
        return TimeSummary()

    durations = [entry.duration for entry in entries]
    total = sum(durations)
    return TimeSummary(
        total_minutes=total,
        total_hours=round(total / 60, 2),
        entries_count=len(entries),
        average_session_minutes=round(total / len(entries)),
        longest_session_minutes=max(durations),
        shortest_session_minutes=min(durations),
        active_days=len({day_key(entry.start_time) for entry in entries}),
    )


def day_key(moment: datetime) -> str:
    """UTC calendar date as ``YYYY-MM-DD``."""
    return ensure_utc(moment).strftime("%Y-%m-%d")


def classify_period(start: datetime, end: datetime) -> PeriodType:
    """Classify a report span by its length rounded up to whole days."""
    span = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    days = math.ceil(span / SECONDS_PER_DAY)
    if days <= 1:
        return "day"
    if days <= 7:
        return "week"
    if days <= 31:
        return "month"
    return "custom"


def issue_key(entry: TimeEntry) -> str:
    """Report bucket for an entry's issue, unique across repositories."""
    return f"{entry.repository}#{entry.issue_number}"


def _group(
    entries: list[TimeEntry], key: Callable[[TimeEntry], Hashable]
) -> dict:
    groups: dict = defaultdict(list)
    for entry in entries:
        groups[key(entry)].append(entry)
    return {k: summarize(group) for k, group in groups.items()}


def build_report(
    entries: Iterable[TimeEntry], start: datetime, end: datetime
) -> TimeReport:
    """Build a report over entries whose start time falls in ``[start, end]``."""
    start = ensure_utc(start)
    end = ensure_utc(end)
    in_range = [entry for entry in entries if start <= entry.start_time <= end]

    return TimeReport(
        summary=summarize(in_range),
        by_issue=_group(in_range, issue_key),
        by_user=_group(in_range, lambda entry: entry.user_id),
        by_day=_group(in_range, lambda entry: day_key(entry.start_time)),
        period=ReportPeriod(type=classify_period(start, end), start=start, end=end),
    )
