"""Date parsing and validation utilities for time report ranges."""

from datetime import datetime, time, timedelta, timezone

# formats without a time of day; an end date in one of these covers the whole day
DATE_ONLY_FORMATS = [
    "%Y-%m-%d",  # 2024-01-01
    "%B %d, %Y",  # January 1, 2024
    "%b %d, %Y",  # Jan 1, 2024
    "%B %d %Y",  # January 1 2024
    "%b %d %Y",  # Jan 1 2024
    "%Y/%m/%d",  # 2024/01/01
    "%m/%d/%Y",  # 01/31/2024
]

DATETIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%SZ",  # 2024-01-01T10:00:00Z
    "%Y-%m-%dT%H:%M:%S",  # 2024-01-01T10:00:00
    "%Y-%m-%d %H:%M",  # 2024-01-01 10:00
]


def _parse(date_str: str) -> tuple[datetime, bool]:
    value = date_str.strip()
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc), False
        except ValueError:
            continue
    for fmt in DATE_ONLY_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc), True
        except ValueError:
            continue

    raise ValueError(
        f"Unable to parse date '{date_str}'. "
        f"Supported formats include: YYYY-MM-DD, YYYY-MM-DDTHH:MM:SSZ, "
        f"'January 1, 2024', 'Jan 1 2024', MM/DD/YYYY"
    )


def parse_date_input(date_str: str) -> datetime:
    """Parse various date formats into UTC datetimes.

    Supports:
    - ISO dates: 2024-01-01, 2024-01-01T10:00:00Z
    - Common formats: January 1, 2024, Jan 1 2024, 01/31/2024

    Args:
        date_str: Date string to parse

    Returns:
        Timezone-aware UTC datetime

    Raises:
        ValueError: If date format is not recognized
    """
    return _parse(date_str)[0]


def parse_end_date_input(date_str: str) -> datetime:
    """Parse an inclusive end date.

    A date without a time of day means the end of that day (23:59:59 UTC).
    """
    parsed, date_only = _parse(date_str)
    if date_only:
        return datetime.combine(parsed.date(), time(23, 59, 59), tzinfo=timezone.utc)
    return parsed


def validate_date_range(start: datetime | None, end: datetime | None) -> None:
    """Validate date range logic.

    Raises:
        ValueError: If start is not before end
    """
    if start is not None and end is not None and start >= end:
        raise ValueError(
            f"Start date ({start.strftime('%Y-%m-%d')}) must be before "
            f"end date ({end.strftime('%Y-%m-%d')})"
        )


def relative_date_to_absolute(
    days: int | None = None,
    weeks: int | None = None,
    months: int | None = None,
    now: datetime | None = None,
) -> datetime:
    """Convert relative dates to absolute dates.

    Args:
        days: Number of days ago (optional)
        weeks: Number of weeks ago (optional)
        months: Number of months ago (optional), counted as 30 days each
        now: Reference time, defaults to the current UTC time

    Returns:
        Datetime object representing the calculated past date

    Raises:
        ValueError: If multiple relative date options provided or values are invalid
    """
    provided_options = sum(1 for x in [days, weeks, months] if x is not None)
    if provided_options == 0:
        raise ValueError("Must provide one of: days, weeks, or months")
    if provided_options > 1:
        raise ValueError("Cannot combine multiple relative date options")

    now = now or datetime.now(timezone.utc)

    if days is not None:
        if days <= 0:
            raise ValueError("Days must be a positive integer")
        return now - timedelta(days=days)

    if weeks is not None:
        if weeks <= 0:
            raise ValueError("Weeks must be a positive integer")
        return now - timedelta(weeks=weeks)

    if months is None or months <= 0:
        raise ValueError("Months must be a positive integer")
    return now - timedelta(days=months * 30)


def resolve_report_range(
    start: str | None = None,
    end: str | None = None,
    last_days: int | None = None,
    last_weeks: int | None = None,
    last_months: int | None = None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Turn report command options into a concrete ``[start, end]`` range.

    With no options at all the range is the last 7 days.

    Raises:
        ValueError: If options conflict or dates are invalid
    """
    now = now or datetime.now(timezone.utc)
    has_relative = any(x is not None for x in [last_days, last_weeks, last_months])

    if has_relative and (start or end):
        raise ValueError(
            "Cannot combine relative date options (--last-days/weeks/months) "
            "with absolute date options (--start/--end)"
        )

    if has_relative:
        try:
            range_start = relative_date_to_absolute(
                days=last_days, weeks=last_weeks, months=last_months, now=now
            )
        except ValueError as e:
            raise ValueError(f"Invalid relative date parameters: {e}")
        return range_start, now

    if not start and not end:
        return now - timedelta(days=7), now

    try:
        range_start = parse_date_input(start) if start else None
    except ValueError as e:
        raise ValueError(f"Invalid --start date: {e}")
    try:
        range_end = parse_end_date_input(end) if end else now
    except ValueError as e:
        raise ValueError(f"Invalid --end date: {e}")

    if range_start is None:
        range_start = range_end - timedelta(days=7)

    validate_date_range(range_start, range_end)
    return range_start, range_end
