"""Conversion between minute counts and ``1h 30m`` style strings."""

import re

DURATION_PATTERN = re.compile(
    r"^\s*(?:(?P<hours>\d+)\s*h)?\s*(?:(?P<minutes>\d+)\s*m)?\s*$", re.IGNORECASE
)


def format_duration(minutes: int) -> str:
    """Format minutes as ``30m``, ``1h`` or ``1h 30m``."""
    hours, remainder = divmod(int(minutes), 60)
    if hours == 0:
        return f"{remainder}m"
    if remainder == 0:
        return f"{hours}h"
    return f"{hours}h {remainder}m"


def parse_duration(text: str) -> int:
    """Parse a duration string into minutes.

    Accepts ``30m``, ``1h``, ``1h 30m``, ``1h30m`` and plain minute counts
    such as ``90``.

    Raises:
        ValueError: If the text is not a duration or amounts to zero minutes
    """
    value = text.strip()
    if value.isdigit():
        minutes = int(value)
    else:
        match = DURATION_PATTERN.match(value)
        if not value or not match or not (match["hours"] or match["minutes"]):
            raise ValueError(
                f"Invalid duration: '{text}'. Use formats like '30m', '1h' or '1h 30m'"
            )
        minutes = int(match["hours"] or 0) * 60 + int(match["minutes"] or 0)

    if minutes <= 0:
        raise ValueError(f"Duration must be greater than zero: '{text}'")
    return minutes
