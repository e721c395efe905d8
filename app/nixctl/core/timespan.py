"""Parsing of systemd.time(7) time spans.

Spans are one or more ``<number><unit>`` groups, optionally separated by
whitespace, for example ``"2h"``, ``"30d 2h 1m"`` or ``"1w2d"``. A number
without a unit is interpreted as seconds.
"""

import re
from datetime import timedelta

_UNITS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("us", "usec"), 1e-6),
    (("ms", "msec"), 1e-3),
    (("s", "sec", "second", "seconds"), 1.0),
    (("m", "min", "minute", "minutes"), 60.0),
    (("h", "hr", "hour", "hours"), 3600.0),
    (("d", "day", "days"), 86400.0),
    (("w", "week", "weeks"), 7 * 86400.0),
    # systemd defines a month as 30.44 days and a year as 365.25 days
    (("M", "month", "months"), 30.44 * 86400.0),
    (("y", "year", "years"), 365.25 * 86400.0),
)

_SECONDS_PER_UNIT: dict[str, float] = {
    name: seconds for names, seconds in _UNITS for name in names
}

_GROUP_PATTERN = re.compile(r"\s*(\d+(?:\.\d+)?)\s*([A-Za-z]*)")


class TimeSpanError(ValueError):
    """Raised when a time span cannot be parsed."""


def parse_time_span(span: str) -> timedelta:
    """Parse a systemd.time(7) span into a timedelta.

    Args:
        span: Time span string (e.g., "30d 2h 1m").

    Returns:
        Total duration of all groups in the span.

    Raises:
        TimeSpanError: If the span is empty, malformed, or uses an unknown unit.
    """
    text = span.strip()
    if not text:
        msg = "time span cannot be empty"
        raise TimeSpanError(msg)

    total_seconds = 0.0
    position = 0
    while position < len(text):
        match = _GROUP_PATTERN.match(text, position)
        if match is None or match.end() == position:
            msg = f"invalid time span '{span}'"
            raise TimeSpanError(msg)

        value, unit = match.groups()
        if not unit:
            unit = "s"
        if unit not in _SECONDS_PER_UNIT:
            msg = f"unknown time unit '{unit}' in time span '{span}'"
            raise TimeSpanError(msg)

        total_seconds += float(value) * _SECONDS_PER_UNIT[unit]
        position = match.end()
        # Skip trailing separators between groups
        while position < len(text) and text[position].isspace():
            position += 1

    try:
        return timedelta(seconds=total_seconds)
    except OverflowError as e:
        msg = f"time span '{span}' is too large"
        raise TimeSpanError(msg) from e
