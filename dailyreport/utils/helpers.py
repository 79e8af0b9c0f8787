"""Shared parsing and formatting helpers.

parse_date_input:  strict ISO date parsing (raises ValueError)
parse_visit_time:  "HH:MM" -> datetime.time (raises ValueError)
format_visit_time: datetime.time -> "HH:MM"
"""
import re
from datetime import date, datetime, time

_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}\Z")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_date_input(value):
    """Parse a ``YYYY-MM-DD`` string, raising ValueError on bad input.

    Date objects pass through unchanged; empty input returns None so callers
    can decide whether the field is required. Numbers, compact (``20240115``)
    and week (``2024-W03-1``) forms are rejected.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError("Invalid date format. Use YYYY-MM-DD.")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError("Invalid date format. Use YYYY-MM-DD.") from exc


def parse_visit_time(value):
    """Parse an ``HH:MM`` wall-clock time. Empty input returns None."""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    match = _TIME_RE.match(str(value))
    if not match:
        raise ValueError("Invalid time format. Use HH:MM.")
    return time(int(match.group(1)), int(match.group(2)))


def format_visit_time(value):
    if value is None:
        return None
    return value.strftime("%H:%M")

