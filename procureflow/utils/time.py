"""Time Utilities - UTC timestamps and formatting"""
from datetime import datetime, timezone
from typing import Optional
from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Attach UTC to naive datetimes

    pymongo hands back naive datetimes unless the client is tz-aware;
    everything stored by this service is UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def not_before(previous: Optional[datetime], candidate: Optional[datetime] = None) -> datetime:
    """
    Return a timestamp that does not go backwards relative to previous

    Args:
        previous: Timestamp of the last recorded event, if any
        candidate: Proposed timestamp (defaults to now)

    Returns:
        max(previous, candidate), in UTC
    """
    candidate = ensure_utc(candidate or utc_now())
    if previous is None:
        return candidate
    previous = ensure_utc(previous)
    return candidate if candidate >= previous else previous


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string

    Args:
        dt: Datetime object

    Returns:
        ISO formatted string with Z suffix for UTC
    """
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 string to datetime

    Args:
        iso_string: ISO formatted datetime string

    Returns:
        Datetime object in UTC
    """
    return ensure_utc(date_parser.isoparse(iso_string))
