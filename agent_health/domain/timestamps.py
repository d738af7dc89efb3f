"""Shared UTC timestamp helper utilities."""

from __future__ import annotations

from datetime import datetime, timezone


def domain_utc_now() -> datetime:
    """Return the current time as an aware UTC datetime.

    Returns:
        datetime: Current UTC time.
    """

    return datetime.now(timezone.utc)


def domain_format_timestamp(moment: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with millisecond precision.

    Naive datetimes are treated as UTC.

    Args:
        moment: Datetime to render.

    Returns:
        str: Timestamp such as `2024-01-31T12:00:00.123Z`.
    """

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc_moment = moment.astimezone(timezone.utc)
    return utc_moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
