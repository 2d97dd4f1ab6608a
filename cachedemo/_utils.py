from __future__ import annotations

import typing as tp
from datetime import datetime, timezone
from email.utils import format_datetime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_http_date(moment: tp.Optional[datetime] = None) -> str:
    """
    Format a moment as an HTTP-date, the value used by Last-Modified,
    If-Modified-Since and Date headers.

    Naive datetimes are treated as UTC. Sub-second precision is dropped,
    so two moments within the same second format identically.

    Example output: 'Mon, 01 Jan 2024 00:00:00 GMT'
    """
    moment = moment if moment is not None else utcnow()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def isoformat_millis(moment: datetime) -> str:
    """
    ISO-8601 in UTC with millisecond precision and a "Z" suffix.

    Examples:
        >>> isoformat_millis(datetime(2024, 1, 1, tzinfo=timezone.utc))
        '2024-01-01T00:00:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
