"""Timestamp helpers.

Timestamps are stored as ISO-8601 UTC text (``2024-01-31T09:15:00Z``) so they
sort and compare correctly as plain strings in every database backend.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

__all__ = ["day_floor_iso", "parse_timestamp", "to_iso", "utcnow", "utcnow_iso"]


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def utcnow_iso() -> str:
    return to_iso(utcnow())


def parse_timestamp(value: Any, *, end_of_day: bool = False) -> str | None:
    """Normalise user input (``date``, ``datetime`` or ISO string) to stored form.

    A bare date means midnight, or the last second of that day when
    ``end_of_day`` is set so inclusive range filters cover the whole day.
    Raises ``ValueError`` for unparseable strings.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, date):
        moment = time(23, 59, 59) if end_of_day else time(0, 0, 0)
        return to_iso(datetime.combine(value, moment))
    if isinstance(value, str):
        raw = value.strip()
        if len(raw) == 10:
            return parse_timestamp(date.fromisoformat(raw), end_of_day=end_of_day)
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        return to_iso(datetime.fromisoformat(raw))
    raise ValueError(f"unsupported timestamp value: {value!r}")


def day_floor_iso(days_ago: int) -> str:
    """Midnight UTC ``days_ago`` days before today."""

    start = datetime.combine(utcnow().date() - timedelta(days=days_ago), time(0, 0, 0))
    return to_iso(start)
