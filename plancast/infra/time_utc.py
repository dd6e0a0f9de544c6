"""Scenario timestamps: UTC, millisecond precision, trailing 'Z'."""
from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def utc_stamp(dt: datetime) -> str:
    """
    "2026-01-02T03:04:05.000Z" for any aware datetime, converted to UTC.

    Raises:
        ValueError: if dt is naive.
    """
    if dt.tzinfo is None:
        raise ValueError("utc_stamp requires a timezone-aware datetime")
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
