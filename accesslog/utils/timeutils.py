"""Timestamp helpers shared by persistence and the analytics services.

All timestamps handled by the application are naive datetimes expressed in
UTC, which is how they are persisted.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as a naive UTC datetime."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_timestamp(value: Optional[datetime]) -> datetime | None:
    """Return a naive UTC datetime for persistence."""

    if value is None:
        return None

    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    return value


def parse_iso_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 date or datetime string into naive UTC.

    A bare date (``2024-05-01``) means midnight UTC of that day. A trailing
    ``Z`` designator is accepted. Raises ``ValueError`` when unparseable.
    """

    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"

    parsed = datetime.fromisoformat(text)
    return normalize_timestamp(parsed)


def round_seconds(delta: timedelta) -> int:
    """Round a time delta to whole seconds, halves rounding up."""

    return math.floor(delta.total_seconds() + 0.5)


def date_key(value: datetime) -> str:
    """Return the ``YYYY-MM-DD`` calendar date of a naive UTC timestamp."""

    return value.date().isoformat()


__all__ = [
    "date_key",
    "normalize_timestamp",
    "parse_iso_timestamp",
    "round_seconds",
    "utcnow",
]
