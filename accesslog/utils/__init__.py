"""Utility helpers for the access log analytics backend."""

from .timeutils import (
    date_key,
    normalize_timestamp,
    parse_iso_timestamp,
    round_seconds,
    utcnow,
)

__all__ = [
    "date_key",
    "normalize_timestamp",
    "parse_iso_timestamp",
    "round_seconds",
    "utcnow",
]
