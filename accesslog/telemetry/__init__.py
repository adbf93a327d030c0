"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    RECORDS_INGESTED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SESSION_LOOKUPS,
    STATS_LATENCY,
    observe_request,
    record_ingested,
    record_session_lookup,
)

__all__ = [
    "ERROR_COUNTER",
    "RECORDS_INGESTED",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SESSION_LOOKUPS",
    "STATS_LATENCY",
    "observe_request",
    "record_ingested",
    "record_session_lookup",
]
