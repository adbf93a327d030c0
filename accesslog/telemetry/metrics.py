"""Prometheus collectors for the API and the analytics services."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

_LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

REQUEST_COUNT = Counter(
    "accesslog_http_requests_total",
    "HTTP requests served, by route template and status",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "accesslog_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=_LATENCY_BUCKETS,
)

ERROR_COUNTER = Counter(
    "accesslog_http_server_errors_total",
    "Requests answered with a 5xx status",
    ("method", "route"),
)

RECORDS_INGESTED = Counter(
    "accesslog_records_ingested_total",
    "Number of access log records appended to the store",
    ("source",),
)

SESSION_LOOKUPS = Counter(
    "accesslog_session_lookups_total",
    "Session detail reconstructions by outcome",
    ("outcome",),
)

STATS_LATENCY = Histogram(
    "accesslog_stats_duration_seconds",
    "Time spent computing an aggregate statistics report",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record one completed HTTP request."""

    labels = {"method": method or "UNKNOWN", "route": route or "unmatched"}

    REQUEST_COUNT.labels(status=str(status_code), **labels).inc()
    REQUEST_LATENCY.labels(**labels).observe(max(duration_seconds, 0.0))
    if status_code >= 500:
        ERROR_COUNTER.labels(**labels).inc()


def record_ingested(count: int, source: str = "api") -> None:
    """Increment the ingested-records counter."""

    if count > 0:
        RECORDS_INGESTED.labels(source=source).inc(count)


def record_session_lookup(found: bool) -> None:
    SESSION_LOOKUPS.labels(outcome="found" if found else "not_found").inc()
