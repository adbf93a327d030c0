"""Service layer: session reconstruction, aggregation and ingestion."""

from .errors import AccessLogError, InputValidationError, NotFoundError, StoreFailure
from .filters import PageInfo, Pagination, build_date_filter, build_filter
from .ingestion import LogPage, SeedResult, ingest_log, list_logs, seed_logs
from .sessions import SessionPage, get_session_detail, list_sessions, reconstruct_session
from .stats import compute_stats

__all__ = [
    "AccessLogError",
    "InputValidationError",
    "NotFoundError",
    "StoreFailure",
    "PageInfo",
    "Pagination",
    "build_date_filter",
    "build_filter",
    "LogPage",
    "SeedResult",
    "ingest_log",
    "list_logs",
    "seed_logs",
    "SessionPage",
    "get_session_detail",
    "list_sessions",
    "reconstruct_session",
    "compute_stats",
]
