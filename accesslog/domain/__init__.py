"""Domain layer: records, filters and derived analytics types."""

from .models import (
    AccessLogCreate,
    AccessLogRecord,
    LogFilter,
    PathStep,
    SessionDetail,
    SessionRow,
    SessionSummary,
    StatBucket,
    StatDimension,
    StatsReport,
)

__all__ = [
    "AccessLogCreate",
    "AccessLogRecord",
    "LogFilter",
    "PathStep",
    "SessionDetail",
    "SessionRow",
    "SessionSummary",
    "StatBucket",
    "StatDimension",
    "StatsReport",
]
