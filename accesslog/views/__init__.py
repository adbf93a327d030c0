"""Pydantic schemas used as views in the MVC architecture."""

from .common import CamelModel, ErrorResponse, PaginationResponse, UtcDateTime
from .logs import (
    AccessLogCreateRequest,
    AccessLogListResponse,
    AccessLogResponse,
    SeedResponse,
)
from .sessions import (
    PathStepResponse,
    SessionListResponse,
    SessionPathResponse,
    SessionRowResponse,
    SessionSummaryResponse,
)
from .stats import StatsResponse

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "PaginationResponse",
    "UtcDateTime",
    "AccessLogCreateRequest",
    "AccessLogListResponse",
    "AccessLogResponse",
    "SeedResponse",
    "PathStepResponse",
    "SessionListResponse",
    "SessionPathResponse",
    "SessionRowResponse",
    "SessionSummaryResponse",
    "StatsResponse",
]
