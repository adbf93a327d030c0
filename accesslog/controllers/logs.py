"""Access log ingestion, listing, session and statistics endpoints."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Query, status

from accesslog.config.settings import settings
from accesslog.controllers.dependencies import StoreDep
from accesslog.domain.models import AccessLogCreate
from accesslog.services import (
    Pagination,
    build_date_filter,
    build_filter,
    compute_stats,
    get_session_detail,
    ingest_log,
    list_logs,
    list_sessions,
    seed_logs,
)
from accesslog.services.filters import PageInfo
from accesslog.views import (
    AccessLogCreateRequest,
    AccessLogListResponse,
    AccessLogResponse,
    ErrorResponse,
    PaginationResponse,
    PathStepResponse,
    SeedResponse,
    SessionListResponse,
    SessionPathResponse,
    SessionRowResponse,
    SessionSummaryResponse,
    StatsResponse,
)

router = APIRouter(
    prefix="/api/logs",
    tags=["logs"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid query or payload"},
        500: {"model": ErrorResponse, "description": "Log store unavailable"},
    },
)

# Raw strings so malformed paging values fall back to defaults instead of 422s.
PageQuery = Annotated[Optional[str], Query(description="1-indexed page number")]
LimitQuery = Annotated[Optional[str], Query(description="Page size")]
StartDateQuery = Annotated[
    Optional[str],
    Query(alias="startDate", description="Inclusive lower bound (ISO-8601)"),
]
EndDateQuery = Annotated[
    Optional[str],
    Query(alias="endDate", description="Inclusive upper bound (ISO-8601)"),
]


def _pagination_response(info: PageInfo) -> PaginationResponse:
    return PaginationResponse(
        page=info.page,
        limit=info.limit,
        total=info.total,
        total_pages=info.total_pages,
    )


@router.get("", response_model=AccessLogListResponse)
async def get_logs(
    store: StoreDep,
    page: PageQuery = None,
    limit: LimitQuery = None,
    session_id: Annotated[Optional[str], Query(alias="sessionId")] = None,
    path: Annotated[Optional[str], Query(description="Substring of the request path")] = None,
    status_code: Annotated[Optional[str], Query(alias="statusCode")] = None,
    start_date: StartDateQuery = None,
    end_date: EndDateQuery = None,
) -> AccessLogListResponse:
    """List access logs, newest first."""

    log_filter = build_filter(
        session_id=session_id,
        path=path,
        status_code=status_code,
        start_date=start_date,
        end_date=end_date,
    )
    result = await list_logs(store, log_filter, Pagination.from_raw(page, limit))

    return AccessLogListResponse(
        logs=[AccessLogResponse.model_validate(log.model_dump()) for log in result.logs],
        pagination=_pagination_response(result.pagination),
    )


@router.post("", response_model=AccessLogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(
    payload: AccessLogCreateRequest,
    store: StoreDep,
) -> AccessLogResponse:
    record = await ingest_log(store, AccessLogCreate.model_validate(payload.model_dump()))
    return AccessLogResponse.model_validate(record.model_dump())


@router.post("/seed", response_model=SeedResponse)
async def seed(store: StoreDep) -> SeedResponse:
    """Populate the store with synthetic sessions."""

    result = await seed_logs(store, settings.analytics.seed_session_count)
    return SeedResponse(
        message="Seed data created successfully",
        sessions_created=result.sessions_created,
        logs_created=result.logs_created,
    )


@router.get("/sessions", response_model=SessionListResponse)
async def get_sessions(
    store: StoreDep,
    page: PageQuery = None,
    limit: LimitQuery = None,
) -> SessionListResponse:
    """List sessions ordered by most recent activity."""

    result = await list_sessions(store, Pagination.from_raw(page, limit))
    return SessionListResponse(
        sessions=[SessionRowResponse.model_validate(row.model_dump()) for row in result.sessions],
        pagination=_pagination_response(result.pagination),
    )


@router.get(
    "/path/{session_id}",
    response_model=SessionPathResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown session"}},
)
async def get_session_path(store: StoreDep, session_id: str) -> SessionPathResponse:
    """Reconstruct a session's page-visit sequence with dwell times."""

    detail = await get_session_detail(store, session_id)
    return SessionPathResponse(
        session_summary=SessionSummaryResponse.model_validate(detail.summary.model_dump()),
        path_sequence=[
            PathStepResponse.model_validate(step.model_dump())
            for step in detail.path_sequence
        ],
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    store: StoreDep,
    start_date: StartDateQuery = None,
    end_date: EndDateQuery = None,
) -> StatsResponse:
    """Aggregate statistics, optionally restricted to a date range."""

    report = await compute_stats(store, build_date_filter(start_date, end_date))
    return StatsResponse.from_report(report)
