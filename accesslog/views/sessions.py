"""Pydantic schemas for session listings and reconstructed paths."""

from __future__ import annotations

from typing import Optional

from accesslog.views.common import CamelModel, PaginationResponse, UtcDateTime


class PathStepResponse(CamelModel):
    step: int
    path: str
    method: str
    status_code: int
    response_time: Optional[int] = None
    timestamp: UtcDateTime
    referer: Optional[str] = None
    duration: Optional[int] = None


class SessionSummaryResponse(CamelModel):
    session_id: str
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    device: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    start_time: UtcDateTime
    end_time: UtcDateTime
    total_duration: int
    total_requests: int
    unique_pages: int
    entry_page: str
    exit_page: str


class SessionPathResponse(CamelModel):
    """Reconstructed session: summary plus the ordered page visits."""

    session_summary: SessionSummaryResponse
    path_sequence: list[PathStepResponse]


class SessionRowResponse(CamelModel):
    session_id: str
    start_time: UtcDateTime
    end_time: UtcDateTime
    total_requests: int
    unique_pages: int
    duration: int
    ip_address: Optional[str] = None
    device: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None


class SessionListResponse(CamelModel):
    sessions: list[SessionRowResponse]
    pagination: PaginationResponse
