"""Pydantic schemas for access log ingestion and listing."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from accesslog.views.common import CamelModel, PaginationResponse, UtcDateTime


class AccessLogCreateRequest(CamelModel):
    """Payload to record one completed request."""

    session_id: str = Field(..., min_length=1, max_length=255)
    path: str = Field(..., min_length=1, max_length=2048)
    method: str = Field(..., min_length=1, max_length=16)
    status_code: int = Field(..., gt=0)
    user_id: Optional[str] = Field(None, max_length=128)
    ip_address: Optional[str] = Field(None, max_length=64)
    user_agent: Optional[str] = None
    response_time: Optional[int] = Field(None, ge=0)
    referer: Optional[str] = Field(None, max_length=2048)
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    device: Optional[str] = Field(None, max_length=50)
    browser: Optional[str] = Field(None, max_length=50)
    os: Optional[str] = Field(None, max_length=50)
    metadata: Optional[dict[str, Any]] = None

    @field_validator("session_id")
    @classmethod
    def _require_session_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("sessionId must not be blank")
        return value


class AccessLogResponse(CamelModel):
    id: int
    session_id: str
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    path: str
    method: str
    status_code: int
    response_time: Optional[int] = None
    referer: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    device: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    created_at: UtcDateTime


class AccessLogListResponse(CamelModel):
    logs: list[AccessLogResponse]
    pagination: PaginationResponse


class SeedResponse(CamelModel):
    message: str
    sessions_created: int
    logs_created: int
