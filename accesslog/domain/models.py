"""Domain models for access log records and the views derived from them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class StatDimension(str, Enum):
    """Record attributes that can be grouped and counted."""

    PATH = "path"
    STATUS_CODE = "status_code"
    METHOD = "method"
    DEVICE = "device"
    BROWSER = "browser"
    OS = "os"

    @property
    def nullable(self) -> bool:
        """Whether records may lack a value for this dimension."""

        return self in (StatDimension.DEVICE, StatDimension.BROWSER, StatDimension.OS)


class AccessLogCreate(BaseModel):
    """Values needed to append a new access log record."""

    session_id: str = Field(..., min_length=1, max_length=255)
    path: str = Field(..., min_length=1, max_length=2048)
    method: str = Field(..., min_length=1, max_length=16)
    status_code: int = Field(..., gt=0)
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    response_time: Optional[int] = Field(None, ge=0)
    referer: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    device: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None

    @field_validator("session_id")
    @classmethod
    def _require_session_id(cls, value: str) -> str:
        # blank ids could never be looked up again
        if not value.strip():
            raise ValueError("session id must not be blank")
        return value

    @field_validator("method")
    @classmethod
    def _normalise_method(cls, value: str) -> str:
        return value.strip().upper()


class AccessLogRecord(BaseModel):
    """A persisted, immutable access log record."""

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
    metadata: Optional[dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("metadata_", "metadata"),
    )
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True, populate_by_name=True)

    def dimension_value(self, dimension: StatDimension) -> Union[str, int, None]:
        return getattr(self, dimension.value)


class PathStep(BaseModel):
    """One request within a reconstructed session, with its dwell time."""

    step: int
    path: str
    method: str
    status_code: int
    response_time: Optional[int] = None
    timestamp: datetime
    referer: Optional[str] = None
    duration: Optional[int] = None

    model_config = ConfigDict(frozen=True)


class SessionSummary(BaseModel):
    """Summary of a session, recomputed from its records on every request."""

    session_id: str
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    device: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    start_time: datetime
    end_time: datetime
    total_duration: int
    total_requests: int
    unique_pages: int
    entry_page: str
    exit_page: str

    model_config = ConfigDict(frozen=True)


class SessionDetail(BaseModel):
    summary: SessionSummary
    path_sequence: list[PathStep]


class SessionRow(BaseModel):
    """One row of the session listing, grouped by session identifier."""

    session_id: str
    start_time: datetime
    end_time: datetime
    total_requests: int
    unique_pages: int
    duration: int
    ip_address: Optional[str] = None
    device: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None


class StatBucket(BaseModel):
    """A grouped count for one value of a dimension."""

    value: Union[int, str]
    count: int

    model_config = ConfigDict(frozen=True)


class StatsReport(BaseModel):
    total_visits: int
    unique_sessions: int
    path_stats: list[StatBucket]
    status_code_stats: list[StatBucket]
    method_stats: list[StatBucket]
    device_stats: list[StatBucket]
    browser_stats: list[StatBucket]
    os_stats: list[StatBucket]
    daily_visits: dict[str, int]
    avg_response_time: float


@dataclass(frozen=True, slots=True)
class LogFilter:
    """Record selection criteria; unset fields do not restrict the selection.

    ``path`` matches by substring containment, date bounds are inclusive.
    """

    session_id: Optional[str] = None
    path: Optional[str] = None
    status_code: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.session_id is None
            and self.path is None
            and self.status_code is None
            and self.start_date is None
            and self.end_date is None
        )

    def matches(self, record: AccessLogRecord) -> bool:
        if self.session_id is not None and record.session_id != self.session_id:
            return False
        if self.path is not None and self.path not in record.path:
            return False
        if self.status_code is not None and record.status_code != self.status_code:
            return False
        if self.start_date is not None and record.created_at < self.start_date:
            return False
        if self.end_date is not None and record.created_at > self.end_date:
            return False
        return True

    def within(self, since: datetime, until: datetime) -> "LogFilter":
        """Return a copy further restricted to the ``[since, until]`` window."""

        start = since if self.start_date is None else max(self.start_date, since)
        end = until if self.end_date is None else min(self.end_date, until)
        return replace(self, start_date=start, end_date=end)


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
