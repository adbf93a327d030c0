"""Pydantic schemas for the aggregate statistics report."""

from __future__ import annotations

from accesslog.domain.models import StatBucket, StatsReport
from accesslog.views.common import CamelModel


class PathCount(CamelModel):
    path: str
    count: int


class StatusCodeCount(CamelModel):
    status_code: int
    count: int


class MethodCount(CamelModel):
    method: str
    count: int


class DeviceCount(CamelModel):
    device: str
    count: int


class BrowserCount(CamelModel):
    browser: str
    count: int


class OsCount(CamelModel):
    os: str
    count: int


def _buckets(model: type[CamelModel], key: str, buckets: list[StatBucket]) -> list:
    return [model(**{key: bucket.value, "count": bucket.count}) for bucket in buckets]


class StatsResponse(CamelModel):
    """Aggregate statistics over the selected records."""

    total_visits: int
    unique_sessions: int
    path_stats: list[PathCount]
    status_code_stats: list[StatusCodeCount]
    method_stats: list[MethodCount]
    device_stats: list[DeviceCount]
    browser_stats: list[BrowserCount]
    os_stats: list[OsCount]
    daily_visits: dict[str, int]
    avg_response_time: float

    @classmethod
    def from_report(cls, report: StatsReport) -> "StatsResponse":
        return cls(
            total_visits=report.total_visits,
            unique_sessions=report.unique_sessions,
            path_stats=_buckets(PathCount, "path", report.path_stats),
            status_code_stats=_buckets(StatusCodeCount, "status_code", report.status_code_stats),
            method_stats=_buckets(MethodCount, "method", report.method_stats),
            device_stats=_buckets(DeviceCount, "device", report.device_stats),
            browser_stats=_buckets(BrowserCount, "browser", report.browser_stats),
            os_stats=_buckets(OsCount, "os", report.os_stats),
            daily_visits=report.daily_visits,
            avg_response_time=report.avg_response_time,
        )
