"""Record filters and offset pagination built from raw query parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from accesslog.config.settings import settings
from accesslog.domain.models import LogFilter
from accesslog.services.errors import InputValidationError
from accesslog.utils import parse_iso_timestamp

# Largest row offset a SQL backend accepts (signed 64-bit)
MAX_OFFSET = 2**63 - 1


def _present(raw: Optional[str]) -> Optional[str]:
    """Treat blank query values as absent."""

    if raw is None:
        return None
    value = raw.strip()
    return value or None


def parse_date(raw: Optional[str], field: str) -> Optional[datetime]:
    """Parse an optional ISO-8601 date bound."""

    value = _present(raw)
    if value is None:
        return None

    try:
        return parse_iso_timestamp(value)
    except ValueError:
        raise InputValidationError(
            f"{field} must be an ISO-8601 date or datetime, got '{value}'",
            field=field,
        ) from None


def parse_status_code(raw: Optional[str]) -> Optional[int]:
    value = _present(raw)
    if value is None:
        return None

    try:
        status_code = int(value)
    except ValueError:
        raise InputValidationError(
            f"statusCode must be an integer, got '{value}'",
            field="statusCode",
        ) from None

    if status_code <= 0:
        raise InputValidationError(
            "statusCode must be a positive integer",
            field="statusCode",
        )
    return status_code


def build_date_filter(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> LogFilter:
    """Build a filter restricted only by the given date bounds."""

    return build_filter(start_date=start_date, end_date=end_date)


def build_filter(
    *,
    session_id: Optional[str] = None,
    path: Optional[str] = None,
    status_code: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> LogFilter:
    """Build a record filter from raw query parameters.

    Absent or blank parameters leave the corresponding attribute
    unrestricted; with no date bounds the filter has no date restriction.
    """

    start = parse_date(start_date, "startDate")
    end = parse_date(end_date, "endDate")
    if start is not None and end is not None and start > end:
        raise InputValidationError(
            "startDate must not be later than endDate",
            field="startDate",
        )

    return LogFilter(
        session_id=_present(session_id),
        path=_present(path),
        status_code=parse_status_code(status_code),
        start_date=start,
        end_date=end,
    )


def _parse_positive(raw: Optional[str], field: str, default: int) -> int:
    value = _present(raw)
    if value is None:
        return default

    try:
        number = int(value)
    except ValueError:
        return default

    if number <= 0:
        raise InputValidationError(f"{field} must be a positive integer", field=field)
    return number


@dataclass(frozen=True, slots=True)
class PageInfo:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True, slots=True)
class Pagination:
    """Offset pagination with 1-indexed pages."""

    page: int = 1
    limit: int = 20

    @classmethod
    def from_raw(cls, page: Optional[str] = None, limit: Optional[str] = None) -> "Pagination":
        """Parse pagination query values.

        Missing or non-numeric values fall back to the defaults, non-positive
        values are rejected and oversized limits are clamped.
        """

        analytics = settings.analytics
        parsed_page = _parse_positive(page, "page", 1)
        parsed_limit = _parse_positive(limit, "limit", analytics.default_page_size)
        pagination = cls(page=parsed_page, limit=min(parsed_limit, analytics.max_page_size))
        if pagination.skip > MAX_OFFSET:
            raise InputValidationError(
                f"page is too large for a limit of {pagination.limit}",
                field="page",
            )
        return pagination

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def page_info(self, total: int) -> PageInfo:
        return PageInfo(
            page=self.page,
            limit=self.limit,
            total=total,
            total_pages=math.ceil(total / self.limit),
        )


__all__ = [
    "PageInfo",
    "Pagination",
    "build_date_filter",
    "build_filter",
    "parse_date",
    "parse_status_code",
]
