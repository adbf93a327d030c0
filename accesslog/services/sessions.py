"""Session reconstruction from raw access log records.

A session is every record sharing a ``session_id``. Records are ordered by
``created_at`` with the record ``id`` as the tie-breaker, and each step's
dwell time is the gap, in whole seconds, to the following step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from accesslog.application.interfaces import AccessLogStoreInterface
from accesslog.domain.models import (
    AccessLogRecord,
    PathStep,
    SessionDetail,
    SessionRow,
    SessionSummary,
)
from accesslog.services.errors import InputValidationError, NotFoundError
from accesslog.services.filters import PageInfo, Pagination
from accesslog.telemetry import record_session_lookup
from accesslog.utils import round_seconds

logger = logging.getLogger(__name__)


def build_path_sequence(records: Sequence[AccessLogRecord]) -> list[PathStep]:
    """Number chronologically ordered records and attach dwell durations."""

    steps: list[PathStep] = []
    for index, record in enumerate(records):
        duration = None
        if index < len(records) - 1:
            duration = round_seconds(records[index + 1].created_at - record.created_at)

        steps.append(
            PathStep(
                step=index + 1,
                path=record.path,
                method=record.method,
                status_code=record.status_code,
                response_time=record.response_time,
                timestamp=record.created_at,
                referer=record.referer,
                duration=duration,
            )
        )
    return steps


def reconstruct_session(
    session_id: str,
    records: Sequence[AccessLogRecord],
) -> SessionDetail:
    """Derive the summary and path sequence of one session.

    ``records`` may arrive in any order. Raises ``NotFoundError`` when empty.
    """

    if not records:
        raise NotFoundError(f"No logs found for session '{session_id}'")

    ordered = sorted(records, key=lambda record: (record.created_at, record.id))
    first, last = ordered[0], ordered[-1]

    summary = SessionSummary(
        session_id=session_id,
        user_id=first.user_id,
        ip_address=first.ip_address,
        user_agent=first.user_agent,
        device=first.device,
        browser=first.browser,
        os=first.os,
        country=first.country,
        city=first.city,
        start_time=first.created_at,
        end_time=last.created_at,
        total_duration=round_seconds(last.created_at - first.created_at),
        total_requests=len(ordered),
        unique_pages=len({record.path for record in ordered}),
        entry_page=first.path,
        exit_page=last.path,
    )
    return SessionDetail(summary=summary, path_sequence=build_path_sequence(ordered))


async def get_session_detail(
    store: AccessLogStoreInterface,
    session_id: str,
) -> SessionDetail:
    """Load a session's records and reconstruct it."""

    if not session_id or not session_id.strip():
        raise InputValidationError("Session ID is required", field="sessionId")

    records = await store.find_by_session_id(session_id)
    if not records:
        record_session_lookup(found=False)
        logger.warning("No access logs found for session_id=%s", session_id)
        raise NotFoundError(f"No logs found for session '{session_id}'")

    detail = reconstruct_session(session_id, records)
    record_session_lookup(found=True)
    logger.debug(
        "Reconstructed session_id=%s with %d steps",
        session_id,
        detail.summary.total_requests,
    )
    return detail


@dataclass(frozen=True, slots=True)
class SessionPage:
    sessions: list[SessionRow]
    pagination: PageInfo


async def list_sessions(
    store: AccessLogStoreInterface,
    pagination: Pagination,
) -> SessionPage:
    """Return one page of sessions, most recently active first."""

    rows = await store.list_sessions(skip=pagination.skip, take=pagination.limit)
    total = await store.count_sessions()
    return SessionPage(sessions=rows, pagination=pagination.page_info(total))


__all__ = [
    "SessionPage",
    "build_path_sequence",
    "get_session_detail",
    "list_sessions",
    "reconstruct_session",
]
