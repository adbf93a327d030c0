"""Appending records to the access log."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from accesslog.application.interfaces import AccessLogStoreInterface
from accesslog.domain.models import AccessLogCreate, AccessLogRecord, LogFilter
from accesslog.services.filters import PageInfo, Pagination
from accesslog.services.seed import generate_seed_records
from accesslog.telemetry import record_ingested

logger = logging.getLogger(__name__)


async def ingest_log(
    store: AccessLogStoreInterface,
    data: AccessLogCreate,
) -> AccessLogRecord:
    record = await store.create_one(data)
    record_ingested(1)
    logger.info(
        "Recorded %s %s (%s) for session_id=%s",
        record.method,
        record.path,
        record.status_code,
        record.session_id,
    )
    return record


@dataclass(frozen=True, slots=True)
class SeedResult:
    sessions_created: int
    logs_created: int


async def seed_logs(
    store: AccessLogStoreInterface,
    session_count: int,
    *,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> SeedResult:
    """Generate synthetic sessions and bulk-insert them."""

    records = generate_seed_records(session_count, rng=rng, now=now)
    created = await store.create_many(records)
    record_ingested(created, source="seed")
    logger.info("Seeded %d sessions with %d access logs", session_count, created)
    return SeedResult(sessions_created=session_count, logs_created=created)


@dataclass(frozen=True, slots=True)
class LogPage:
    logs: list[AccessLogRecord]
    pagination: PageInfo


async def list_logs(
    store: AccessLogStoreInterface,
    log_filter: LogFilter,
    pagination: Pagination,
) -> LogPage:
    """Return one page of matching records, newest first."""

    logs = await store.find_many(log_filter, skip=pagination.skip, take=pagination.limit)
    total = await store.count(log_filter)
    return LogPage(logs=logs, pagination=pagination.page_info(total))


__all__ = ["LogPage", "SeedResult", "ingest_log", "list_logs", "seed_logs"]
