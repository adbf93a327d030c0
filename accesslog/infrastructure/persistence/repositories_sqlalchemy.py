"""SQLAlchemy implementation of the access log store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from accesslog.application.interfaces import AVERAGEABLE_FIELDS, AccessLogStoreInterface
from accesslog.domain.models import (
    AccessLogCreate,
    AccessLogRecord,
    LogFilter,
    SessionRow,
    StatBucket,
    StatDimension,
)
from accesslog.models.access_log import AccessLog
from accesslog.services.errors import StoreFailure
from accesslog.utils import normalize_timestamp, round_seconds

logger = logging.getLogger(__name__)


def _path_contains(fragment: str, dialect_name: str) -> Any:
    """Case-sensitive substring match on the request path."""

    if dialect_name == "sqlite":
        # SQLite LIKE folds ASCII case
        return func.instr(AccessLog.path, fragment) > 0
    return AccessLog.path.contains(fragment, autoescape=True)


def _where(log_filter: LogFilter, dialect_name: str) -> list[Any]:
    """Translate a filter into SQL criteria."""

    clauses: list[Any] = []
    if log_filter.session_id is not None:
        clauses.append(AccessLog.session_id == log_filter.session_id)
    if log_filter.path is not None:
        clauses.append(_path_contains(log_filter.path, dialect_name))
    if log_filter.status_code is not None:
        clauses.append(AccessLog.status_code == log_filter.status_code)
    if log_filter.start_date is not None:
        clauses.append(AccessLog.created_at >= log_filter.start_date)
    if log_filter.end_date is not None:
        clauses.append(AccessLog.created_at <= log_filter.end_date)
    return clauses


def _to_entity(data: AccessLogCreate) -> AccessLog:
    values = data.model_dump(exclude={"metadata", "created_at"})
    entity = AccessLog(**values, metadata_=data.metadata)
    if data.created_at is not None:
        entity.created_at = normalize_timestamp(data.created_at)
    return entity


class SQLAlchemyAccessLogStore(AccessLogStoreInterface):
    """Access log store backed by a SQLAlchemy async session"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _where(self, log_filter: LogFilter) -> list[Any]:
        return _where(log_filter, self.session.get_bind().dialect.name)

    async def _execute(self, statement: Executable, operation: str) -> Any:
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as exc:
            logger.exception("Access log store query failed during %s", operation)
            raise StoreFailure(f"Access log store failed during {operation}") from exc

    async def _commit(self, operation: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Access log store commit failed during %s", operation)
            raise StoreFailure(f"Access log store failed during {operation}") from exc

    async def create_one(self, data: AccessLogCreate) -> AccessLogRecord:
        entity = _to_entity(data)
        self.session.add(entity)
        await self._commit("create_one")
        await self.session.refresh(entity)
        return AccessLogRecord.model_validate(entity)

    async def create_many(self, items: Sequence[AccessLogCreate]) -> int:
        if not items:
            return 0
        self.session.add_all([_to_entity(item) for item in items])
        await self._commit("create_many")
        return len(items)

    async def find_by_session_id(self, session_id: str) -> List[AccessLogRecord]:
        result = await self._execute(
            select(AccessLog)
            .where(AccessLog.session_id == session_id)
            .order_by(AccessLog.created_at.asc(), AccessLog.id.asc()),
            "find_by_session_id",
        )
        return [AccessLogRecord.model_validate(row) for row in result.scalars().all()]

    async def find_many(
        self,
        log_filter: LogFilter,
        *,
        skip: int = 0,
        take: Optional[int] = None,
    ) -> List[AccessLogRecord]:
        statement = (
            select(AccessLog)
            .where(*self._where(log_filter))
            .order_by(AccessLog.created_at.desc(), AccessLog.id.desc())
            .offset(skip)
        )
        if take is not None:
            statement = statement.limit(take)

        result = await self._execute(statement, "find_many")
        return [AccessLogRecord.model_validate(row) for row in result.scalars().all()]

    async def count(self, log_filter: LogFilter) -> int:
        result = await self._execute(
            select(func.count(AccessLog.id)).where(*self._where(log_filter)),
            "count",
        )
        return int(result.scalar_one())

    async def group_count(
        self,
        dimension: StatDimension,
        log_filter: LogFilter,
        *,
        limit: Optional[int] = None,
    ) -> List[StatBucket]:
        column = getattr(AccessLog, dimension.value)
        occurrences = func.count(AccessLog.id).label("occurrences")
        statement = (
            select(column, occurrences)
            .where(*self._where(log_filter))
            .group_by(column)
            .order_by(occurrences.desc(), column.asc())
        )
        if dimension.nullable:
            statement = statement.where(column.isnot(None))
        if limit is not None:
            statement = statement.limit(limit)

        result = await self._execute(statement, f"group_count({dimension.value})")
        return [StatBucket(value=value, count=int(count)) for value, count in result.all()]

    async def count_distinct_sessions(self, log_filter: LogFilter) -> int:
        result = await self._execute(
            select(func.count(distinct(AccessLog.session_id))).where(
                *self._where(log_filter)
            ),
            "count_distinct_sessions",
        )
        return int(result.scalar_one())

    async def average(self, field: str, log_filter: LogFilter) -> Optional[float]:
        if field not in AVERAGEABLE_FIELDS:
            raise ValueError(f"Cannot average field '{field}'")

        column = getattr(AccessLog, field)
        result = await self._execute(
            select(func.avg(column)).where(*self._where(log_filter), column.isnot(None)),
            f"average({field})",
        )
        value = result.scalar_one_or_none()
        return float(value) if value is not None else None

    async def list_timestamps(self, log_filter: LogFilter) -> List[datetime]:
        result = await self._execute(
            select(AccessLog.created_at).where(*self._where(log_filter)),
            "list_timestamps",
        )
        return list(result.scalars().all())

    async def list_sessions(self, *, skip: int = 0, take: int = 20) -> List[SessionRow]:
        last_seen = func.max(AccessLog.created_at)
        statement = (
            select(
                AccessLog.session_id,
                func.min(AccessLog.created_at).label("start_time"),
                last_seen.label("end_time"),
                func.count(AccessLog.id).label("total_requests"),
                func.count(distinct(AccessLog.path)).label("unique_pages"),
                func.max(AccessLog.ip_address).label("ip_address"),
                func.max(AccessLog.device).label("device"),
                func.max(AccessLog.browser).label("browser"),
                func.max(AccessLog.os).label("os"),
                func.max(AccessLog.country).label("country"),
                func.max(AccessLog.city).label("city"),
            )
            .group_by(AccessLog.session_id)
            .order_by(last_seen.desc(), AccessLog.session_id.asc())
            .offset(skip)
            .limit(take)
        )
        result = await self._execute(statement, "list_sessions")

        rows: List[SessionRow] = []
        for row in result.mappings().all():
            start_time = normalize_timestamp(row["start_time"])
            end_time = normalize_timestamp(row["end_time"])
            rows.append(
                SessionRow(
                    session_id=row["session_id"],
                    start_time=start_time,
                    end_time=end_time,
                    total_requests=int(row["total_requests"]),
                    unique_pages=int(row["unique_pages"]),
                    duration=round_seconds(end_time - start_time),
                    ip_address=row["ip_address"],
                    device=row["device"],
                    browser=row["browser"],
                    os=row["os"],
                    country=row["country"],
                    city=row["city"],
                )
            )
        return rows

    async def count_sessions(self) -> int:
        result = await self._execute(
            select(func.count(distinct(AccessLog.session_id))),
            "count_sessions",
        )
        return int(result.scalar_one())


__all__ = ["SQLAlchemyAccessLogStore"]
