"""In-memory access log store.

Keeps records in an append-only list and answers every query by reducing
over a snapshot of it. Used by the test-suite and for running the service
without a database.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime
from itertools import count as id_sequence
from typing import Iterable, List, Optional, Sequence

from accesslog.application.interfaces import AVERAGEABLE_FIELDS, AccessLogStoreInterface
from accesslog.domain.models import (
    AccessLogCreate,
    AccessLogRecord,
    LogFilter,
    SessionRow,
    StatBucket,
    StatDimension,
)
from accesslog.utils import normalize_timestamp, round_seconds, utcnow

_SESSION_ROW_COLUMNS = ("ip_address", "device", "browser", "os", "country", "city")


def _chronological(record: AccessLogRecord) -> tuple[datetime, int]:
    return record.created_at, record.id


def _max_present(values: Iterable[Optional[str]]) -> Optional[str]:
    present = [value for value in values if value is not None]
    return max(present) if present else None


class InMemoryAccessLogStore(AccessLogStoreInterface):
    """Access log store kept in process memory."""

    def __init__(self, records: Iterable[AccessLogCreate] = ()) -> None:
        self._records: list[AccessLogRecord] = []
        self._ids = id_sequence(1)
        for item in records:
            self._append(item)

    def _append(self, data: AccessLogCreate) -> AccessLogRecord:
        created_at = normalize_timestamp(data.created_at) or utcnow()
        record = AccessLogRecord(
            id=next(self._ids),
            **data.model_dump(exclude={"created_at"}),
            created_at=created_at,
        )
        self._records.append(record)
        return record

    def _select(self, log_filter: LogFilter) -> list[AccessLogRecord]:
        snapshot = list(self._records)
        if log_filter.is_empty:
            return snapshot
        return [record for record in snapshot if log_filter.matches(record)]

    async def create_one(self, data: AccessLogCreate) -> AccessLogRecord:
        return self._append(data)

    async def create_many(self, items: Sequence[AccessLogCreate]) -> int:
        for item in items:
            self._append(item)
        return len(items)

    async def find_by_session_id(self, session_id: str) -> List[AccessLogRecord]:
        matches = [record for record in self._records if record.session_id == session_id]
        return sorted(matches, key=_chronological)

    async def find_many(
        self,
        log_filter: LogFilter,
        *,
        skip: int = 0,
        take: Optional[int] = None,
    ) -> List[AccessLogRecord]:
        ordered = sorted(self._select(log_filter), key=_chronological, reverse=True)
        end = None if take is None else skip + take
        return ordered[skip:end]

    async def count(self, log_filter: LogFilter) -> int:
        return len(self._select(log_filter))

    async def group_count(
        self,
        dimension: StatDimension,
        log_filter: LogFilter,
        *,
        limit: Optional[int] = None,
    ) -> List[StatBucket]:
        counts = Counter(
            record.dimension_value(dimension) for record in self._select(log_filter)
        )
        counts.pop(None, None)

        buckets = [
            StatBucket(value=value, count=occurrences)
            for value, occurrences in sorted(
                counts.items(), key=lambda item: (-item[1], item[0])
            )
        ]
        return buckets if limit is None else buckets[:limit]

    async def count_distinct_sessions(self, log_filter: LogFilter) -> int:
        return len({record.session_id for record in self._select(log_filter)})

    async def average(self, field: str, log_filter: LogFilter) -> Optional[float]:
        if field not in AVERAGEABLE_FIELDS:
            raise ValueError(f"Cannot average field '{field}'")

        values = [
            getattr(record, field)
            for record in self._select(log_filter)
            if getattr(record, field) is not None
        ]
        if not values:
            return None
        return sum(values) / len(values)

    async def list_timestamps(self, log_filter: LogFilter) -> List[datetime]:
        return [record.created_at for record in self._select(log_filter)]

    async def list_sessions(self, *, skip: int = 0, take: int = 20) -> List[SessionRow]:
        grouped: dict[str, list[AccessLogRecord]] = defaultdict(list)
        for record in self._select(LogFilter()):
            grouped[record.session_id].append(record)

        rows = []
        for session_id, records in grouped.items():
            start_time = min(record.created_at for record in records)
            end_time = max(record.created_at for record in records)
            descriptive = {
                column: _max_present(getattr(record, column) for record in records)
                for column in _SESSION_ROW_COLUMNS
            }
            rows.append(
                SessionRow(
                    session_id=session_id,
                    start_time=start_time,
                    end_time=end_time,
                    total_requests=len(records),
                    unique_pages=len({record.path for record in records}),
                    duration=round_seconds(end_time - start_time),
                    **descriptive,
                )
            )

        rows.sort(key=lambda row: row.session_id)
        rows.sort(key=lambda row: row.end_time, reverse=True)
        return rows[skip : skip + take]

    async def count_sessions(self) -> int:
        return len({record.session_id for record in self._records})


__all__ = ["InMemoryAccessLogStore"]
