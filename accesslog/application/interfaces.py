from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from accesslog.domain.models import (
    AccessLogCreate,
    AccessLogRecord,
    LogFilter,
    SessionRow,
    StatBucket,
    StatDimension,
)

AVERAGEABLE_FIELDS = frozenset({"response_time"})


class AccessLogStoreInterface(ABC):
    """Persistence contract for the append-only access log.

    Implementations raise ``StoreFailure`` when the backing store fails.
    """

    @abstractmethod
    async def create_one(self, data: AccessLogCreate) -> AccessLogRecord:
        ...

    @abstractmethod
    async def create_many(self, items: Sequence[AccessLogCreate]) -> int:
        ...

    @abstractmethod
    async def find_by_session_id(self, session_id: str) -> List[AccessLogRecord]:
        ...

    @abstractmethod
    async def find_many(
        self,
        log_filter: LogFilter,
        *,
        skip: int = 0,
        take: Optional[int] = None,
    ) -> List[AccessLogRecord]:
        """Return matching records, newest first."""

    @abstractmethod
    async def count(self, log_filter: LogFilter) -> int:
        ...

    @abstractmethod
    async def group_count(
        self,
        dimension: StatDimension,
        log_filter: LogFilter,
        *,
        limit: Optional[int] = None,
    ) -> List[StatBucket]:
        """Return counts per dimension value, largest first, ties by value.

        Null values of nullable dimensions are left out.
        """

    @abstractmethod
    async def count_distinct_sessions(self, log_filter: LogFilter) -> int:
        ...

    @abstractmethod
    async def average(self, field: str, log_filter: LogFilter) -> Optional[float]:
        """Mean of a numeric field over matching records where it is not null."""

    @abstractmethod
    async def list_timestamps(self, log_filter: LogFilter) -> List[datetime]:
        ...

    @abstractmethod
    async def list_sessions(self, *, skip: int = 0, take: int = 20) -> List[SessionRow]:
        """Return one row per session, most recently active first."""

    @abstractmethod
    async def count_sessions(self) -> int:
        ...
