"""Shared fixtures for the access log analytics test-suite."""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from typing import Any, Callable

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("LOG_FILE", "logs/test.log")

import pytest  # noqa: E402

from accesslog.domain.models import AccessLogCreate  # noqa: E402
from accesslog.infrastructure.persistence import InMemoryAccessLogStore  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)

LogFactory = Callable[..., AccessLogCreate]


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def make_log() -> LogFactory:
    """Build ingestion payloads; ``offset`` is seconds after ``BASE_TIME``."""

    def factory(
        session_id: str = "s1",
        path: str = "/home",
        *,
        offset: float = 0,
        method: str = "GET",
        status_code: int = 200,
        **extra: Any,
    ) -> AccessLogCreate:
        return AccessLogCreate(
            session_id=session_id,
            path=path,
            method=method,
            status_code=status_code,
            created_at=BASE_TIME + timedelta(seconds=offset),
            **extra,
        )

    return factory


@pytest.fixture
def checkout_session(make_log: LogFactory) -> list[AccessLogCreate]:
    """Three-step visit: home, cart, then a checkout POST."""

    return [
        make_log(
            "s1",
            "/home",
            offset=0,
            response_time=120,
            device="Desktop",
            browser="Chrome",
            os="macOS",
            ip_address="10.0.0.1",
            user_id="user_7",
            country="Japan",
            city="Tokyo",
        ),
        make_log("s1", "/cart", offset=30, response_time=80, device="Desktop"),
        make_log(
            "s1",
            "/checkout",
            offset=95,
            method="POST",
            status_code=201,
            referer="/cart",
            device="Desktop",
        ),
    ]


@pytest.fixture
def memory_store(checkout_session: list[AccessLogCreate]) -> InMemoryAccessLogStore:
    return InMemoryAccessLogStore(checkout_session)
