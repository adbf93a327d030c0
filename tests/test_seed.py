"""Synthetic traffic generator."""

from __future__ import annotations

import random
from itertools import groupby

import pytest

from accesslog.domain.models import LogFilter
from accesslog.infrastructure.persistence import InMemoryAccessLogStore
from accesslog.services import seed_logs
from accesslog.services.seed import (
    MAX_GAP_SECONDS,
    MIN_GAP_SECONDS,
    START_WINDOW,
    generate_seed_records,
    generate_session,
)

from conftest import BASE_TIME


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def test_session_shape(rng):
    for _ in range(25):
        records = generate_session(rng, BASE_TIME)

        assert 3 <= len(records) <= 12
        assert records[0].method == "GET"
        assert records[0].referer is None
        assert len({record.session_id for record in records}) == 1
        assert len({(record.device, record.browser, record.os) for record in records}) == 1


def test_get_requests_always_succeed(rng):
    records = generate_seed_records(30, rng=rng, now=BASE_TIME)

    assert all(record.status_code == 200 for record in records if record.method == "GET")
    assert all(10 <= record.response_time < 510 for record in records)


def test_session_timing(rng):
    records = generate_session(rng, BASE_TIME)
    times = [record.created_at for record in records]

    assert BASE_TIME - START_WINDOW <= times[0] <= BASE_TIME
    for earlier, later in zip(times, times[1:]):
        gap = (later - earlier).total_seconds()
        assert MIN_GAP_SECONDS <= gap <= MAX_GAP_SECONDS


def test_sessions_get_distinct_ids(rng):
    records = generate_seed_records(20, rng=rng, now=BASE_TIME)

    session_ids = [key for key, _ in groupby(record.session_id for record in records)]
    assert len(session_ids) == 20
    assert len(set(session_ids)) == 20


def test_same_seed_same_traffic():
    first = generate_seed_records(5, rng=random.Random(7), now=BASE_TIME)
    second = generate_seed_records(5, rng=random.Random(7), now=BASE_TIME)

    assert first == second


@pytest.mark.asyncio
async def test_seed_logs_persists_generated_records(rng):
    store = InMemoryAccessLogStore()

    result = await seed_logs(store, 6, rng=rng, now=BASE_TIME)

    assert result.sessions_created == 6
    assert result.logs_created == await store.count(LogFilter())
    assert await store.count_sessions() == 6
