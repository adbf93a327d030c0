"""Aggregate statistics report."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from accesslog.domain.models import LogFilter, StatBucket
from accesslog.infrastructure.persistence import InMemoryAccessLogStore
from accesslog.services import build_date_filter, compute_stats
from accesslog.services.stats import bucket_by_day

from conftest import BASE_TIME

NOW = BASE_TIME + timedelta(days=1)


def _pairs(buckets: list[StatBucket]) -> list[tuple]:
    return [(bucket.value, bucket.count) for bucket in buckets]


@pytest.fixture
def traffic_store(make_log) -> InMemoryAccessLogStore:
    return InMemoryAccessLogStore(
        [
            make_log("a", "/home", offset=0, response_time=100, device="Desktop", browser="Chrome", os="Linux"),
            make_log("a", "/cart", offset=10, response_time=300, device="Desktop", browser="Chrome"),
            make_log("a", "/home", offset=20, method="POST", status_code=201, device="Mobile"),
            make_log("b", "/home", offset=30, status_code=404, response_time=50),
            make_log("b", "/about", offset=40, status_code=404, os="iOS"),
            make_log("c", "/cart", offset=50, method="DELETE", status_code=500, browser="Safari"),
        ]
    )


@pytest.mark.asyncio
async def test_totals_and_grouped_counts(traffic_store):
    report = await compute_stats(traffic_store, now=NOW)

    assert report.total_visits == 6
    assert report.unique_sessions == 3
    assert _pairs(report.path_stats) == [("/home", 3), ("/cart", 2), ("/about", 1)]
    assert _pairs(report.status_code_stats) == [(200, 2), (404, 2), (201, 1), (500, 1)]
    assert _pairs(report.method_stats) == [("GET", 4), ("DELETE", 1), ("POST", 1)]


@pytest.mark.asyncio
async def test_nullable_dimensions_drop_missing_values(traffic_store):
    report = await compute_stats(traffic_store, now=NOW)

    assert _pairs(report.device_stats) == [("Desktop", 2), ("Mobile", 1)]
    assert _pairs(report.browser_stats) == [("Chrome", 2), ("Safari", 1)]
    assert _pairs(report.os_stats) == [("Linux", 1), ("iOS", 1)]


@pytest.mark.asyncio
async def test_status_code_counts_sum_to_total_visits(traffic_store):
    date_filter = build_date_filter("2024-05-01T12:00:15Z", None)

    report = await compute_stats(traffic_store, date_filter, now=NOW)

    assert report.total_visits == 4
    assert sum(bucket.count for bucket in report.status_code_stats) == report.total_visits


@pytest.mark.asyncio
async def test_average_response_time_ignores_unmeasured_requests(traffic_store):
    report = await compute_stats(traffic_store, now=NOW)

    assert report.avg_response_time == pytest.approx(150.0)


@pytest.mark.asyncio
async def test_average_response_time_is_zero_without_measurements(make_log):
    store = InMemoryAccessLogStore([make_log(), make_log(offset=5)])

    report = await compute_stats(store, now=NOW)

    assert report.avg_response_time == 0


@pytest.mark.asyncio
async def test_only_response_time_can_be_averaged(traffic_store):
    with pytest.raises(ValueError):
        await traffic_store.average("status_code", LogFilter())


@pytest.mark.asyncio
async def test_empty_store_produces_zeroed_report():
    report = await compute_stats(InMemoryAccessLogStore(), now=NOW)

    assert report.total_visits == 0
    assert report.unique_sessions == 0
    assert report.path_stats == []
    assert report.daily_visits == {}
    assert report.avg_response_time == 0


@pytest.mark.asyncio
async def test_top_paths_are_truncated_with_path_tie_break(make_log):
    logs = [make_log("s", f"/page-{index:02d}", offset=index) for index in range(12)]
    logs += [make_log("s", "/popular", offset=100), make_log("s", "/popular", offset=101)]
    store = InMemoryAccessLogStore(logs)

    report = await compute_stats(store, now=NOW)

    assert len(report.path_stats) == 10
    assert report.path_stats[0] == StatBucket(value="/popular", count=2)
    assert [bucket.value for bucket in report.path_stats[1:]] == [
        f"/page-{index:02d}" for index in range(9)
    ]
    assert len(report.method_stats) == 1


@pytest.mark.asyncio
async def test_daily_visits_cover_only_the_trailing_week(make_log):
    day = timedelta(days=1).total_seconds()
    store = InMemoryAccessLogStore(
        [
            make_log(offset=-10 * day),
            make_log(offset=-6 * day),
            make_log(offset=0),
            make_log(offset=60),
            make_log(offset=2 * day),
        ]
    )

    report = await compute_stats(store, now=NOW)

    assert report.total_visits == 5
    assert report.daily_visits == {"2024-04-25": 1, "2024-05-01": 2}
    assert list(report.daily_visits) == sorted(report.daily_visits)
    assert sum(report.daily_visits.values()) <= report.total_visits


@pytest.mark.asyncio
async def test_daily_visits_intersect_with_date_filter(make_log):
    day = timedelta(days=1).total_seconds()
    store = InMemoryAccessLogStore(
        [
            make_log(offset=-20 * day),
            make_log(offset=-5 * day),
            make_log(offset=-1 * day),
            make_log(offset=0),
        ]
    )
    date_filter = build_date_filter("2024-04-01", "2024-04-30T23:59:59")

    report = await compute_stats(store, date_filter, now=NOW)

    assert report.total_visits == 3
    assert report.daily_visits == {"2024-04-26": 1, "2024-04-30": 1}


@pytest.mark.asyncio
async def test_report_is_idempotent(traffic_store):
    first = await compute_stats(traffic_store, now=NOW)
    second = await compute_stats(traffic_store, now=NOW)

    assert first == second


@pytest.mark.asyncio
async def test_default_filter_matches_explicit_empty_filter(traffic_store):
    implicit = await compute_stats(traffic_store, now=NOW)
    explicit = await compute_stats(traffic_store, LogFilter(), now=NOW)

    assert implicit == explicit


def test_bucket_by_day_orders_dates():
    counts = bucket_by_day(
        [
            datetime(2024, 5, 3, 23, 59),
            datetime(2024, 5, 1, 0, 0),
            datetime(2024, 5, 3, 0, 1),
        ]
    )

    assert counts == {"2024-05-01": 1, "2024-05-03": 2}
    assert list(counts) == ["2024-05-01", "2024-05-03"]
