"""Aggregate statistics over the access log."""

from __future__ import annotations

import logging
import time
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from accesslog.application.interfaces import AccessLogStoreInterface
from accesslog.config.settings import settings
from accesslog.domain.models import LogFilter, StatDimension, StatsReport
from accesslog.telemetry import STATS_LATENCY
from accesslog.utils import date_key, normalize_timestamp, utcnow

logger = logging.getLogger(__name__)


def bucket_by_day(timestamps: list[datetime]) -> dict[str, int]:
    """Count timestamps per UTC calendar day, keyed ``YYYY-MM-DD`` in date order."""

    counts = Counter(date_key(timestamp) for timestamp in timestamps)
    return {day: counts[day] for day in sorted(counts)}


async def compute_stats(
    store: AccessLogStoreInterface,
    log_filter: Optional[LogFilter] = None,
    *,
    now: Optional[datetime] = None,
) -> StatsReport:
    """Compute the statistics report for the records selected by ``log_filter``.

    The daily histogram only covers the trailing window ending at ``now``
    (``analytics.daily_window_days``), intersected with the filter. Sub-queries
    run one after another; a failure in any of them aborts the report.
    """

    analytics = settings.analytics
    log_filter = log_filter or LogFilter()
    now = normalize_timestamp(now) or utcnow()
    started = time.perf_counter()

    total_visits = await store.count(log_filter)
    unique_sessions = await store.count_distinct_sessions(log_filter)
    path_stats = await store.group_count(
        StatDimension.PATH, log_filter, limit=analytics.top_paths_limit
    )
    status_code_stats = await store.group_count(StatDimension.STATUS_CODE, log_filter)
    method_stats = await store.group_count(StatDimension.METHOD, log_filter)
    device_stats = await store.group_count(StatDimension.DEVICE, log_filter)
    browser_stats = await store.group_count(StatDimension.BROWSER, log_filter)
    os_stats = await store.group_count(StatDimension.OS, log_filter)

    window_start = now - timedelta(days=analytics.daily_window_days)
    recent = await store.list_timestamps(log_filter.within(window_start, now))
    daily_visits = bucket_by_day(recent)

    avg_response_time = await store.average("response_time", log_filter)

    elapsed = time.perf_counter() - started
    STATS_LATENCY.observe(elapsed)
    logger.debug(
        "Computed stats over %d records in %.3fs (filter=%s)",
        total_visits,
        elapsed,
        log_filter,
    )

    return StatsReport(
        total_visits=total_visits,
        unique_sessions=unique_sessions,
        path_stats=path_stats,
        status_code_stats=status_code_stats,
        method_stats=method_stats,
        device_stats=device_stats,
        browser_stats=browser_stats,
        os_stats=os_stats,
        daily_visits=daily_visits,
        avg_response_time=avg_response_time or 0.0,
    )


__all__ = ["bucket_by_day", "compute_stats"]
