"""Filter construction, date parsing and pagination."""

from __future__ import annotations

from datetime import datetime

import pytest

from accesslog.config.settings import settings
from accesslog.domain.models import AccessLogRecord, LogFilter
from accesslog.services import InputValidationError, Pagination, build_filter
from accesslog.services.filters import MAX_OFFSET, parse_date


def _record(**overrides) -> AccessLogRecord:
    values = {
        "id": 1,
        "session_id": "s1",
        "path": "/products/42",
        "method": "GET",
        "status_code": 404,
        "created_at": datetime(2024, 5, 1, 12, 0),
    }
    values.update(overrides)
    return AccessLogRecord(**values)


def test_absent_parameters_build_an_unrestricted_filter():
    log_filter = build_filter(session_id="", path="  ", status_code=None)

    assert log_filter == LogFilter()
    assert log_filter.is_empty
    assert log_filter.matches(_record())


def test_filter_matches_on_every_criterion():
    log_filter = build_filter(
        session_id="s1",
        path="products",
        status_code="404",
        start_date="2024-05-01",
        end_date="2024-05-01T12:00:00",
    )

    assert log_filter.matches(_record())
    assert not log_filter.matches(_record(session_id="s2"))
    assert not log_filter.matches(_record(path="/cart"))
    assert not log_filter.matches(_record(status_code=200))
    assert not log_filter.matches(_record(created_at=datetime(2024, 5, 1, 12, 0, 1)))
    assert not log_filter.matches(_record(created_at=datetime(2024, 4, 30, 23, 59)))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-05-01", datetime(2024, 5, 1)),
        ("2024-05-01T08:30:00", datetime(2024, 5, 1, 8, 30)),
        ("2024-05-01T08:30:00Z", datetime(2024, 5, 1, 8, 30)),
        ("2024-05-01T10:30:00+02:00", datetime(2024, 5, 1, 8, 30)),
    ],
)
def test_dates_are_parsed_as_naive_utc(raw, expected):
    assert parse_date(raw, "startDate") == expected


def test_unparseable_date_names_the_field():
    with pytest.raises(InputValidationError) as excinfo:
        build_filter(end_date="yesterday")

    assert excinfo.value.field == "endDate"


def test_inverted_date_range_is_rejected():
    with pytest.raises(InputValidationError):
        build_filter(start_date="2024-05-02", end_date="2024-05-01")


@pytest.mark.parametrize("raw", ["abc", "0", "-404"])
def test_invalid_status_code_is_rejected(raw):
    with pytest.raises(InputValidationError):
        build_filter(status_code=raw)


def test_within_intersects_existing_bounds():
    log_filter = LogFilter(start_date=datetime(2024, 4, 1), end_date=datetime(2024, 4, 30))

    narrowed = log_filter.within(datetime(2024, 4, 20), datetime(2024, 5, 2))

    assert narrowed.start_date == datetime(2024, 4, 20)
    assert narrowed.end_date == datetime(2024, 4, 30)
    assert log_filter.start_date == datetime(2024, 4, 1)


def test_pagination_defaults():
    pagination = Pagination.from_raw(None, None)

    assert pagination.page == 1
    assert pagination.limit == settings.analytics.default_page_size
    assert pagination.skip == 0


def test_non_numeric_pagination_falls_back_to_defaults():
    pagination = Pagination.from_raw("two", "lots")

    assert (pagination.page, pagination.limit) == (1, 20)


def test_pagination_offset():
    pagination = Pagination.from_raw("3", "15")

    assert pagination.skip == 30
    assert pagination.page_info(31).total_pages == 3
    assert pagination.page_info(0).total_pages == 0


@pytest.mark.parametrize(("page", "limit"), [("0", "10"), ("1", "-5")])
def test_non_positive_pagination_is_rejected(page, limit):
    with pytest.raises(InputValidationError):
        Pagination.from_raw(page, limit)


def test_page_beyond_any_offset_is_rejected():
    with pytest.raises(InputValidationError) as excinfo:
        Pagination.from_raw("99999999999999999999", "20")

    assert excinfo.value.field == "page"


def test_largest_representable_offset_is_accepted():
    pagination = Pagination.from_raw(str(MAX_OFFSET + 1), "1")

    assert pagination.skip == MAX_OFFSET


def test_oversized_limit_is_clamped():
    pagination = Pagination.from_raw("1", "100000")

    assert pagination.limit == settings.analytics.max_page_size
