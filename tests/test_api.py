"""HTTP surface of the analytics service, served from an in-memory store."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from accesslog.config.settings import settings
from accesslog.controllers.dependencies import get_store
from accesslog.main import app
from accesslog.services import StoreFailure


@pytest.fixture
def client(memory_store):
    """Route every store dependency to the in-memory fixture store."""

    async def fake_get_store():
        return memory_store

    app.dependency_overrides[get_store] = fake_get_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_session_path(client):
    response = client.get("/api/logs/path/s1")

    assert response.status_code == 200
    payload = response.json()
    assert [
        (step["step"], step["path"], step["duration"]) for step in payload["pathSequence"]
    ] == [(1, "/home", 30), (2, "/cart", 65), (3, "/checkout", None)]

    summary = payload["sessionSummary"]
    assert summary["sessionId"] == "s1"
    assert summary["totalDuration"] == 95
    assert summary["entryPage"] == "/home"
    assert summary["exitPage"] == "/checkout"
    assert summary["uniquePages"] == 3
    assert summary["startTime"] == "2024-05-01T12:00:00Z"


def test_unknown_session_path_is_404(client):
    response = client.get("/api/logs/path/nobody")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_create_log(client):
    response = client.post(
        "/api/logs",
        json={
            "sessionId": "s9",
            "path": "/pricing",
            "method": "get",
            "statusCode": 200,
            "responseTime": 42,
            "metadata": {"experiment": "b"},
        },
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["sessionId"] == "s9"
    assert payload["method"] == "GET"
    assert payload["metadata"] == {"experiment": "b"}
    assert payload["createdAt"].endswith("Z")

    listing = client.get("/api/logs", params={"sessionId": "s9"}).json()
    assert listing["pagination"]["total"] == 1


def test_create_log_requires_core_fields(client):
    response = client.post("/api/logs", json={"sessionId": "s9", "path": "/"})

    assert response.status_code == 400
    assert "method" in response.json()["detail"]


def test_list_logs_filters_and_paginates(client):
    response = client.get("/api/logs", params={"statusCode": "201"})

    payload = response.json()
    assert response.status_code == 200
    assert [log["path"] for log in payload["logs"]] == ["/checkout"]
    assert payload["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}

    paged = client.get("/api/logs", params={"page": "2", "limit": "2"}).json()
    assert [log["path"] for log in paged["logs"]] == ["/home"]
    assert paged["pagination"]["totalPages"] == 2


def test_list_logs_rejects_bad_dates(client):
    response = client.get("/api/logs", params={"startDate": "not-a-date"})

    assert response.status_code == 400
    assert "startDate" in response.json()["detail"]


def test_list_logs_ignores_non_numeric_paging(client):
    response = client.get("/api/logs", params={"page": "first", "limit": "many"})

    assert response.status_code == 200
    assert response.json()["pagination"]["limit"] == 20


def test_list_logs_rejects_unreachable_page(client):
    response = client.get("/api/logs", params={"page": "99999999999999999999"})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_create_log_rejects_blank_session_id(client):
    response = client.post(
        "/api/logs",
        json={"sessionId": "   ", "path": "/", "method": "GET", "statusCode": 200},
    )

    assert response.status_code == 400
    assert "sessionId" in response.json()["detail"]


def test_list_sessions(client):
    payload = client.get("/api/logs/sessions").json()

    assert [row["sessionId"] for row in payload["sessions"]] == ["s1"]
    assert payload["sessions"][0]["totalRequests"] == 3
    assert payload["sessions"][0]["duration"] == 95
    assert payload["pagination"]["total"] == 1


def test_stats(client):
    response = client.get("/api/logs/stats", params={"startDate": "2024-05-01"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalVisits"] == 3
    assert payload["uniqueSessions"] == 1
    assert payload["pathStats"][0] == {"path": "/cart", "count": 1}
    assert {"statusCode": 201, "count": 1} in payload["statusCodeStats"]
    assert payload["methodStats"] == [{"method": "GET", "count": 2}, {"method": "POST", "count": 1}]
    assert payload["deviceStats"] == [{"device": "Desktop", "count": 3}]
    assert payload["browserStats"] == [{"browser": "Chrome", "count": 1}]
    assert payload["osStats"] == [{"os": "macOS", "count": 1}]
    assert payload["avgResponseTime"] == pytest.approx(100.0)
    assert isinstance(payload["dailyVisits"], dict)


def test_seed_populates_store(client, memory_store, monkeypatch):
    monkeypatch.setattr(settings.analytics, "seed_session_count", 4)

    response = client.post("/api/logs/seed")

    assert response.status_code == 200
    payload = response.json()
    assert payload["sessionsCreated"] == 4
    assert 12 <= payload["logsCreated"] <= 48

    sessions = client.get("/api/logs/sessions").json()
    assert sessions["pagination"]["total"] == 5


def test_store_failure_is_500(client, memory_store, monkeypatch):
    async def broken_count(log_filter):
        raise StoreFailure("Access log store failed during count")

    monkeypatch.setattr(memory_store, "count", broken_count)

    response = client.get("/api/logs/stats")

    assert response.status_code == 500
    assert response.json()["code"] == "store_failure"


def test_error_responses_are_documented(client):
    schema = client.get("/openapi.json").json()

    session_path = schema["paths"]["/api/logs/path/{session_id}"]["get"]["responses"]
    error_ref = "#/components/schemas/ErrorResponse"
    assert session_path["404"]["content"]["application/json"]["schema"]["$ref"] == error_ref
    assert session_path["400"]["content"]["application/json"]["schema"]["$ref"] == error_ref
    assert "ErrorResponse" in schema["components"]["schemas"]


def test_lifespan_prepares_and_releases_the_database(monkeypatch):
    calls = []

    async def fake_init_models():
        calls.append("init")

    async def fake_dispose_engine():
        calls.append("dispose")

    monkeypatch.setattr("accesslog.main.init_models", fake_init_models)
    monkeypatch.setattr("accesslog.main.dispose_engine", fake_dispose_engine)
    monkeypatch.setattr(settings, "create_tables_on_startup", True)

    with TestClient(app) as client:
        assert calls == ["init"]
        assert client.get("/health").status_code == 200

    assert calls == ["init", "dispose"]
