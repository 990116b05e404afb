from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_distance_service, get_http_client
from app.main import app
from app.services.outcomes import FailureKind, Result
from tests.conftest import AIRPORT_PAYLOADS, directory_handler


@pytest.fixture()
def upstream_calls() -> list[httpx.Request]:
    return []


@pytest.fixture()
def client(upstream_calls):
    handler = directory_handler(calls=upstream_calls)

    async def override_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            yield http

    app.dependency_overrides[get_http_client] = override_http_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_calculate_distance(client):
    resp = client.post("/api/distance/calculate", json={"from_airport": "JFK", "to_airport": "LHR"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["from_airport"]["iata"] == "JFK"
    assert body["to_airport"]["name"] == "Heathrow Airport"
    assert body["distance_in_miles"] == pytest.approx(3451, rel=0.01)
    assert body["distance_in_kilometers"] == pytest.approx(5554, rel=0.01)
    assert body["distance_in_miles"] == round(body["distance_in_miles"], 2)
    assert body["execution_time_ms"] >= 0


@pytest.mark.parametrize(
    "payload",
    [
        {"from_airport": "jfk", "to_airport": "LHR"},
        {"from_airport": "JFKX", "to_airport": "LHR"},
        {"from_airport": "J1K", "to_airport": "LHR"},
        {"to_airport": "LHR"},
    ],
)
def test_calculate_rejects_invalid_codes(client, upstream_calls, payload):
    resp = client.post("/api/distance/calculate", json=payload)

    assert resp.status_code == 400
    body = resp.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert "from_airport" in body["details"]
    assert upstream_calls == []


def test_calculate_rejects_same_airports(client, upstream_calls):
    resp = client.post("/api/distance/calculate", json={"from_airport": "JFK", "to_airport": "JFK"})

    assert resp.status_code == 400
    assert resp.json()["error_code"] == "SAME_AIRPORTS"
    assert upstream_calls == []


def test_calculate_unknown_airport(client):
    resp = client.post("/api/distance/calculate", json={"from_airport": "JFK", "to_airport": "ZZZ"})

    assert resp.status_code == 404
    body = resp.json()
    assert body["error_code"] == "AIRPORT_NOT_FOUND"
    assert "ZZZ" in body["message"]
    assert "timestamp" in body


def test_get_airport(client, upstream_calls):
    resp = client.get("/api/distance/airport/SVO")

    assert resp.status_code == 200
    assert resp.json() == AIRPORT_PAYLOADS["SVO"]
    assert upstream_calls[0].headers["User-Agent"] == "AirportDistanceService/1.0"


def test_get_airport_rejects_lowercase(client, upstream_calls):
    resp = client.get("/api/distance/airport/svo")

    assert resp.status_code == 400
    assert resp.json()["error_code"] == "VALIDATION_ERROR"
    assert upstream_calls == []


class _FailingService:
    def __init__(self, result: Result) -> None:
        self.result = result

    async def airport(self, iata_code, cancel=None):
        return self.result

    async def measure(self, from_code, to_code, cancel=None, timeout=None):
        return self.result


@pytest.mark.parametrize(
    "kind,status_code,error_code",
    [
        (FailureKind.UPSTREAM_ERROR, 502, "EXTERNAL_SERVICE_ERROR"),
        (FailureKind.MALFORMED_RESPONSE, 502, "MALFORMED_UPSTREAM_RESPONSE"),
        (FailureKind.CANCELLED, 408, "OPERATION_CANCELLED"),
        (FailureKind.UNEXPECTED, 500, "INTERNAL_SERVER_ERROR"),
    ],
)
def test_failure_mapping(kind, status_code, error_code):
    failing = _FailingService(Result.error(kind, "lookup failed", detail="secret detail"))
    app.dependency_overrides[get_distance_service] = lambda: failing
    try:
        resp = TestClient(app).post(
            "/api/distance/calculate", json={"from_airport": "JFK", "to_airport": "LHR"}
        )
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == status_code
    body = resp.json()
    assert body["error_code"] == error_code
    if kind is FailureKind.UNEXPECTED:
        assert body["details"] is None
        assert "secret" not in body["message"]
    else:
        assert body["details"] == "secret detail"


def test_unhandled_exception_returns_500():
    class _ExplodingService:
        async def airport(self, iata_code, cancel=None):
            raise RuntimeError("database password is hunter2")

    app.dependency_overrides[get_distance_service] = lambda: _ExplodingService()
    try:
        resp = TestClient(app).get("/api/distance/airport/JFK")
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    body = resp.json()
    assert body["error_code"] == "INTERNAL_SERVER_ERROR"
    assert "hunter2" not in resp.text


def test_openapi_lists_routes():
    schema = app.openapi()
    assert "/api/distance/calculate" in schema["paths"]
    assert "/api/distance/airport/{iata_code}" in schema["paths"]


def test_failure_logs_retryability(caplog):
    failing = _FailingService(Result.error(FailureKind.UPSTREAM_ERROR, "lookup failed", status_code=503))
    app.dependency_overrides[get_distance_service] = lambda: failing
    try:
        with caplog.at_level("WARNING", logger="app.api.errors"):
            resp = TestClient(app).get("/api/distance/airport/JFK")
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 502
    assert "retryable=True" in caplog.text
