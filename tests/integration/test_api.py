"""Integration tests for operational endpoints and cross-cutting middleware"""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "finance-tracker"}


def test_metrics_endpoint(client: TestClient, alice):
    """Test Prometheus metrics endpoint"""
    client.get("/api/income")  # rejected: no token

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "auth_events_total" in response.text
    assert 'outcome="no_token"' in response.text
    assert "http_request_duration_seconds" in response.text


def test_request_id_header(client: TestClient):
    first = client.get("/health")
    second = client.get("/health")

    assert first.headers["X-Request-ID"]
    assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]


def test_request_id_on_rejected_requests(client: TestClient):
    response = client.get("/api/expense")

    assert response.status_code == 401
    assert "X-Request-ID" in response.headers


def test_request_id_from_caller_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-abc-123"})

    assert response.headers["X-Request-ID"] == "trace-abc-123"
