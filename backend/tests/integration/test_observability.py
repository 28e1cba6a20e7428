"""Integration tests for health, readiness, metrics and request ids"""

import pytest
from fastapi.testclient import TestClient


pytestmark = pytest.mark.integration


def test_health_reports_components(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert set(data["components"]) == {"database", "object_storage"}


def test_ready(client: TestClient):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_metrics_exposed(requester_client: TestClient, declaration):
    requester_client.post("/api/v1/requests", json={"declaration_id": str(declaration.id)})

    response = requester_client.get("/metrics")

    assert response.status_code == 200
    assert "declara_requests_created_total" in response.text
    assert "declara_documents_generated_total" in response.text


def test_request_id_echoed(client: TestClient):
    response = client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_generated(client: TestClient):
    response = client.get("/")

    assert response.headers["X-Request-ID"]


def test_request_id_on_domain_error(requester_client: TestClient):
    # Requesters may not list every request
    response = requester_client.get("/api/v1/requests", headers={"X-Request-ID": "req-denied"})

    assert response.status_code == 403
    assert response.headers["X-Request-ID"] == "req-denied"
    assert response.json()["error"] == "permission_denied"


def test_request_id_on_validation_error(admin_client: TestClient):
    response = admin_client.patch(
        "/api/v1/requests/status",
        json={"request_ids": [], "status": "COMPLETED"},
        headers={"X-Request-ID": "req-invalid"},
    )

    assert response.status_code == 422
    assert response.headers["X-Request-ID"] == "req-invalid"
