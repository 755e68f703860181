"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    """Can the application receive a request and respond?"""
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    """Monitoring parses this field; its value must not drift."""
    response = client.get("/health")
    data = response.json()
    assert data["service"] == "general-ledger"


def test_health_check_reports_database_status(client):
    response = client.get("/health")
    data = response.json()
    assert data["database"] == "healthy"
    assert data["status"] == "healthy"
