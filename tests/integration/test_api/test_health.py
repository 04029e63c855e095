"""Integration tests for the health check and response headers."""
import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError


@pytest.mark.integration
class TestHealth:
    """Test the /health endpoint."""

    def test_health(self, client, store):
        session = store.registry.create_session("1")
        store.ledger.submit_claim(session.id, "John Doe", "CS12345", "STD12345")
        store.registry.end_session(store.registry.create_session("1").id)

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["status"] == "connected"
        assert data["store"] == {"sessions": 2, "active_sessions": 1, "claims": 1}

    def test_health_database_down(self, client, db_session):
        with patch.object(db_session, "execute", side_effect=OperationalError("SELECT 1", {}, Exception("down"))):
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["detail"]["status"] == "unhealthy"

    def test_request_id_header(self, client):
        response = client.get("/health")

        assert response.headers["X-Request-ID"]
        assert response.headers["X-API-Version"] == "1.0.0"

    def test_request_ids_differ(self, client):
        first = client.get("/health").headers["X-Request-ID"]
        second = client.get("/health").headers["X-Request-ID"]
        assert first != second
