"""Integration tests for health check, headers and error responses."""
import pytest
from unittest.mock import Mock

from quickvote.api.deps import get_db
from quickvote.core.config import settings
from quickvote.main import app


@pytest.mark.integration
class TestHealth:
    """GET /health"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == {"status": "connected"}
        assert data["realtime"] == {"subscribers": 0}

    def test_database_down(self, client):
        broken = Mock()
        broken.execute.side_effect = RuntimeError("connection refused")
        app.dependency_overrides[get_db] = lambda: broken

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json() == {"error": "Database unavailable"}


@pytest.mark.integration
class TestResponseHeaders:
    """Headers added by middleware."""

    def test_version_and_request_id(self, client):
        response = client.get("/health")

        assert response.headers["X-API-Version"] == settings.APP_VERSION
        assert response.headers["X-Request-ID"]

    def test_cors_allows_frontend(self, client):
        origin = settings.CORS_ORIGINS[0]
        response = client.options(
            "/api/sessions",
            headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == origin


@pytest.mark.integration
class TestErrorShape:
    """Every error body is {"error": message}."""

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert set(response.json()) == {"error"}

    def test_malformed_json(self, client):
        response = client.post(
            "/api/sessions",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert set(response.json()) == {"error"}

    def test_wrong_method(self, client):
        response = client.delete("/api/sessions/abc1234")

        assert response.status_code == 405
        assert set(response.json()) == {"error"}
