"""
Tests for API health and basic endpoints.
"""

import pytest
from fastapi.testclient import TestClient


class TestHealthEndpoints:
    """Test basic health and status endpoints"""

    @pytest.mark.unit
    def test_root_endpoint(self, client: TestClient):
        """Test root endpoint returns API info"""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "GREpandit API"
        assert "version" in data

    @pytest.mark.unit
    def test_health_check(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.unit
    def test_openapi_lists_verbal_routes(self, client: TestClient):
        """Test OpenAPI schema exposes the question and stats routes"""
        response = client.get("/openapi.json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/api/verbal-questions/adaptive" in paths
        assert "/api/verbal-stats" in paths
        assert "/api/words/lookup/{text}" in paths


class TestAuthentication:
    """Bearer token handling"""

    @pytest.mark.api
    def test_missing_token_rejected(self, client: TestClient):
        response = client.get("/api/users/me")
        assert response.status_code == 401

    @pytest.mark.api
    def test_unregistered_token(self, client: TestClient):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer stranger"})
        assert response.status_code == 404
