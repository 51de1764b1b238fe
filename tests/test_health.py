"""
==============================================================================
Health Endpoint Tests
==============================================================================
"""

from fastapi.testclient import TestClient


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test health check returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == "healthy"
        assert data["components"]["catalog"] == "empty"

    def test_health_reports_catalog_counts(self, client: TestClient, inventory):
        """Test health details include row counts."""
        data = client.get("/api/v1/health").json()
        assert data["components"]["catalog"] == "healthy"
        assert data["details"]["stores"] == 4
        assert data["details"]["drinks"]["total"] == 3
        assert data["details"]["drinks"]["with_barcode"] == 2
        assert data["details"]["inventory"]["total"] == 5
        assert data["details"]["inventory"]["in_stock"] == 4

    def test_readiness_probe(self, client: TestClient):
        """Test readiness probe."""
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_liveness_probe(self, client: TestClient):
        """Test liveness probe."""
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True

    def test_root_redirects_to_search_page(self, client: TestClient):
        """Test / redirects to the static search page."""
        response = client.get("/", follow_redirects=False)
        assert response.status_code in (302, 307)
        assert response.headers["location"] == "/static/pages/index.html"

    def test_search_page_is_served(self, client: TestClient):
        """Test the static UI is mounted."""
        response = client.get("/static/pages/index.html")
        assert response.status_code == 200
        assert "Energy Drink Finder" in response.text
