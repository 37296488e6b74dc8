"""
Integration Tests - Dashboard API
"""
import pytest
from fastapi.testclient import TestClient

from showroom.config import get_settings
from showroom.data import ShowroomDataGenerator, write_csv
from showroom.ingestion.sources import SourceFetchError
from showroom.orchestration import DashboardPipeline
from showroom.serving.api import create_api_app


@pytest.fixture(autouse=True)
def csv_settings(monkeypatch, tmp_path):
    """Run the API against the CSV source so no database is needed"""
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("DASHBOARD_SOURCE", "csv")
    monkeypatch.setenv("DASHBOARD_CSV_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def app(fake_source):
    app = create_api_app()
    app.state.pipeline = DashboardPipeline(fake_source)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestDashboardEndpoints:
    """Tests for /api/v1/dashboard"""

    def test_initial_dashboard_is_empty(self, client):
        response = client.get("/api/v1/dashboard")

        assert response.status_code == 200
        body = response.json()
        assert body["loading"] is False
        assert body["cycle_id"] == 0
        assert body["snapshot"]["revenue"] == 0
        assert body["snapshot"]["recent_activity"] == []
        assert body["derived"]["profit_margin"] == 0

    def test_refresh_then_get(self, client):
        refresh = client.post("/api/v1/dashboard/refresh")

        assert refresh.status_code == 200
        body = refresh.json()
        assert body["outcome"] == "completed"
        assert body["cycle_id"] == 1
        assert body["failed_sources"] == []

        dashboard = client.get("/api/v1/dashboard").json()
        snapshot = dashboard["snapshot"]
        assert snapshot["revenue"] == 1000
        assert snapshot["profit"] == 400
        assert snapshot["cars_in_stock"] == 1
        assert dashboard["derived"] == {"net_balance": 250, "profit_margin": 40}
        assert [entry["kind"] for entry in snapshot["recent_activity"]] == ["sale", "purchase"]
        assert dashboard["refreshed_at"] is not None

    def test_failed_refresh_is_reported(self, app, client, fake_source):
        client.post("/api/v1/dashboard/refresh")
        fake_source.failures = {"sales": SourceFetchError("sales", "connection reset")}

        body = client.post("/api/v1/dashboard/refresh").json()

        assert body["outcome"] == "aborted"
        assert body["failed_sources"] == ["sales"]
        assert "connection reset" in body["dashboard"]["last_error"]
        # Last good snapshot is still served
        assert body["dashboard"]["snapshot"]["revenue"] == 1000

    def test_no_pipeline_is_unavailable(self):
        client = TestClient(create_api_app())
        assert client.get("/api/v1/dashboard").status_code == 503


class TestHealthEndpoints:
    """Tests for health checks"""

    def test_liveness(self, client):
        assert client.get("/api/v1/health/live").json() == {"status": "alive"}

    def test_readiness(self, client):
        assert client.get("/api/v1/health/ready").json() == {"status": "ready"}

    def test_not_ready_without_pipeline(self):
        response = TestClient(create_api_app()).get("/api/v1/health/ready")
        assert response.status_code == 503

    def test_health_reports_dashboard(self, client):
        client.post("/api/v1/dashboard/refresh")
        body = client.get("/api/v1/health").json()

        assert body["status"] == "healthy"
        assert body["environment"] == "testing"
        assert body["checks"]["dashboard"]["cycle_id"] == 1
        assert "database" not in body["checks"]


class TestMiddleware:
    """Tests for response headers"""

    def test_headers(self, client):
        response = client.get("/api/v1/dashboard", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.headers["Cache-Control"] == "no-store"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Response-Time" in response.headers


class TestApplicationLifespan:
    """Tests for the production application"""

    def test_dashboard_loads_on_start(self, tmp_path):
        frames = ShowroomDataGenerator(seed=5).generate_all(purchases=20)
        write_csv(frames, tmp_path)

        from showroom.main import lifespan

        with TestClient(create_api_app(lifespan=lifespan)) as client:
            body = client.get("/api/v1/dashboard").json()

        assert body["cycle_id"] == 1
        assert body["loading"] is False
        assert body["snapshot"]["revenue"] > 0
        assert body["last_error"] is None
