"""Test health check endpoints"""

from sqlalchemy.exc import OperationalError

from event_rsvp.config import config
from event_rsvp.services.registration_service import RegistrationService


class TestHealthEndpoint:
    def test_basic_health_check(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "event-rsvp"
        assert body["timestamp"]

    def test_detailed_health_check(self, api_client, monkeypatch):
        monkeypatch.setitem(config, "github_token", None)
        monkeypatch.setitem(config, "github_owner", "acme")
        monkeypatch.setitem(config, "github_repo", "proofs")

        response = api_client.get("/health/detailed")

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks["database"] == "healthy"
        # Missing proof hosting credentials do not fail the check
        assert checks["proof_hosting"] == "missing: github_token"

    def test_detailed_health_reports_registration_count(
        self, api_client, registration_payload
    ):
        api_client.post("/api/registrations", json=registration_payload())
        api_client.post("/api/registrations", json=registration_payload())

        response = api_client.get("/health/detailed")

        assert response.status_code == 200
        assert response.json()["checks"]["registrations"] == 2

    def test_database_outage_returns_503(self, api_client, monkeypatch):
        def broken_count(self):
            raise OperationalError("SELECT count(*)", {}, Exception("server closed"))

        monkeypatch.setattr(RegistrationService, "count_registrations", broken_count)

        response = api_client.get("/health/detailed")

        assert response.status_code == 503
        detail = response.json()["detail"]
        assert detail["status"] == "unhealthy"
        assert detail["checks"]["database"].startswith("unhealthy")
