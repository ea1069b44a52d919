"""Test the registrations HTTP API"""

import base64
import logging
import uuid

from event_rsvp.config import config
from event_rsvp.models.connect_group import NO_CONNECT_GROUP
from event_rsvp.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

COMPARED_FIELDS = [
    "name",
    "email",
    "phone",
    "has_joined_cg",
    "connect_group",
    "food_item",
    "drink_item",
    "bringing_gift",
    "transfer_proof",
]


class TestCreateRegistration:
    """POST /api/registrations"""

    def test_create_returns_201_with_generated_id(
        self, api_client, registration_payload
    ):
        payload = registration_payload()

        response = api_client.post("/api/registrations", json=payload)

        logger.info(f"Response content: {response.text}")
        assert response.status_code == 201
        result = response.json()
        assert uuid.UUID(result["id"])
        assert result["created_at"]
        for field in COMPARED_FIELDS:
            assert result[field] == payload[field], field

    def test_invalid_email_returns_400(self, api_client, registration_payload):
        response = api_client.post(
            "/api/registrations", json=registration_payload(email="not-an-email")
        )

        assert response.status_code == 400
        assert "email" in response.json()["detail"]

    def test_missing_group_returns_400(self, api_client, registration_payload):
        response = api_client.post(
            "/api/registrations", json=registration_payload(connect_group=None)
        )

        assert response.status_code == 400
        assert "connect_group" in response.json()["detail"]

    def test_malformed_json_returns_400(self, api_client):
        response = api_client.post(
            "/api/registrations",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400

    def test_not_joined_stores_sentinel(self, api_client, registration_payload):
        response = api_client.post(
            "/api/registrations",
            json=registration_payload(has_joined_cg=False, connect_group="CG Ezra"),
        )

        assert response.status_code == 201
        assert response.json()["connect_group"] == NO_CONNECT_GROUP

    def test_client_supplied_id_is_ignored(self, api_client, registration_payload):
        response = api_client.post(
            "/api/registrations",
            json=registration_payload(
                id="00000000-0000-0000-0000-000000000000",
                created_at="1999-01-01T00:00:00Z",
            ),
        )

        assert response.status_code == 201
        result = response.json()
        assert result["id"] != "00000000-0000-0000-0000-000000000000"
        assert not result["created_at"].startswith("1999")

    def test_same_input_twice_creates_two_records(
        self, api_client, registration_payload
    ):
        payload = registration_payload()

        first = api_client.post("/api/registrations", json=payload).json()
        second = api_client.post("/api/registrations", json=payload).json()

        assert first["id"] != second["id"]

    def test_storage_failure_returns_generic_500(
        self, api_client, registration_payload, monkeypatch
    ):
        def broken_create(self, data):
            raise RuntimeError("connection reset by peer")

        monkeypatch.setattr(RegistrationService, "create_registration", broken_create)

        response = api_client.post("/api/registrations", json=registration_payload())

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to create registration"
        assert "connection reset" not in response.text

    def test_oversized_inline_proof_returns_400(
        self, api_client, registration_payload, monkeypatch
    ):
        monkeypatch.setitem(config, "inline_proof_max_bytes", 32)
        proof = "data:image/png;base64," + base64.b64encode(b"x" * 64).decode()

        response = api_client.post(
            "/api/registrations", json=registration_payload(transfer_proof=proof)
        )

        assert response.status_code == 400
        assert "too large" in response.json()["detail"]

    def test_request_body_is_documented(self, api_client):
        schema = api_client.get("/openapi.json").json()

        request_body = schema["paths"]["/api/registrations"]["post"]["requestBody"]
        properties = request_body["content"]["application/json"]["schema"]["properties"]
        assert "transfer_proof" in properties
        assert "has_joined_cg" in properties


class TestReadRegistrations:
    """GET /api/registrations and GET /api/registrations/{id}"""

    def test_round_trip_by_id(self, api_client, registration_payload):
        payload = registration_payload(phone="", food_item="", drink_item="")
        created = api_client.post("/api/registrations", json=payload).json()

        response = api_client.get(f"/api/registrations/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_unknown_id_returns_404(self, api_client):
        response = api_client.get(f"/api/registrations/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Registration not found"

    def test_list_is_newest_first(self, api_client, registration_payload):
        first = api_client.post(
            "/api/registrations", json=registration_payload(name="First Guest")
        ).json()
        second = api_client.post(
            "/api/registrations", json=registration_payload(name="Second Guest")
        ).json()

        response = api_client.get("/api/registrations")

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [second["id"], first["id"]]

    def test_list_empty(self, api_client):
        response = api_client.get("/api/registrations")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_failure_returns_generic_500(self, api_client, monkeypatch):
        def broken_list(self):
            raise RuntimeError("relation does not exist")

        monkeypatch.setattr(RegistrationService, "list_registrations", broken_list)

        response = api_client.get("/api/registrations")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch registrations"
