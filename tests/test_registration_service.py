"""Tests for registration service functionality"""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from event_rsvp.errors import NotFoundError, PersistenceError
from event_rsvp.schemas.registration import STRICT_POLICY, validate_registration


class TestRegistrationService:
    """Test registration service functionality"""

    def _input(self, registration_payload, **overrides):
        return validate_registration(registration_payload(**overrides), STRICT_POLICY)

    def test_create_registration_success(
        self, registration_service, registration_payload
    ):
        """Test successful registration creation"""
        registration = registration_service.create_registration(
            self._input(registration_payload)
        )

        assert uuid.UUID(registration.id)
        assert registration.name == "Alice"
        assert registration.email == "alice@x.com"
        assert registration.has_joined_cg is True
        assert registration.connect_group == "CG Samuel"
        assert registration.created_at is not None

    def test_create_registration_allows_duplicates(
        self, registration_service, registration_payload
    ):
        """Submitting the same input twice stores two records"""
        data = self._input(registration_payload)

        reg1 = registration_service.create_registration(data)
        reg2 = registration_service.create_registration(data)

        assert reg1.id != reg2.id
        assert reg1.email == reg2.email
        assert registration_service.count_registrations() == 2

    def test_list_registrations_newest_first(
        self, registration_service, registration_payload
    ):
        first = registration_service.create_registration(
            self._input(registration_payload, name="First Guest")
        )
        second = registration_service.create_registration(
            self._input(registration_payload, name="Second Guest")
        )

        registrations = registration_service.list_registrations()

        assert [r.id for r in registrations] == [second.id, first.id]

    def test_get_registration_by_id(self, registration_service, registration_payload):
        created = registration_service.create_registration(
            self._input(registration_payload)
        )

        fetched = registration_service.get_registration_by_id(created.id)

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.transfer_proof == created.transfer_proof

    def test_get_unknown_registration_returns_none(self, registration_service):
        assert registration_service.get_registration_by_id(str(uuid.uuid4())) is None

    def test_get_registration_or_raise_unknown(self, registration_service):
        with pytest.raises(NotFoundError):
            registration_service.get_registration_or_raise(str(uuid.uuid4()))

    def test_database_failure_becomes_persistence_error(
        self, registration_service, registration_payload, monkeypatch
    ):
        def broken_commit():
            raise OperationalError("INSERT", {}, Exception("disk full"))

        monkeypatch.setattr(registration_service.db, "commit", broken_commit)

        with pytest.raises(PersistenceError):
            registration_service.create_registration(self._input(registration_payload))
