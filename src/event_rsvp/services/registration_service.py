"""Registration service for storing and reading guest registrations"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from event_rsvp.errors import NotFoundError, PersistenceError
from event_rsvp.models.registration import Registration
from event_rsvp.schemas.registration import RegistrationInput

logger = logging.getLogger(__name__)


class RegistrationService:
    """Service for managing guest registrations"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def create_registration(self, data: RegistrationInput) -> Registration:
        """
        Store a validated registration.

        The identifier and creation timestamp are always generated here,
        whatever the caller sent.

        Args:
            data: Registration that already passed validate_registration

        Returns:
            Registration: The created registration

        Raises:
            PersistenceError: If the insert fails
        """
        registration = Registration(
            name=data.name,
            email=data.email,
            phone=data.phone,
            has_joined_cg=data.has_joined_cg,
            connect_group=data.connect_group,
            food_item=data.food_item,
            drink_item=data.drink_item,
            bringing_gift=data.bringing_gift,
            transfer_proof=data.transfer_proof,
        )

        try:
            self.db.add(registration)
            self.db.commit()
            self.db.refresh(registration)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Failed to store registration") from e

        logger.info(f"Created registration {registration.id}")
        return registration

    def list_registrations(self) -> list[Registration]:
        """Get all registrations, newest first"""
        stmt = select(Registration).order_by(Registration.created_at.desc())
        return list(self.db.exec(stmt).all())

    def get_registration_by_id(self, registration_id: str) -> Optional[Registration]:
        """Get a registration by ID"""
        return self.db.get(Registration, registration_id)

    def get_registration_or_raise(self, registration_id: str) -> Registration:
        registration = self.get_registration_by_id(registration_id)
        if registration is None:
            raise NotFoundError(f"Registration {registration_id} not found")
        return registration

    def count_registrations(self) -> int:
        """Get the total number of stored registrations"""
        stmt = select(func.count()).select_from(Registration)
        return self.db.exec(stmt).one()
