"""Registration API endpoints backed by the registrations table"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session

from event_rsvp.errors import FieldValidationError, NotFoundError
from event_rsvp.models.database import get_db
from event_rsvp.schemas.registration import (
    STRICT_POLICY,
    RegistrationInput,
    RegistrationRead,
    validate_registration,
)
from event_rsvp.services.registration_service import RegistrationService

router = APIRouter(prefix="/api/registrations", tags=["Registrations"])

logger = logging.getLogger(__name__)


@router.post(
    "",
    status_code=201,
    response_model=RegistrationRead,
    # Body is parsed by hand so validation errors stay 400, not 422
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": RegistrationInput.model_json_schema()}
            },
        }
    },
)
async def create_registration(request: Request, db: Session = Depends(get_db)):
    """Validate and store a registration"""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")

    try:
        # Same rules as the form; client-supplied id/created_at are dropped
        data = validate_registration(payload, STRICT_POLICY)
        registration = RegistrationService(db).create_registration(data)
    except FieldValidationError as e:
        logger.info(f"Rejected registration: {e.field_errors}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error creating registration")
        raise HTTPException(status_code=500, detail="Failed to create registration")

    return RegistrationRead.model_validate(registration)


@router.get("", response_model=list[RegistrationRead])
async def list_registrations(db: Session = Depends(get_db)):
    """List all registrations, newest first"""
    try:
        registrations = RegistrationService(db).list_registrations()
    except Exception:
        logger.exception("Error fetching registrations")
        raise HTTPException(status_code=500, detail="Failed to fetch registrations")

    return [RegistrationRead.model_validate(r) for r in registrations]


@router.get("/{registration_id}", response_model=RegistrationRead)
async def get_registration(registration_id: str, db: Session = Depends(get_db)):
    """Fetch a single registration"""
    try:
        registration = RegistrationService(db).get_registration_or_raise(
            registration_id
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Registration not found")
    except Exception:
        logger.exception(f"Error fetching registration {registration_id}")
        raise HTTPException(status_code=500, detail="Failed to fetch registration")

    return RegistrationRead.model_validate(registration)
