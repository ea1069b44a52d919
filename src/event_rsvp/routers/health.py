from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from event_rsvp.config import config
from event_rsvp.models.database import get_db
from event_rsvp.services.registration_service import RegistrationService

health = APIRouter()


@health.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "event-rsvp",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
    }


@health.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Detailed health check with database and configuration checks"""
    health_status = {
        "status": "healthy",
        "service": "event-rsvp",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
        "checks": {},
    }

    # Database connectivity check
    try:
        # Counting rows also proves the registrations table exists
        count = RegistrationService(db).count_registrations()
        health_status["checks"]["database"] = "healthy"
        health_status["checks"]["registrations"] = count
    except Exception as e:
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    # Proof hosting is only needed by the hosted upload flow, so report it
    # without failing the check
    missing_github = [
        key
        for key in ("github_token", "github_owner", "github_repo")
        if not config.get(key)
    ]
    health_status["checks"]["proof_hosting"] = (
        f"missing: {', '.join(missing_github)}" if missing_github else "configured"
    )

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
