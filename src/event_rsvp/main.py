#!/usr/bin/env python3
"""Event RSVP - registration API server"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from event_rsvp.config import config
from event_rsvp.logging_config import get_logger, setup_logging
from event_rsvp.models.database import init_db
from event_rsvp.routers.health import health
from event_rsvp.routers.registrations import router as registrations_router

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config["environment"] == "development":
        # Deployed environments run alembic migrations instead
        init_db()
    yield


app = FastAPI(
    title="Event RSVP",
    description="Guest registration API for event RSVPs with proof of payment",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health)
app.include_router(registrations_router)


def run():
    port = config["port"]
    logger.info(f"Starting Event RSVP on 0.0.0.0:{port}")
    logger.info("Registration API available at /api/registrations")
    logger.info("Health check available at /health")

    try:
        uvicorn.run(
            app, host="0.0.0.0", port=port, log_level=config["log_level"].lower()
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise


if __name__ == "__main__":
    run()
