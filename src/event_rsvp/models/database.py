"""Database configuration and session helpers"""

import os

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from event_rsvp.config import config

# Database URL from config
DATABASE_URL = config["database_url"]

# Validate DATABASE_URL exists
if not DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Set DATABASE_URL in the deployment environment or local .env file."
    )

engine_kwargs = {"echo": os.getenv("DEBUG", "false").lower() == "true"}
if DATABASE_URL.startswith("sqlite"):
    # Share one in-memory database across sessions
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if ":memory:" in DATABASE_URL or DATABASE_URL == "sqlite://":
        engine_kwargs["poolclass"] = StaticPool

# Process-wide engine, created once at import and reused
engine = create_engine(DATABASE_URL, **engine_kwargs)


def init_db():
    """Create tables that do not exist yet. Migrations own the schema elsewhere."""
    SQLModel.metadata.create_all(engine)


def get_db():
    """Get database session"""
    with Session(engine) as session:
        yield session
