"""SQLModel Registration model"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


class Registration(SQLModel, table=True):
    """A stored guest registration. Created once, never updated."""

    __tablename__ = "registrations"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), primary_key=True, max_length=36
    )
    name: str
    email: str
    phone: Optional[str] = Field(default=None)
    has_joined_cg: bool = Field(default=False)
    connect_group: Optional[str] = Field(default=None)
    food_item: Optional[str] = Field(default=None)
    drink_item: Optional[str] = Field(default=None)
    bringing_gift: bool = Field(default=True)
    # Either a base64 data string or a public download URL
    transfer_proof: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
