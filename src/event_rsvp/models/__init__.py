"""Database models for Event RSVP"""

from event_rsvp.models.connect_group import (
    CONNECT_GROUP_NAMES,
    DEFAULT_CONNECT_GROUP,
    NO_CONNECT_GROUP,
    ConnectGroup,
)
from event_rsvp.models.registration import Registration

__all__ = [
    "Registration",
    "ConnectGroup",
    "CONNECT_GROUP_NAMES",
    "DEFAULT_CONNECT_GROUP",
    "NO_CONNECT_GROUP",
]
