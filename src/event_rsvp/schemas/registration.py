"""Registration input schema shared by the form controller and the HTTP API.

The same rules run on both sides so a client that skips validation still
cannot store a malformed registration.

Two deployments exist and disagree on a few rules, so each picks a
``FormPolicy``:

- STRICT_POLICY (database sink): name of at least 2 characters, proof of
  payment required, a joined guest must pick a Connect Group.
- RELAXED_POLICY (Google Form sink): any non-empty name, phone required,
  proof optional, a joined guest with no group falls back to the first one.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from event_rsvp.config import config
from event_rsvp.errors import FieldValidationError
from event_rsvp.models.connect_group import (
    CONNECT_GROUP_NAMES,
    DEFAULT_CONNECT_GROUP,
    NO_CONNECT_GROUP,
    ConnectGroup,
)

DATA_URL_PATTERN = re.compile(r"^data:[\w.+-]+/[\w.+-]+;base64,(?P<payload>.*)$", re.S)


@dataclass(frozen=True)
class FormPolicy:
    """Per-deployment validation rules"""

    name: str
    name_min_length: int
    require_phone: bool
    require_transfer_proof: bool
    default_connect_group: Optional[ConnectGroup] = None


STRICT_POLICY = FormPolicy(
    name="strict",
    name_min_length=2,
    require_phone=False,
    require_transfer_proof=True,
)

RELAXED_POLICY = FormPolicy(
    name="relaxed",
    name_min_length=1,
    require_phone=True,
    require_transfer_proof=False,
    default_connect_group=DEFAULT_CONNECT_GROUP,
)

SINK_POLICIES = {
    "database": STRICT_POLICY,
    "google_form": RELAXED_POLICY,
}


def policy_for_sink(sink_name: str) -> FormPolicy:
    """Return the validation policy a sink deployment uses"""
    try:
        return SINK_POLICIES[sink_name]
    except KeyError:
        raise ValueError(
            f"Unknown registration sink '{sink_name}', expected one of "
            f"{sorted(SINK_POLICIES)}"
        )


def classify_proof_reference(value: str, max_inline_bytes: Optional[int] = None) -> str:
    """
    Return "url" or "inline" for a proof reference, or raise ValueError.

    Inline proofs must be a ``data:<type>;base64,<payload>`` string whose
    payload decodes to at least one byte and at most max_inline_bytes.
    """
    if value.startswith(("http://", "https://")):
        if not urlparse(value).netloc:
            raise ValueError("Proof link is not a valid URL")
        return "url"

    match = DATA_URL_PATTERN.match(value)
    if not match:
        raise ValueError("Proof must be an uploaded image or a link to one")
    try:
        decoded = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Proof must be an uploaded image or a link to one")
    if not decoded:
        raise ValueError("Uploaded proof is empty")
    if max_inline_bytes is not None and len(decoded) > max_inline_bytes:
        raise ValueError(
            f"File too large. Please upload a file under "
            f"{max_inline_bytes / (1024 * 1024):g}MB."
        )
    return "inline"


def _policy(info: ValidationInfo) -> FormPolicy:
    return (info.context or {}).get("policy", STRICT_POLICY)


class RegistrationInput(BaseModel):
    """Guest registration as typed into the form"""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str
    email: EmailStr
    phone: Optional[str] = Field(default=None, validate_default=True)
    # Must stay ahead of connect_group: its validator reads this value
    has_joined_cg: bool
    connect_group: Optional[str] = Field(default=None, validate_default=True)
    food_item: Optional[str] = None
    drink_item: Optional[str] = None
    bringing_gift: bool = True
    transfer_proof: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str, info: ValidationInfo) -> str:
        min_length = _policy(info).name_min_length
        if len(v) < min_length:
            if min_length <= 1:
                raise ValueError("Please tell us your name.")
            raise ValueError(f"Name must be at least {min_length} characters")
        return v

    @field_validator("phone")
    @classmethod
    def _validate_phone(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if not v:
            if _policy(info).require_phone:
                raise ValueError("Phone number is required.")
            return None
        return v

    @field_validator("connect_group")
    @classmethod
    def _validate_connect_group(
        cls, v: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        if "has_joined_cg" not in info.data:
            # Membership itself failed validation and is reported there
            return v
        if not info.data["has_joined_cg"]:
            return NO_CONNECT_GROUP
        if not v or v == NO_CONNECT_GROUP:
            default = _policy(info).default_connect_group
            if default is None:
                raise ValueError("Please select your Connect Group")
            return default.value
        if v not in CONNECT_GROUP_NAMES:
            raise ValueError(f"Unknown Connect Group '{v}'")
        return v

    @field_validator("food_item", "drink_item")
    @classmethod
    def _empty_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator("transfer_proof")
    @classmethod
    def _validate_transfer_proof(
        cls, v: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        if not v:
            if _policy(info).require_transfer_proof:
                raise ValueError("Please upload transfer proof")
            return None
        classify_proof_reference(v, config["inline_proof_max_bytes"])
        return v


class RegistrationRead(BaseModel):
    """Stored registration as returned by the API"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    has_joined_cg: bool
    connect_group: Optional[str] = None
    food_item: Optional[str] = None
    drink_item: Optional[str] = None
    bringing_gift: bool = True
    transfer_proof: str
    created_at: datetime


# Friendlier wording for errors pydantic raises before our validators run
DEFAULT_FIELD_MESSAGES = {
    "name": "Please tell us your name.",
    "email": "Please enter a valid email address",
    "has_joined_cg": "Please pick an option.",
    "bringing_gift": "Please pick an option.",
}


def field_errors_from(exc: ValidationError) -> Dict[str, str]:
    """Flatten a pydantic ValidationError to one message per field"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "__all__"
        if field in errors:
            continue
        raised = (error.get("ctx") or {}).get("error")
        if error["type"] == "value_error" and raised is not None:
            message = str(raised)
        else:
            message = DEFAULT_FIELD_MESSAGES.get(field, error["msg"])
        errors[field] = message
    return errors


def validate_registration(
    data: Any, policy: FormPolicy = STRICT_POLICY
) -> RegistrationInput:
    """
    Validate raw form or JSON data against the registration rules.

    Args:
        data: Mapping of field values (unknown keys are ignored)
        policy: Deployment policy to apply

    Returns:
        RegistrationInput: Normalised registration. When the guest has not
        joined a Connect Group, connect_group is the NO_CONNECT_GROUP sentinel.

    Raises:
        FieldValidationError: If any field fails, with one message per field
    """
    if isinstance(data, RegistrationInput):
        data = data.model_dump()
    try:
        return RegistrationInput.model_validate(data, context={"policy": policy})
    except ValidationError as e:
        raise FieldValidationError(field_errors_from(e)) from e
