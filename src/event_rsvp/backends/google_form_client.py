import logging
from typing import Dict, Optional

import httpx

from event_rsvp.errors import ConfigurationError, PersistenceError
from event_rsvp.models.connect_group import NO_CONNECT_GROUP
from event_rsvp.schemas.registration import RegistrationInput

logger = logging.getLogger(__name__)

GOOGLE_FORMS_URL = "https://docs.google.com/forms/d"

# Entry identifiers assigned by Google Forms to each question
GOOGLE_FORM_ENTRY_IDS = {
    "name": "entry.1364157829",
    "phone": "entry.1455060612",
    "email": "entry.1706537260",
    "has_joined_cg": "entry.1460132900",
    "connect_group": "entry.1071819399",
    "food_item": "entry.722588337",
    "drink_item": "entry.1917095034",
    "bringing_gift": "entry.1696718212",
    "transfer_proof": "entry.2135820848",
}


def _bool_field(value: bool) -> str:
    return "true" if value else "false"


class GoogleFormSink:
    """Forwards registrations to a Google Form response endpoint.

    Google does not return a usable confirmation, so a submission counts as
    delivered once the POST completes without a network error.
    """

    name = "google_form"

    def __init__(
        self,
        form_id: Optional[str],
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not form_id:
            raise ConfigurationError("GOOGLE_FORM_ID is not configured")
        self.form_id = form_id
        self.timeout = timeout
        self.transport = transport

    @property
    def action_url(self) -> str:
        return f"{GOOGLE_FORMS_URL}/{self.form_id}/formResponse"

    @property
    def view_url(self) -> str:
        """Public form link guests can use if submission keeps failing"""
        return f"{GOOGLE_FORMS_URL}/{self.form_id}/viewform"

    def build_form_data(self, payload: RegistrationInput) -> Dict[str, str]:
        fields = {
            "name": payload.name,
            "phone": payload.phone or "",
            "email": payload.email,
            "has_joined_cg": _bool_field(payload.has_joined_cg),
            "connect_group": (
                payload.connect_group if payload.has_joined_cg else NO_CONNECT_GROUP
            ),
            "food_item": payload.food_item or "",
            "drink_item": payload.drink_item or "",
            "bringing_gift": _bool_field(payload.bringing_gift),
        }
        if payload.transfer_proof:
            fields["transfer_proof"] = payload.transfer_proof

        return {GOOGLE_FORM_ENTRY_IDS[key]: value for key, value in fields.items()}

    async def create(self, payload: RegistrationInput) -> None:
        """
        POST the registration as multipart form data.

        Raises:
            PersistenceError: If the request cannot be sent
        """
        form_data = self.build_form_data(payload)
        # (None, value) parts are plain fields, which forces a multipart body
        multipart = {key: (None, value) for key, value in form_data.items()}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(self.action_url, files=multipart)
        except httpx.RequestError as e:
            logger.error(f"Failed to submit Google Form {self.form_id}: {e}")
            raise PersistenceError("Failed to submit registration") from e

        logger.info(
            f"Submitted registration for {payload.email} to Google Form "
            f"(status {response.status_code})"
        )
