import logging
from typing import List, Optional

import httpx

from event_rsvp.errors import FieldValidationError, PersistenceError
from event_rsvp.schemas.registration import RegistrationInput, RegistrationRead

logger = logging.getLogger(__name__)

REGISTRATIONS_PATH = "/api/registrations"


class RegistrationApiSink:
    """Submits registrations to the registrations HTTP API"""

    name = "database"

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    @staticmethod
    def _detail(response: httpx.Response) -> str:
        try:
            return str(response.json().get("detail", ""))
        except ValueError:
            return response.text[:200]

    async def create(self, payload: RegistrationInput) -> RegistrationRead:
        """
        POST the registration and return the stored record.

        Raises:
            FieldValidationError: If the server rejects the payload (400)
            PersistenceError: For any other failure
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    REGISTRATIONS_PATH, json=payload.model_dump(mode="json")
                )
        except httpx.RequestError as e:
            logger.error(f"Registration API unreachable: {e}")
            raise PersistenceError("Could not reach the registration service") from e

        if response.status_code == 400:
            raise FieldValidationError({"__all__": self._detail(response)})
        if response.status_code != 201:
            logger.error(
                f"Registration API error: {response.status_code} - {self._detail(response)}"
            )
            raise PersistenceError("Failed to create registration")

        return RegistrationRead.model_validate(response.json())

    async def list(self) -> List[RegistrationRead]:
        """Fetch all registrations, newest first"""
        try:
            async with self._client() as client:
                response = await client.get(REGISTRATIONS_PATH)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to list registrations: {e}")
            raise PersistenceError("Failed to fetch registrations") from e

        return [RegistrationRead.model_validate(item) for item in response.json()]

    async def get_by_id(self, registration_id: str) -> Optional[RegistrationRead]:
        """Fetch one registration, or None if it does not exist"""
        try:
            async with self._client() as client:
                response = await client.get(f"{REGISTRATIONS_PATH}/{registration_id}")
                if response.status_code == 404:
                    return None
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch registration {registration_id}: {e}")
            raise PersistenceError("Failed to fetch registration") from e

        return RegistrationRead.model_validate(response.json())
