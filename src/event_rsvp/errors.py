"""Exception types raised across the registration flow"""

from typing import Dict, Optional

# Host error bodies are cut to this many characters before being surfaced
ERROR_BODY_EXCERPT_LENGTH = 200


class RegistrationError(Exception):
    """Base class for all registration flow errors"""


class FieldValidationError(RegistrationError):
    """One or more form fields failed validation.

    Blocks submission entirely. ``field_errors`` maps field name to a short,
    user-facing message.
    """

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__(self.summary())

    def summary(self) -> str:
        return "; ".join(
            message if field == "__all__" else f"{field}: {message}"
            for field, message in self.field_errors.items()
        )


class FileConstraintError(RegistrationError):
    """Selected proof file is missing, of the wrong type, or too large"""

    TOO_LARGE = "too_large"
    UNSUPPORTED_TYPE = "unsupported_type"
    MISSING = "missing"

    def __init__(self, reason: str, message: str):
        self.reason = reason
        super().__init__(message)


class UploadTransportError(RegistrationError):
    """The file host rejected the upload or could not be reached"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body_excerpt: str = "",
    ):
        self.status_code = status_code
        self.body_excerpt = body_excerpt[:ERROR_BODY_EXCERPT_LENGTH]
        detail = message
        if status_code is not None:
            detail = f"{message}: {status_code} {self.body_excerpt}".rstrip()
        super().__init__(detail)


class ConfigurationError(RegistrationError):
    """A required credential or setting is missing"""


class PersistenceError(RegistrationError):
    """The submission sink failed to record the registration"""


class NotFoundError(RegistrationError):
    """No registration exists with the requested identifier"""
