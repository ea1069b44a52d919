"""Registration form controller.

Holds what the guest has typed, derives what the form should show, and runs
the submit sequence: validate, upload the proof if one is pending, then hand
the payload to the sink. The same controller drives both deployments; the
sink, uploader and FormPolicy decide which one it behaves like.

Proof uploads may overlap when the guest picks a new file before the previous
upload settles. Each selection bumps a generation counter and only the
newest generation's result is kept.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from event_rsvp.errors import FieldValidationError, RegistrationError
from event_rsvp.models.connect_group import CONNECT_GROUP_NAMES, NO_CONNECT_GROUP
from event_rsvp.schemas.registration import (
    FormPolicy,
    RegistrationInput,
    validate_registration,
)
from event_rsvp.services.proof_upload import FileHandle

logger = logging.getLogger(__name__)


class ProofStatus(str, Enum):
    NONE = "none"
    UPLOADING = "uploading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class FormState:
    """Everything the guest has entered so far"""

    name: str = ""
    email: str = ""
    phone: str = ""
    has_joined_cg: Optional[bool] = None
    connect_group: Optional[str] = None
    food_item: str = ""
    drink_item: str = ""
    bringing_gift: bool = True
    proof_file: Optional[FileHandle] = None
    proof_reference: Optional[str] = None
    proof_status: ProofStatus = ProofStatus.NONE
    proof_error: Optional[str] = None
    submitting: bool = False


EDITABLE_FIELDS = {
    "name",
    "email",
    "phone",
    "has_joined_cg",
    "connect_group",
    "food_item",
    "drink_item",
    "bringing_gift",
}


@dataclass(frozen=True)
class FormView:
    show_group_selector: bool
    connect_group_options: List[str] = field(default_factory=list)
    effective_connect_group: Optional[str] = None
    proof_status: ProofStatus = ProofStatus.NONE
    can_submit: bool = True


def initial_form_state(policy: FormPolicy) -> FormState:
    """Defaults for an empty form.

    The relaxed form starts as "joined" with the first group preselected; the
    strict form makes the guest answer the membership question.
    """
    if policy.default_connect_group is not None:
        return FormState(
            has_joined_cg=True, connect_group=policy.default_connect_group.value
        )
    return FormState()


def apply_membership_toggle(
    state: FormState, joined: bool, policy: FormPolicy
) -> FormState:
    """Set the membership answer and keep the group selection consistent"""
    if not joined:
        # Never submit a stale group alongside "not joined"
        return replace(state, has_joined_cg=False, connect_group=NO_CONNECT_GROUP)

    group = state.connect_group
    if group in (None, "", NO_CONNECT_GROUP):
        default = policy.default_connect_group
        group = default.value if default is not None else None
    return replace(state, has_joined_cg=True, connect_group=group)


def derive_form_view(state: FormState) -> FormView:
    """What the form should display for the given state"""
    joined = state.has_joined_cg is True
    if joined:
        effective_group = state.connect_group
    elif state.has_joined_cg is False:
        effective_group = NO_CONNECT_GROUP
    else:
        effective_group = None

    return FormView(
        show_group_selector=joined,
        connect_group_options=list(CONNECT_GROUP_NAMES) if joined else [],
        effective_connect_group=effective_group,
        proof_status=state.proof_status,
        can_submit=not state.submitting
        and state.proof_status != ProofStatus.UPLOADING,
    )


class RegistrationFormController:
    """Client-side registration form"""

    def __init__(self, sink, uploader, policy: FormPolicy):
        self.sink = sink
        self.uploader = uploader
        self.policy = policy
        self.state = initial_form_state(policy)
        self._upload_generation = 0

    @property
    def view(self) -> FormView:
        return derive_form_view(self.state)

    def update(self, **fields: Any) -> FormState:
        """Apply typed edits. Membership changes go through apply_membership_toggle."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")

        joined = fields.pop("has_joined_cg", None)
        if fields:
            self.state = replace(self.state, **fields)
        if joined is not None:
            self.state = apply_membership_toggle(self.state, joined, self.policy)
        return self.state

    def form_data(self) -> Dict[str, Any]:
        state = self.state
        return {
            "name": state.name,
            "email": state.email,
            "phone": state.phone,
            "has_joined_cg": state.has_joined_cg,
            "connect_group": state.connect_group,
            "food_item": state.food_item,
            "drink_item": state.drink_item,
            "bringing_gift": state.bringing_gift,
            "transfer_proof": state.proof_reference,
        }

    def validate(self) -> RegistrationInput:
        """Validate the current state against the deployment policy"""
        return validate_registration(self.form_data(), self.policy)

    async def select_proof_file(self, file: Optional[FileHandle]) -> Optional[str]:
        """
        Replace the selected proof file and upload it.

        Any earlier upload result is dropped immediately. If another file is
        selected (or the form is reset) before this upload settles, its result
        is discarded and None is returned.

        Returns:
            Optional[str]: The proof reference, or None if there is no file or
            the upload was superseded

        Raises:
            FileConstraintError, ConfigurationError, UploadTransportError:
                If the current upload fails
        """
        self._upload_generation += 1
        generation = self._upload_generation
        self.state = replace(
            self.state,
            proof_file=file,
            proof_reference=None,
            proof_error=None,
            proof_status=ProofStatus.NONE if file is None else ProofStatus.UPLOADING,
        )
        if file is None:
            return None

        try:
            reference = await self.uploader.upload(file, self.state.name or None)
        except RegistrationError as e:
            if generation != self._upload_generation:
                logger.info("Ignoring failed upload superseded by a newer selection")
                return None
            logger.warning(f"Proof upload failed: {e}")
            self.state = replace(
                self.state, proof_status=ProofStatus.FAILED, proof_error=str(e)
            )
            raise
        except Exception:
            if generation == self._upload_generation:
                logger.exception("Unexpected error while uploading proof")
                self.state = replace(
                    self.state,
                    proof_status=ProofStatus.FAILED,
                    proof_error="Upload failed, please try again",
                )
            raise

        if generation != self._upload_generation:
            logger.info("Ignoring upload result superseded by a newer selection")
            return None

        self.state = replace(
            self.state, proof_reference=reference, proof_status=ProofStatus.READY
        )
        return reference

    async def submit(self):
        """
        Validate, upload any pending proof, and send the registration.

        On success the form is reset for the next guest. On failure the typed
        values stay in place so the guest can retry.

        Returns:
            Whatever the sink returns: the stored registration for the
            database sink, None for the Google Form sink

        Raises:
            FieldValidationError: Before any network call, if a field is invalid
            FileConstraintError, ConfigurationError, UploadTransportError:
                If the proof upload fails; nothing is submitted
            PersistenceError: If the sink fails
        """
        pending_file = None
        if self.state.proof_file is not None and not self.state.proof_reference:
            pending_file = self.state.proof_file

        # The proof is checked again once the upload has produced it
        pre_upload_policy = (
            replace(self.policy, require_transfer_proof=False)
            if pending_file is not None
            else self.policy
        )
        validate_registration(self.form_data(), pre_upload_policy)

        if pending_file is not None:
            reference = await self.select_proof_file(pending_file)
            if reference is None:
                raise FieldValidationError(
                    {"transfer_proof": "Proof upload did not finish, please try again"}
                )

        payload = self.validate()

        self.state = replace(self.state, submitting=True)
        try:
            result = await self.sink.create(payload)
        except Exception as e:
            logger.error(f"Submission failed: {e}")
            self.state = replace(self.state, submitting=False)
            raise

        logger.info(f"Submitted registration for {payload.email}")
        self.reset()
        return result

    def reset(self) -> FormState:
        """Return to the initial state and forget any upload in flight"""
        self._upload_generation += 1
        self.state = initial_form_state(self.policy)
        return self.state
