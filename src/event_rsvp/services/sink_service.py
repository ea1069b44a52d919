"""Selects the submission sink and proof uploader for a deployment"""

import logging

from event_rsvp.backends.google_form_client import GoogleFormSink
from event_rsvp.backends.registration_api_client import RegistrationApiSink
from event_rsvp.schemas.registration import policy_for_sink
from event_rsvp.services.form_controller import RegistrationFormController
from event_rsvp.services.proof_upload import HostedProofUploader, InlineProofUploader

logger = logging.getLogger(__name__)


def build_sink(config: dict, transport=None):
    """Create the sink named by config["registration_sink"]"""
    sink_name = config["registration_sink"]
    if sink_name == "google_form":
        sink = GoogleFormSink(config.get("google_form_id"), transport=transport)
    elif sink_name == "database":
        sink = RegistrationApiSink(config["api_base_url"], transport=transport)
    else:
        raise ValueError(f"Unknown registration sink '{sink_name}'")

    logger.info(f"Using {sink_name} registration sink")
    return sink


def build_uploader(config: dict, transport=None):
    """Create the proof uploader that pairs with the configured sink.

    The Google Form only stores text, so proofs go to GitHub and the form gets
    the link. The database sink stores the image inline.
    """
    if config["registration_sink"] == "google_form":
        return HostedProofUploader(
            token=config.get("github_token"),
            owner=config.get("github_owner"),
            repo=config.get("github_repo"),
            max_bytes=config["hosted_proof_max_bytes"],
            transport=transport,
        )
    return InlineProofUploader(max_bytes=config["inline_proof_max_bytes"])


def build_form_controller(config: dict, transport=None) -> RegistrationFormController:
    """Wire the form controller for the configured deployment.

    The sink, uploader and validation policy always come from the same
    ``registration_sink`` setting, so they cannot be mixed.
    """
    sink_name = config["registration_sink"]
    policy = policy_for_sink(sink_name)
    controller = RegistrationFormController(
        build_sink(config, transport=transport),
        build_uploader(config, transport=transport),
        policy,
    )
    logger.info(f"Registration form ready ({sink_name} sink, {policy.name} policy)")
    return controller
