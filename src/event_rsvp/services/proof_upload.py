"""Proof-of-payment upload adapters.

Both adapters turn a selected file into the string stored as
``transfer_proof``:

- InlineProofUploader returns a base64 data string, stored verbatim.
- HostedProofUploader commits the file to a GitHub repository and returns
  its public download URL.

Adapters are stateless per call. Ordering between overlapping uploads is the
form controller's job.
"""

import base64
import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import httpx

from event_rsvp.backends.github_client import GitHubContentsClient
from event_rsvp.errors import FileConstraintError

logger = logging.getLogger(__name__)

IMAGE_TYPES = ("image/",)
IMAGE_OR_PDF_TYPES = ("image/", "application/pdf")


@dataclass(frozen=True)
class FileHandle:
    """A file the guest selected for upload"""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def _format_size(num_bytes: int) -> str:
    return f"{num_bytes / (1024 * 1024):g}MB"


def check_file_constraints(
    file: Optional[FileHandle], max_bytes: int, allowed_types: Sequence[str]
) -> FileHandle:
    """
    Reject a missing, oversized or wrongly typed file.

    A file of exactly max_bytes is accepted.

    Raises:
        FileConstraintError: With reason "missing", "too_large" or
            "unsupported_type"
    """
    if file is None:
        raise FileConstraintError(
            FileConstraintError.MISSING, "Please choose a file to upload."
        )

    content_type = (file.content_type or "").lower()
    if not any(content_type.startswith(allowed) for allowed in allowed_types):
        raise FileConstraintError(
            FileConstraintError.UNSUPPORTED_TYPE,
            f"Unsupported file type '{file.content_type}'.",
        )

    if file.size > max_bytes:
        raise FileConstraintError(
            FileConstraintError.TOO_LARGE,
            f"File too large. Please upload a file under {_format_size(max_bytes)}.",
        )

    return file


def sanitize_filename(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9._-]", "_", filename)


def owner_slug(owner_name_hint: Optional[str]) -> str:
    """Lower-case the name and collapse anything non-alphanumeric to '-'"""
    slug = re.sub(r"[^a-z0-9]+", "-", (owner_name_hint or "").strip().lower())
    return slug.strip("-") or "guest"


def build_storage_path(
    timestamp_ms: int, owner_name_hint: Optional[str], filename: str
) -> str:
    return (
        f"uploads/{timestamp_ms}-{owner_slug(owner_name_hint)}-"
        f"{sanitize_filename(filename)}"
    )


class InlineProofUploader:
    """Encodes the proof image itself as a base64 data string"""

    allowed_types = IMAGE_TYPES

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes

    async def upload(
        self, file: Optional[FileHandle], owner_name_hint: Optional[str] = None
    ) -> str:
        file = check_file_constraints(file, self.max_bytes, self.allowed_types)
        encoded = base64.b64encode(file.content).decode("ascii")
        return f"data:{file.content_type};base64,{encoded}"


class HostedProofUploader:
    """Commits the proof file to GitHub and returns its download URL"""

    allowed_types = IMAGE_OR_PDF_TYPES

    def __init__(
        self,
        token: Optional[str],
        owner: Optional[str],
        repo: Optional[str],
        max_bytes: int,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.max_bytes = max_bytes
        self.timeout = timeout
        self.transport = transport
        self.clock = clock

    async def upload(
        self, file: Optional[FileHandle], owner_name_hint: Optional[str] = None
    ) -> str:
        """
        Upload the proof file and return its public URL.

        Args:
            file: Selected file, or None if nothing was chosen
            owner_name_hint: Registrant name used in the storage path

        Returns:
            str: Public download URL

        Raises:
            FileConstraintError: Before any request, for a bad file
            ConfigurationError: If GitHub credentials are not configured
            UploadTransportError: If the single upload attempt fails
        """
        file = check_file_constraints(file, self.max_bytes, self.allowed_types)
        client = GitHubContentsClient(
            self.token,
            self.owner,
            self.repo,
            timeout=self.timeout,
            transport=self.transport,
        )

        path = build_storage_path(
            int(self.clock() * 1000), owner_name_hint, file.filename
        )
        content_b64 = base64.b64encode(file.content).decode("ascii")
        logger.info(f"Uploading proof {path} ({file.size} bytes)")
        return await client.create_file(
            path, content_b64, f"Add upload {sanitize_filename(file.filename)}"
        )

