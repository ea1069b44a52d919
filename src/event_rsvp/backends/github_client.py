import logging
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from event_rsvp.errors import ConfigurationError, UploadTransportError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


class GitHubContentsClient:
    """Creates files in a GitHub repository through the contents API"""

    def __init__(
        self,
        token: Optional[str],
        owner: Optional[str],
        repo: Optional[str],
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        missing = [
            label
            for label, value in (
                ("GITHUB_TOKEN", token),
                ("GITHUB_OWNER", owner),
                ("GITHUB_REPO", repo),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Proof upload is not configured: missing {', '.join(missing)}"
            )

        self.token = token
        self.owner = owner
        self.repo = repo
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def contents_url(self, path: str) -> str:
        return (
            f"{GITHUB_API_URL}/repos/{self.owner}/{self.repo}/contents/"
            f"{quote(path, safe='/')}"
        )

    async def create_file(self, path: str, content_b64: str, message: str) -> str:
        """
        Create a file with a single PUT and return its public download URL.

        Args:
            path: Repository path of the new file
            content_b64: Base64 encoded file content
            message: Commit message

        Returns:
            str: download_url reported by GitHub

        Raises:
            UploadTransportError: If GitHub cannot be reached, rejects the
                request, or answers without a download URL
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.put(
                    self.contents_url(path),
                    headers=self._headers(),
                    json={"message": message, "content": content_b64},
                )
        except httpx.RequestError as e:
            logger.error(f"GitHub upload request failed for {path}: {e}")
            raise UploadTransportError(f"Could not reach GitHub: {e}") from e

        if not response.is_success:
            logger.error(
                f"GitHub API error: {response.status_code} - {response.text[:500]}"
            )
            raise UploadTransportError(
                "Upload failed",
                status_code=response.status_code,
                body_excerpt=response.text,
            )

        try:
            body = response.json()
        except ValueError:
            body = None
        content = body.get("content") if isinstance(body, dict) else None
        download_url = content.get("download_url") if isinstance(content, dict) else None
        if not isinstance(download_url, str) or not download_url:
            raise UploadTransportError("No download URL returned from GitHub")

        logger.info(f"Uploaded {path} to {self.owner}/{self.repo}")
        return download_url
