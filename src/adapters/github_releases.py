"""GitHub releases adapter.

Implements the core ReleasePort with a minimal async client for the
"latest release" endpoint.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import aiohttp
from aiohttp import ClientTimeout

from core.models import ReleaseInfo

LOGGER = logging.getLogger(__name__)


def parse_release(payload: Any) -> ReleaseInfo:
    """Extract the fields we need from a release payload.

    Raises ValueError when the payload does not carry a string ``name`` and
    ``assets_url``.
    """

    if not isinstance(payload, dict):
        raise ValueError(f"Release payload must be an object, got {type(payload).__name__}")
    name = payload.get("name")
    assets_url = payload.get("assets_url")
    if not isinstance(name, str) or not isinstance(assets_url, str):
        raise ValueError("Release payload is missing 'name' or 'assets_url'")
    return ReleaseInfo(name=name, assets_url=assets_url)


class GitHubReleaseClient:
    """Minimal async client for the GitHub latest-release endpoint."""

    def __init__(self, url: str, token: Optional[str] = None, timeout: float = 30.0) -> None:
        """Initialize client with endpoint URL and optional bearer token."""
        self.url = url
        self.timeout = timeout
        self.headers = {"Accept": "application/vnd.github+json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def _get_json(self) -> Any:
        """Send GET request and return parsed JSON response."""
        async with (
            aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout)) as sess,
            sess.get(self.url, headers=self.headers) as resp,
        ):
            if resp.status // 100 != 2:
                text = await resp.text()
                raise RuntimeError(f"Release GET failed ({resp.status}): {text}")
            return await resp.json(content_type=None)

    async def fetch_latest(self) -> ReleaseInfo:
        """Return the latest published release."""

        LOGGER.debug("Fetching latest release from %s", self.url)
        return parse_release(await self._get_json())
