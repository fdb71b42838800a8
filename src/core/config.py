"""Core configuration dataclasses.

We keep settings parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_RELEASE_URL = "https://api.github.com/repos/onekintaro/OctoDash/releases/latest"
DEFAULT_UPDATE_INTERVAL_SECONDS = 3600.0


@dataclass(frozen=True)
class UpdateConfig:
    """Update polling settings consumed by the checker and release adapter."""

    release_url: str = DEFAULT_RELEASE_URL
    interval_seconds: float = DEFAULT_UPDATE_INTERVAL_SECONDS
    request_timeout_seconds: float = 30.0
