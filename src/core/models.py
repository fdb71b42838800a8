"""Core domain models.

These types are shared across the core and adapters to avoid tight coupling
to any integration-specific payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

# The dashboard config is an externally owned JSON tree. The core only
# mutates known fields in place and never builds one from scratch.
Config = Dict[str, Any]


@dataclass(frozen=True)
class ReleaseInfo:
    """Latest published release as reported by the release endpoint."""

    name: str
    assets_url: str


@dataclass(frozen=True)
class UpdateState:
    """Point-in-time view of the update checker."""

    current_version: Optional[str]
    latest_version: Optional[str]
    latest_assets_url: Optional[str]
    update_available: bool


class CheckerState(str, Enum):
    """Lifecycle states of the update checker."""

    UNINITIALIZED = "uninitialized"
    IDLE = "idle"
    CHECKING = "checking"
