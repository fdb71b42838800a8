"""Ports (interfaces) used by the core.

Ports define the minimal contracts for the config store, release endpoint,
notification surface, and IPC channel so the core can be reused with
different backends.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol, Union

from core.models import Config, ReleaseInfo

EventHandler = Callable[[Any], Union[None, Awaitable[None]]]


class ConfigStorePort(Protocol):
    """Config persistence required by the auto-fix engine."""

    def get_current_config(self) -> Config:
        ...

    def save_config(self, config: Config) -> None:
        ...


class ReleasePort(Protocol):
    """Release metadata lookup required by the update checker."""

    async def fetch_latest(self) -> ReleaseInfo:
        ...


class NotifierPort(Protocol):
    """User-facing error surface."""

    def set_error(self, title: str, detail: str) -> None:
        ...


class ChannelPort(Protocol):
    """Named-event messaging channel to the desktop shell."""

    def on(self, event: str, handler: EventHandler) -> None:
        ...

    def send(self, command: str, payload: Optional[Any] = None) -> None:
        ...
