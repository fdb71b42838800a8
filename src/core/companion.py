"""Hosting service that connects the core to the desktop shell.

The shell talks to us through named IPC events and commands. This service
wires those events to the auto-fix engine and the update checker, and keeps
the small bits of UI state the shell asks about.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from core.autofix import AutoFixEngine
from core.ports import ChannelPort, NotifierPort
from core.updates import UpdateChecker

LOGGER = logging.getLogger(__name__)

EVENT_VERSION_INFORMATION = "versionInformation"
EVENT_CUSTOM_STYLES = "customStyles"
EVENT_CUSTOM_STYLES_ERROR = "customStylesError"

COMMAND_APP_INFO = "appInfo"
COMMAND_SCREEN_SLEEP = "screenSleep"
COMMAND_SCREEN_WAKEUP = "screenWakeup"


class CompanionService:
    """Routes shell events to the core and exposes its state."""

    def __init__(
        self,
        channel: ChannelPort,
        notifier: NotifierPort,
        autofix: AutoFixEngine,
        update_checker: UpdateChecker,
    ) -> None:
        self._channel = channel
        self._notifier = notifier
        self._autofix = autofix
        self._updates = update_checker
        self._loaded_file = False
        self.custom_styles: Optional[str] = None

        self._channel.on(EVENT_VERSION_INFORMATION, self._on_version_information)
        self._channel.on(EVENT_CUSTOM_STYLES, self._on_custom_styles)
        self._channel.on(EVENT_CUSTOM_STYLES_ERROR, self._on_custom_styles_error)

    @property
    def update_checker(self) -> UpdateChecker:
        return self._updates

    @property
    def update_available(self) -> bool:
        return self._updates.update_available

    def start(self) -> None:
        """Ask the shell to announce the running version."""

        self._channel.send(COMMAND_APP_INFO)

    async def aclose(self) -> None:
        await self._updates.aclose()

    def _on_version_information(self, payload: Any) -> None:
        if not isinstance(payload, dict) or not isinstance(payload.get("version"), str):
            LOGGER.warning("Ignoring malformed %s payload: %r", EVENT_VERSION_INFORMATION, payload)
            return
        self._updates.announce_version(payload["version"])

    def _on_custom_styles(self, payload: Any) -> None:
        self.custom_styles = str(payload)

    def _on_custom_styles_error(self, payload: Any) -> None:
        self._notifier.set_error("Can't load custom styles!", str(payload))

    # If all errors can be fixed automatically this returns True.
    def fix_update_errors(self, errors: Iterable[str]) -> bool:
        return self._autofix.fix_errors(errors)

    def has_update_error(self, errors: Iterable[str]) -> bool:
        return self._autofix.has_known_error(errors)

    def get_version(self) -> Optional[str]:
        return self._updates.get_version()

    def get_latest_version(self) -> Optional[str]:
        return self._updates.get_latest_version()

    def get_latest_version_assets_url(self) -> Optional[str]:
        return self._updates.get_latest_version_assets_url()

    def turn_display_off(self) -> None:
        self._channel.send(COMMAND_SCREEN_SLEEP)

    def turn_display_on(self) -> None:
        self._channel.send(COMMAND_SCREEN_WAKEUP)

    def set_loaded_file(self, value: bool) -> None:
        self._loaded_file = value

    def get_loaded_file(self) -> bool:
        return self._loaded_file
