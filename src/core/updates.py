"""Update availability polling (core domain).

The checker learns the running version from the desktop shell, then polls the
release endpoint on a fixed schedule. Each poll fires one interval after the
previous poll fired, not after it finished, and at most one request is in
flight at any time.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Awaitable, Callable, Optional

from core.config import DEFAULT_UPDATE_INTERVAL_SECONDS
from core.models import CheckerState, UpdateState
from core.ports import ReleasePort

LOGGER = logging.getLogger(__name__)


def strip_version_prefix(name: str) -> str:
    """Drop a single leading "v" from a release name ("v1.3.0" -> "1.3.0")."""

    return name[1:] if name.startswith("v") else name


class UpdateChecker:
    """Tracks the running version and the latest published release."""

    def __init__(
        self,
        releases: ReleasePort,
        interval_seconds: float = DEFAULT_UPDATE_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._releases = releases
        self._interval = interval_seconds
        self._clock = clock
        self._sleep = sleep

        self._current_version: Optional[str] = None
        self._latest_version: Optional[str] = None
        self._latest_assets_url: Optional[str] = None
        self._update_available = False

        self._state = CheckerState.UNINITIALIZED
        self._next_fire_at: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> CheckerState:
        return self._state

    @property
    def update_available(self) -> bool:
        return self._update_available

    @property
    def next_fire_at(self) -> Optional[float]:
        """Monotonic time of the next scheduled poll, if the loop has started."""

        return self._next_fire_at

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def get_version(self) -> Optional[str]:
        return self._current_version

    def get_latest_version(self) -> Optional[str]:
        return self._latest_version

    def get_latest_version_assets_url(self) -> Optional[str]:
        return self._latest_assets_url

    def snapshot(self) -> UpdateState:
        return UpdateState(
            current_version=self._current_version,
            latest_version=self._latest_version,
            latest_assets_url=self._latest_assets_url,
            update_available=self._update_available,
        )

    def announce_version(self, version: str) -> None:
        """Record the running version and make sure the polling loop is active.

        A repeated announcement only overwrites the version; it never starts
        a second loop. Must be called from inside a running event loop.
        """

        self.set_version(version)
        self.start()

    def set_version(self, version: str) -> None:
        """Record the running version without touching the polling loop."""

        if self._current_version is not None and self._current_version != version:
            LOGGER.warning("Running version re-announced: %s -> %s", self._current_version, version)
        self._current_version = version
        if self._latest_version is not None:
            self._update_available = self._latest_version != version
        if self._state is CheckerState.UNINITIALIZED:
            self._state = CheckerState.IDLE
        LOGGER.info("Running version %s", version)

    def start(self) -> None:
        """Schedule the polling loop as a background task unless one is running."""

        if self.running:
            return
        if self._current_version is None:
            raise RuntimeError("Cannot poll for updates before the running version is announced")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self.run_forever())

    async def aclose(self) -> None:
        """Cancel the polling loop and wait for it to finish."""

        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def check_update(self) -> bool:
        """Poll the release endpoint once.

        Returns True when the poll succeeded. Failures of any kind leave the
        last known release untouched and are only logged.
        """

        self._state = CheckerState.CHECKING
        try:
            release = await self._releases.fetch_latest()
        except Exception as exc:
            LOGGER.warning("Update check failed: %s", exc)
            return False
        finally:
            self._state = CheckerState.IDLE if self._current_version is not None else CheckerState.UNINITIALIZED

        latest = strip_version_prefix(release.name)
        # Plain string equality, so a differently formatted tag also counts
        # as an update.
        self._update_available = latest != self._current_version
        self._latest_version = latest
        self._latest_assets_url = release.assets_url
        if self._update_available:
            LOGGER.info("Update available: %s (running %s)", latest, self._current_version)
        else:
            LOGGER.debug("Running the latest release %s", latest)
        return True

    async def run_forever(self) -> None:
        """Poll now, then once per interval measured between poll starts."""

        self._next_fire_at = self._clock()
        while True:
            fired_at = self._next_fire_at
            await self.check_update()
            self._next_fire_at = fired_at + self._interval
            await self._sleep(max(0.0, self._next_fire_at - self._clock()))
