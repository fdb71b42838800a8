"""Logging notification adapter.

Reports user-facing errors to the log and keeps the most recent ones so a
frontend can pick them up.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Tuple

LOGGER = logging.getLogger(__name__)


class LogNotifier:
    """Notifier adapter that writes errors to the application log."""

    def __init__(self, history: int = 20) -> None:
        self._errors: Deque[Tuple[str, str]] = deque(maxlen=history)

    @property
    def errors(self) -> List[Tuple[str, str]]:
        return list(self._errors)

    def set_error(self, title: str, detail: str) -> None:
        self._errors.append((title, detail))
        LOGGER.error("%s %s", title, detail)
