"""Config auto-fix engine.

This module is integration-agnostic. It only relies on the config store port,
so the same engine serves the IPC service and the CLI.
"""

from __future__ import annotations

import logging
from typing import Iterable

from core.migrations import MigrationRegistry
from core.ports import ConfigStorePort

LOGGER = logging.getLogger(__name__)


class AutoFixEngine:
    """Repairs a config for a batch of validator errors and persists it once."""

    def __init__(self, registry: MigrationRegistry, store: ConfigStorePort) -> None:
        self._registry = registry
        self._store = store

    def fix_errors(self, errors: Iterable[str]) -> bool:
        """Apply every known patch and report whether the batch was fully fixed.

        All patches run against one borrowed config so later patches see the
        effects of earlier ones. Unknown errors do not stop the batch, and the
        config is saved even when the repair is partial.
        """

        config = self._store.get_current_config()

        fully_fixed = True
        try:
            for error in errors:
                if self._registry.has(error):
                    self._registry.apply(error, config)
                    LOGGER.info("Auto-fixed config error: %s", error)
                else:
                    fully_fixed = False
                    LOGGER.warning("No auto-fix known for config error: %s", error)
        finally:
            # Keep the patches that did apply even if a later one failed.
            self._store.save_config(config)
        return fully_fixed

    def has_known_error(self, errors: Iterable[str]) -> bool:
        """Return True if at least one error has a registered patch."""

        return any(self._registry.has(error) for error in errors)
