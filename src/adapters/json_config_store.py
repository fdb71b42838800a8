"""JSON file config store adapter.

Implements the core ConfigStorePort on top of the dashboard's config.json.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import stat
import tempfile

from core.models import Config

LOGGER = logging.getLogger(__name__)


class JsonConfigStore:
    """Thin JSON file wrapper that satisfies the ConfigStorePort contract."""

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def get_current_config(self) -> Config:
        """Load the config from disk; a missing file reads as an empty config."""

        if not os.path.exists(self._path):
            LOGGER.warning("Config file not found, starting from an empty config: %s", self._path)
            return {}

        with open(self._path, "r", encoding="utf-8") as handle:
            config = json.load(handle)
        if not isinstance(config, dict):
            raise ValueError(f"Config root must be an object: {self._path}")
        return config

    def save_config(self, config: Config) -> None:
        """Write the config atomically so a crash never leaves a torn file."""

        directory = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".config-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(config, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
            if os.path.exists(self._path):
                os.chmod(tmp_path, stat.S_IMODE(os.stat(self._path).st_mode))
            os.replace(tmp_path, self._path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            raise
        LOGGER.info("Config saved to %s", self._path)
