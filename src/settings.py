"""Static configuration for the OctoDash companion.

Companion settings (release endpoint, polling interval, logging) live in an
optional companion.json at the project root. Paths and secrets can be
overridden from the environment (.env is honored).
"""

import json
import os

from dotenv import load_dotenv

from core.config import DEFAULT_RELEASE_URL, DEFAULT_UPDATE_INTERVAL_SECONDS, UpdateConfig

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Companion settings file; the whole file is optional.
SETTINGS_PATH = os.getenv("COMPANION_SETTINGS", os.path.join(PROJECT_ROOT, "companion.json"))


def _load_json_settings() -> dict:
    """Load companion.json, falling back to defaults when it does not exist."""

    if not os.path.exists(SETTINGS_PATH):
        return {}

    with open(SETTINGS_PATH, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise RuntimeError(f"Settings file must contain a JSON object: {SETTINGS_PATH}")
    return data


def _resolve_path(path: str) -> str:
    path = os.path.expanduser(path)
    if not os.path.isabs(path):
        path = os.path.join(PROJECT_ROOT, path)
    return path


_SETTINGS = _load_json_settings()

# The dashboard config that gets auto-fixed after upgrades.
CONFIG_PATH = _resolve_path(
    os.getenv("OCTODASH_CONFIG_PATH") or _SETTINGS.get("config_path", "config.json")
)

# Update polling. The interval is measured between poll starts.
_updates = _SETTINGS.get("updates", {})
RELEASE_URL = _updates.get("release_url", DEFAULT_RELEASE_URL)
UPDATE_INTERVAL_SECONDS = float(_updates.get("interval_seconds", DEFAULT_UPDATE_INTERVAL_SECONDS))
REQUEST_TIMEOUT_SECONDS = float(_updates.get("request_timeout_seconds", 30))

# Optional token to lift GitHub's anonymous rate limit.
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")

UPDATE_CONFIG = UpdateConfig(
    release_url=RELEASE_URL,
    interval_seconds=UPDATE_INTERVAL_SECONDS,
    request_timeout_seconds=REQUEST_TIMEOUT_SECONDS,
)

# Logging configuration (optional).
LOGGING = _SETTINGS.get("logging", {})
