"""Adapter factories for the companion.

Building adapters in one place keeps app.py about lifecycle only and makes it
obvious which settings each adapter reads.
"""

from __future__ import annotations

import asyncio
import logging
import sys

import settings
from adapters.github_releases import GitHubReleaseClient
from adapters.json_config_store import JsonConfigStore
from adapters.jsonl_channel import JsonLinesChannel, new_stream_reader


def build_release_client() -> GitHubReleaseClient:
    """Create the release client from settings and environment.

    GITHUB_TOKEN is read via python-dotenv to keep secrets out of the repo.
    """

    update_config = settings.UPDATE_CONFIG
    logging.getLogger(__name__).info("Release endpoint: %s", update_config.release_url)
    return GitHubReleaseClient(
        update_config.release_url,
        token=settings.GITHUB_TOKEN,
        timeout=update_config.request_timeout_seconds,
    )


def build_config_store(path: str | None = None) -> JsonConfigStore:
    return JsonConfigStore(path or settings.CONFIG_PATH)


async def open_stdio_channel() -> JsonLinesChannel:
    """Attach a JSON-lines channel to this process' stdin/stdout."""

    loop = asyncio.get_running_loop()
    reader = new_stream_reader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return JsonLinesChannel(reader, sys.stdout)
