from __future__ import annotations

import asyncio
import threading

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


@pytest.fixture
def release_server():
    """Serve an aiohttp handler on a background loop and return its URL.

    The server lives on its own thread so tests can drive the client with
    asyncio.run, the same way the CLI does.
    """

    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    servers: list[TestServer] = []

    def start(handler) -> str:
        async def _start() -> str:
            app = web.Application()
            app.router.add_get("/releases/latest", handler)
            server = TestServer(app)
            await server.start_server()
            servers.append(server)
            return str(server.make_url("/releases/latest"))

        return asyncio.run_coroutine_threadsafe(_start(), loop).result(timeout=10)

    yield start

    for server in servers:
        asyncio.run_coroutine_threadsafe(server.close(), loop).result(timeout=30)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=10)
    loop.close()
