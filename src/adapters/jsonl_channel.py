"""JSON-lines IPC channel adapter.

The desktop shell runs the companion as a child process and exchanges one
JSON object per line:

- inbound:  {"event": "<name>", "payload": <any>}
- outbound: {"command": "<name>", "payload": <any>}
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections import defaultdict
from typing import Any, Optional, TextIO

from core.ports import EventHandler

LOGGER = logging.getLogger(__name__)

# Stylesheets travel over this channel, so lines can be far longer than
# asyncio's 64 KiB default.
MAX_LINE_BYTES = 16 * 1024 * 1024


def new_stream_reader(limit: int = MAX_LINE_BYTES) -> asyncio.StreamReader:
    return asyncio.StreamReader(limit=limit)


class JsonLinesChannel:
    """Channel adapter over an asyncio reader and a text writer."""

    def __init__(self, reader: asyncio.StreamReader, writer: TextIO) -> None:
        self._reader = reader
        self._writer = writer
        self._handlers: defaultdict[str, list[EventHandler]] = defaultdict(list)

    def on(self, event: str, handler: EventHandler) -> None:
        self._handlers[event].append(handler)

    def send(self, command: str, payload: Optional[Any] = None) -> None:
        message = {"command": command, "payload": payload}
        self._writer.write(json.dumps(message) + "\n")
        self._writer.flush()
        LOGGER.debug("Sent command %s", command)

    async def dispatch(self, event: str, payload: Any) -> None:
        """Run every handler registered for ``event``.

        A failing handler is logged and does not stop the others.
        """

        handlers = self._handlers.get(event)
        if not handlers:
            LOGGER.debug("No handler for event %s", event)
            return
        for handler in list(handlers):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                LOGGER.exception("Error while handling event %s", event)

    async def listen(self) -> None:
        """Read and dispatch events until the reader reaches EOF."""

        while True:
            try:
                line = await self._reader.readline()
            except ValueError as exc:
                # readline drops the oversized chunk before raising.
                LOGGER.warning("Skipping IPC line over the size limit: %s", exc)
                continue
            if not line:
                break
            text = line.decode("utf-8", errors="replace").strip()
            if not text:
                continue
            try:
                message = json.loads(text)
            except json.JSONDecodeError:
                LOGGER.warning("Skipping malformed IPC line: %r", text)
                continue
            if not isinstance(message, dict) or not isinstance(message.get("event"), str):
                LOGGER.warning("Skipping IPC message without event name: %r", text)
                continue
            await self.dispatch(message["event"], message.get("payload"))
        LOGGER.info("IPC channel closed")
