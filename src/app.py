"""Application entry point for the OctoDash companion."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import text2art
from dotenv import load_dotenv

import settings
from adapters.jsonl_channel import JsonLinesChannel
from adapters.log_notifier import LogNotifier
from client import build_config_store, build_release_client, open_stdio_channel
from core.autofix import AutoFixEngine
from core.companion import CompanionService
from core.migrations import build_default_registry
from core.updates import UpdateChecker

NAME = "OCTODASH"
FONT = "tarty-1"


def _print_banner() -> None:
    # stdout carries the IPC stream, so the banner goes to stderr.
    print(text2art(NAME, font=FONT, space=1), file=sys.stderr)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", True):
        return []
    values = []
    for name in redact_cfg.get("patterns", ["GITHUB_TOKEN"]):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        # StreamHandler defaults to stderr, which keeps stdout free for IPC.
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/companion.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_update_checker() -> UpdateChecker:
    return UpdateChecker(
        build_release_client(),
        interval_seconds=settings.UPDATE_CONFIG.interval_seconds,
    )


async def _serve(channel: Optional[JsonLinesChannel] = None) -> None:
    logger = logging.getLogger(__name__)

    if channel is None:
        channel = await open_stdio_channel()
    autofix = AutoFixEngine(build_default_registry(), build_config_store())
    service = CompanionService(
        channel=channel,
        notifier=LogNotifier(),
        autofix=autofix,
        update_checker=_build_update_checker(),
    )

    service.start()
    logger.info("Companion started. Listening for shell events...")
    try:
        await channel.listen()
    finally:
        await service.aclose()


def _run() -> None:
    _print_banner()
    _configure_logging()
    logging.getLogger(__name__).info("Starting companion")
    asyncio.run(_serve())


def _fix(config_path: Optional[str], errors: list[str]) -> int:
    _configure_logging()
    store = build_config_store(config_path)
    engine = AutoFixEngine(build_default_registry(), store)

    if not engine.has_known_error(errors):
        print("None of the given errors can be fixed automatically.")
    fully_fixed = engine.fix_errors(errors)
    if fully_fixed:
        print(f"All {len(errors)} error(s) fixed in {store.path}")
        return 0
    print(f"Config at {store.path} saved, but some errors still need a manual fix.")
    return 1


def _check_update(current_version: str) -> int:
    _configure_logging()
    checker = _build_update_checker()

    # One-shot poll: record the version without starting the background loop.
    checker.set_version(current_version)
    if not asyncio.run(checker.check_update()):
        print("Update check failed.")
        return 1

    state = checker.snapshot()
    print(f"Current version: {state.current_version}")
    print(f"Latest version:  {state.latest_version}")
    print(f"Update available: {'yes' if state.update_available else 'no'}")
    print(f"Assets: {state.latest_assets_url}")
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="octodash-companion")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Serve the desktop shell over stdin/stdout")

    fix_parser = subparsers.add_parser("fix", help="Auto-fix config validation errors")
    fix_parser.add_argument("--config", dest="config_path", help="Path to the dashboard config.json")
    fix_parser.add_argument("errors", nargs="+", help="Validation error messages, verbatim")

    check_parser = subparsers.add_parser("check-update", help="Poll the release endpoint once")
    check_parser.add_argument("--current", required=True, help="Running version, e.g. 2.3.1")

    args = parser.parse_args(argv)
    if args.command == "fix":
        raise SystemExit(_fix(args.config_path, args.errors))
    if args.command == "check-update":
        raise SystemExit(_check_update(args.current))
    _run()


if __name__ == "__main__":
    main()
