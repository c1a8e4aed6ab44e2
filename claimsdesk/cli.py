"""Command that starts the claims HTTP service."""

from __future__ import annotations

import argparse
import logging
import signal
import sqlite3
import threading
from pathlib import Path

from claimsdesk.config import Config, load_config
from claimsdesk.events import EventLogger
from claimsdesk.seeder import SeedError, seed_pharmacies
from claimsdesk.server import Server
from claimsdesk.store import open_store

log = logging.getLogger(__name__)


def build_server(
    config: Config, log_dir: str | Path = "logs", data_dir: str | Path = "data"
) -> Server:
    """Open the store, set up event logging, seed pharmacies and return the server.

    Raises ``sqlite3.Error`` when the database cannot be opened.
    """
    store = open_store(config.db_source)

    event_logger: EventLogger | None
    try:
        event_logger = EventLogger(log_dir)
    except OSError as exc:
        log.warning("Warning: failed to initialize logger: %s", exc)
        event_logger = None

    try:
        seed_pharmacies(store, data_dir)
    except SeedError as exc:
        log.warning("Warning: failed to seed pharmacies: %s", exc)

    return Server(store, event_logger)


def main(argv: list[str] | None = None) -> int:
    """Run the service until interrupted; returns the exit status."""
    parser = argparse.ArgumentParser(
        prog="claimsdesk", description="Serve the pharmacy claims HTTP API."
    )
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        config = load_config("")
    except (OSError, ValueError) as exc:
        log.error("cannot load config: %s", exc)
        return 1

    try:
        server = build_server(config)
    except sqlite3.Error as exc:
        log.error("cannot connect to db: %s", exc)
        return 1

    stop = threading.Event()
    failures: list[BaseException] = []

    def serve() -> None:
        try:
            server.start(config)
        except Exception as exc:
            failures.append(exc)
        finally:
            stop.set()

    with server.store:
        threading.Thread(target=serve, name="http-server", daemon=True).start()
        previous = {
            sig: signal.signal(sig, lambda *_: stop.set())
            for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            while not stop.wait(0.5):
                pass
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    if failures:
        log.error("cannot start server: %s", failures[0])
        return 1
    log.info("Shutting down server...")
    return 0