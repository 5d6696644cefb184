#!/usr/bin/env python3
"""
Main Entry Point (Start)

- Resolves configuration (flags, environment, config file, defaults).
- Opens the node's LMDB store read-only and connects to MongoDB.
- Runs the sync loop in a worker thread until SIGINT or SIGTERM.
"""

import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional

from Mongo_Dumper.blockchain.blockchainerror import SyncInitError
from Mongo_Dumper.blockchain.constants import Constants
from Mongo_Dumper.main.config import CONFIG_OPTIONS, Config
from Mongo_Dumper.mongodb.mongo_client import MongoManager
from Mongo_Dumper.mongodb.sync_service import SyncingService
from Mongo_Dumper.storage.lmdatabase import LMDBManager


class DumperNode:
    """Wires the store, the MongoDB connection and the sync loop together."""

    def __init__(self, config: Config, stop_event: Optional[threading.Event] = None):
        self.config = config
        self.stop_event = stop_event or threading.Event()
        self.store: Optional[LMDBManager] = None
        self.mongo: Optional[MongoManager] = None
        self.service: Optional[SyncingService] = None
        self.worker: Optional[threading.Thread] = None

    def start(self):
        """Open both ends and start syncing. Raises SyncInitError if either end is unavailable."""
        logging.info(f"[DumperNode] 🚀 Starting mongodb-dumper {Constants.VERSION} with {self.config.to_dict()}")
        try:
            self.store = LMDBManager(self.config.store_path)
            logging.info(f"[DumperNode] Store status: {self.store.get_database_status()}")
            self.mongo = MongoManager(
                uri=self.config.mongo_uri,
                database=self.config.mongo_database,
                collection=self.config.mongo_collection,
            )
            collection = self.mongo.connect()
        except SyncInitError:
            self.stop()
            raise

        self.service = SyncingService(
            self.store,
            collection,
            chunk_size=self.config.chunk_size,
            sync_interval=self.config.sync_interval,
            stop_event=self.stop_event,
        )
        self.worker = threading.Thread(target=self.service.start, name="mongo-sync", daemon=True)
        self.worker.start()

    def is_running(self) -> bool:
        return self.worker is not None and self.worker.is_alive()

    def stop(self):
        self.stop_event.set()
        if self.worker is not None:
            self.worker.join(timeout=Constants.SHUTDOWN_JOIN_TIMEOUT_SECONDS)
            if self.worker.is_alive():
                logging.warning("[DumperNode] ⚠️ Sync worker did not stop in time; closing anyway.")
            self.worker = None
        if self.mongo is not None:
            self.mongo.disconnect()
            self.mongo = None
        if self.store is not None:
            self.store.close()
            self.store = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongodb-dumper",
        description="Mirror a node's LMDB store into MongoDB.",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    run = subcommands.add_parser("run", help="Run the sync loop until interrupted.")
    run.add_argument("--config", help=f"YAML or JSON config file (default: {Constants.CONFIG_FILE} if present)")
    run.add_argument("--mongo-uri", help="MongoDB connection string")
    run.add_argument("--mongo-database", help="MongoDB database name")
    run.add_argument("--mongo-collection", help="MongoDB collection name")
    run.add_argument("--data-dir", help="Path to the node's LMDB environment")
    run.add_argument("--chunk-size", type=int, help="Operations per bulk write")
    run.add_argument("--sync-interval", type=float, help="Seconds to sleep between passes")
    run.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)s %(threadName)s %(message)s",
    )
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cli_values = {option: getattr(args, option.replace("-", "_")) for option in CONFIG_OPTIONS}

    try:
        config = Config.load(cli_values, config_file=args.config)
    except SyncInitError as e:
        configure_logging(Constants.LOG_LEVEL)
        logging.critical(f"[Main] ❌ Invalid configuration: {e}")
        return 1
    configure_logging(config.log_level)

    stop_event = threading.Event()

    def handle_signal(signum, frame):
        logging.info(f"[Main] Received {signal.Signals(signum).name}, shutting down...")
        stop_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    node = DumperNode(config, stop_event)
    try:
        node.start()
    except SyncInitError as e:
        logging.critical(f"[Main] ❌ Startup failed: {e}")
        return 1

    try:
        while node.is_running() and not stop_event.is_set():
            stop_event.wait(1)
        worker_crashed = not stop_event.is_set()
    finally:
        node.stop()

    if worker_crashed:
        logging.error("[Main] ❌ Sync worker exited unexpectedly.")
        return 1
    logging.info("[Main] ✅ Shutdown complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
