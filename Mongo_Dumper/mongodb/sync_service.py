import logging
import threading
import time
from collections import Counter
from enum import Enum
from typing import Any, Dict, List, Optional

from bson.errors import BSONError
from pymongo import UpdateOne
from pymongo.errors import BulkWriteError, PyMongoError

from Mongo_Dumper.blockchain.blockchainerror import StoreReadError
from Mongo_Dumper.blockchain.constants import Constants
from Mongo_Dumper.mongodb.prefix_dispatcher import badger_record_to_document, is_supported_tag


def mongo_id_for_key(key: bytes) -> str:
    """
    Map raw key bytes to the document _id.
    Latin-1 maps every byte to exactly one code point, so
    mongo_id_for_key(key).encode("latin-1") == key.

    Code points >= 0x80 are stored as two-byte UTF-8 in BSON, so these ids do
    not match collections filled by dumpers that wrote the raw key bytes as
    the id. Point the service at an empty collection rather than reusing one.
    """
    return bytes(key).decode("latin-1")


def build_upsert_operation(key: bytes, document: Dict[str, Any]) -> UpdateOne:
    return UpdateOne({"_id": mongo_id_for_key(key)}, {"$set": document}, upsert=True)


class SyncState(Enum):
    SCANNING = "scanning"
    FLUSHING = "flushing"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class SyncStats:
    """Cumulative counters across every pass of one SyncingService."""

    def __init__(self):
        self.passes_completed = 0
        self.passes_failed = 0
        self.records_scanned = 0
        self.documents_emitted = 0
        self.dropped_unknown = Counter()
        self.dropped_malformed = Counter()
        self.batches_written = 0
        self.batches_failed = 0
        self.operations_written = 0

    def record_drop(self, key: bytes):
        tag = key[0] if key else None
        if tag is not None and is_supported_tag(tag):
            self.dropped_malformed[tag] += 1
        else:
            self.dropped_unknown[tag] += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passes_completed": self.passes_completed,
            "passes_failed": self.passes_failed,
            "records_scanned": self.records_scanned,
            "documents_emitted": self.documents_emitted,
            "dropped_unknown": dict(self.dropped_unknown),
            "dropped_malformed": dict(self.dropped_malformed),
            "batches_written": self.batches_written,
            "batches_failed": self.batches_failed,
            "operations_written": self.operations_written,
        }


class SyncingService:
    """
    Mirrors the whole store into a MongoDB collection, forever.

    Each pass reads one consistent snapshot in key order, turns every record
    into an upsert keyed by its raw key and sends them in unordered bulk
    writes of chunk_size operations. Failed batches are logged and skipped;
    the next pass rewrites the same documents anyway.

        SCANNING → FLUSHING → SCANNING → ... → SLEEPING → SCANNING
        any state → STOPPED once stop() is called
    """

    def __init__(self, store, collection, chunk_size: int = Constants.BULK_WRITE_CHUNK_SIZE,
                 sync_interval: float = Constants.SYNC_INTERVAL_SECONDS,
                 stop_event: Optional[threading.Event] = None,
                 retry_delay: float = Constants.STORE_ERROR_RETRY_SECONDS):
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1.")
        self.store = store
        self.collection = collection
        self.chunk_size = chunk_size
        self.sync_interval = sync_interval
        self.retry_delay = retry_delay
        self.stop_event = stop_event or threading.Event()
        self.state = SyncState.STOPPED
        self.stats = SyncStats()

    def run_pass(self) -> bool:
        """
        Run one full snapshot pass.

        Returns False when stop() interrupted the pass. Raises StoreReadError
        if the store fails mid-scan; operations not yet flushed are discarded.
        """
        self.state = SyncState.SCANNING
        started = time.time()
        scanned = 0
        emitted = 0
        operations: List[UpdateOne] = []

        with self.store.snapshot() as records:
            for key, value in records:
                if self.stop_event.is_set():
                    logging.info("[SyncingService] Stop requested, abandoning the current pass.")
                    return False

                scanned += 1
                self.stats.records_scanned += 1

                document = badger_record_to_document(key, value)
                if document is None:
                    self.stats.record_drop(key)
                    continue

                operations.append(build_upsert_operation(key, document))
                emitted += 1
                self.stats.documents_emitted += 1

                if len(operations) >= self.chunk_size:
                    self._flush(operations)
                    operations = []

        if operations:
            self._flush(operations)

        self.stats.passes_completed += 1
        logging.info(
            f"[SyncingService] ✅ Pass complete in {time.time() - started:.2f}s: "
            f"{scanned} records scanned, {emitted} documents upserted, "
            f"{scanned - emitted} dropped. Totals: {self.stats.to_dict()}"
        )
        return True

    def _flush(self, operations: List[UpdateOne]):
        self.state = SyncState.FLUSHING
        try:
            result = self.collection.bulk_write(operations, ordered=False)
            self.stats.batches_written += 1
            self.stats.operations_written += len(operations)
            logging.debug(f"[SyncingService] Bulk write of {len(operations)} operations: {result.bulk_api_result}")
        except BulkWriteError as e:
            self.stats.batches_failed += 1
            write_errors = e.details.get("writeErrors", [])
            logging.error(
                f"[SyncingService] ❌ Bulk write of {len(operations)} operations had "
                f"{len(write_errors)} write errors: {write_errors[:3]}"
            )
        except PyMongoError as e:
            self.stats.batches_failed += 1
            logging.error(f"[SyncingService] ❌ Bulk write of {len(operations)} operations failed: {e}")
        except BSONError as e:
            self.stats.batches_failed += 1
            logging.error(f"[SyncingService] ❌ Batch of {len(operations)} operations could not be encoded: {e}")
        finally:
            self.state = SyncState.SCANNING

    def start(self):
        """Run passes until stop() is called. Blocks; run it in a worker thread."""
        logging.info(
            f"[SyncingService] 🔄 Starting sync loop (chunk_size={self.chunk_size}, "
            f"sync_interval={self.sync_interval}s)"
        )
        while not self.stop_event.is_set():
            try:
                completed = self.run_pass()
            except StoreReadError as e:
                self.stats.passes_failed += 1
                logging.error(
                    f"[SyncingService] ❌ Pass aborted by a store read error, "
                    f"restarting scan in {self.retry_delay}s: {e}"
                )
                self.stop_event.wait(self.retry_delay)
                continue

            if not completed:
                break

            self.state = SyncState.SLEEPING
            self.stop_event.wait(self.sync_interval)

        self.state = SyncState.STOPPED
        logging.info("[SyncingService] Sync loop stopped.")

    def stop(self):
        self.stop_event.set()
