import logging
import os
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Tuple

import lmdb

from Mongo_Dumper.blockchain.blockchainerror import StoreReadError, SyncInitError
from Mongo_Dumper.blockchain.constants import Constants


class LMDBManager:
    """
    Read side of the node's LMDB store.

    Every record lives in the unnamed main database and the first key byte is
    its prefix tag, so a single cursor walk visits the whole store in key order.
    """

    def __init__(self, db_path: Optional[str] = None, readonly: bool = True,
                 map_size: int = Constants.LMDB_MAP_SIZE, max_readers: int = Constants.LMDB_MAX_READERS):
        """
        Args:
            db_path (Optional[str]): Path to the LMDB environment directory.
            readonly (bool): Open without write access (the node owns the store).
            map_size (int): Maximum size the environment may grow to.
            max_readers (int): Maximum number of concurrent read transactions.
        """
        self.db_path = os.path.abspath(db_path or Constants.DEFAULT_STORE_PATH)
        self.readonly = readonly
        self.map_size = map_size
        self.max_readers = max_readers
        self.env = self._open_env()

    def _open_env(self):
        if not self.readonly:
            os.makedirs(self.db_path, exist_ok=True)
        try:
            env = lmdb.open(
                path=self.db_path,
                map_size=self.map_size,
                max_readers=self.max_readers,
                readonly=self.readonly,
                create=not self.readonly,
                readahead=False,
            )
        except lmdb.Error as e:
            logging.error(f"[LMDBManager] ❌ Failed to open LMDB environment at {self.db_path}: {e}")
            raise SyncInitError("Unable to open the LMDB store.", e, db_path=self.db_path) from e

        logging.info(f"[LMDBManager] ✅ Opened LMDB environment at {self.db_path} (readonly={self.readonly})")
        return env

    @contextmanager
    def snapshot(self) -> Iterator[Iterator[Tuple[bytes, bytes]]]:
        """
        Open one read-only transaction and yield an ordered (key, value) iterator.
        Writers keep committing while the snapshot is held; the iterator
        never sees their changes. LMDB failures surface as StoreReadError.
        """
        if self.env is None:
            raise StoreReadError(f"LMDB environment at {self.db_path} is closed.")
        try:
            with self.env.begin(write=False) as txn:
                with txn.cursor() as cursor:
                    yield iter(cursor)
        except lmdb.Error as e:
            logging.error(f"[LMDBManager] ❌ Snapshot read failed: {e}")
            raise StoreReadError(f"LMDB snapshot read failed: {e}") from e

    def put_records(self, records: Iterable[Tuple[bytes, bytes]]) -> int:
        """Write raw records in one transaction. Used to seed stores for tooling and tests."""
        if self.readonly:
            raise PermissionError("LMDBManager was opened read-only.")
        count = 0
        with self.env.begin(write=True) as txn:
            for key, value in records:
                txn.put(bytes(key), bytes(value))
                count += 1
        return count

    def get_database_status(self) -> dict:
        """
        Return current store usage: entry count, map size and free space.
        """
        env_info = self.env.info()
        env_stats = self.env.stat()

        map_size = env_info.get("map_size", 0)
        used_pages = env_info.get("last_pgno", 0)
        page_size = env_stats.get("psize", 4096)

        return {
            "used_entries": env_stats.get("entries", 0),
            "map_size_bytes": map_size,
            "free_space_bytes": map_size - (used_pages * page_size),
        }

    def close(self):
        if self.env is not None:
            self.env.close()
            self.env = None
            logging.info(f"[LMDBManager] Closed LMDB environment at {self.db_path}")
