import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from Mongo_Dumper.blockchain.blockchainerror import SyncInitError
from Mongo_Dumper.blockchain.constants import Constants


class MongoManager:
    """Owns the MongoClient and hands out the destination collection."""

    def __init__(self, uri: str = Constants.MONGO_URI, database: str = Constants.MONGO_DATABASE,
                 collection: str = Constants.MONGO_COLLECTION,
                 server_selection_timeout_ms: int = Constants.MONGO_SERVER_SELECTION_TIMEOUT_MS):
        self.uri = uri
        self.database_name = database
        self.collection_name = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client: Optional[MongoClient] = None

    def connect(self) -> Collection:
        """
        Create the client and ping the server so a bad URI fails at startup
        instead of on the first bulk write.
        """
        try:
            self.client = MongoClient(self.uri, serverSelectionTimeoutMS=self.server_selection_timeout_ms)
            self.client.admin.command("ping")
        except PyMongoError as e:
            logging.critical(f"[MongoManager] ❌ Cannot reach MongoDB: {e}")
            self.disconnect()
            raise SyncInitError(
                "Unable to connect to MongoDB.", e,
                database=self.database_name, collection=self.collection_name,
            ) from e

        logging.info(f"[MongoManager] ✅ Connected to MongoDB, writing to {self.database_name}.{self.collection_name}")
        return self.collection

    @property
    def collection(self) -> Collection:
        if self.client is None:
            raise RuntimeError("MongoManager is not connected.")
        return self.client[self.database_name][self.collection_name]

    def disconnect(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            logging.info("[MongoManager] Disconnected from MongoDB.")
