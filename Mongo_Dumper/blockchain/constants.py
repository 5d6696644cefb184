import os


class Constants:
    """
    Centralized constants for the store mirror: record sizes, public key
    prefixes, sync cadence, MongoDB defaults and LMDB settings.
    """

    # 🔹 **Versioning**
    VERSION = "1.00"

    # 🔹 **Record Sizes**
    HASH_SIZE_BYTES = 32
    PUBLIC_KEY_SIZE_BYTES = 33
    UINT64_SIZE_BYTES = 8
    UINT32_SIZE_BYTES = 4
    MAX_UVARINT_BYTES = 10

    # 🔹 **Public Key Base58Check Prefixes**
    NETWORK_PUBLIC_KEY_PREFIXES = {
        "mainnet": bytes([0xCD, 0x14, 0x00]),
        "testnet": bytes([0x11, 0xC2, 0x00]),
    }

    # BSON integers are signed 64-bit
    MAX_BSON_INT = (1 << 63) - 1
    MIN_BSON_INT = -(1 << 63)

    # 🔹 **Sync Loop**
    BULK_WRITE_CHUNK_SIZE = 1000  # Number of operations in a bulk write operation
    SYNC_INTERVAL_SECONDS = 60  # Wait between full passes to limit CPU utilization
    SHUTDOWN_JOIN_TIMEOUT_SECONDS = 30
    STORE_ERROR_RETRY_SECONDS = 1  # Pause before rescanning after a store read error

    # 🔹 **MongoDB Defaults**
    MONGO_URI = "mongodb://localhost:27017"
    MONGO_DATABASE = "bitclout"
    MONGO_COLLECTION = "data"
    MONGO_SERVER_SELECTION_TIMEOUT_MS = 30_000

    # 🔹 **LMDB Settings**
    DEFAULT_STORE_PATH = "./blockchain_storage/BlockData/"
    LMDB_MAP_SIZE = 128 * 1024 * 1024  # 128MB
    LMDB_MAX_READERS = 200

    # 🔹 **Config File**
    CONFIG_FILE = os.path.join(os.path.expanduser("~"), ".deso", "mongodb-dumper.yaml")
    LOG_LEVEL = "INFO"
