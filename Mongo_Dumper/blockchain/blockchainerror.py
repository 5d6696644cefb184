import json
import time

from Mongo_Dumper.blockchain.constants import Constants


class ChainRecordDecodeError(ValueError):
    """A stored record does not match the layout of its prefix schema."""


class StoreReadError(Exception):
    """The embedded store failed while a snapshot was being opened or read."""


class SyncInitError(Exception):
    """Specialized error for startup failures (store or MongoDB unreachable)"""
    def __init__(self, message, original=None, **context):
        super().__init__(message)
        self.original_error = original
        self.timestamp = time.time()
        self.context = {"dumper_version": Constants.VERSION}
        self.context.update(context)

    def __str__(self):
        return (f"{super().__str__()}\n"
                f"Original Error: {self.original_error}\n"
                f"Failure Context: {json.dumps(self.context, default=str)}")
