from typing import Optional

from Mongo_Dumper.blockchain.constants import Constants
from Mongo_Dumper.blockchain.blockchainerror import ChainRecordDecodeError
from Mongo_Dumper.utils.data_encoding import DataEncoding


class BlockHash:
    """A 32-byte hash (block hash, transaction id, post hash). Renders as hex."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes):
        raw = bytes(raw)
        if len(raw) != Constants.HASH_SIZE_BYTES:
            raise ChainRecordDecodeError(
                f"BlockHash must be {Constants.HASH_SIZE_BYTES} bytes, got {len(raw)}."
            )
        self._raw = raw

    @classmethod
    def from_hex(cls, hex_str: str) -> "BlockHash":
        return cls(bytes.fromhex(hex_str))

    def __bytes__(self):
        return self._raw

    def __str__(self):
        return self._raw.hex()

    def __eq__(self, other):
        return isinstance(other, BlockHash) and other._raw == self._raw

    def __hash__(self):
        return hash(self._raw)

    def __repr__(self):
        return f"BlockHash({self._raw.hex()[:16]}...)"


class PKID:
    """A 33-byte profile identifier. Renders in the dual mainnet:testnet form."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes):
        raw = bytes(raw)
        if len(raw) != Constants.PUBLIC_KEY_SIZE_BYTES:
            raise ChainRecordDecodeError(
                f"PKID must be {Constants.PUBLIC_KEY_SIZE_BYTES} bytes, got {len(raw)}."
            )
        self._raw = raw

    def __bytes__(self):
        return self._raw

    def __str__(self):
        return DataEncoding.pk_to_string_both(self._raw)

    def __eq__(self, other):
        return isinstance(other, PKID) and other._raw == self._raw

    def __hash__(self):
        return hash(self._raw)

    def __repr__(self):
        return f"PKID({self._raw.hex()[:16]}...)"


class BigInt(int):
    """Arbitrary precision integer (cumulative work). Always rendered as a decimal string."""


class ParentLink:
    """
    Back-reference from a block node to its parent node.
    Documents never embed the parent; only its hash is kept (ParentHash).
    """

    __slots__ = ("node",)

    def __init__(self, node: Optional[object]):
        self.node = node

    @property
    def parent_hash(self) -> Optional[str]:
        if self.node is None:
            return None
        return str(self.node.hash)
