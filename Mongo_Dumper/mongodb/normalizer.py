from datetime import datetime
from typing import Any, Dict

from Mongo_Dumper.blockchain.chaintypes import BigInt, BlockHash, PKID, ParentLink
from Mongo_Dumper.social.post import StakeEntry
from Mongo_Dumper.transactions.utxo import UtxoType
from Mongo_Dumper.utils.data_encoding import DataEncoding


# Byte values under these names are public keys or PKIDs
PUBLIC_KEY_FIELDS = frozenset({
    "PKID",
    "PosterPublicKey",
    "FollowedPublicKey",
    "FollowedPKID",
    "FollowerPKID",
    "FollowedPublicKeys",
    "HoldingPublicKey",
    "PublicKey",
    "SenderPublicKey",
    "RecipientPublicKey",
    "HODLerPKID",
    "CreatorPKID",
    "ReclouterPubKey",
})

# Byte values under these names are user supplied text
TEXT_FIELDS = frozenset({"Body", "EncryptedText", "Username", "Description", "ProfilePic"})

HEADER_HASH_FIELDS = ("PrevBlockHash", "TransactionMerkleRoot")

# Already rendered by Transaction.to_dict()
PASSTHROUGH_FIELDS = frozenset({"Txns"})


def current_timestamp() -> str:
    """Local wall-clock time with UTC offset, e.g. '2021-05-01 12:00:00.123456+02:00'."""
    return str(datetime.now().astimezone())


class ValueNormalizer:
    """
    Rewrites a decoded field map in place so every value is JSON/BSON friendly.

    Type rules:
      - BlockHash → hex
      - PKID → "<mainnet>:<testnet>" base58check
      - UtxoType → "UtxoType<Name>"
      - BigInt → decimal string
      - ParentLink → field dropped, ParentHash set instead
      - StakeEntry → field dropped
      - int outside the signed 64-bit range → decimal string
      - leftover bytes → base64

    Keys containing NUL (rejected by BSON) are replaced by the hex of their
    UTF-8 bytes.

    Name rules only apply to raw bytes, so normalizing an already
    normalized map leaves it unchanged (apart from Time).
    """

    @classmethod
    def normalize(cls, field_map: Dict[str, Any], stamp_time: bool = True) -> Dict[str, Any]:
        cls._normalize_map(field_map)
        if stamp_time:
            field_map["Time"] = current_timestamp()
        return field_map

    @classmethod
    def _normalize_map(cls, field_map: Dict[str, Any]):
        for name, value in list(field_map.items()):
            if name in PASSTHROUGH_FIELDS:
                continue
            if isinstance(name, str) and "\x00" in name:
                del field_map[name]
                name = DataEncoding.document_key(name)
                field_map[name] = value
            if isinstance(value, ParentLink):
                del field_map[name]
                field_map["ParentHash"] = value.parent_hash
            elif isinstance(value, StakeEntry):
                del field_map[name]
            else:
                field_map[name] = cls._normalize_value(name, value)

    @classmethod
    def _normalize_value(cls, name: str, value: Any) -> Any:
        if value is None or isinstance(value, (str, float, bool)):
            return value

        # Int subclasses first
        if isinstance(value, BigInt):
            return str(int(value))
        if isinstance(value, UtxoType):
            return str(value)
        if isinstance(value, int):
            return DataEncoding.bson_safe_int(value)

        if isinstance(value, (BlockHash, PKID)):
            return str(value)

        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls._normalize_bytes(name, bytes(value))

        if isinstance(value, dict):
            if name == "Header":
                cls._coerce_header_hashes(value)
            cls._normalize_map(value)
            return value

        if isinstance(value, (list, tuple)):
            normalized = []
            for item in value:
                if isinstance(item, dict):
                    cls._normalize_map(item)
                    normalized.append(item)
                else:
                    normalized.append(cls._normalize_value(name, item))
            return normalized

        raise TypeError(f"Cannot normalize field '{name}' of type {type(value).__name__}.")

    @staticmethod
    def _normalize_bytes(name: str, value: bytes) -> str:
        if name in PUBLIC_KEY_FIELDS:
            return DataEncoding.pk_to_string_both(value)
        if name in TEXT_FIELDS:
            return DataEncoding.bytes_to_utf8(value)
        if name == "ParentStakeID":
            return DataEncoding.bytes_to_hex(value)
        return DataEncoding.bytes_to_base64(value)

    @staticmethod
    def _coerce_header_hashes(header: Dict[str, Any]):
        for hash_field in HEADER_HASH_FIELDS:
            value = header.get(hash_field)
            if value is None or isinstance(value, str):
                continue
            if isinstance(value, (bytes, bytearray)):
                header[hash_field] = DataEncoding.bytes_to_hex(value)
            else:
                header[hash_field] = str(value)
