from typing import Dict, List

from Mongo_Dumper.blockchain.blockchainerror import ChainRecordDecodeError
from Mongo_Dumper.blockchain.chaintypes import BlockHash
from Mongo_Dumper.blockchain.constants import Constants
from Mongo_Dumper.utils.data_encoding import DataEncoding
from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


TXN_TYPE_NAMES = {
    0: "UNSET",
    1: "BLOCK_REWARD",
    2: "BASIC_TRANSFER",
    3: "BITCOIN_EXCHANGE",
    4: "PRIVATE_MESSAGE",
    5: "SUBMIT_POST",
    6: "UPDATE_PROFILE",
    8: "UPDATE_BITCOIN_USD_EXCHANGE_RATE",
    9: "FOLLOW",
    10: "LIKE",
    11: "CREATOR_COIN",
    12: "SWAP_IDENTITY",
    13: "UPDATE_GLOBAL_PARAMS",
    14: "CREATOR_COIN_TRANSFER",
}


def txn_type_name(txn_type: int) -> str:
    return TXN_TYPE_NAMES.get(txn_type, "UNKNOWN")


class TransactionIn:
    """Reference to the output being spent."""

    def __init__(self, tx_id: BlockHash, index: int):
        self.tx_id = tx_id
        self.index = index

    def to_dict(self) -> Dict:
        return {"TxID": str(self.tx_id), "Index": DataEncoding.bson_safe_int(self.index)}


class TransactionOut:
    """Represents a transaction output (UTXO)."""

    def __init__(self, public_key: bytes, amount_nanos: int):
        self.public_key = bytes(public_key)
        self.amount_nanos = amount_nanos

    @classmethod
    def read_from(cls, reader: ByteReader) -> "TransactionOut":
        public_key = reader.read(Constants.PUBLIC_KEY_SIZE_BYTES)
        return cls(public_key=public_key, amount_nanos=reader.read_uvarint())

    def write_to(self, writer: ByteWriter):
        if len(self.public_key) != Constants.PUBLIC_KEY_SIZE_BYTES:
            raise ValueError("Output public key must be 33 bytes.")
        writer.write(self.public_key).write_uvarint(self.amount_nanos)

    def to_dict(self) -> Dict:
        return {
            "PublicKey": DataEncoding.pk_to_string_both(self.public_key),
            "AmountNanos": DataEncoding.bson_safe_int(self.amount_nanos),
        }


class Transaction:
    """
    A transaction as stored inside a block.

    Layout: inputs, outputs, txn type + metadata, transactor public key,
    extra data map and signature; every variable part is length-prefixed.
    """

    def __init__(self, tx_inputs: List[TransactionIn], tx_outputs: List[TransactionOut], txn_type: int,
                 txn_meta: bytes = b"", public_key: bytes = b"", extra_data: Dict[bytes, bytes] = None,
                 signature: bytes = b""):
        self.tx_inputs = tx_inputs
        self.tx_outputs = tx_outputs
        self.txn_type = txn_type
        self.txn_meta = txn_meta
        self.public_key = public_key
        self.extra_data = extra_data or {}
        self.signature = signature

    @classmethod
    def from_bytes(cls, data: bytes) -> "Transaction":
        reader = ByteReader(data)

        tx_inputs = []
        for _ in range(reader.read_count()):
            tx_inputs.append(TransactionIn(reader.read_hash(), reader.read_uvarint()))

        tx_outputs = []
        for _ in range(reader.read_count()):
            tx_outputs.append(TransactionOut.read_from(reader))

        txn_type = reader.read_uint8()
        txn_meta = reader.read_var_bytes()
        public_key = reader.read_var_bytes()

        extra_data = {}
        for _ in range(reader.read_count()):
            extra_key = reader.read_var_bytes()
            extra_data[extra_key] = reader.read_var_bytes()

        signature = reader.read_var_bytes()
        reader.expect_end()

        if public_key and len(public_key) != Constants.PUBLIC_KEY_SIZE_BYTES:
            raise ChainRecordDecodeError(f"Transactor public key has {len(public_key)} bytes.")

        return cls(tx_inputs, tx_outputs, txn_type, txn_meta, public_key, extra_data, signature)

    def to_bytes(self) -> bytes:
        writer = ByteWriter()
        writer.write_uvarint(len(self.tx_inputs))
        for tx_in in self.tx_inputs:
            writer.write_hash(tx_in.tx_id).write_uvarint(tx_in.index)
        writer.write_uvarint(len(self.tx_outputs))
        for tx_out in self.tx_outputs:
            tx_out.write_to(writer)
        writer.write_uint8(self.txn_type)
        writer.write_var_bytes(self.txn_meta)
        writer.write_var_bytes(self.public_key)
        writer.write_uvarint(len(self.extra_data))
        for extra_key, extra_value in self.extra_data.items():
            writer.write_var_bytes(extra_key).write_var_bytes(extra_value)
        writer.write_var_bytes(self.signature)
        return writer.getvalue()

    def to_dict(self) -> Dict:
        """
        Document-ready form: hashes as hex, keys as base58check, raw blobs as hex.
        Blocks embed this form directly, so it must already be JSON-safe.
        """
        return {
            "TxInputs": [tx_in.to_dict() for tx_in in self.tx_inputs],
            "TxOutputs": [tx_out.to_dict() for tx_out in self.tx_outputs],
            "TxnType": txn_type_name(self.txn_type),
            "TxnMeta": DataEncoding.bytes_to_hex(self.txn_meta),
            "PublicKey": DataEncoding.pk_to_string_both(self.public_key) if self.public_key else None,
            "ExtraData": {
                DataEncoding.bytes_to_document_key(extra_key): DataEncoding.bytes_to_hex(extra_value)
                for extra_key, extra_value in self.extra_data.items()
            },
            "Signature": DataEncoding.bytes_to_hex(self.signature) if self.signature else None,
        }
