from typing import Dict, List

from Mongo_Dumper.transactions.tx import TransactionOut
from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class AffectedPublicKey:
    def __init__(self, public_key_base58check: str, metadata: str):
        self.public_key_base58check = public_key_base58check
        self.metadata = metadata

    def to_dict(self) -> Dict:
        return {"PublicKeyBase58Check": self.public_key_base58check, "Metadata": self.metadata}


class TransactionMetadata:
    """
    Transaction index entry (only present when the node runs with --txindex).
    Records where a transaction landed and which public keys it touched.
    """

    def __init__(self, block_hash_hex: str, txn_index_in_block: int, txn_type: str,
                 transactor_public_key_base58check: str, affected_public_keys: List[AffectedPublicKey],
                 txn_outputs: List[TransactionOut]):
        self.block_hash_hex = block_hash_hex
        self.txn_index_in_block = txn_index_in_block
        self.txn_type = txn_type
        self.transactor_public_key_base58check = transactor_public_key_base58check
        self.affected_public_keys = affected_public_keys
        self.txn_outputs = txn_outputs

    @classmethod
    def from_bytes(cls, data: bytes) -> "TransactionMetadata":
        reader = ByteReader(data)
        block_hash_hex = reader.read_var_string()
        txn_index_in_block = reader.read_uint64()
        txn_type = reader.read_var_string()
        transactor = reader.read_var_string()
        affected_public_keys = [
            AffectedPublicKey(reader.read_var_string(), reader.read_var_string())
            for _ in range(reader.read_count())
        ]
        txn_outputs = [TransactionOut.read_from(reader) for _ in range(reader.read_count())]
        reader.expect_end()
        return cls(block_hash_hex, txn_index_in_block, txn_type, transactor, affected_public_keys, txn_outputs)

    def to_bytes(self) -> bytes:
        writer = (
            ByteWriter()
            .write_var_string(self.block_hash_hex)
            .write_uint64(self.txn_index_in_block)
            .write_var_string(self.txn_type)
            .write_var_string(self.transactor_public_key_base58check)
            .write_uvarint(len(self.affected_public_keys))
        )
        for affected in self.affected_public_keys:
            writer.write_var_string(affected.public_key_base58check).write_var_string(affected.metadata)
        writer.write_uvarint(len(self.txn_outputs))
        for tx_out in self.txn_outputs:
            tx_out.write_to(writer)
        return writer.getvalue()

    def to_dict(self) -> Dict:
        return {
            "BlockHashHex": self.block_hash_hex,
            "TxnIndexInBlock": self.txn_index_in_block,
            "TxnType": self.txn_type,
            "TransactorPublicKeyBase58Check": self.transactor_public_key_base58check,
            "AffectedPublicKeys": [affected.to_dict() for affected in self.affected_public_keys],
            "TxnOutputs": [
                {"PublicKey": tx_out.public_key, "AmountNanos": tx_out.amount_nanos}
                for tx_out in self.txn_outputs
            ],
        }
