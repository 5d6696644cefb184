from enum import IntEnum
from typing import Dict, Optional

from Mongo_Dumper.blockchain.blockchainerror import ChainRecordDecodeError
from Mongo_Dumper.blockchain.chaintypes import BlockHash
from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class UtxoType(IntEnum):
    OUTPUT = 0
    BLOCK_REWARD = 1
    BITCOIN_BURN = 2
    STAKE_REWARD = 3
    CREATOR_COIN_SALE = 4
    CREATOR_COIN_FOUNDER_REWARD = 5

    def __str__(self):
        return "UtxoType" + "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def decode(cls, value: int) -> "UtxoType":
        try:
            return cls(value)
        except ValueError as e:
            raise ChainRecordDecodeError(f"Unknown UtxoType {value}.") from e


class UtxoKey:
    """Outpoint: the id of the creating transaction and the output index."""

    def __init__(self, tx_id: BlockHash, index: int):
        self.tx_id = tx_id
        self.index = index

    @classmethod
    def read_from(cls, reader: ByteReader) -> "UtxoKey":
        return cls(tx_id=reader.read_hash(), index=reader.read_uint32())

    @classmethod
    def from_bytes(cls, data: bytes) -> "UtxoKey":
        reader = ByteReader(data)
        utxo_key = cls.read_from(reader)
        reader.expect_end()
        return utxo_key

    def write_to(self, writer: ByteWriter):
        writer.write_hash(self.tx_id).write_uint32(self.index)

    def to_bytes(self) -> bytes:
        writer = ByteWriter()
        self.write_to(writer)
        return writer.getvalue()

    def to_dict(self) -> Dict:
        return {"TxID": self.tx_id, "Index": self.index}


class UtxoEntry:
    """An unspent output with the height it was mined at."""

    def __init__(self, amount_nanos: int, public_key: bytes, block_height: int, utxo_type: UtxoType,
                 utxo_key: Optional[UtxoKey] = None):
        self.amount_nanos = amount_nanos
        self.public_key = public_key
        self.block_height = block_height
        self.utxo_type = utxo_type
        self.utxo_key = utxo_key

    @classmethod
    def from_bytes(cls, data: bytes) -> "UtxoEntry":
        reader = ByteReader(data)
        amount_nanos = reader.read_uint64()
        public_key = reader.read_var_bytes()
        block_height = reader.read_uint32()
        utxo_type = UtxoType.decode(reader.read_uint8())
        utxo_key = UtxoKey.read_from(reader) if reader.read_bool() else None
        reader.expect_end()
        return cls(amount_nanos, public_key, block_height, utxo_type, utxo_key)

    def to_bytes(self) -> bytes:
        writer = (
            ByteWriter()
            .write_uint64(self.amount_nanos)
            .write_var_bytes(self.public_key)
            .write_uint32(self.block_height)
            .write_uint8(int(self.utxo_type))
            .write_bool(self.utxo_key is not None)
        )
        if self.utxo_key is not None:
            self.utxo_key.write_to(writer)
        return writer.getvalue()

    def to_dict(self) -> Dict:
        return {
            "AmountNanos": self.amount_nanos,
            "PublicKey": self.public_key,
            "BlockHeight": self.block_height,
            "UtxoType": self.utxo_type,
            "UtxoKey": self.utxo_key.to_dict() if self.utxo_key else None,
        }
