from typing import List, Optional

from Mongo_Dumper.blockchain.blockheader import BlockHeader
from Mongo_Dumper.blockchain.chaintypes import BigInt, BlockHash, ParentLink
from Mongo_Dumper.transactions.tx import Transaction
from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class Block:
    """
    A full block as stored under its block hash.

    Layout: length-prefixed header, transaction count, then each
    transaction length-prefixed.
    """

    def __init__(self, header: BlockHeader, transactions: List[Transaction]):
        self.header = header
        self.transactions = transactions

    @classmethod
    def from_bytes(cls, data: bytes) -> "Block":
        reader = ByteReader(data)
        header = BlockHeader.from_bytes(reader.read_var_bytes())
        transactions = [
            Transaction.from_bytes(reader.read_var_bytes())
            for _ in range(reader.read_count())
        ]
        reader.expect_end()
        return cls(header, transactions)

    def to_bytes(self) -> bytes:
        writer = ByteWriter()
        writer.write_var_bytes(self.header.to_bytes())
        writer.write_uvarint(len(self.transactions))
        for tx in self.transactions:
            writer.write_var_bytes(tx.to_bytes())
        return writer.getvalue()

    def to_dict(self):
        return {
            "Header": self.header.to_dict(),
            "Txns": [tx.to_dict() for tx in self.transactions],
        }


class BlockNode:
    """
    A node in the block index (BitClout chain or Bitcoin header chain).

    The parent link lives only in memory; stored nodes come back with
    parent=None and the link is resolved by whoever builds the index.
    """

    def __init__(self, block_hash: BlockHash, height: int, difficulty_target: BlockHash, cum_work: Optional[int],
                 header: BlockHeader, status: int, parent: Optional["BlockNode"] = None):
        self.hash = block_hash
        self.height = height
        self.difficulty_target = difficulty_target
        self.cum_work = cum_work
        self.header = header
        self.status = status
        self.parent = parent

    @classmethod
    def from_bytes(cls, data: bytes) -> "BlockNode":
        reader = ByteReader(data)
        block_hash = reader.read_hash()
        height = reader.read_uint32()
        difficulty_target = reader.read_hash()
        cum_work = int.from_bytes(reader.read_var_bytes(), "big")
        header = BlockHeader.from_bytes(reader.read_var_bytes())
        status = reader.read_uint32()
        reader.expect_end()
        return cls(block_hash, height, difficulty_target, cum_work, header, status)

    def to_bytes(self) -> bytes:
        cum_work = self.cum_work or 0
        return (
            ByteWriter()
            .write_hash(self.hash)
            .write_uint32(self.height)
            .write_hash(self.difficulty_target)
            .write_var_bytes(cum_work.to_bytes((cum_work.bit_length() + 7) // 8, "big"))
            .write_var_bytes(self.header.to_bytes())
            .write_uint32(self.status)
            .getvalue()
        )

    def to_dict(self):
        return {
            "Parent": ParentLink(self.parent),
            "Hash": self.hash,
            "Height": self.height,
            "DifficultyTarget": self.difficulty_target,
            "CumWork": BigInt(self.cum_work) if self.cum_work is not None else None,
            "Header": self.header.to_dict(),
            "Status": self.status,
        }
