from typing import Dict

from Mongo_Dumper.blockchain.chaintypes import PKID
from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class BalanceEntry:
    """How many of a creator's coins a holder owns."""

    def __init__(self, hodler_pkid: PKID, creator_pkid: PKID, balance_nanos: int, has_purchased: bool = False):
        self.hodler_pkid = hodler_pkid
        self.creator_pkid = creator_pkid
        self.balance_nanos = balance_nanos
        self.has_purchased = has_purchased

    @classmethod
    def from_bytes(cls, data: bytes) -> "BalanceEntry":
        reader = ByteReader(data)
        entry = cls(
            hodler_pkid=reader.read_pkid(),
            creator_pkid=reader.read_pkid(),
            balance_nanos=reader.read_uint64(),
            has_purchased=reader.read_bool(),
        )
        reader.expect_end()
        return entry

    def to_bytes(self) -> bytes:
        return (
            ByteWriter()
            .write_pkid(self.hodler_pkid)
            .write_pkid(self.creator_pkid)
            .write_uint64(self.balance_nanos)
            .write_bool(self.has_purchased)
            .getvalue()
        )

    def to_dict(self) -> Dict:
        return {
            "HODLerPKID": self.hodler_pkid,
            "CreatorPKID": self.creator_pkid,
            "BalanceNanos": self.balance_nanos,
            "HasPurchased": self.has_purchased,
        }
