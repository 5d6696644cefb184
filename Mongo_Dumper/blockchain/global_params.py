from typing import Dict

from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class GlobalParamsEntry:
    """Network-wide parameters set by the param updater key."""

    def __init__(self, usd_cents_per_bitcoin: int, create_profile_fee_nanos: int,
                 minimum_network_fee_nanos_per_kb: int):
        self.usd_cents_per_bitcoin = usd_cents_per_bitcoin
        self.create_profile_fee_nanos = create_profile_fee_nanos
        self.minimum_network_fee_nanos_per_kb = minimum_network_fee_nanos_per_kb

    @classmethod
    def from_bytes(cls, data: bytes) -> "GlobalParamsEntry":
        reader = ByteReader(data)
        entry = cls(reader.read_uint64(), reader.read_uint64(), reader.read_uint64())
        reader.expect_end()
        return entry

    def to_bytes(self) -> bytes:
        return (
            ByteWriter()
            .write_uint64(self.usd_cents_per_bitcoin)
            .write_uint64(self.create_profile_fee_nanos)
            .write_uint64(self.minimum_network_fee_nanos_per_kb)
            .getvalue()
        )

    def to_dict(self) -> Dict:
        return {
            "USDCentsPerBitcoin": self.usd_cents_per_bitcoin,
            "CreateProfileFeeNanos": self.create_profile_fee_nanos,
            "MinimumNetworkFeeNanosPerKB": self.minimum_network_fee_nanos_per_kb,
        }
