from typing import Dict

from Mongo_Dumper.blockchain.chaintypes import PKID
from Mongo_Dumper.social.post import StakeEntry
from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class CoinEntry:
    """Creator coin state attached to a profile."""

    def __init__(self, creator_basis_points: int = 0, bitclout_locked_nanos: int = 0, number_of_holders: int = 0,
                 coins_in_circulation_nanos: int = 0, coin_watermark_nanos: int = 0):
        self.creator_basis_points = creator_basis_points
        self.bitclout_locked_nanos = bitclout_locked_nanos
        self.number_of_holders = number_of_holders
        self.coins_in_circulation_nanos = coins_in_circulation_nanos
        self.coin_watermark_nanos = coin_watermark_nanos

    @classmethod
    def read_from(cls, reader: ByteReader) -> "CoinEntry":
        return cls(
            creator_basis_points=reader.read_uint64(),
            bitclout_locked_nanos=reader.read_uint64(),
            number_of_holders=reader.read_uint64(),
            coins_in_circulation_nanos=reader.read_uint64(),
            coin_watermark_nanos=reader.read_uint64(),
        )

    def write_to(self, writer: ByteWriter):
        (
            writer.write_uint64(self.creator_basis_points)
            .write_uint64(self.bitclout_locked_nanos)
            .write_uint64(self.number_of_holders)
            .write_uint64(self.coins_in_circulation_nanos)
            .write_uint64(self.coin_watermark_nanos)
        )

    def to_dict(self) -> Dict:
        return {
            "CreatorBasisPoints": self.creator_basis_points,
            "BitCloutLockedNanos": self.bitclout_locked_nanos,
            "NumberOfHolders": self.number_of_holders,
            "CoinsInCirculationNanos": self.coins_in_circulation_nanos,
            "CoinWatermarkNanos": self.coin_watermark_nanos,
        }


class ProfileEntry:
    """
    A user profile keyed by PKID.

    Username, description and profile picture are stored as raw bytes; the
    picture is usually a data URL but nothing enforces it.
    """

    def __init__(self, public_key: bytes, username: bytes, description: bytes = b"", profile_pic: bytes = b"",
                 is_hidden: bool = False, coin_entry: CoinEntry = None, stake_multiple_basis_points: int = 0,
                 stake_entry: StakeEntry = None):
        self.public_key = public_key
        self.username = username
        self.description = description
        self.profile_pic = profile_pic
        self.is_hidden = is_hidden
        self.coin_entry = coin_entry or CoinEntry()
        self.stake_multiple_basis_points = stake_multiple_basis_points
        self.stake_entry = stake_entry or StakeEntry()

    @classmethod
    def from_bytes(cls, data: bytes) -> "ProfileEntry":
        reader = ByteReader(data)
        entry = cls(
            public_key=reader.read_var_bytes(),
            username=reader.read_var_bytes(),
            description=reader.read_var_bytes(),
            profile_pic=reader.read_var_bytes(),
            is_hidden=reader.read_bool(),
            coin_entry=CoinEntry.read_from(reader),
            stake_multiple_basis_points=reader.read_uint64(),
            stake_entry=StakeEntry.read_from(reader),
        )
        reader.expect_end()
        return entry

    def to_bytes(self) -> bytes:
        writer = (
            ByteWriter()
            .write_var_bytes(self.public_key)
            .write_var_bytes(self.username)
            .write_var_bytes(self.description)
            .write_var_bytes(self.profile_pic)
            .write_bool(self.is_hidden)
        )
        self.coin_entry.write_to(writer)
        writer.write_uint64(self.stake_multiple_basis_points)
        self.stake_entry.write_to(writer)
        return writer.getvalue()

    def to_dict(self) -> Dict:
        return {
            "PublicKey": self.public_key,
            "Username": self.username,
            "Description": self.description,
            "ProfilePic": self.profile_pic,
            "IsHidden": self.is_hidden,
            "CoinEntry": self.coin_entry.to_dict(),
            "StakeMultipleBasisPoints": self.stake_multiple_basis_points,
            "StakeEntry": self.stake_entry,
        }


class PKIDEntry:
    """Maps a public key to the PKID its profile lives under."""

    def __init__(self, pkid: PKID, public_key: bytes):
        self.pkid = pkid
        self.public_key = public_key

    @classmethod
    def from_bytes(cls, data: bytes) -> "PKIDEntry":
        reader = ByteReader(data)
        entry = cls(reader.read_pkid(), reader.read_var_bytes())
        reader.expect_end()
        return entry

    def to_bytes(self) -> bytes:
        return ByteWriter().write_pkid(self.pkid).write_var_bytes(self.public_key).getvalue()

    def to_dict(self) -> Dict:
        return {"PKID": self.pkid, "PublicKey": self.public_key}
