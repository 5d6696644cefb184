from typing import Dict, List, Optional

from Mongo_Dumper.blockchain.chaintypes import BlockHash
from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class StakerEntry:
    def __init__(self, initial_staker_public_key: bytes, initial_stake_nanos: int, remaining_stake_owed_nanos: int):
        self.initial_staker_public_key = initial_staker_public_key
        self.initial_stake_nanos = initial_stake_nanos
        self.remaining_stake_owed_nanos = remaining_stake_owed_nanos


class StakeEntry:
    """
    Legacy staking bookkeeping still carried by posts and profiles.
    It is internal state and is never mirrored.
    """

    def __init__(self, stake_list: List[StakerEntry] = None, total_post_stake: int = 0):
        self.stake_list = stake_list or []
        self.total_post_stake = total_post_stake

    @classmethod
    def read_from(cls, reader: ByteReader) -> "StakeEntry":
        stake_list = [
            StakerEntry(reader.read_var_bytes(), reader.read_uvarint(), reader.read_uvarint())
            for _ in range(reader.read_count())
        ]
        return cls(stake_list, reader.read_uvarint())

    def write_to(self, writer: ByteWriter):
        writer.write_uvarint(len(self.stake_list))
        for staker in self.stake_list:
            writer.write_var_bytes(staker.initial_staker_public_key)
            writer.write_uvarint(staker.initial_stake_nanos)
            writer.write_uvarint(staker.remaining_stake_owed_nanos)
        writer.write_uvarint(self.total_post_stake)


def read_extra_data(reader: ByteReader) -> Dict[str, bytes]:
    extra_data = {}
    for _ in range(reader.read_count()):
        extra_key = reader.read_var_string()
        extra_data[extra_key] = reader.read_var_bytes()
    return extra_data


def write_extra_data(writer: ByteWriter, extra_data: Dict[str, bytes]):
    writer.write_uvarint(len(extra_data))
    for extra_key, extra_value in extra_data.items():
        writer.write_var_string(extra_key).write_var_bytes(extra_value)


class PostEntry:
    """A user's post or comment, including its engagement counters."""

    def __init__(self, post_hash: BlockHash, poster_public_key: bytes, body: bytes,
                 parent_stake_id: bytes = b"", reclouted_post_hash: Optional[BlockHash] = None,
                 is_quoted_reclout: bool = False, creator_basis_points: int = 0,
                 stake_multiple_basis_points: int = 0, confirmation_block_height: int = 0,
                 timestamp_nanos: int = 0, is_hidden: bool = False, stake_entry: StakeEntry = None,
                 like_count: int = 0, reclout_count: int = 0, quote_reclout_count: int = 0,
                 diamond_count: int = 0, comment_count: int = 0, post_extra_data: Dict[str, bytes] = None):
        self.post_hash = post_hash
        self.poster_public_key = poster_public_key
        self.parent_stake_id = parent_stake_id
        self.body = body
        self.reclouted_post_hash = reclouted_post_hash
        self.is_quoted_reclout = is_quoted_reclout
        self.creator_basis_points = creator_basis_points
        self.stake_multiple_basis_points = stake_multiple_basis_points
        self.confirmation_block_height = confirmation_block_height
        self.timestamp_nanos = timestamp_nanos
        self.is_hidden = is_hidden
        self.stake_entry = stake_entry or StakeEntry()
        self.like_count = like_count
        self.reclout_count = reclout_count
        self.quote_reclout_count = quote_reclout_count
        self.diamond_count = diamond_count
        self.comment_count = comment_count
        self.post_extra_data = post_extra_data or {}

    @classmethod
    def from_bytes(cls, data: bytes) -> "PostEntry":
        reader = ByteReader(data)
        entry = cls(
            post_hash=reader.read_hash(),
            poster_public_key=reader.read_var_bytes(),
            parent_stake_id=reader.read_var_bytes(),
            body=reader.read_var_bytes(),
            reclouted_post_hash=reader.read_optional_hash(),
            is_quoted_reclout=reader.read_bool(),
            creator_basis_points=reader.read_uint64(),
            stake_multiple_basis_points=reader.read_uint64(),
            confirmation_block_height=reader.read_uint32(),
            timestamp_nanos=reader.read_uint64(),
            is_hidden=reader.read_bool(),
            stake_entry=StakeEntry.read_from(reader),
            like_count=reader.read_uint64(),
            reclout_count=reader.read_uint64(),
            quote_reclout_count=reader.read_uint64(),
            diamond_count=reader.read_uint64(),
            comment_count=reader.read_uint64(),
            post_extra_data=read_extra_data(reader),
        )
        reader.expect_end()
        return entry

    def to_bytes(self) -> bytes:
        writer = (
            ByteWriter()
            .write_hash(self.post_hash)
            .write_var_bytes(self.poster_public_key)
            .write_var_bytes(self.parent_stake_id)
            .write_var_bytes(self.body)
            .write_optional_hash(self.reclouted_post_hash)
            .write_bool(self.is_quoted_reclout)
            .write_uint64(self.creator_basis_points)
            .write_uint64(self.stake_multiple_basis_points)
            .write_uint32(self.confirmation_block_height)
            .write_uint64(self.timestamp_nanos)
            .write_bool(self.is_hidden)
        )
        self.stake_entry.write_to(writer)
        (
            writer.write_uint64(self.like_count)
            .write_uint64(self.reclout_count)
            .write_uint64(self.quote_reclout_count)
            .write_uint64(self.diamond_count)
            .write_uint64(self.comment_count)
        )
        write_extra_data(writer, self.post_extra_data)
        return writer.getvalue()

    def to_dict(self) -> Dict:
        return {
            "PostHash": self.post_hash,
            "PosterPublicKey": self.poster_public_key,
            "ParentStakeID": self.parent_stake_id,
            "Body": self.body,
            "RecloutedPostHash": self.reclouted_post_hash,
            "IsQuotedReclout": self.is_quoted_reclout,
            "CreatorBasisPoints": self.creator_basis_points,
            "StakeMultipleBasisPoints": self.stake_multiple_basis_points,
            "ConfirmationBlockHeight": self.confirmation_block_height,
            "TimestampNanos": self.timestamp_nanos,
            "IsHidden": self.is_hidden,
            "StakeEntry": self.stake_entry,
            "LikeCount": self.like_count,
            "RecloutCount": self.reclout_count,
            "QuoteRecloutCount": self.quote_reclout_count,
            "DiamondCount": self.diamond_count,
            "CommentCount": self.comment_count,
            "PostExtraData": dict(self.post_extra_data),
        }


class RecloutEntry:
    """A reclout: who reclouted, the reclout post and the original post."""

    def __init__(self, reclouter_pub_key: bytes, reclout_post_hash: BlockHash, reclouted_post_hash: BlockHash):
        self.reclouter_pub_key = reclouter_pub_key
        self.reclout_post_hash = reclout_post_hash
        self.reclouted_post_hash = reclouted_post_hash

    @classmethod
    def from_bytes(cls, data: bytes) -> "RecloutEntry":
        reader = ByteReader(data)
        entry = cls(reader.read_var_bytes(), reader.read_hash(), reader.read_hash())
        reader.expect_end()
        return entry

    def to_bytes(self) -> bytes:
        return (
            ByteWriter()
            .write_var_bytes(self.reclouter_pub_key)
            .write_hash(self.reclout_post_hash)
            .write_hash(self.reclouted_post_hash)
            .getvalue()
        )

    def to_dict(self) -> Dict:
        return {
            "ReclouterPubKey": self.reclouter_pub_key,
            "RecloutPostHash": self.reclout_post_hash,
            "RecloutedPostHash": self.reclouted_post_hash,
        }
