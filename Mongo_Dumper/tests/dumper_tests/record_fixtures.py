"""
Well-formed sample records for every prefix, shared by the dispatcher and
sync tests. Keys and values are built with the record classes' to_bytes().
"""

import struct

from Mongo_Dumper.accounts.balance import BalanceEntry
from Mongo_Dumper.accounts.profile import CoinEntry, PKIDEntry, ProfileEntry
from Mongo_Dumper.blockchain.block import Block, BlockNode
from Mongo_Dumper.blockchain.blockheader import BlockHeader
from Mongo_Dumper.blockchain.chaintypes import BlockHash, PKID
from Mongo_Dumper.blockchain.global_params import GlobalParamsEntry
from Mongo_Dumper.social.message import MessageEntry
from Mongo_Dumper.social.post import PostEntry, RecloutEntry, StakeEntry, StakerEntry
from Mongo_Dumper.transactions.transaction_metadata import AffectedPublicKey, TransactionMetadata
from Mongo_Dumper.transactions.tx import Transaction, TransactionIn, TransactionOut
from Mongo_Dumper.transactions.utxo import UtxoEntry, UtxoKey, UtxoType

PK_A = bytes([0x02]) + bytes(range(1, 33))
PK_B = bytes([0x03]) + bytes(range(101, 133))
HASH_A = BlockHash(bytes(range(32)))
HASH_B = BlockHash(bytes(range(32, 64)))
HASH_C = BlockHash(bytes([0xAB] * 32))


def u64(value):
    return struct.pack(">Q", value)


def u32(value):
    return struct.pack(">I", value)


def sample_header():
    return BlockHeader(
        version=1, prev_block_hash=HASH_B, transaction_merkle_root=HASH_C,
        tstamp_secs=1_610_000_000, height=42, nonce=7, extra_nonce=3,
    )


def sample_transaction():
    return Transaction(
        tx_inputs=[TransactionIn(HASH_B, 0)],
        tx_outputs=[TransactionOut(PK_B, 5_000)],
        txn_type=2,
        public_key=PK_A,
        extra_data={b"memo": b"\x01\x02"},
        signature=b"\x30\x44",
    )


def sample_post():
    return PostEntry(
        post_hash=HASH_A,
        poster_public_key=PK_A,
        body=b'{"Body": "gm"}',
        parent_stake_id=PK_B,
        reclouted_post_hash=HASH_B,
        creator_basis_points=1_000,
        stake_multiple_basis_points=12_500,
        confirmation_block_height=42,
        timestamp_nanos=1_610_000_000_000_000_000,
        stake_entry=StakeEntry([StakerEntry(PK_B, 10, 5)], 10),
        like_count=3,
        comment_count=1,
        post_extra_data={"Node": b"1"},
    )


def sample_profile():
    return ProfileEntry(
        public_key=PK_A,
        username=b"satoshi",
        description=b"just a node",
        profile_pic=b"data:image/webp;base64,AAAA",
        coin_entry=CoinEntry(creator_basis_points=1_000, bitclout_locked_nanos=50, number_of_holders=2),
        stake_multiple_basis_points=12_500,
    )


def sample_records():
    """Return {tag: (key, value)} with one valid record per known prefix."""
    return {
        0: (b"\x00" + bytes(HASH_A), Block(sample_header(), [sample_transaction()]).to_bytes()),
        1: (b"\x01" + u32(42) + bytes(HASH_A),
            BlockNode(HASH_A, 42, HASH_C, 1 << 70, sample_header(), 1).to_bytes()),
        2: (b"\x02" + u32(7) + bytes(HASH_B),
            BlockNode(HASH_B, 7, HASH_C, 12345, sample_header(), 3).to_bytes()),
        3: (b"\x03", bytes(HASH_A)),
        4: (b"\x04", bytes(HASH_B)),
        5: (b"\x05" + UtxoKey(HASH_A, 1).to_bytes(),
            UtxoEntry(100, PK_A, 42, UtxoType.OUTPUT, UtxoKey(HASH_A, 1)).to_bytes()),
        6: (b"\x06" + u32(42) + u32(0), UtxoKey(HASH_B, 2).to_bytes()),
        7: (b"\x07" + PK_A + bytes(HASH_A) + u32(1), b""),
        8: (b"\x08", u64(1234)),
        9: (b"\x09" + bytes(HASH_A), b"\x00\x01\x02"),
        10: (b"\x0a", u64(999)),
        11: (b"\x0b" + bytes(HASH_C), b""),
        12: (b"\x0c" + PK_A + u64(5), MessageEntry(PK_A, PK_B, b"ciphertext", 5).to_bytes()),
        13: (b"\x0d" + PK_A, b"anything"),
        14: (b"\x0e", bytes(HASH_C)),
        15: (b"\x0f" + bytes(HASH_A), TransactionMetadata(
            str(HASH_B), 0, "BASIC_TRANSFER", "BC1YLtransactor",
            [AffectedPublicKey("BC1YLaffected", "BasicTransferOutput")],
            [TransactionOut(PK_B, 5_000)],
        ).to_bytes()),
        16: (b"\x10" + PK_A + u32(1), bytes(HASH_A)),
        17: (b"\x11" + bytes(HASH_A), sample_post().to_bytes()),
        18: (b"\x12" + PK_A + bytes(HASH_A), b""),
        19: (b"\x13" + u64(1_610_000_000_000_000_000) + bytes(HASH_A), b""),
        20: (b"\x14" + u64(1_000) + bytes(HASH_A), b""),
        21: (b"\x15" + u64(12_500) + bytes(HASH_A), b""),
        22: (b"\x16" + PK_B + u64(77) + bytes(HASH_A), b""),
        23: (b"\x17" + PK_A, sample_profile().to_bytes()),
        24: (b"\x18" + u64(500) + PK_A, b""),
        25: (b"\x19satoshi", PK_A),
        26: (b"\x1a\x00" + u64(250) + bytes(HASH_A), b""),
        27: (b"\x1b", u64(5_000_000)),
        28: (b"\x1c" + PK_A + PK_B, b""),
        29: (b"\x1d" + PK_B + PK_A, b""),
        30: (b"\x1e" + PK_A + bytes(HASH_A), b""),
        31: (b"\x1f" + bytes(HASH_A) + PK_A, b""),
        32: (b"\x20" + u64(50) + PK_A, b""),
        33: (b"\x21" + PK_B + PK_A, BalanceEntry(PKID(PK_B), PKID(PK_A), 777, True).to_bytes()),
        34: (b"\x22" + PK_A + PK_B, BalanceEntry(PKID(PK_B), PKID(PK_A), 777, True).to_bytes()),
        35: (b"\x23" + PK_A + u64(88) + bytes(HASH_A), b""),
        36: (b"\x24" + PK_A, PKIDEntry(PKID(PK_A), PK_A).to_bytes()),
        37: (b"\x25" + PK_A, PK_A),
        39: (b"\x27" + PK_A + bytes(HASH_B), RecloutEntry(PK_A, HASH_A, HASH_B).to_bytes()),
        40: (b"\x28", GlobalParamsEntry(5_000_000, 10_000, 1_000).to_bytes()),
    }


COMMON_FIELDS = {"MongoMeta", "BadgerKeyPrefix"}
NODE_FIELDS = {"ParentHash", "Hash", "Height", "DifficultyTarget", "CumWork", "Header", "Status"}
BALANCE_FIELDS = {"HODLerPKID", "CreatorPKID", "BalanceNanos", "HasPurchased"}

EXPECTED_FIELDS = {
    0: {"Header", "Txns", "BlockHash"},
    1: NODE_FIELDS,
    2: NODE_FIELDS,
    3: {"Hash"},
    4: {"Hash"},
    5: {"AmountNanos", "PublicKey", "BlockHeight", "UtxoType", "UtxoKey"},
    6: {"TxID", "Index"},
    7: {"PublicKey", "TxID", "Index"},
    8: {"UTXOs"},
    9: set(),
    10: {"Nanos"},
    11: {"TxID"},
    12: {"SenderPublicKey", "RecipientPublicKey", "EncryptedText", "TstampNanos"},
    13: set(),
    14: {"Hash"},
    15: {"BlockHashHex", "TxnIndexInBlock", "TxnType", "TransactorPublicKeyBase58Check",
         "AffectedPublicKeys", "TxnOutputs"},
    16: set(),
    17: {"PostHash", "PosterPublicKey", "ParentStakeID", "Body", "RecloutedPostHash", "IsQuotedReclout",
         "CreatorBasisPoints", "StakeMultipleBasisPoints", "ConfirmationBlockHeight", "TimestampNanos",
         "IsHidden", "LikeCount", "RecloutCount", "QuoteRecloutCount", "DiamondCount", "CommentCount",
         "PostExtraData"},
    18: {"PublicKey", "PostHash"},
    19: {"TstampNanos", "PostHash"},
    20: {"CreatorBasisPoints", "PostHash"},
    21: {"StakeMultipleBasisPoints", "PostHash"},
    22: {"ParentStakeID", "TstampNanos", "PostHash"},
    23: {"PublicKey", "Username", "Description", "ProfilePic", "IsHidden", "CoinEntry",
         "StakeMultipleBasisPoints"},
    24: {"Stake", "PublicKey"},
    25: {"Username", "PKID"},
    26: {"StakeType", "AmountNanos", "StakeID"},
    27: {"USDCentsPerBitcoin"},
    28: {"FollowerPKID", "FollowedPKID"},
    29: {"FollowedPKID", "FollowerPKID"},
    30: {"PublicKey", "LikedPostHash"},
    31: {"LikedPostHash", "PublicKey"},
    32: {"BitCloutLockedNanos", "PKID"},
    33: BALANCE_FIELDS,
    34: BALANCE_FIELDS,
    35: {"PublicKey", "TStampNanos", "PostHash"},
    36: {"PKID", "PublicKey"},
    37: {"PKID", "PublicKey"},
    39: {"ReclouterPubKey", "RecloutPostHash", "RecloutedPostHash"},
    40: {"USDCentsPerBitcoin", "CreateProfileFeeNanos", "MinimumNetworkFeeNanosPerKB"},
}
