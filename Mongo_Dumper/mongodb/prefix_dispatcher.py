import logging
from enum import IntEnum
from typing import Any, Callable, Dict, NamedTuple, Optional

from Mongo_Dumper.accounts.balance import BalanceEntry
from Mongo_Dumper.accounts.profile import PKIDEntry, ProfileEntry
from Mongo_Dumper.blockchain.block import Block, BlockNode
from Mongo_Dumper.blockchain.blockchainerror import ChainRecordDecodeError
from Mongo_Dumper.blockchain.chaintypes import BlockHash, PKID
from Mongo_Dumper.blockchain.constants import Constants
from Mongo_Dumper.blockchain.global_params import GlobalParamsEntry
from Mongo_Dumper.mongodb.normalizer import ValueNormalizer
from Mongo_Dumper.social.message import MessageEntry
from Mongo_Dumper.social.post import PostEntry, RecloutEntry
from Mongo_Dumper.transactions.transaction_metadata import TransactionMetadata
from Mongo_Dumper.transactions.utxo import UtxoEntry, UtxoKey
from Mongo_Dumper.utils.serialization import read_uint32_be, read_uint64_be


class SchemaTag(IntEnum):
    """First key byte of every record in the node's store."""
    PrefixBlockHashToBlock = 0
    PrefixHeightHashToNodeInfo = 1
    PrefixBitcoinHeightHashToNodeInfo = 2
    KeyBestBitCloutBlockHash = 3
    KeyBestBitcoinHeaderHash = 4
    PrefixUtxoKeyToUtxoEntry = 5
    PrefixPositionToUtxoKey = 6
    PrefixPubKeyUtxoKey = 7
    KeyUtxoNumEntries = 8
    PrefixBlockHashToUtxoOperations = 9
    KeyNanosPurchased = 10
    PrefixBitcoinBurnTxIDs = 11
    PrefixPublicKeyTimestampToPrivateMessage = 12
    KeyAccountData = 13
    KeyTransactionIndexTip = 14
    PrefixTransactionIDToMetadata = 15
    PrefixPublicKeyIndexToTransactionIDs = 16
    PrefixPostHashToPostEntry = 17
    PrefixPosterPublicKeyPostHash = 18
    PrefixTstampNanosPostHash = 19
    PrefixCreatorBpsPostHash = 20
    PrefixMultipleBpsPostHash = 21
    PrefixCommentParentStakeIDToPostHash = 22
    PrefixPKIDToProfileEntry = 23
    PrefixProfileStakeToProfilePubKey = 24
    PrefixProfileUsernameToPKID = 25
    PrefixStakeIDTypeAmountStakeIDIndex = 26
    KeyUSDCentsPerBitcoinExchangeRate = 27
    PrefixFollowerPKIDToFollowedPKID = 28
    PrefixFollowedPKIDToFollowerPKID = 29
    PrefixLikerPubKeyToLikedPostHash = 30
    PrefixLikedPostHashToLikerPubKey = 31
    PrefixCreatorBitCloutLockedNanosCreatorPKID = 32
    PrefixHODLerPKIDCreatorPKIDToBalanceEntry = 33
    PrefixCreatorPKIDHODLerPKIDToBalanceEntry = 34
    PrefixPosterPublicKeyTimestampPostHash = 35
    PrefixPublicKeyToPKID = 36
    PrefixPKIDToPublicKey = 37
    PrefixReclouterPubKeyRecloutedPostHashToRecloutPostHash = 39
    KeyGlobalParams = 40

    @property
    def badger_key_prefix(self) -> str:
        return f"_{self.name}:{int(self)}"


class PrefixSchema(NamedTuple):
    description: str
    decode: Callable[[bytes, bytes], Dict[str, Any]]
    stamps_time: bool = True


PREFIX_SCHEMAS: Dict[SchemaTag, PrefixSchema] = {}


def _schema(tag: SchemaTag, description: str, stamps_time: bool = True):
    def register(decode_fn):
        PREFIX_SCHEMAS[tag] = PrefixSchema(description, decode_fn, stamps_time)
        return decode_fn
    return register


# ----------------------------
# Key Slicing
# ----------------------------
def _key_bytes(key: bytes, start: int, size: int) -> bytes:
    chunk = key[start:start + size]
    if len(chunk) != size:
        raise ChainRecordDecodeError(f"Key slice [{start}:{start + size}] has {len(chunk)} bytes, expected {size}.")
    return chunk


def _key_hash(key: bytes, start: int) -> BlockHash:
    return BlockHash(_key_bytes(key, start, Constants.HASH_SIZE_BYTES))


def _key_public_key(key: bytes, start: int) -> bytes:
    return _key_bytes(key, start, Constants.PUBLIC_KEY_SIZE_BYTES)


def _key_pkid(key: bytes, start: int) -> PKID:
    return PKID(_key_bytes(key, start, Constants.PUBLIC_KEY_SIZE_BYTES))


def _key_uint64(key: bytes, start: int) -> int:
    return read_uint64_be(_key_bytes(key, start, Constants.UINT64_SIZE_BYTES))


def _key_uint32(key: bytes, start: int) -> int:
    return read_uint32_be(_key_bytes(key, start, Constants.UINT32_SIZE_BYTES))


def _placeholder(key: bytes, value: bytes) -> Dict[str, Any]:
    return {}


# ----------------------------
# Chain Records
# ----------------------------
@_schema(SchemaTag.PrefixBlockHashToBlock, "A bitclout block and its corresponding blockhash.")
def _decode_block(key, value):
    field_map = Block.from_bytes(value).to_dict()
    field_map["BlockHash"] = _key_hash(key, 1)
    return field_map


@_schema(SchemaTag.PrefixHeightHashToNodeInfo, "A block node in the bitclout blockchain graph.")
def _decode_block_node(key, value):
    return BlockNode.from_bytes(value).to_dict()


_schema(SchemaTag.PrefixBitcoinHeightHashToNodeInfo, "A block node in the bitcoin blockchain graph.")(_decode_block_node)


@_schema(SchemaTag.KeyBestBitCloutBlockHash, "The hash of the front of the best BitClout Chain.")
def _decode_best_hash(key, value):
    return {"Hash": BlockHash(value)}


_schema(SchemaTag.KeyBestBitcoinHeaderHash, "The hash of the front of the best Bitcoin Chain.")(_decode_best_hash)


@_schema(SchemaTag.PrefixUtxoKeyToUtxoEntry, "A UTXO Entry.")
def _decode_utxo_entry(key, value):
    return UtxoEntry.from_bytes(value).to_dict()


@_schema(SchemaTag.PrefixPositionToUtxoKey, "A UTXO Key.")
def _decode_utxo_key(key, value):
    return UtxoKey.from_bytes(value).to_dict()


@_schema(SchemaTag.PrefixPubKeyUtxoKey, "Public key and UTXO key.")
def _decode_pub_key_utxo_key(key, value):
    return {
        "PublicKey": _key_public_key(key, 1),
        "TxID": _key_hash(key, 34),
        "Index": _key_uint32(key, 66),
    }


@_schema(SchemaTag.KeyUtxoNumEntries, "The number of utxo entries in the database.")
def _decode_utxo_num_entries(key, value):
    return {"UTXOs": read_uint64_be(value)}


_schema(SchemaTag.PrefixBlockHashToUtxoOperations, "The UTXO operations applied by a block. Not decoded.")(_placeholder)


@_schema(SchemaTag.KeyNanosPurchased, "The number of nanos purchased thus far.")
def _decode_nanos_purchased(key, value):
    return {"Nanos": read_uint64_be(value)}


@_schema(SchemaTag.PrefixBitcoinBurnTxIDs, "A processed bitcoin transaction.")
def _decode_bitcoin_burn_txid(key, value):
    return {"TxID": _key_hash(key, 1)}


@_schema(SchemaTag.PrefixPublicKeyTimestampToPrivateMessage, "An encrypted message between two users.")
def _decode_private_message(key, value):
    return MessageEntry.from_bytes(value).to_dict()


_schema(SchemaTag.KeyAccountData, "Account data. Not decoded.")(_placeholder)


@_schema(
    SchemaTag.KeyTransactionIndexTip,
    "The transaction index supports the block explorer and is only created when a node is run with --txindex. "
    "It uses its own separate blockchain data structure to create the index, and this is the tip of that blockchain.",
)
def _decode_txindex_tip(key, value):
    return {"Hash": BlockHash(value)}


@_schema(SchemaTag.PrefixTransactionIDToMetadata, "The transaction metadata for a particular transaction ID.")
def _decode_transaction_metadata(key, value):
    return TransactionMetadata.from_bytes(value).to_dict()


_schema(SchemaTag.PrefixPublicKeyIndexToTransactionIDs, "Transaction IDs indexed by public key. Not decoded.")(_placeholder)


# ----------------------------
# Posts
# ----------------------------
@_schema(SchemaTag.PrefixPostHashToPostEntry, "A User's Post or Subcomment.")
def _decode_post_entry(key, value):
    return PostEntry.from_bytes(value).to_dict()


@_schema(SchemaTag.PrefixPosterPublicKeyPostHash,
         "An association between a PostHash and its corresponding public key.")
def _decode_poster_post_hash(key, value):
    return {"PublicKey": _key_public_key(key, 1), "PostHash": _key_hash(key, 34)}


@_schema(SchemaTag.PrefixTstampNanosPostHash,
         "An association between a PostHash and its corresponding time stamp (in nanos).")
def _decode_tstamp_post_hash(key, value):
    return {"TstampNanos": _key_uint64(key, 1), "PostHash": _key_hash(key, 9)}


@_schema(SchemaTag.PrefixCreatorBpsPostHash,
         "An association between a PostHash and its corresponding creator basis points founder reward.")
def _decode_creator_bps_post_hash(key, value):
    return {"CreatorBasisPoints": _key_uint64(key, 1), "PostHash": _key_hash(key, 9)}


@_schema(SchemaTag.PrefixMultipleBpsPostHash, "An association between a PostHash and its multiplier basis points.")
def _decode_multiple_bps_post_hash(key, value):
    return {"StakeMultipleBasisPoints": _key_uint64(key, 1), "PostHash": _key_hash(key, 9)}


@_schema(SchemaTag.PrefixCommentParentStakeIDToPostHash,
         "An association between a comment PostHash and it's corresponding parent post stakeID.")
def _decode_comment_post_hash(key, value):
    return {
        "ParentStakeID": _key_bytes(key, 1, Constants.PUBLIC_KEY_SIZE_BYTES),
        "TstampNanos": _key_uint64(key, 34),
        "PostHash": _key_hash(key, 42),
    }


# ----------------------------
# Profiles
# ----------------------------
@_schema(SchemaTag.PrefixPKIDToProfileEntry, "A User's Profile.")
def _decode_profile_entry(key, value):
    return ProfileEntry.from_bytes(value).to_dict()


@_schema(SchemaTag.PrefixProfileStakeToProfilePubKey, "Depricated.")
def _decode_profile_stake(key, value):
    return {"Stake": _key_uint64(key, 1), "PublicKey": _key_public_key(key, 9)}


@_schema(SchemaTag.PrefixProfileUsernameToPKID, "A user's username and their corresponding PKID.")
def _decode_username_to_pkid(key, value):
    return {"Username": key[1:], "PKID": PKID(value)}


@_schema(SchemaTag.PrefixStakeIDTypeAmountStakeIDIndex, "A stake ID and its corresponding stakes nanos.")
def _decode_stake_id_index(key, value):
    stake_type = _key_bytes(key, 1, 1)[0]
    return {
        "StakeType": "Post" if stake_type == 0 else "Profile",
        "AmountNanos": _key_uint64(key, 2),
        "StakeID": key[10:],
    }


@_schema(SchemaTag.KeyUSDCentsPerBitcoinExchangeRate, "The exchange rate in USD Cents for a bitcoin.")
def _decode_exchange_rate(key, value):
    return {"USDCentsPerBitcoin": read_uint64_be(value)}


# ----------------------------
# Follows, Likes And Coins
# ----------------------------
@_schema(SchemaTag.PrefixFollowerPKIDToFollowedPKID,
         "A user's PKID (follower) and the PKID of those they follow (followed).")
def _decode_follower_to_followed(key, value):
    return {"FollowerPKID": _key_pkid(key, 1), "FollowedPKID": _key_pkid(key, 34)}


@_schema(SchemaTag.PrefixFollowedPKIDToFollowerPKID,
         "A user's PKID (followed) and the PKID of those who follow them (follower).")
def _decode_followed_to_follower(key, value):
    return {"FollowedPKID": _key_pkid(key, 1), "FollowerPKID": _key_pkid(key, 34)}


@_schema(SchemaTag.PrefixLikerPubKeyToLikedPostHash,
         "A user's public key and the post hash of one of their liked posts.")
def _decode_liker_to_liked(key, value):
    return {"PublicKey": _key_public_key(key, 1), "LikedPostHash": _key_hash(key, 34)}


@_schema(SchemaTag.PrefixLikedPostHashToLikerPubKey,
         "A PostHash and a corresponding public key of someone who liked that post.")
def _decode_liked_to_liker(key, value):
    return {"LikedPostHash": _key_hash(key, 1), "PublicKey": _key_public_key(key, 33)}


@_schema(SchemaTag.PrefixCreatorBitCloutLockedNanosCreatorPKID,
         "The amount of BitClout locked in a particular profile's PKID.")
def _decode_locked_nanos(key, value):
    return {"BitCloutLockedNanos": _key_uint64(key, 1), "PKID": _key_pkid(key, 9)}


@_schema(SchemaTag.PrefixHODLerPKIDCreatorPKIDToBalanceEntry,
         "A user's (HODLerPubKey) balance of held (CreatorPubKey).")
def _decode_balance_entry(key, value):
    return BalanceEntry.from_bytes(value).to_dict()


_schema(SchemaTag.PrefixCreatorPKIDHODLerPKIDToBalanceEntry,
        "A ceator's (CreatorPubKey) hodlers (HODLerPubKey) and their associated balances.")(_decode_balance_entry)


@_schema(SchemaTag.PrefixPosterPublicKeyTimestampPostHash,
         "The PostHash of a post generated by a user's public key and the corresponding time in nanos.")
def _decode_poster_timestamp_post_hash(key, value):
    return {
        "PublicKey": _key_public_key(key, 1),
        "TStampNanos": _key_uint64(key, 34),
        "PostHash": _key_hash(key, 42),
    }


@_schema(SchemaTag.PrefixPublicKeyToPKID, "A mapping of a public key to it's corresponding PKID.")
def _decode_pkid_entry(key, value):
    return PKIDEntry.from_bytes(value).to_dict()


@_schema(SchemaTag.PrefixPKIDToPublicKey, "A map of a PKID to it's corresponding public key.")
def _decode_pkid_to_public_key(key, value):
    return {"PKID": _key_pkid(key, 1), "PublicKey": _key_public_key(value, 0)}


@_schema(SchemaTag.PrefixReclouterPubKeyRecloutedPostHashToRecloutPostHash,
         "A user's public key and the post hash of one of the post they reclouted")
def _decode_reclout_entry(key, value):
    return RecloutEntry.from_bytes(value).to_dict()


@_schema(SchemaTag.KeyGlobalParams, "Global Params Entry", stamps_time=False)
def _decode_global_params(key, value):
    return GlobalParamsEntry.from_bytes(value).to_dict()


def schema_tag_for_key(key: bytes) -> Optional[SchemaTag]:
    if not key:
        return None
    try:
        return SchemaTag(key[0])
    except ValueError:
        return None


def is_supported_tag(tag: int) -> bool:
    try:
        return SchemaTag(tag) in PREFIX_SCHEMAS
    except ValueError:
        return False


def badger_record_to_document(key: bytes, value: bytes) -> Optional[Dict[str, Any]]:
    """
    Turn one raw store record into a normalized document.

    Returns None for unknown prefixes and for records whose key or value
    does not match the prefix layout.
    """
    key = bytes(key)
    value = bytes(value)

    tag = schema_tag_for_key(key)
    if tag is None:
        return None
    schema = PREFIX_SCHEMAS[tag]

    try:
        document = schema.decode(key, value)
        document["MongoMeta"] = schema.description
        document["BadgerKeyPrefix"] = tag.badger_key_prefix
        return ValueNormalizer.normalize(document, stamp_time=schema.stamps_time)
    except (ValueError, TypeError) as e:
        logging.debug(f"[PrefixDispatcher] Dropped {tag.name} record ({len(key)}-byte key): {e}")
        return None
