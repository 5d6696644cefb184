import base64
import unittest
from unittest.mock import patch

import bson

from Mongo_Dumper.blockchain.block import Block
from Mongo_Dumper.mongodb.prefix_dispatcher import (
    PREFIX_SCHEMAS,
    SchemaTag,
    badger_record_to_document,
    is_supported_tag,
)
from Mongo_Dumper.tests.dumper_tests.record_fixtures import (
    COMMON_FIELDS,
    EXPECTED_FIELDS,
    HASH_A,
    HASH_B,
    PK_A,
    PK_B,
    sample_header,
    sample_post,
    sample_records,
    u64,
)
from Mongo_Dumper.transactions.tx import Transaction
from Mongo_Dumper.transactions.utxo import UtxoEntry, UtxoKey, UtxoType
from Mongo_Dumper.utils.data_encoding import DataEncoding

FIXED_TIME = "2021-03-01 12:00:00.000000+00:00"


class PrefixDispatcherTestSuite(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.records = sample_records()
        cls.time_patch = patch("Mongo_Dumper.mongodb.normalizer.current_timestamp", return_value=FIXED_TIME)
        cls.time_patch.start()

    @classmethod
    def tearDownClass(cls):
        cls.time_patch.stop()

    def test_01_every_tag_has_a_schema(self):
        """✅ Tags 0-37, 39 and 40 are registered; 38 and 41+ are not."""
        expected = set(range(38)) | {39, 40}
        self.assertEqual({int(tag) for tag in PREFIX_SCHEMAS}, expected)
        self.assertEqual({int(tag) for tag in SchemaTag}, expected)
        self.assertFalse(is_supported_tag(38))
        self.assertFalse(is_supported_tag(99))

    def test_02_field_sets_per_tag(self):
        """✅ Every well-formed sample record produces exactly its documented fields."""
        for tag, (key, value) in self.records.items():
            with self.subTest(tag=tag):
                document = badger_record_to_document(key, value)
                self.assertIsNotNone(document)
                expected = set(EXPECTED_FIELDS[tag]) | COMMON_FIELDS
                if tag != 40:
                    expected.add("Time")
                self.assertEqual(set(document), expected)
                self.assertEqual(document["BadgerKeyPrefix"], f"_{SchemaTag(tag).name}:{tag}")

    def test_03_global_params_are_not_time_stamped(self):
        key, value = self.records[40]
        document = badger_record_to_document(key, value)
        self.assertNotIn("Time", document)
        self.assertEqual(document["BadgerKeyPrefix"], "_KeyGlobalParams:40")
        self.assertEqual(document["MongoMeta"], "Global Params Entry")
        self.assertEqual(document["USDCentsPerBitcoin"], 5_000_000)

    def test_04_unknown_prefix_yields_nothing(self):
        """✅ Tag 99 and an empty key are dropped."""
        self.assertIsNone(badger_record_to_document(b"\x63hello", b"world"))
        self.assertIsNone(badger_record_to_document(b"\x26" + PK_A, b""))
        self.assertIsNone(badger_record_to_document(b"", b""))

    def test_05_truncated_values_yield_nothing(self):
        """✅ A value cut short by one byte is a decode failure, never an exception."""
        for tag in (0, 1, 5, 6, 8, 12, 15, 17, 23, 33, 36, 39, 40):
            key, value = self.records[tag]
            with self.subTest(tag=tag):
                self.assertIsNone(badger_record_to_document(key, value[:-1]))

    def test_06_short_keys_yield_nothing(self):
        for tag in (7, 18, 19, 22, 28, 31, 35, 37):
            key, value = self.records[tag]
            with self.subTest(tag=tag):
                self.assertIsNone(badger_record_to_document(key[:-1], value))

    def test_07_utxo_entry_document(self):
        """✅ A UTXO entry renders amount, dual public key, height, type name and key."""
        utxo_key = UtxoKey(HASH_A, 3)
        value = UtxoEntry(100, PK_A, 42, UtxoType.OUTPUT, utxo_key).to_bytes()
        document = badger_record_to_document(b"\x05" + utxo_key.to_bytes(), value)

        self.assertEqual(document["AmountNanos"], 100)
        self.assertEqual(document["PublicKey"], DataEncoding.pk_to_string_both(PK_A))
        self.assertEqual(document["BlockHeight"], 42)
        self.assertEqual(document["UtxoType"], "UtxoTypeOutput")
        self.assertEqual(document["UtxoKey"], {"TxID": str(HASH_A), "Index": 3})
        self.assertEqual(document["MongoMeta"], "A UTXO Entry.")
        self.assertEqual(document["BadgerKeyPrefix"], "_PrefixUtxoKeyToUtxoEntry:5")
        self.assertEqual(document["Time"], FIXED_TIME)

    def test_08_block_document(self):
        key, value = self.records[0]
        document = badger_record_to_document(key, value)

        self.assertEqual(document["BlockHash"], str(HASH_A))
        self.assertEqual(document["Header"]["PrevBlockHash"], str(HASH_B))
        self.assertEqual(document["Header"]["Height"], 42)
        transaction = document["Txns"][0]
        self.assertEqual(transaction["TxnType"], "BASIC_TRANSFER")
        self.assertEqual(transaction["TxOutputs"][0]["PublicKey"], DataEncoding.pk_to_string_both(PK_B))
        self.assertEqual(transaction["ExtraData"], {"memo": "0102"})

    def test_09_block_node_document(self):
        """✅ The parent link is replaced by ParentHash and cumulative work is a decimal string."""
        key, value = self.records[1]
        document = badger_record_to_document(key, value)

        self.assertNotIn("Parent", document)
        self.assertIsNone(document["ParentHash"])
        self.assertEqual(document["CumWork"], str(1 << 70))
        self.assertEqual(document["Hash"], str(HASH_A))

    def test_10_post_document(self):
        key, value = self.records[17]
        document = badger_record_to_document(key, value)

        self.assertEqual(document["Body"], '{"Body": "gm"}')
        self.assertEqual(document["ParentStakeID"], PK_B.hex())
        self.assertEqual(document["PosterPublicKey"], DataEncoding.pk_to_string_both(PK_A))
        self.assertEqual(document["RecloutedPostHash"], str(HASH_B))
        self.assertEqual(document["TimestampNanos"], 1_610_000_000_000_000_000)
        self.assertEqual(document["PostExtraData"], {"Node": base64.b64encode(b"1").decode()})
        self.assertNotIn("StakeEntry", document)

    def test_11_profile_document(self):
        key, value = self.records[23]
        document = badger_record_to_document(key, value)

        self.assertEqual(document["Username"], "satoshi")
        self.assertEqual(document["ProfilePic"], "data:image/webp;base64,AAAA")
        self.assertEqual(document["CoinEntry"]["BitCloutLockedNanos"], 50)
        self.assertNotIn("StakeEntry", document)

    def test_12_key_only_documents(self):
        document = badger_record_to_document(*self.records[26])
        self.assertEqual(document["StakeType"], "Post")
        self.assertEqual(document["AmountNanos"], 250)
        self.assertEqual(document["StakeID"], base64.b64encode(bytes(HASH_A)).decode())

        profile_stake = badger_record_to_document(b"\x1a\x01" + u64(250) + bytes(HASH_A), b"")
        self.assertEqual(profile_stake["StakeType"], "Profile")

        likes = badger_record_to_document(*self.records[31])
        self.assertEqual(likes["LikedPostHash"], str(HASH_A))
        self.assertEqual(likes["PublicKey"], DataEncoding.pk_to_string_both(PK_A))

        follows = badger_record_to_document(*self.records[28])
        self.assertEqual(follows["FollowerPKID"], DataEncoding.pk_to_string_both(PK_A))
        self.assertEqual(follows["FollowedPKID"], DataEncoding.pk_to_string_both(PK_B))

    def test_13_oversized_counters_become_strings(self):
        document = badger_record_to_document(b"\x08", u64(2 ** 64 - 1))
        self.assertEqual(document["UTXOs"], str(2 ** 64 - 1))

    def test_14_placeholder_tags_carry_only_metadata(self):
        for tag in (9, 13, 16):
            with self.subTest(tag=tag):
                document = badger_record_to_document(*self.records[tag])
                self.assertEqual(set(document), {"MongoMeta", "BadgerKeyPrefix", "Time"})

    def test_15_wrong_length_hash_values_are_dropped(self):
        self.assertIsNone(badger_record_to_document(b"\x03", b"\x00" * 31))
        self.assertIsNone(badger_record_to_document(b"\x0e", b"\x00" * 33))

    def test_16_nul_map_keys_still_encode(self):
        """✅ Extra-data keys holding NUL are renamed so the document stays valid BSON."""
        post = sample_post()
        post.post_extra_data = {"a\x00b": b"x"}
        document = badger_record_to_document(b"\x11" + bytes(HASH_A), post.to_bytes())

        self.assertEqual(document["PostExtraData"], {"610062": "eA=="})
        bson.encode({"$set": document})

    def test_17_undecodable_transaction_extra_keys_stay_distinct(self):
        transaction = Transaction([], [], 0, extra_data={b"\xff\x01": b"\x01", b"\xfe\x01": b"\x02", b"ok": b"\x03"})
        key = b"\x00" + bytes(HASH_A)
        document = badger_record_to_document(key, Block(sample_header(), [transaction]).to_bytes())

        self.assertEqual(document["Txns"][0]["ExtraData"], {"ff01": "01", "fe01": "02", "ok": "03"})
        bson.encode({"$set": document})


if __name__ == "__main__":
    unittest.main()
