import unittest
from unittest.mock import MagicMock, patch

from Mongo_Dumper.blockchain.blockchainerror import SyncInitError
from Mongo_Dumper.main.config import Config
from Mongo_Dumper.main.start import DumperNode, build_parser, main


class StartTestSuite(unittest.TestCase):
    def test_01_run_flags(self):
        args = build_parser().parse_args(
            ["run", "--mongo-uri", "mongodb://db:27017", "--chunk-size", "50", "--data-dir", "/tmp/store"]
        )
        self.assertEqual(args.command, "run")
        self.assertEqual(args.mongo_uri, "mongodb://db:27017")
        self.assertEqual(args.chunk_size, 50)
        self.assertEqual(args.data_dir, "/tmp/store")
        self.assertIsNone(args.mongo_database)

    def test_02_subcommand_is_required(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args([])

    @patch("Mongo_Dumper.main.start.signal.signal")
    @patch.object(DumperNode, "start", side_effect=SyncInitError("Unable to connect to MongoDB."))
    def test_03_startup_failure_exits_with_status_1(self, node_start, install_handler):
        """✅ An unreachable store or database ends the process with status 1."""
        self.assertEqual(main(["run", "--config", __file__ + ".absent"]), 1)
        node_start.assert_not_called()

        self.assertEqual(main(["run", "--mongo-uri", "mongodb://nowhere:1"]), 1)
        node_start.assert_called_once()

    @patch("Mongo_Dumper.main.start.SyncingService")
    @patch("Mongo_Dumper.main.start.MongoManager")
    @patch("Mongo_Dumper.main.start.LMDBManager")
    def test_04_start_logs_store_status(self, store_cls, mongo_cls, service_cls):
        """✅ Startup reports the store's entry count and free space."""
        store_cls.return_value.get_database_status.return_value = {
            "used_entries": 7, "map_size_bytes": 4096, "free_space_bytes": 1024,
        }
        service_cls.return_value.start = MagicMock()
        node = DumperNode(Config(store_path="/tmp/store"))

        with self.assertLogs(level="INFO") as logs:
            node.start()
        node.stop()

        store_cls.assert_called_once_with("/tmp/store")
        store_cls.return_value.get_database_status.assert_called_once_with()
        self.assertTrue(any("'used_entries': 7" in line for line in logs.output))
        store_cls.return_value.close.assert_called_once_with()
        mongo_cls.return_value.disconnect.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
