"""
Unit tests for the key-value stores.
"""

import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from db.connection import db_connection, transaction
from db.kv_store import MemoryKeyValueStore, SqliteKeyValueStore


class KeyValueStoreContract:
    """Behaviour shared by every store implementation."""

    def make_store(self):
        raise NotImplementedError

    def test_load_missing_returns_default(self):
        store = self.make_store()
        self.assertIsNone(store.load("missing"))
        self.assertEqual(store.load("missing", []), [])

    def test_save_and_load(self):
        store = self.make_store()
        store.save("history", [{"text": "a", "embedding": [0.1, 0.2]}])
        store.save("total", 3)
        self.assertEqual(store.load("history"), [{"text": "a", "embedding": [0.1, 0.2]}])
        self.assertEqual(store.load("total"), 3)

    def test_overwrite(self):
        store = self.make_store()
        store.save("total", 1)
        store.save("total", 2)
        self.assertEqual(store.load("total"), 2)

    def test_delete(self):
        store = self.make_store()
        store.save("total", 1)
        store.delete("total")
        store.delete("never-saved")
        self.assertIsNone(store.load("total"))


class TestMemoryKeyValueStore(KeyValueStoreContract, unittest.TestCase):

    def make_store(self):
        return MemoryKeyValueStore()


class TestSqliteKeyValueStore(KeyValueStoreContract, unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "nested", "store.db")

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def make_store(self):
        return SqliteKeyValueStore(self.db_path)

    def test_persists_across_instances(self):
        """Test values survive reopening the database file."""
        SqliteKeyValueStore(self.db_path).save("total", 42)
        self.assertEqual(SqliteKeyValueStore(self.db_path).load("total"), 42)

    def test_unreadable_value_returns_default(self):
        """Test corrupt rows fall back to the default instead of raising."""
        store = self.make_store()
        with db_connection(self.db_path) as conn:
            conn.execute("INSERT INTO kv_store (key, value) VALUES (?, ?)", ("bad", "{not json"))
            conn.commit()
        self.assertEqual(store.load("bad", "fallback"), "fallback")


class TestConnection(unittest.TestCase):
    """Test cases for the SQLite connection helpers."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "nested", "dash.db")

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_creates_parent_directory_and_uses_wal(self):
        with db_connection(self.db_path) as conn:
            mode = conn.execute("PRAGMA journal_mode;").fetchone()[0]
        self.assertTrue(os.path.isdir(os.path.dirname(self.db_path)))
        self.assertEqual(mode.lower(), "wal")

    def test_in_memory_database(self):
        with db_connection(":memory:") as conn:
            row = conn.execute("SELECT 1 AS one").fetchone()
        self.assertEqual(row["one"], 1)

    def test_transaction_commits(self):
        with transaction(self.db_path) as conn:
            conn.execute("CREATE TABLE t (v INTEGER)")
            conn.execute("INSERT INTO t VALUES (1)")
        with db_connection(self.db_path) as conn:
            self.assertEqual(conn.execute("SELECT COUNT(*) FROM t").fetchone()[0], 1)

    def test_transaction_rolls_back_on_error(self):
        with transaction(self.db_path) as conn:
            conn.execute("CREATE TABLE t (v INTEGER)")
        with self.assertRaises(RuntimeError):
            with transaction(self.db_path) as conn:
                conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")
        with db_connection(self.db_path) as conn:
            self.assertEqual(conn.execute("SELECT COUNT(*) FROM t").fetchone()[0], 0)


if __name__ == "__main__":
    unittest.main()
