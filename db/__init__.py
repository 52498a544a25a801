"""
Local persistence for dashboard bookkeeping.
"""
from .connection import db_connection, transaction
from .kv_store import MemoryKeyValueStore, SqliteKeyValueStore

__all__ = [
    'db_connection',
    'transaction',
    'MemoryKeyValueStore',
    'SqliteKeyValueStore',
]
