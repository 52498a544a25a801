"""
SQLite helpers for the local key-value store.
"""
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from utils.logger import get_logger

logger = get_logger(__name__)

MEMORY_PATH = ":memory:"


def _ensure_parent_dir(db_path: str):
    if db_path == MEMORY_PATH:
        return
    parent = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(parent, exist_ok=True)


@contextmanager
def db_connection(db_path: str, timeout: float = 5.0) -> Iterator[sqlite3.Connection]:
    """
    Open a short-lived connection with Row access and WAL journaling,
    closing it on exit. Nothing is committed implicitly; see transaction().
    """
    _ensure_parent_dir(db_path)
    conn = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    if db_path != MEMORY_PATH:
        # WAL lets readers run while a save is in progress
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.Error as e:
            logger.warning(f"WAL journaling unavailable for {db_path}: {e}")
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(db_path: str, timeout: float = 5.0) -> Iterator[sqlite3.Connection]:
    """Commit when the block finishes, roll back and re-raise on error."""
    with db_connection(db_path, timeout=timeout) as conn:
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
