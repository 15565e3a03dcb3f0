# =============================================================================
# madrasa_core/offline/local_database.py
# Local SQLite Database backing the offline cache and sync queue
# =============================================================================
"""
LocalDatabase - SQLite file shared by the LocalCache and the SyncQueue.

Features:
- Automatic schema creation
- Thread-local connections (the connectivity monitor replays from its own thread)
- Transaction context manager
- JSON encoding of records coming from pandas / numpy / Streamlit widgets
"""

from __future__ import annotations
import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import numpy as np
import pandas as pd

from madrasa_core.errors.exceptions import CacheStorageError
from madrasa_core.logging import get_logger

logger = get_logger(__name__)


class LocalDatabase:
    """
    Local SQLite database for offline data storage.

    One row per cached record (collection, key) plus the durable FIFO of
    queued mutations.
    """

    DEFAULT_DB_PATH = Path("local_data") / "madrasa_offline.db"

    SCHEMA = {
        "cached_records": """
            CREATE TABLE IF NOT EXISTS cached_records (
                collection TEXT NOT NULL,
                record_key TEXT NOT NULL,
                data_json TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (collection, record_key)
            )
        """,
        "sync_queue": """
            CREATE TABLE IF NOT EXISTS sync_queue (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                table_name TEXT NOT NULL,
                operation TEXT NOT NULL CHECK (operation IN ('insert', 'update', 'delete')),
                payload_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                attempts INTEGER NOT NULL DEFAULT 0,
                last_attempt TEXT,
                status TEXT NOT NULL DEFAULT 'pending',
                error_message TEXT
            )
        """,
    }

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize local database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self._ensure_directory()
        self._local = threading.local()
        self._connections: List[sqlite3.Connection] = []
        self._connections_lock = threading.Lock()
        self._initialized = False

    def _ensure_directory(self) -> None:
        """Ensure database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            try:
                connection = sqlite3.connect(str(self.db_path), check_same_thread=False)
            except sqlite3.Error as e:
                raise CacheStorageError(f"Cannot open local database {self.db_path}: {e}") from e
            connection.row_factory = sqlite3.Row
            self._local.connection = connection
            with self._connections_lock:
                self._connections.append(connection)
        return self._local.connection

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Context manager for database transactions.

        sqlite3 errors are rolled back and re-raised as CacheStorageError.
        """
        self.initialize()
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise CacheStorageError(f"Local database error: {e}") from e
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> None:
        """Initialize database schema."""
        if self._initialized:
            return

        conn = self._get_connection()
        try:
            for table_name, schema in self.SCHEMA.items():
                conn.execute(schema)
                logger.debug(f"Created/verified table: {table_name}")
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise CacheStorageError(f"Cannot create local schema: {e}") from e

        self._initialized = True
        logger.info(f"Local database initialized at: {self.db_path}")

    def query(self, sql: str, params: Optional[List] = None) -> List[sqlite3.Row]:
        """Execute a read query."""
        self.initialize()
        try:
            cursor = self._get_connection().execute(sql, params or [])
            return cursor.fetchall()
        except sqlite3.Error as e:
            raise CacheStorageError(f"Local database error: {e}") from e

    def execute(self, sql: str, params: Optional[List] = None) -> int:
        """Execute a single write statement in its own transaction."""
        with self.transaction() as conn:
            cursor = conn.execute(sql, params or [])
            return cursor.rowcount

    def close(self) -> None:
        """Close every connection opened by this database."""
        with self._connections_lock:
            for connection in self._connections:
                try:
                    connection.close()
                except sqlite3.Error as e:
                    logger.debug(f"Error closing connection: {e}")
            self._connections.clear()
        self._local = threading.local()
        self._initialized = False


# =============================================================================
# JSON ENCODING
# =============================================================================

def clean_value(value: Any) -> Any:
    """Convert a single value into something json.dumps accepts."""
    if value is pd.NaT:
        return None
    if isinstance(value, dict):
        return {str(k): clean_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [clean_value(v) for v in value]
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return value.isoformat()
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return None if np.isnan(value) else float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


def clean_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Clean every value of a record for JSON serialization."""
    return {str(k): clean_value(v) for k, v in record.items()}


def dumps_record(record: Any) -> str:
    """Serialize a record (or any value) to JSON text."""
    return json.dumps(clean_value(record), ensure_ascii=False)
