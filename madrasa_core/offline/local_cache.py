# =============================================================================
# madrasa_core/offline/local_cache.py
# Per-collection key/value cache of last-known-good remote rows
# =============================================================================
"""
LocalCache - durable snapshot of each tracked collection.

A cached collection is either an exact mirror of the last successful remote
fetch, or that mirror plus/minus local edits that are still queued.
Storage faults surface as CacheStorageError; nothing is retried here.
"""

from __future__ import annotations
import json
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from madrasa_core.errors.exceptions import ValidationError
from madrasa_core.logging import get_logger
from madrasa_core.offline.local_database import LocalDatabase, dumps_record

logger = get_logger(__name__)


# Collections mirrored locally and refreshed after every replay
TRACKED_COLLECTIONS: Tuple[str, ...] = (
    "students",
    "teachers",
    "classes",
    "attendance",
    "courses",
    "fees",
    "education_reports",
)


class LocalCache:
    """
    Key/value store per collection, backed by LocalDatabase.

    Usage:
        cache = LocalCache(LocalDatabase(path))
        cache.put("students", student["id"], student)
        rows = cache.get_all("students")
    """

    def __init__(
        self,
        database: LocalDatabase,
        collections: Iterable[str] = TRACKED_COLLECTIONS,
    ):
        self._db = database
        self.collections = tuple(collections)

    def _check_collection(self, collection: str) -> None:
        if collection not in self.collections:
            raise ValidationError(
                f"'{collection}' is not a cached collection",
                field="collection",
                value=collection,
            )

    def put(self, collection: str, key: Any, record: Dict[str, Any]) -> None:
        """Insert or overwrite one record under key."""
        self._check_collection(collection)
        with self._db.transaction() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO cached_records (collection, record_key, data_json, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                [collection, str(key), dumps_record(record), datetime.now().isoformat()],
            )

    def get(self, collection: str, key: Any) -> Optional[Dict[str, Any]]:
        """Return the record stored under key, or None when absent."""
        self._check_collection(collection)
        rows = self._db.query(
            "SELECT data_json FROM cached_records WHERE collection = ? AND record_key = ?",
            [collection, str(key)],
        )
        if not rows:
            return None
        return json.loads(rows[0]["data_json"])

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return every record of the collection; an empty collection yields []."""
        self._check_collection(collection)
        rows = self._db.query(
            "SELECT data_json FROM cached_records WHERE collection = ? ORDER BY rowid",
            [collection],
        )
        return [json.loads(row["data_json"]) for row in rows]

    def delete(self, collection: str, key: Any) -> None:
        """Remove the record if present."""
        self._check_collection(collection)
        self._db.execute(
            "DELETE FROM cached_records WHERE collection = ? AND record_key = ?",
            [collection, str(key)],
        )

    def clear(self, collection: str) -> None:
        """Remove every record of the collection."""
        self._check_collection(collection)
        removed = self._db.execute(
            "DELETE FROM cached_records WHERE collection = ?",
            [collection],
        )
        logger.debug(f"Cleared {removed} cached rows from {collection}")

    def replace_all(
        self,
        collection: str,
        records: Iterable[Dict[str, Any]],
        key_field: str = "id",
    ) -> int:
        """
        Clear the collection and put every record back in one transaction.

        Records without key_field are skipped.

        Returns:
            Number of records stored
        """
        self._check_collection(collection)
        now = datetime.now().isoformat()
        stored = 0
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM cached_records WHERE collection = ?", [collection])
            for record in records:
                key = record.get(key_field)
                if key is None:
                    logger.warning(f"Skipping {collection} row without '{key_field}'")
                    continue
                conn.execute(
                    """
                    INSERT OR REPLACE INTO cached_records (collection, record_key, data_json, updated_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    [collection, str(key), dumps_record(record), now],
                )
                stored += 1
        return stored

    def count(self, collection: str) -> int:
        self._check_collection(collection)
        rows = self._db.query(
            "SELECT COUNT(*) AS count FROM cached_records WHERE collection = ?",
            [collection],
        )
        return rows[0]["count"] if rows else 0

    def remap_references(self, old_value: str, new_value: str) -> int:
        """
        Rewrite cached rows whose fields hold old_value (a temp id now confirmed).

        Returns:
            Number of rows rewritten
        """
        rewritten = 0
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT collection, record_key, data_json FROM cached_records WHERE data_json LIKE ?",
                [f'%"{old_value}"%'],
            ).fetchall()
            for row in rows:
                record = json.loads(row["data_json"])
                updated = {key: (new_value if value == old_value else value) for key, value in record.items()}
                if updated == record:
                    continue
                conn.execute(
                    "UPDATE cached_records SET data_json = ? WHERE collection = ? AND record_key = ?",
                    [dumps_record(updated), row["collection"], row["record_key"]],
                )
                rewritten += 1
        return rewritten
