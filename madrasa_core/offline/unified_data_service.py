# =============================================================================
# madrasa_core/offline/unified_data_service.py
# Offline Data Service - Single API for Online/Offline Operations
# =============================================================================
"""
OfflineDataService - the primary API for all data operations.

- Online: remote store first, then the cache is updated from the confirmed row
- Offline: the cache is edited in place and the write is queued for replay
- Reads: remote when online, cached snapshot when offline or unreachable

Usage:
------
from madrasa_core.offline import get_data_service

service = get_data_service()
outcome = service.create("students", {"name": "Ahmad", "father_name": "Ali"})
if outcome.queued:
    ...  # saved locally, will sync later
rows = service.list("students")
"""

from __future__ import annotations
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from madrasa_core.data.remote_store import RemoteStore
from madrasa_core.errors.exceptions import (
    OfflineUnavailableError,
    RemoteStoreError,
    ValidationError,
)
from madrasa_core.logging import get_logger
from madrasa_core.offline.local_cache import LocalCache
from madrasa_core.offline.notifications import SAVED_OFFLINE, LoggingNotifier, Notifier
from madrasa_core.offline.state import SyncState
from madrasa_core.offline.sync_queue import TEMP_ID_PREFIX, Operation, SyncQueue, is_temp_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class WriteOutcome:
    """Result of a write: the record as now visible, and whether it was queued."""
    record: Optional[Dict[str, Any]]
    queued: bool = False
    mutation_id: Optional[int] = None


class OfflineDataService:
    """
    Write-path decision logic plus cache-backed reads.

    Writes to collections the cache does not track are only possible online;
    offline they raise OfflineUnavailableError.
    """

    def __init__(
        self,
        state: SyncState,
        cache: LocalCache,
        queue: SyncQueue,
        remote: Optional[RemoteStore] = None,
        notifier: Optional[Notifier] = None,
    ):
        self._state = state
        self._cache = cache
        self._queue = queue
        self._remote = remote
        self._notifier = notifier or LoggingNotifier()
        self._temp_lock = threading.Lock()
        self._last_temp = 0

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def remote(self) -> Optional[RemoteStore]:
        return self._remote

    @property
    def is_online(self) -> bool:
        """Online and a remote store is configured."""
        return self._state.online and self._remote is not None

    @property
    def pending_sync_count(self) -> int:
        return self._queue.count()

    def is_tracked(self, table: str) -> bool:
        return table in self._cache.collections

    def new_temp_id(self) -> str:
        """Unique temp-<number> id, increasing even for calls within the same millisecond."""
        with self._temp_lock:
            candidate = int(time.time() * 1000)
            if candidate <= self._last_temp:
                candidate = self._last_temp + 1
            self._last_temp = candidate
        return f"{TEMP_ID_PREFIX}{candidate}"

    # =========================================================================
    # WRITES
    # =========================================================================

    def create(self, table: str, row: Dict[str, Any]) -> WriteOutcome:
        """
        Create a row; offline it gets a temporary id until replayed.

        A row referencing another row that is still queued (a fee for a
        student added offline) is queued behind it even while online.
        """
        references = [v for k, v in row.items() if k != "id"]
        if self.is_online and not self._waits_for_replay(table, *references):
            confirmed = self._remote.insert(table, self._without_temp_id(row))
            if self.is_tracked(table) and confirmed.get("id") is not None:
                self._cache.put(table, confirmed["id"], confirmed)
            logger.info(f"Created {table}/{confirmed.get('id')}")
            return WriteOutcome(confirmed)

        self._require_offline_support(table, "create")
        record = dict(row)
        if not record.get("id"):
            record["id"] = self.new_temp_id()
        self._cache.put(table, record["id"], record)
        return self._queue_write(table, Operation.INSERT, record, record)

    def update(self, table: str, record_id: str, changes: Dict[str, Any]) -> WriteOutcome:
        """Apply changed fields to one row."""
        if not record_id:
            raise ValidationError(f"Update on '{table}' requires an id", field="id")
        changes = {k: v for k, v in changes.items() if k != "id"}

        if self.is_online and not self._waits_for_replay(table, record_id, *changes.values()):
            confirmed = self._remote.update(table, record_id, changes)
            if self.is_tracked(table):
                cached = self._cache.get(table, record_id) or {}
                self._cache.put(table, record_id, {**cached, **confirmed})
            logger.info(f"Updated {table}/{record_id}")
            return WriteOutcome(confirmed)

        self._require_offline_support(table, "update")
        merged = {**(self._cache.get(table, record_id) or {}), **changes, "id": record_id}
        self._cache.put(table, record_id, merged)
        return self._queue_write(table, Operation.UPDATE, {**changes, "id": record_id}, merged)

    def delete(self, table: str, record_id: str) -> WriteOutcome:
        """Remove one row."""
        if not record_id:
            raise ValidationError(f"Delete on '{table}' requires an id", field="id")

        if self.is_online and not self._waits_for_replay(table, record_id):
            self._remote.delete(table, record_id)
            if self.is_tracked(table):
                self._cache.delete(table, record_id)
            logger.info(f"Deleted {table}/{record_id}")
            return WriteOutcome(None)

        self._require_offline_support(table, "delete")
        self._cache.delete(table, record_id)
        return self._queue_write(table, Operation.DELETE, {"id": record_id}, None)

    def _queue_write(
        self,
        table: str,
        operation: Operation,
        payload: Dict[str, Any],
        visible: Optional[Dict[str, Any]],
    ) -> WriteOutcome:
        mutation = self._queue.enqueue(table, operation, payload)
        pending = self._queue.count()
        self._state.set_pending_changes(pending)
        self._notifier.info(SAVED_OFFLINE, pending=pending)
        return WriteOutcome(visible, queued=True, mutation_id=mutation.id)

    def _require_offline_support(self, table: str, action: str) -> None:
        if not self.is_tracked(table):
            raise OfflineUnavailableError(
                f"Cannot {action} {table} while offline",
                table=table,
            )

    def _waits_for_replay(self, table: str, *values: Any) -> bool:
        """True when the write names a row created offline and not yet replayed."""
        return self.is_tracked(table) and any(is_temp_id(value) for value in values)

    @staticmethod
    def _without_temp_id(row: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in row.items() if not (k == "id" and (v is None or is_temp_id(v)))}

    # =========================================================================
    # READS
    # =========================================================================

    def list(self, table: str, order_by: Optional[str] = None, ascending: bool = True) -> List[Dict[str, Any]]:
        """
        Every row of table.

        Online the rows come from the remote store and, for tracked
        collections, replace the cached snapshot. Offline, or when the fetch
        fails, the cached snapshot is returned.
        """
        if self.is_online:
            try:
                rows = self._remote.select_all(table, order_by=order_by, ascending=ascending)
            except RemoteStoreError as e:
                if not self.is_tracked(table):
                    raise
                logger.warning(f"Falling back to cached {table}: {e.message}")
            else:
                if self.is_tracked(table) and self._queue.count() == 0:
                    self._cache.replace_all(table, rows)
                return rows

        if not self.is_tracked(table):
            raise OfflineUnavailableError(f"{table} is not available offline", table=table)
        return self._sort(self._cache.get_all(table), order_by, ascending)

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """One row by id, or None."""
        if self.is_online and not is_temp_id(record_id):
            try:
                rows = self._remote.select_where(table, {"id": record_id})
                return rows[0] if rows else None
            except RemoteStoreError as e:
                if not self.is_tracked(table):
                    raise
                logger.warning(f"Falling back to cached {table}/{record_id}: {e.message}")

        if not self.is_tracked(table):
            raise OfflineUnavailableError(f"{table} is not available offline", table=table)
        return self._cache.get(table, record_id)

    def select_where(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Rows matching every filter; offline the cached snapshot is filtered."""
        if self.is_online:
            try:
                return self._remote.select_where(table, filters)
            except RemoteStoreError as e:
                if not self.is_tracked(table):
                    raise
                logger.warning(f"Falling back to cached {table}: {e.message}")

        if not self.is_tracked(table):
            raise OfflineUnavailableError(f"{table} is not available offline", table=table)
        return [
            row for row in self._cache.get_all(table)
            if all(str(row.get(col)) == str(val) for col, val in filters.items())
        ]

    def delete_where(self, table: str, filters: Dict[str, Any]) -> None:
        """Online-only filtered delete."""
        if not self.is_online:
            raise OfflineUnavailableError(f"Cannot delete from {table} while offline", table=table)
        self._remote.delete_where(table, filters)

    @staticmethod
    def _sort(rows: List[Dict[str, Any]], order_by: Optional[str], ascending: bool) -> List[Dict[str, Any]]:
        if not order_by:
            return rows
        present = [r for r in rows if r.get(order_by) is not None]
        missing = [r for r in rows if r.get(order_by) is None]
        present.sort(key=lambda r: str(r[order_by]), reverse=not ascending)
        return present + missing
