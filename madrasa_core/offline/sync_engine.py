# =============================================================================
# madrasa_core/offline/sync_engine.py
# Replay Engine: drains the sync queue against the remote store
# =============================================================================
"""
ReplayEngine - applies queued mutations in enqueue order, then refreshes
the cache from server truth.

Features:
- At most one replay pass at a time (SyncState.try_begin_sync)
- Each mutation removed from the queue right after it is applied
- Per-mutation failures are logged and counted; the pass continues
- Bounded retry: a mutation failing max_attempts times becomes a dead letter
- Temporary ids of offline inserts replaced by the server-assigned id
"""

from __future__ import annotations
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from madrasa_core.data.remote_store import RemoteStore
from madrasa_core.errors.exceptions import RemoteStoreError, SyncError
from madrasa_core.logging import get_logger
from madrasa_core.offline.cache_refresh import CacheRefreshCoordinator, RefreshReport
from madrasa_core.offline.local_cache import LocalCache
from madrasa_core.offline.notifications import (
    SYNC_COMPLETE,
    SYNC_ERROR,
    SYNC_OFFLINE,
    SYNC_PARTIAL,
    LoggingNotifier,
    Notifier,
)
from madrasa_core.offline.state import SyncState
from madrasa_core.offline.sync_queue import (
    DeleteMutation,
    InsertMutation,
    Mutation,
    SyncQueue,
    UpdateMutation,
    is_temp_id,
)

logger = get_logger(__name__)


@dataclass
class ReplayReport:
    """Outcome of one replay pass."""
    skipped: bool = False
    attempted: int = 0
    applied: int = 0
    failed: int = 0
    dead_lettered: int = 0
    remapped: Dict[str, str] = field(default_factory=dict)
    refresh: Optional[RefreshReport] = None
    error: Optional[str] = None
    pending: int = 0
    dead_letters: int = 0

    @property
    def ok(self) -> bool:
        return not self.skipped and self.error is None and self.failed == 0


class ReplayEngine:
    """
    Drains the SyncQueue one mutation at a time.

    Usage:
        engine = ReplayEngine(state, queue, remote, refresher, cache)
        manager.set_replay_trigger(engine.replay)
        report = engine.sync_now()
    """

    MAX_SYNC_ATTEMPTS = 5

    def __init__(
        self,
        state: SyncState,
        queue: SyncQueue,
        remote: RemoteStore,
        refresher: CacheRefreshCoordinator,
        cache: Optional[LocalCache] = None,
        notifier: Optional[Notifier] = None,
        max_attempts: Optional[int] = MAX_SYNC_ATTEMPTS,
    ):
        self._state = state
        self._queue = queue
        self._remote = remote
        self._refresher = refresher
        self._cache = cache
        self._notifier = notifier or LoggingNotifier()
        self.max_attempts = max_attempts

    @property
    def state(self) -> SyncState:
        return self._state

    def sync_now(self) -> ReplayReport:
        """Replay immediately if online."""
        if not self._state.online:
            logger.debug("Cannot sync: offline")
            self._notifier.error(SYNC_OFFLINE)
            return ReplayReport(skipped=True, pending=self._state.pending_changes)
        return self.replay()

    def replay(self) -> ReplayReport:
        """
        Run one replay pass.

        Returns immediately with skipped=True if another pass is running.
        """
        if not self._state.try_begin_sync():
            logger.debug("Replay already in progress, skipping")
            return ReplayReport(skipped=True, pending=self._state.pending_changes)

        report = ReplayReport()
        try:
            pending = self._queue.list_all()
            if not pending:
                return report

            logger.info(f"Replaying {len(pending)} queued mutations")
            id_map: Dict[str, str] = {}

            for mutation in pending:
                mutation = self._resolve_ids(mutation, id_map)
                report.attempted += 1
                try:
                    confirmed = self._apply(mutation)
                except RemoteStoreError as e:
                    report.failed += 1
                    logger.error(f"Error syncing mutation #{mutation.id} ({mutation.operation.value} {mutation.table}): {e}")
                    if self._queue.record_failure(mutation.id, e.message, self.max_attempts):
                        report.dead_lettered += 1
                    continue

                self._queue.remove_one(mutation.id)
                report.applied += 1

                if isinstance(mutation, InsertMutation) and is_temp_id(mutation.record_id):
                    self._adopt_server_id(mutation, confirmed, id_map, report)

            report.refresh = self._refresher.refresh_all()
            if not report.refresh.ok:
                report.error = "; ".join(f"{name}: {msg}" for name, msg in report.refresh.failed.items())

            logger.info(
                f"Sync complete: {report.applied} success, {report.failed} failed, "
                f"{report.dead_lettered} dead-lettered"
            )

        except Exception as e:
            # Transport or local storage fault outside a single mutation
            logger.error(f"Sync failed: {e}", exc_info=True)
            report.error = str(e)

        finally:
            report.pending, report.dead_letters = self._recount()
            self._state.set_queue_counts(report.pending, report.dead_letters)
            self._state.end_sync(synced=report.applied, error=report.error)
            self._announce(report)

        return report

    def _recount(self) -> Tuple[int, int]:
        try:
            return self._queue.count(), self._queue.count_dead()
        except Exception as e:
            logger.error(f"Cannot count queued mutations: {e}")
            return self._state.pending_changes, self._state.dead_letters

    def _announce(self, report: ReplayReport) -> None:
        if report.error:
            self._notifier.error(SYNC_ERROR, error=report.error)
        elif report.failed:
            self._notifier.warning(
                SYNC_PARTIAL,
                applied=report.applied,
                pending=report.pending + report.dead_letters,
            )
        elif report.applied:
            self._notifier.success(SYNC_COMPLETE, count=report.applied)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def _apply(self, mutation: Mutation) -> Optional[Dict[str, Any]]:
        """Send one mutation to the remote store."""
        if isinstance(mutation, InsertMutation):
            row = dict(mutation.row)
            if is_temp_id(row.get("id")):
                # Server assigns the real id
                row.pop("id")
            return self._remote.insert(mutation.table, row)
        if isinstance(mutation, UpdateMutation):
            return self._remote.update(mutation.table, mutation.record_id, dict(mutation.changes))
        if isinstance(mutation, DeleteMutation):
            self._remote.delete(mutation.table, mutation.record_id)
            return None
        raise SyncError(
            f"Unsupported mutation type {type(mutation).__name__}",
            mutation_id=getattr(mutation, "id", None),
        )

    # =========================================================================
    # TEMPORARY IDS
    # =========================================================================

    @staticmethod
    def _resolve_ids(mutation: Mutation, id_map: Dict[str, str]) -> Mutation:
        """Swap temp ids confirmed earlier in this pass for their server ids."""
        if not id_map:
            return mutation

        def swap(value: Any) -> Any:
            return id_map.get(value, value) if is_temp_id(value) else value

        if isinstance(mutation, InsertMutation):
            row = {key: swap(value) for key, value in mutation.row.items()}
            return mutation if row == mutation.row else dataclasses.replace(mutation, row=row)
        if isinstance(mutation, UpdateMutation):
            changes = {key: swap(value) for key, value in mutation.changes.items()}
            return dataclasses.replace(mutation, record_id=swap(mutation.record_id), changes=changes)
        if isinstance(mutation, DeleteMutation):
            return dataclasses.replace(mutation, record_id=swap(mutation.record_id))
        return mutation

    def _adopt_server_id(
        self,
        mutation: InsertMutation,
        confirmed: Optional[Dict[str, Any]],
        id_map: Dict[str, str],
        report: ReplayReport,
    ) -> None:
        temp_id = str(mutation.record_id)
        server_id = (confirmed or {}).get("id")
        if server_id is None:
            logger.warning(f"Insert #{mutation.id} on {mutation.table} returned no id; {temp_id} left unresolved")
            return

        server_id = str(server_id)
        id_map[temp_id] = server_id
        report.remapped[temp_id] = server_id
        self._queue.remap_temp_id(temp_id, server_id)

        if self._cache is not None and mutation.table in self._cache.collections:
            self._cache.delete(mutation.table, temp_id)
            self._cache.put(mutation.table, server_id, confirmed)
            self._cache.remap_references(temp_id, server_id)
