# =============================================================================
# madrasa_core/offline/state.py
# Connectivity / Sync State shared by the monitor, replay engine and UI
# =============================================================================
"""
SyncState - explicitly owned connectivity and replay state.

Created once by the composition root and injected into the ConnectionManager,
the ReplayEngine and the OfflineDataService. Only the monitor, the engine and
the data service mutate it; the UI reads snapshots. Never persisted.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SyncPhase(Enum):
    """User-facing sync status."""
    OFFLINE = "offline"     # Offline, possibly with changes pending
    SYNCING = "syncing"     # Replay in progress
    PENDING = "pending"     # Online but changes still queued
    SYNCED = "synced"       # All changes synced
    ERROR = "error"         # Last replay pass failed, or changes were given up on


@dataclass(frozen=True)
class SyncSnapshot:
    """Immutable copy of SyncState for display."""
    online: bool
    syncing: bool
    pending_changes: int
    last_sync: Optional[datetime]
    last_sync_success: Optional[datetime]
    last_error: Optional[str]
    total_synced: int
    dead_letters: int = 0

    @property
    def unconfirmed(self) -> int:
        """Every write the server has not confirmed, dead letters included."""
        return self.pending_changes + self.dead_letters

    @property
    def phase(self) -> SyncPhase:
        if self.syncing:
            return SyncPhase.SYNCING
        if not self.online:
            return SyncPhase.OFFLINE
        if self.last_error or self.dead_letters > 0:
            return SyncPhase.ERROR
        if self.pending_changes > 0:
            return SyncPhase.PENDING
        return SyncPhase.SYNCED


class SyncState:
    """
    Thread-safe holder of online / syncing / pending_changes / dead_letters.

    Usage:
        state = SyncState(online=check())
        if state.try_begin_sync():
            try:
                ...
            finally:
                state.end_sync()
    """

    def __init__(self, online: bool = False, pending_changes: int = 0, dead_letters: int = 0):
        self._lock = threading.RLock()
        self._sync_lock = threading.Lock()
        self._online = online
        self._syncing = False
        self._pending_changes = pending_changes
        self._dead_letters = dead_letters
        self._last_sync: Optional[datetime] = None
        self._last_sync_success: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._total_synced = 0

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def online(self) -> bool:
        return self._online

    @property
    def syncing(self) -> bool:
        return self._syncing

    @property
    def pending_changes(self) -> int:
        return self._pending_changes

    @property
    def dead_letters(self) -> int:
        return self._dead_letters

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def snapshot(self) -> SyncSnapshot:
        with self._lock:
            return SyncSnapshot(
                online=self._online,
                syncing=self._syncing,
                pending_changes=self._pending_changes,
                last_sync=self._last_sync,
                last_sync_success=self._last_sync_success,
                last_error=self._last_error,
                total_synced=self._total_synced,
                dead_letters=self._dead_letters,
            )

    # =========================================================================
    # MUTATION
    # =========================================================================

    def set_online(self, online: bool) -> bool:
        """Set the online flag. Returns True if it changed."""
        with self._lock:
            changed = self._online != online
            self._online = online
        return changed

    def set_pending_changes(self, count: int) -> None:
        with self._lock:
            self._pending_changes = max(0, int(count))

    def set_queue_counts(self, pending: int, dead_letters: int) -> None:
        """Mirror the queue: replayable mutations and dead letters."""
        with self._lock:
            self._pending_changes = max(0, int(pending))
            self._dead_letters = max(0, int(dead_letters))

    def try_begin_sync(self) -> bool:
        """
        Atomically claim the replay slot.

        Returns:
            False when another replay pass already holds it
        """
        if not self._sync_lock.acquire(blocking=False):
            return False
        with self._lock:
            self._syncing = True
            self._last_sync = datetime.now()
        return True

    def end_sync(self, synced: int = 0, error: Optional[str] = None) -> None:
        """Release the replay slot and record the outcome of the pass."""
        with self._lock:
            self._syncing = False
            self._total_synced += synced
            self._last_error = error
            if error is None:
                self._last_sync_success = datetime.now()
        if self._sync_lock.locked():
            self._sync_lock.release()
