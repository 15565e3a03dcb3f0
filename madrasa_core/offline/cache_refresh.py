# =============================================================================
# madrasa_core/offline/cache_refresh.py
# Cache Refresh Coordinator
# =============================================================================
"""
After a replay pass, re-fetch every tracked collection and overwrite the
local snapshot with server truth. A collection whose fetch fails keeps its
previous snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from madrasa_core.data.remote_store import RemoteStore
from madrasa_core.errors.exceptions import RemoteStoreError
from madrasa_core.logging import get_logger
from madrasa_core.offline.local_cache import LocalCache

logger = get_logger(__name__)


@dataclass
class RefreshReport:
    """Outcome of one refresh: rows stored per collection, errors per collection."""
    refreshed: Dict[str, int] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class CacheRefreshCoordinator:
    """
    Overwrites cached collections from the remote store.

    Usage:
        coordinator = CacheRefreshCoordinator(remote, cache)
        report = coordinator.refresh_all()
        if not report.ok:
            ...
    """

    def __init__(
        self,
        remote: RemoteStore,
        cache: LocalCache,
        collections: Optional[Iterable[str]] = None,
    ):
        self._remote = remote
        self._cache = cache
        self.collections = tuple(collections) if collections is not None else cache.collections

    def refresh(self, collection: str) -> int:
        """
        Refresh one collection.

        Raises:
            RemoteStoreError: fetch failed, cache untouched
            CacheStorageError: local write failed
        """
        rows = self._remote.select_all(collection)
        stored = self._cache.replace_all(collection, rows)
        logger.debug(f"Refreshed {collection}: {stored} rows")
        return stored

    def refresh_all(self) -> RefreshReport:
        """
        Refresh every tracked collection independently.

        A fetch failure leaves that collection stale and is recorded in the
        report; CacheStorageError propagates to the caller.
        """
        report = RefreshReport()
        for collection in self.collections:
            try:
                report.refreshed[collection] = self.refresh(collection)
            except RemoteStoreError as e:
                logger.warning(f"Refresh of {collection} failed, keeping cached copy: {e.message}")
                report.failed[collection] = e.message

        logger.info(
            f"Cache refresh complete: {len(report.refreshed)} refreshed, {len(report.failed)} failed"
        )
        return report
