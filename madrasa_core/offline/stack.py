# =============================================================================
# madrasa_core/offline/stack.py
# Composition root for the offline layer
# =============================================================================

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from madrasa_core.config.settings import Settings, get_settings
from madrasa_core.data.remote_store import RemoteStore
from madrasa_core.logging import get_logger
from madrasa_core.offline.cache_refresh import CacheRefreshCoordinator
from madrasa_core.offline.connection_manager import ConnectionManager, SocketCheck
from madrasa_core.offline.local_cache import LocalCache
from madrasa_core.offline.local_database import LocalDatabase
from madrasa_core.offline.notifications import Notifier, QueuedNotifier
from madrasa_core.offline.state import SyncState
from madrasa_core.offline.sync_engine import ReplayEngine
from madrasa_core.offline.sync_queue import SyncQueue
from madrasa_core.offline.unified_data_service import OfflineDataService

logger = get_logger(__name__)


@dataclass
class OfflineStack:
    """Every offline component, wired around one SyncState."""
    settings: Settings
    database: LocalDatabase
    cache: LocalCache
    queue: SyncQueue
    state: SyncState
    notifier: Notifier
    remote: Optional[RemoteStore]
    connection_manager: ConnectionManager
    refresher: Optional[CacheRefreshCoordinator]
    engine: Optional[ReplayEngine]
    data_service: OfflineDataService

    def start(self, start_monitoring: bool = True) -> None:
        """Check connectivity once and start the monitor thread."""
        self.connection_manager.initialize(start_monitoring=start_monitoring)

    def shutdown(self) -> None:
        """Stop monitoring and close the local database."""
        self.connection_manager.stop_monitoring()
        self.database.close()
        logger.info("Offline stack shut down")


def _no_remote_check() -> bool:
    return False


def build_offline_stack(
    settings: Optional[Settings] = None,
    remote: Optional[RemoteStore] = None,
    check: Optional[Callable[[], bool]] = None,
    notifier: Optional[Notifier] = None,
    database: Optional[LocalDatabase] = None,
) -> OfflineStack:
    """
    Wire the cache, queue, monitor, replay engine and data service together.

    Without a remote store the app runs permanently offline: reads come from
    the cache and writes to tracked collections are queued.

    Args:
        settings: Settings (defaults to get_settings())
        remote: Remote store; None means no remote is configured
        check: Reachability check; defaults to a SocketCheck on the Supabase host
        notifier: Notice sink; defaults to a QueuedNotifier drained by the UI
        database: Local database; defaults to the configured db_path
    """
    settings = settings or get_settings()
    offline = settings.offline

    database = database or LocalDatabase(offline.db_path)
    database.initialize()
    cache = LocalCache(database)
    queue = SyncQueue(database)
    notifier = notifier or QueuedNotifier()
    state = SyncState(online=False, pending_changes=queue.count(), dead_letters=queue.count_dead())

    if check is None:
        check = SocketCheck(settings.supabase.url, offline.connection_timeout) if remote else _no_remote_check

    connection_manager = ConnectionManager(
        state,
        check,
        notifier,
        check_interval=offline.check_interval,
        sync_interval=offline.sync_interval,
    )

    refresher = None
    engine = None
    if remote is not None:
        refresher = CacheRefreshCoordinator(remote, cache)
        engine = ReplayEngine(
            state,
            queue,
            remote,
            refresher,
            cache=cache,
            notifier=notifier,
            max_attempts=offline.max_sync_attempts,
        )
        connection_manager.set_replay_trigger(engine.replay)

    data_service = OfflineDataService(state, cache, queue, remote, notifier)

    logger.info(
        f"Offline stack ready (remote={'yes' if remote else 'no'}, pending={state.pending_changes})"
    )
    return OfflineStack(
        settings=settings,
        database=database,
        cache=cache,
        queue=queue,
        state=state,
        notifier=notifier,
        remote=remote,
        connection_manager=connection_manager,
        refresher=refresher,
        engine=engine,
        data_service=data_service,
    )


# Singleton accessor
_offline_stack: Optional[OfflineStack] = None
_stack_lock = threading.Lock()


def get_offline_stack() -> OfflineStack:
    """
    Get the process-wide OfflineStack, building and starting it on first use.
    """
    global _offline_stack
    if _offline_stack is None:
        with _stack_lock:
            if _offline_stack is None:
                from madrasa_core.data.supabase_client import SupabaseRemoteStore, get_supabase_client

                settings = get_settings()
                client = get_supabase_client(settings)
                remote = SupabaseRemoteStore(client) if client is not None else None
                stack = build_offline_stack(settings, remote=remote)
                stack.start()
                _offline_stack = stack
    return _offline_stack


def get_data_service() -> OfflineDataService:
    """Get the global OfflineDataService."""
    return get_offline_stack().data_service
