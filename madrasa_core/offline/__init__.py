# =============================================================================
# madrasa_core/offline/__init__.py
# Offline-First Architecture for Madrasa Manager
# =============================================================================
"""
Offline-First Architecture Module

Writes made while disconnected are buffered in a durable queue, replayed
against Supabase when connectivity returns, and the local cache is then
reconciled with server truth.

Architecture:
------------
┌─────────────────────────────────────────────────────────────────┐
│                    OFFLINE-FIRST ARCHITECTURE                    │
├─────────────────────────────────────────────────────────────────┤
│                                                                  │
│   ┌──────────────────────────────────────────────────────────┐  │
│   │                 OfflineDataService                        │  │
│   │         (Single API - pages use this only)                │  │
│   └──────────────────────────────────────────────────────────┘  │
│              │                  │                 │              │
│              ▼                  ▼                 ▼              │
│   ┌──────────────┐    ┌──────────────┐   ┌──────────────┐       │
│   │  LocalCache  │    │  SyncQueue   │   │ RemoteStore  │       │
│   └──────────────┘    └──────────────┘   └──────────────┘       │
│              │                  │                 ▲              │
│              └────── SQLite ────┘                 │              │
│                                                   │              │
│   ┌──────────────────┐   replay   ┌──────────────────┐          │
│   │ ConnectionMgr    │──────────►│  ReplayEngine    │          │
│   │ (monitor thread) │           │  + CacheRefresh  │          │
│   └──────────────────┘           └──────────────────┘          │
│              └──────────── SyncState ───────────┘               │
└─────────────────────────────────────────────────────────────────┘

Usage:
------
from madrasa_core.offline import get_data_service

service = get_data_service()
service.update("students", student_id, {"grade": "B"})
print(service.state.pending_changes)
"""

from madrasa_core.offline.local_database import LocalDatabase

from madrasa_core.offline.local_cache import (
    LocalCache,
    TRACKED_COLLECTIONS,
)

from madrasa_core.offline.sync_queue import (
    SyncQueue,
    Operation,
    Mutation,
    InsertMutation,
    UpdateMutation,
    DeleteMutation,
    build_mutation,
    is_temp_id,
)

from madrasa_core.offline.state import (
    SyncState,
    SyncSnapshot,
    SyncPhase,
)

from madrasa_core.offline.notifications import (
    Notice,
    NoticeLevel,
    Notifier,
    LoggingNotifier,
    QueuedNotifier,
)

from madrasa_core.offline.connection_manager import (
    ConnectionManager,
    ConnectionStatus,
    SocketCheck,
)

from madrasa_core.offline.cache_refresh import (
    CacheRefreshCoordinator,
    RefreshReport,
)

from madrasa_core.offline.sync_engine import (
    ReplayEngine,
    ReplayReport,
)

from madrasa_core.offline.unified_data_service import (
    OfflineDataService,
    WriteOutcome,
)

from madrasa_core.offline.stack import (
    OfflineStack,
    build_offline_stack,
    get_offline_stack,
    get_data_service,
)

__all__ = [
    # Local storage
    "LocalDatabase",
    "LocalCache",
    "TRACKED_COLLECTIONS",
    # Sync queue
    "SyncQueue",
    "Operation",
    "Mutation",
    "InsertMutation",
    "UpdateMutation",
    "DeleteMutation",
    "build_mutation",
    "is_temp_id",
    # State & notices
    "SyncState",
    "SyncSnapshot",
    "SyncPhase",
    "Notice",
    "NoticeLevel",
    "Notifier",
    "LoggingNotifier",
    "QueuedNotifier",
    # Connectivity
    "ConnectionManager",
    "ConnectionStatus",
    "SocketCheck",
    # Replay
    "CacheRefreshCoordinator",
    "RefreshReport",
    "ReplayEngine",
    "ReplayReport",
    # Unified Service (Main API)
    "OfflineDataService",
    "WriteOutcome",
    "OfflineStack",
    "build_offline_stack",
    "get_offline_stack",
    "get_data_service",
]
