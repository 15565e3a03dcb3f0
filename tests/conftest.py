# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import threading
from typing import Any, Dict, List, Optional, Set, Tuple
from unittest.mock import MagicMock

import pytest

from madrasa_core.config.settings import OfflineSettings, Settings
from madrasa_core.data.remote_store import RemoteStore
from madrasa_core.errors.exceptions import RemoteStoreError
from madrasa_core.offline.local_cache import LocalCache
from madrasa_core.offline.local_database import LocalDatabase
from madrasa_core.offline.notifications import Notice, Notifier
from madrasa_core.offline.sync_queue import SyncQueue


# =============================================================================
# FAKES
# =============================================================================

class InMemoryRemoteStore(RemoteStore):
    """
    Remote store backed by plain dicts.

    Failures can be injected per table or per (table, operation); inserts
    without an id get server ids srv-1, srv-2, ...
    """

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.calls: List[Tuple[str, str, Any]] = []
        self.fail_tables: Set[str] = set()
        self.fail_ops: Set[Tuple[str, str]] = set()
        self.insert_gate: Optional[threading.Event] = None
        self.insert_started = threading.Event()
        self._next_id = 0
        self._lock = threading.Lock()

    def _check(self, table: str, operation: str) -> None:
        if table in self.fail_tables or (table, operation) in self.fail_ops:
            raise RemoteStoreError(f"{operation} on {table} rejected", table=table, operation=operation)

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def select_all(self, table, order_by=None, ascending=True):
        self.calls.append(("select_all", table, None))
        self._check(table, "select")
        rows = [dict(row) for row in self._rows(table)]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by)), reverse=not ascending)
        return rows

    def insert(self, table, row):
        self.calls.append(("insert", table, dict(row)))
        self.insert_started.set()
        if self.insert_gate is not None:
            self.insert_gate.wait(timeout=5)
        self._check(table, "insert")
        stored = dict(row)
        with self._lock:
            if not stored.get("id"):
                self._next_id += 1
                stored["id"] = f"srv-{self._next_id}"
        self._rows(table).append(stored)
        return dict(stored)

    def update(self, table, record_id, changes):
        self.calls.append(("update", table, (record_id, dict(changes))))
        self._check(table, "update")
        for row in self._rows(table):
            if str(row.get("id")) == str(record_id):
                row.update(changes)
                return dict(row)
        raise RemoteStoreError(f"No {table} row {record_id}", table=table, record_id=record_id)

    def delete(self, table, record_id):
        self.calls.append(("delete", table, record_id))
        self._check(table, "delete")
        self.tables[table] = [r for r in self._rows(table) if str(r.get("id")) != str(record_id)]

    def select_where(self, table, filters):
        self.calls.append(("select_where", table, dict(filters)))
        self._check(table, "select")
        return [
            dict(row) for row in self._rows(table)
            if all(str(row.get(k)) == str(v) for k, v in filters.items())
        ]

    def delete_where(self, table, filters):
        self.calls.append(("delete_where", table, dict(filters)))
        self._check(table, "delete")
        self.tables[table] = [
            row for row in self._rows(table)
            if not all(str(row.get(k)) == str(v) for k, v in filters.items())
        ]

    def ops(self, *kinds: str) -> List[Tuple[str, str, Any]]:
        """Recorded calls of the given kinds, in call order."""
        return [call for call in self.calls if call[0] in kinds]


class RecordingNotifier(Notifier):
    """Keeps every notice for inspection."""

    def __init__(self):
        self.notices: List[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def keys(self) -> List[str]:
        return [n.key for n in self.notices]


class Reachability:
    """Switchable check: call it like a function, flip .up to change the answer."""

    def __init__(self, up: bool = True):
        self.up = up
        self.calls = 0

    def __call__(self) -> bool:
        self.calls += 1
        return self.up


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_students():
    """Two students in one class"""
    return [
        {"id": "s1", "name": "Ahmad", "father_name": "Ali", "class_id": "c1", "status": "active",
         "admission_date": "2024-01-10", "created_at": "2024-01-10T09:00:00"},
        {"id": "s2", "name": "Bilal", "father_name": "Hamza", "class_id": "c1", "status": "active",
         "admission_date": "2024-02-01", "created_at": "2024-02-01T09:00:00"},
    ]


@pytest.fixture
def sample_classes():
    return [{"id": "c1", "name": "Hifz A", "level": "beginner", "created_at": "2024-01-01T08:00:00"}]


@pytest.fixture
def sample_fees():
    """Fees across statuses"""
    return [
        {"id": "f1", "student_id": "s1", "amount": 1500, "status": "paid", "fee_type": "monthly",
         "academic_year": "2024", "due_date": "2024-03-01", "paid_date": "2024-03-02"},
        {"id": "f2", "student_id": "s2", "amount": 1500, "status": "pending", "fee_type": "monthly",
         "academic_year": "2024", "due_date": "2024-03-01"},
        {"id": "f3", "student_id": "s2", "amount": 500, "status": "overdue", "fee_type": "exam",
         "academic_year": "2024", "due_date": "2024-02-01"},
    ]


# =============================================================================
# OFFLINE STACK FIXTURES
# =============================================================================

@pytest.fixture
def database(tmp_path):
    """Initialised local SQLite database in a temp directory"""
    db = LocalDatabase(tmp_path / "offline.db")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def cache(database):
    return LocalCache(database)


@pytest.fixture
def queue(database):
    return SyncQueue(database)


@pytest.fixture
def remote(sample_students, sample_classes):
    """Remote store seeded with students and classes"""
    return InMemoryRemoteStore({"students": sample_students, "classes": sample_classes})


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def reachability():
    return Reachability(up=True)


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing the offline database at a temp directory"""
    return Settings(offline=OfflineSettings(db_path=tmp_path / "stack.db", max_sync_attempts=3))


@pytest.fixture
def stack(test_settings, remote, reachability, notifier, database):
    """Fully wired offline stack, initialised without the monitor thread"""
    from madrasa_core.offline.stack import build_offline_stack

    built = build_offline_stack(
        test_settings,
        remote=remote,
        check=reachability,
        notifier=notifier,
        database=database,
    )
    built.connection_manager.initialize(start_monitoring=False)
    yield built
    built.connection_manager.stop_monitoring()


class Network:
    """Flips reachability and lets the monitor notice."""

    def __init__(self, stack, reachability: Reachability):
        self.stack = stack
        self.reachability = reachability

    def offline(self) -> None:
        self.reachability.up = False
        self.stack.connection_manager.check_connection()

    def online(self) -> None:
        # The monitor replays on the offline -> online transition
        self.reachability.up = True
        self.stack.connection_manager.check_connection()


@pytest.fixture
def network(stack, reachability):
    return Network(stack, reachability)


# =============================================================================
# MOCK FIXTURES
# =============================================================================

class SessionState(dict):
    """dict with attribute access, like st.session_state"""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        del self[name]


@pytest.fixture
def mock_streamlit():
    """Mock Streamlit for testing"""
    import sys

    # Create mock streamlit module
    mock_st = MagicMock()
    mock_st.session_state = SessionState()
    mock_st.cache_data = lambda f: f
    mock_st.cache_resource = lambda f: f

    # Store original and replace
    original_st = sys.modules.get('streamlit')
    sys.modules['streamlit'] = mock_st

    yield mock_st

    # Restore original
    if original_st:
        sys.modules['streamlit'] = original_st


@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client
