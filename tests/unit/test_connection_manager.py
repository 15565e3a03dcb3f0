# =============================================================================
# tests/unit/test_connection_manager.py
# Unit Tests for SyncState and ConnectionManager
# =============================================================================

from unittest.mock import MagicMock

import pytest

from madrasa_core.offline.notifications import BACK_ONLINE, WENT_OFFLINE


@pytest.fixture
def manager(reachability, notifier):
    """Connection manager with a switchable check and a mock replay trigger"""
    from madrasa_core.offline.connection_manager import ConnectionManager
    from madrasa_core.offline.state import SyncState

    manager = ConnectionManager(SyncState(), reachability, notifier, check_interval=0.01, sync_interval=60)
    manager.trigger = MagicMock()
    manager.set_replay_trigger(manager.trigger)
    yield manager
    manager.stop_monitoring()


class TestSyncState:
    """Shared connectivity / replay flags"""

    def test_phase_precedence(self):
        from madrasa_core.offline.state import SyncPhase, SyncState

        state = SyncState(online=True)
        assert state.snapshot().phase is SyncPhase.SYNCED

        state.set_pending_changes(2)
        assert state.snapshot().phase is SyncPhase.PENDING

        state.set_online(False)
        assert state.snapshot().phase is SyncPhase.OFFLINE

        state.try_begin_sync()
        assert state.snapshot().phase is SyncPhase.SYNCING
        state.end_sync(error="boom")

        state.set_online(True)
        assert state.snapshot().phase is SyncPhase.ERROR

    def test_try_begin_sync_is_exclusive(self):
        from madrasa_core.offline.state import SyncState

        state = SyncState(online=True)

        assert state.try_begin_sync()
        assert not state.try_begin_sync()
        state.end_sync()
        assert state.try_begin_sync()
        state.end_sync()

    def test_pending_changes_never_negative(self):
        from madrasa_core.offline.state import SyncState

        state = SyncState()
        state.set_pending_changes(-3)
        assert state.pending_changes == 0

    def test_dead_letters_keep_error_phase(self):
        from madrasa_core.offline.state import SyncPhase, SyncState

        state = SyncState(online=True)
        state.set_queue_counts(pending=0, dead_letters=1)
        snapshot = state.snapshot()

        assert snapshot.phase is SyncPhase.ERROR
        assert snapshot.unconfirmed == 1

        state.set_queue_counts(pending=2, dead_letters=0)
        assert state.snapshot().phase is SyncPhase.PENDING

    def test_dead_letters_seeded_at_construction(self):
        from madrasa_core.offline.state import SyncPhase, SyncState

        state = SyncState(online=True, pending_changes=0, dead_letters=3)

        assert state.dead_letters == 3
        assert state.snapshot().phase is SyncPhase.ERROR

    def test_set_online_reports_change(self):
        from madrasa_core.offline.state import SyncState

        state = SyncState()

        assert state.set_online(True)
        assert not state.set_online(True)


class TestConnectionTransitions:
    """Replay fires exactly once per offline -> online transition"""

    def test_initialize_seeds_state_without_replay(self, manager, reachability, notifier):
        manager.initialize(start_monitoring=False)

        assert manager.is_online
        manager.trigger.assert_not_called()
        assert notifier.notices == []

    def test_going_offline_notifies_only(self, manager, reachability, notifier):
        manager.initialize(start_monitoring=False)
        reachability.up = False

        status = manager.check_connection()

        assert status.value == "offline"
        assert notifier.keys == [WENT_OFFLINE]
        manager.trigger.assert_not_called()

    def test_coming_back_triggers_one_replay(self, manager, reachability, notifier):
        reachability.up = False
        manager.initialize(start_monitoring=False)
        reachability.up = True

        manager.check_connection()
        manager.check_connection()

        assert manager.trigger.call_count == 1
        assert notifier.keys == [BACK_ONLINE]

    def test_reachability_check_exception_counts_as_offline(self, notifier):
        from madrasa_core.offline.connection_manager import ConnectionManager
        from madrasa_core.offline.state import SyncState

        def broken_check():
            raise OSError("no route")

        state = SyncState(online=True)
        broken = ConnectionManager(state, broken_check, notifier)

        broken.check_connection()

        assert not state.online
        assert broken.consecutive_failures == 1

    def test_trigger_error_is_contained(self, manager, reachability):
        reachability.up = False
        manager.initialize(start_monitoring=False)
        manager.trigger.side_effect = RuntimeError("replay blew up")
        reachability.up = True

        manager.check_connection()

        assert manager.is_online

    def test_status_display(self, manager):
        manager.initialize(start_monitoring=False)

        display = manager.get_status_display()

        assert display["status"] == "online"
        assert display["failures"] == 0
        assert display["last_online"] is not None

    def test_status_display_keeps_last_online_while_offline(self, manager, reachability):
        manager.initialize(start_monitoring=False)
        was_online = manager.get_status_display()["last_online"]
        reachability.up = False

        manager.check_connection()
        display = manager.get_status_display()

        assert display["status"] == "offline"
        assert display["last_online"] == was_online
        assert display["failures"] == 1


class TestPeriodicReplay:
    """Timer-driven replay"""

    def test_tick_replays_when_online(self, manager):
        manager.initialize(start_monitoring=False)

        assert manager.tick()
        manager.trigger.assert_called_once()

    def test_tick_skips_when_offline(self, manager, reachability):
        reachability.up = False
        manager.initialize(start_monitoring=False)

        assert not manager.tick()
        manager.trigger.assert_not_called()

    def test_monitor_thread_starts_and_stops(self, manager, reachability):
        manager.initialize(start_monitoring=True)
        assert manager.is_monitoring

        manager.stop_monitoring()

        assert not manager.is_monitoring


class TestSocketReachability:
    """Reachability check"""

    def test_unconfigured_host_is_unreachable(self):
        from madrasa_core.offline.connection_manager import SocketCheck

        check = SocketCheck("")
        assert not check.check_supabase()

    def test_requires_both_internet_and_supabase(self, monkeypatch):
        from madrasa_core.offline.connection_manager import SocketCheck

        check = SocketCheck("https://example.supabase.co", timeout=0.1)
        attempted = []

        def fake_connect(host, port):
            attempted.append((host, port))
            return host != "example.supabase.co"

        monkeypatch.setattr(check, "_can_connect", fake_connect)

        assert not check()
        assert ("example.supabase.co", 443) in attempted
