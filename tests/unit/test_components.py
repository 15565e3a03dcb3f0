# =============================================================================
# tests/unit/test_components.py
# Unit Tests for sync status display and result reporting
# =============================================================================

from datetime import date, datetime

import pytest


def snapshot(**overrides):
    from madrasa_core.offline.state import SyncSnapshot

    values = dict(
        online=True,
        syncing=False,
        pending_changes=0,
        last_sync=None,
        last_sync_success=None,
        last_error=None,
        total_synced=0,
    )
    values.update(overrides)
    return SyncSnapshot(**values)


@pytest.fixture
def components(mock_streamlit, monkeypatch):
    from madrasa_core.ui import components

    monkeypatch.setattr(components, "st", mock_streamlit)
    return components


class TestSyncStatusText:
    """Sidebar status line"""

    def test_synced(self):
        from madrasa_core.ui.components import sync_status_text

        assert sync_status_text(snapshot(), "en").endswith("Online · All changes synced")

    def test_offline_with_pending(self):
        from madrasa_core.ui.components import sync_status_text

        text = sync_status_text(snapshot(online=False, pending_changes=4), "en")

        assert "Offline" in text
        assert "4 changes pending" in text

    def test_offline_nothing_pending(self):
        from madrasa_core.ui.components import sync_status_text

        assert sync_status_text(snapshot(online=False), "en").endswith("Offline")

    def test_syncing_wins(self):
        from madrasa_core.ui.components import sync_status_text

        assert "Syncing" in sync_status_text(snapshot(syncing=True, online=False), "en")

    def test_error(self):
        from madrasa_core.ui.components import sync_status_text

        assert "Sync error" in sync_status_text(snapshot(last_error="boom"), "en")

    def test_dead_letters_never_show_synced(self):
        from madrasa_core.ui.components import sync_status_text

        text = sync_status_text(snapshot(dead_letters=1), "en")

        assert "Sync error" in text
        assert "1 changes could not be synced" in text
        assert "All changes synced" not in text

    def test_urdu(self):
        from madrasa_core.ui.components import sync_status_text

        assert "آف لائن" in sync_status_text(snapshot(online=False, pending_changes=1), "ur")


class TestNotifications:
    """Queued notices rendered as toasts"""

    def test_notice_text(self):
        from madrasa_core.offline.notifications import SYNC_PARTIAL, Notice, NoticeLevel
        from madrasa_core.ui.components import notice_text

        notice = Notice(NoticeLevel.WARNING, SYNC_PARTIAL, {"applied": 2, "pending": 1})

        assert notice_text(notice, "en") == "2 changes synced, 1 still pending"

    def test_render_drains_queue(self, components, mock_streamlit):
        from madrasa_core.offline.notifications import BACK_ONLINE, WENT_OFFLINE, QueuedNotifier

        notifier = QueuedNotifier()
        notifier.info(WENT_OFFLINE)
        notifier.success(BACK_ONLINE)

        shown = components.render_notifications(notifier, "en")

        assert shown == 2
        assert len(notifier) == 0
        assert mock_streamlit.toast.call_count == 2

    def test_other_notifiers_ignored(self, components, notifier, mock_streamlit):
        assert components.render_notifications(notifier, "en") == 0
        mock_streamlit.toast.assert_not_called()

    def test_queue_is_bounded(self):
        from madrasa_core.offline.notifications import SAVED_OFFLINE, QueuedNotifier

        notifier = QueuedNotifier(maxlen=3)
        for i in range(5):
            notifier.info(SAVED_OFFLINE, pending=i)

        assert [n.params["pending"] for n in notifier.drain()] == [2, 3, 4]


class TestShowResult:
    """Write feedback"""

    def test_failure_shows_error(self, components, mock_streamlit):
        from madrasa_core.services import ServiceResult

        assert not components.show_result(ServiceResult.fail("Missing name"), "en")
        mock_streamlit.error.assert_called_once_with("Missing name")

    def test_offline_failure_is_a_warning(self, components, mock_streamlit):
        from madrasa_core.errors import OfflineUnavailableError
        from madrasa_core.services import ServiceResult

        result = ServiceResult.from_error(OfflineUnavailableError("user_roles needs a connection"))

        assert not components.show_result(result, "en")
        mock_streamlit.warning.assert_called_once_with("This section needs an internet connection.")
        mock_streamlit.error.assert_not_called()

    def test_pending_shows_offline_toast(self, components, mock_streamlit):
        from madrasa_core.services import ServiceResult

        assert components.show_result(ServiceResult.ok({}, pending=True), "en", pending_count=2)

        message = mock_streamlit.toast.call_args[0][0]
        assert "Saved offline. 2 changes" in message


class TestSidebarSyncStatus:
    """Dead letters and last-online time in the sidebar"""

    @pytest.fixture
    def sidebar(self, mock_streamlit, monkeypatch):
        from madrasa_core.ui import components, sidebar_brand

        monkeypatch.setattr(sidebar_brand, "st", mock_streamlit)
        monkeypatch.setattr(components, "st", mock_streamlit)
        mock_streamlit.sidebar.button.return_value = False
        return sidebar_brand

    def dead_letter(self, stack):
        mutation = stack.queue.enqueue("classes", "update", {"id": "c1", "name": "B"})
        stack.queue.record_failure(mutation.id, "rejected", max_attempts=1)
        stack.state.set_queue_counts(stack.queue.count(), stack.queue.count_dead())

    def test_dead_letters_warned(self, sidebar, stack, mock_streamlit):
        self.dead_letter(stack)

        sidebar.render_sync_status(stack, "en")

        mock_streamlit.sidebar.warning.assert_called_once_with("1 changes could not be synced")
        status_html = mock_streamlit.sidebar.markdown.call_args[0][0]
        assert "Sync error" in status_html

    def test_retry_requeues_and_recounts(self, sidebar, stack, mock_streamlit):
        self.dead_letter(stack)
        mock_streamlit.sidebar.button.side_effect = lambda label, **kw: kw.get("key") == "retry_dead_btn"

        sidebar.render_sync_status(stack, "en")

        assert stack.queue.count() == 1
        assert stack.state.dead_letters == 0
        assert stack.state.pending_changes == 1
        mock_streamlit.rerun.assert_called_once()

    def test_last_online_shown_while_offline(self, sidebar, stack, network, mock_streamlit):
        network.offline()

        sidebar.render_sync_status(stack, "en")

        caption = mock_streamlit.sidebar.caption.call_args[0][0]
        assert caption.startswith("Last online ")


class TestValueParsing:
    """Form pre-fill helpers"""

    @pytest.mark.parametrize("value,expected", [
        ("2024-03-01", date(2024, 3, 1)),
        ("2024-03-01T10:00:00", date(2024, 3, 1)),
        (datetime(2024, 3, 1, 10), date(2024, 3, 1)),
        ("", None),
        ("not a date", None),
    ])
    def test_as_date(self, value, expected):
        from madrasa_core.ui.components import as_date

        assert as_date(value) == expected

    def test_as_time(self):
        from madrasa_core.ui.components import as_time

        assert as_time("09:15:00").hour == 9
        assert as_time(None) is None
