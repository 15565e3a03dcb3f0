# =============================================================================
# tests/unit/test_supabase_client.py
# Unit Tests for the Supabase remote store
# =============================================================================

from unittest.mock import MagicMock

import pytest


def response(data):
    return MagicMock(data=data)


@pytest.fixture
def store():
    from madrasa_core.data.supabase_client import SupabaseRemoteStore

    return SupabaseRemoteStore(MagicMock())


class TestSelectAll:
    """Paginated reads"""

    def test_pages_until_short_batch(self, store):
        store.BATCH_SIZE = 2
        query = store.client.table.return_value.select.return_value
        query.range.return_value.execute.side_effect = [
            response([{"id": "1"}, {"id": "2"}]),
            response([{"id": "3"}]),
        ]

        rows = store.select_all("students")

        assert [r["id"] for r in rows] == ["1", "2", "3"]
        assert [c.args for c in query.range.call_args_list] == [(0, 1), (2, 3)]

    def test_stops_on_empty_page(self, store):
        query = store.client.table.return_value.select.return_value
        query.range.return_value.execute.return_value = response([])

        assert store.select_all("classes") == []

    def test_ordering(self, store):
        ordered = store.client.table.return_value.select.return_value.order
        ordered.return_value.range.return_value.execute.return_value = response([{"id": "1"}])

        store.select_all("students", order_by="created_at", ascending=False)

        ordered.assert_called_once_with("created_at", desc=True)

    def test_failure_wrapped(self, store):
        from madrasa_core.errors import RemoteStoreError

        store.client.table.side_effect = ConnectionError("reset")

        with pytest.raises(RemoteStoreError) as exc:
            store.select_all("fees")

        assert exc.value.details == {"table": "fees", "operation": "select"}


class TestWrites:
    """insert / update / delete"""

    def test_insert_returns_server_row(self, store):
        store.client.table.return_value.insert.return_value.execute.return_value = response(
            [{"id": "srv-1", "name": "Ahmad"}]
        )

        assert store.insert("students", {"name": "Ahmad"}) == {"id": "srv-1", "name": "Ahmad"}

    def test_insert_without_representation_returns_sent_row(self, store):
        store.client.table.return_value.insert.return_value.execute.return_value = response([])

        assert store.insert("students", {"id": "s9", "name": "Zaid"}) == {"id": "s9", "name": "Zaid"}

    def test_update_missing_row(self, store):
        from madrasa_core.errors import RemoteStoreError

        chain = store.client.table.return_value.update.return_value.eq.return_value
        chain.execute.return_value = response([])

        with pytest.raises(RemoteStoreError) as exc:
            store.update("students", "s404", {"name": "x"})

        assert exc.value.details["record_id"] == "s404"

    def test_update_filters_by_id(self, store):
        table = store.client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = response([{"id": "s1", "name": "New"}])

        row = store.update("students", "s1", {"name": "New"})

        table.update.assert_called_once_with({"name": "New"})
        table.update.return_value.eq.assert_called_once_with("id", "s1")
        assert row["name"] == "New"

    def test_delete_failure_wrapped(self, store):
        from madrasa_core.errors import RemoteStoreError

        store.client.table.return_value.delete.return_value.eq.return_value.execute.side_effect = RuntimeError("409")

        with pytest.raises(RemoteStoreError):
            store.delete("classes", "c1")

    def test_delete_where_requires_filters(self, store):
        from madrasa_core.errors import RemoteStoreError

        with pytest.raises(RemoteStoreError):
            store.delete_where("user_roles", {})

        store.client.table.assert_not_called()


class TestStorage:
    """File uploads"""

    def test_upload_returns_public_url(self, store):
        bucket = store.client.storage.from_.return_value
        bucket.get_public_url.return_value = "https://cdn/logo.png"

        url = store.upload_file("madrasa-assets", "logo.png", b"\x89PNG", "image/png")

        assert url == "https://cdn/logo.png"
        store.client.storage.from_.assert_called_once_with("madrasa-assets")
        assert bucket.upload.call_args[0][:2] == ("logo.png", b"\x89PNG")


class TestClientFactory:
    """get_supabase_client"""

    def test_unconfigured_returns_none(self):
        from madrasa_core.config import load_settings
        from madrasa_core.data.supabase_client import get_supabase_client

        assert get_supabase_client(load_settings(secrets={}, environ={})) is None

    def test_configured_creates_client(self, monkeypatch):
        from madrasa_core.config import load_settings
        from madrasa_core.data import supabase_client

        created = MagicMock()
        monkeypatch.setattr(supabase_client, "create_client", lambda url, key: created)
        settings = load_settings(secrets={"supabase": {"url": "https://x.supabase.co", "key": "k"}}, environ={})

        assert supabase_client.get_supabase_client(settings) is created
