# =============================================================================
# tests/unit/test_cache_refresh.py
# Unit Tests for CacheRefreshCoordinator
# =============================================================================

import pytest


@pytest.fixture
def refresher(remote, cache):
    from madrasa_core.offline.cache_refresh import CacheRefreshCoordinator

    return CacheRefreshCoordinator(remote, cache, collections=("students", "classes", "fees"))


class TestCacheRefresh:
    """Overwrite cached collections with server truth"""

    def test_refresh_all_overwrites_every_collection(self, refresher, cache):
        cache.put("students", "gone", {"id": "gone"})

        report = refresher.refresh_all()

        assert report.ok
        assert report.refreshed == {"students": 2, "classes": 1, "fees": 0}
        assert cache.get("students", "gone") is None

    def test_failed_collection_left_stale(self, refresher, remote, cache):
        cache.put("classes", "old", {"id": "old", "name": "Old name"})
        remote.fail_tables.add("classes")

        report = refresher.refresh_all()

        assert not report.ok
        assert set(report.failed) == {"classes"}
        assert cache.get_all("classes") == [{"id": "old", "name": "Old name"}]
        assert cache.count("students") == 2

    def test_refresh_single_raises(self, refresher, remote):
        from madrasa_core.errors import RemoteStoreError

        remote.fail_tables.add("fees")

        with pytest.raises(RemoteStoreError):
            refresher.refresh("fees")

    def test_defaults_to_cache_collections(self, remote, cache):
        from madrasa_core.offline.cache_refresh import CacheRefreshCoordinator
        from madrasa_core.offline.local_cache import TRACKED_COLLECTIONS

        coordinator = CacheRefreshCoordinator(remote, cache)

        assert tuple(coordinator.collections) == tuple(TRACKED_COLLECTIONS)
