# =============================================================================
# madrasa_core/data/supabase_client.py
# Supabase Client Configuration for Madrasa Manager
# Handles database connections and CRUD operations
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from madrasa_core.config.settings import Settings, get_settings
from madrasa_core.data.remote_store import RemoteStore
from madrasa_core.errors.exceptions import RemoteStoreError
from madrasa_core.logging import get_logger

logger = get_logger(__name__)


def get_supabase_client(settings: Optional[Settings] = None) -> Optional[Client]:
    """
    Create a Supabase client from the configured credentials.

    Expects secrets in .streamlit/secrets.toml (or SUPABASE_URL / SUPABASE_KEY):
        [supabase]
        url = "https://your-project.supabase.co"
        key = "your-anon-key"

    Returns:
        Supabase client instance or None if not configured
    """
    settings = settings or get_settings()
    if not settings.supabase.is_configured:
        logger.warning("Supabase credentials not found; running without a remote store")
        return None

    try:
        return create_client(settings.supabase.url, settings.supabase.key)
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        return None


class SupabaseRemoteStore(RemoteStore):
    """
    RemoteStore backed by Supabase (PostgREST).

    Usage:
        store = SupabaseRemoteStore(get_supabase_client())
        rows = store.select_all("students", order_by="created_at", ascending=False)
    """

    BATCH_SIZE = 1000   # PostgREST row limit per request

    def __init__(self, client: Client):
        self.client = client

    def select_all(self, table: str, order_by: Optional[str] = None, ascending: bool = True) -> List[Dict[str, Any]]:
        """
        Fetch ALL rows of the table (handles the Supabase 1000 row limit).
        """
        all_data: List[Dict[str, Any]] = []
        offset = 0

        try:
            while True:
                query = self.client.table(table).select("*")

                if order_by:
                    query = query.order(order_by, desc=not ascending)

                response = query.range(offset, offset + self.BATCH_SIZE - 1).execute()

                if not response.data:
                    break
                all_data.extend(response.data)
                # Fewer than a full batch means we've reached the end
                if len(response.data) < self.BATCH_SIZE:
                    break
                offset += self.BATCH_SIZE

        except Exception as e:
            raise RemoteStoreError(
                f"Error fetching data from {table}: {e}",
                table=table,
                operation="select",
            ) from e

        logger.debug(f"Fetched {len(all_data)} rows from {table}")
        return all_data

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.client.table(table).insert(row).execute()
        except Exception as e:
            raise RemoteStoreError(f"Error inserting into {table}: {e}", table=table, operation="insert") from e
        return self._single(response, table, "insert", row)

    def update(self, table: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.client.table(table).update(changes).eq("id", record_id).execute()
        except Exception as e:
            raise RemoteStoreError(
                f"Error updating {table}/{record_id}: {e}",
                table=table,
                operation="update",
                record_id=record_id,
            ) from e
        if not response.data:
            raise RemoteStoreError(
                f"No row {record_id} in {table} to update",
                table=table,
                operation="update",
                record_id=record_id,
            )
        return self._single(response, table, "update", {**changes, "id": record_id})

    def delete(self, table: str, record_id: str) -> None:
        try:
            self.client.table(table).delete().eq("id", record_id).execute()
        except Exception as e:
            raise RemoteStoreError(
                f"Error deleting {table}/{record_id}: {e}",
                table=table,
                operation="delete",
                record_id=record_id,
            ) from e

    def select_where(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            query = self.client.table(table).select("*")
            for col, val in filters.items():
                query = query.eq(col, val)
            return query.execute().data or []
        except Exception as e:
            raise RemoteStoreError(f"Error querying {table}: {e}", table=table, operation="select") from e

    def delete_where(self, table: str, filters: Dict[str, Any]) -> None:
        if not filters:
            raise RemoteStoreError(f"Refusing unfiltered delete on {table}", table=table, operation="delete")
        try:
            query = self.client.table(table).delete()
            for col, val in filters.items():
                query = query.eq(col, val)
            query.execute()
        except Exception as e:
            raise RemoteStoreError(f"Error deleting from {table}: {e}", table=table, operation="delete") from e

    def upload_file(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """
        Upload a file to Supabase Storage and return its public URL.
        """
        try:
            storage = self.client.storage.from_(bucket)
            storage.upload(path, content, {"content-type": content_type, "upsert": "true"})
            return storage.get_public_url(path)
        except Exception as e:
            raise RemoteStoreError(f"Error uploading {path} to {bucket}: {e}", table=bucket, operation="upload") from e

    @staticmethod
    def _single(response, table: str, operation: str, fallback: Dict[str, Any]) -> Dict[str, Any]:
        if response.data:
            return dict(response.data[0])
        # RLS can hide the returned representation; fall back to what was sent
        logger.debug(f"{operation} on {table} returned no representation")
        return dict(fallback)
