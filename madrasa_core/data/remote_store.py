# =============================================================================
# madrasa_core/data/remote_store.py
# Boundary of the remote relational store
# =============================================================================
"""
RemoteStore - the four row operations the offline layer needs, plus the
filtered reads and deletes used by role management.

Every failure, transport or server-side, raises RemoteStoreError.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class RemoteStore(ABC):
    """Abstract remote table store."""

    @abstractmethod
    def select_all(self, table: str, order_by: Optional[str] = None, ascending: bool = True) -> List[Dict[str, Any]]:
        """Return every row of table."""

    @abstractmethod
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Create a row and return it as stored (server id included)."""

    @abstractmethod
    def update(self, table: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply changes to the row with id record_id and return the stored row."""

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        """Remove the row with id record_id."""

    @abstractmethod
    def select_where(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return the rows whose columns equal every value in filters."""

    @abstractmethod
    def delete_where(self, table: str, filters: Dict[str, Any]) -> None:
        """Remove the rows whose columns equal every value in filters."""
