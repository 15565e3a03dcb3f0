# =============================================================================
# madrasa_core/data/__init__.py
# Remote store boundary and entity descriptors
# =============================================================================

from .remote_store import RemoteStore

__all__ = ["RemoteStore"]
