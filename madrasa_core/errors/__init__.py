# =============================================================================
# madrasa_core/errors/__init__.py
# Centralized Error Handling for Madrasa Manager
# =============================================================================

from .exceptions import (
    MadrasaError,
    ValidationError,
    CacheStorageError,
    RemoteStoreError,
    OfflineUnavailableError,
    SyncError,
    AuthenticationError,
    ReportExportError,
    ConfigurationError,
)

from .handlers import (
    report_error,
    user_message,
    guarded_call,
    ErrorContext,
    error_boundary,
)

__all__ = [
    # Exceptions
    "MadrasaError",
    "ValidationError",
    "CacheStorageError",
    "RemoteStoreError",
    "OfflineUnavailableError",
    "SyncError",
    "AuthenticationError",
    "ReportExportError",
    "ConfigurationError",
    # Handlers
    "report_error",
    "user_message",
    "guarded_call",
    "ErrorContext",
    "error_boundary",
]
