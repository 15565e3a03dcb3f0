# =============================================================================
# madrasa_core/errors/exceptions.py
# Custom Exception Hierarchy for Madrasa Manager
# =============================================================================

from typing import Optional, Dict, Any


class MadrasaError(Exception):
    """
    Base exception for all Madrasa Manager errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "SYNC_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "MM_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# DATA LAYER EXCEPTIONS
# =============================================================================

class ValidationError(MadrasaError):
    """Raised when a record, collection or operation is not acceptable"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(
            message=message,
            code="DATA_001",
            details=details,
            **kwargs,
        )


class CacheStorageError(MadrasaError):
    """Raised when the local SQLite cache cannot be read or written"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if key is not None:
            details["key"] = key

        super().__init__(
            message=message,
            code="CACHE_001",
            details=details,
            **kwargs,
        )


class RemoteStoreError(MadrasaError):
    """Raised when a remote (Supabase) call fails, for transport or validation reasons"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation
        if record_id is not None:
            details["record_id"] = record_id

        super().__init__(
            message=message,
            code=kwargs.pop("code", "REMOTE_001"),
            details=details,
            **kwargs,
        )


class OfflineUnavailableError(MadrasaError):
    """Raised when an operation needs the remote store while offline"""

    def __init__(self, message: str, table: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            code="OFFLINE_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# SYNC EXCEPTIONS
# =============================================================================

class SyncError(MadrasaError):
    """Raised when a replay pass cannot complete"""

    def __init__(
        self,
        message: str,
        mutation_id: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if mutation_id is not None:
            details["mutation_id"] = mutation_id

        super().__init__(
            message=message,
            code="SYNC_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# AUTH / REPORT EXCEPTIONS
# =============================================================================

class AuthenticationError(MadrasaError):
    """Raised when sign-in fails or a session is required"""

    def __init__(self, message: str, email: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if email:
            details["email"] = email

        super().__init__(
            message=message,
            code="AUTH_001",
            details=details,
            **kwargs,
        )


class ReportExportError(MadrasaError):
    """Raised when a PDF report cannot be generated"""

    def __init__(self, message: str, report: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if report:
            details["report"] = report

        super().__init__(
            message=message,
            code="REPORT_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(MadrasaError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
