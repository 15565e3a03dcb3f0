# =============================================================================
# madrasa_core/services/base_service.py
# Result type and shared run() for repositories
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Optional

from madrasa_core.errors import MadrasaError
from madrasa_core.errors.handlers import EXPECTED_ERRORS, classify
from madrasa_core.i18n import t
from madrasa_core.logging import LogContext, get_logger
from madrasa_core.offline.unified_data_service import WriteOutcome

OFFLINE_CODE = "OFFLINE_001"


@dataclass
class ServiceResult:
    """
    Outcome of a repository call.

    A successful write is either confirmed by the server or, with
    pending=True, saved locally and waiting in the sync queue. A failure
    carries the error text, its code and the translation key for the user.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    error_key: Optional[str] = None
    pending: bool = False

    def __bool__(self) -> bool:
        return self.success

    @property
    def offline(self) -> bool:
        """Failed only because the section needs a connection."""
        return self.error_code == OFFLINE_CODE

    @classmethod
    def ok(cls, data: Any = None, pending: bool = False) -> ServiceResult:
        return cls(success=True, data=data, pending=pending)

    @classmethod
    def from_outcome(cls, outcome: WriteOutcome) -> ServiceResult:
        return cls(success=True, data=outcome.record, pending=outcome.queued)

    @classmethod
    def fail(cls, error: str, error_code: str = "UNKNOWN") -> ServiceResult:
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def from_error(cls, e: MadrasaError) -> ServiceResult:
        return cls(success=False, error=e.message, error_code=e.code, error_key=classify(e)[0])

    def message(self, lang: str = "en", pending_count: int = 0) -> str:
        """What to tell the user about this result."""
        if self.success:
            if self.pending:
                return t("sync.saved_offline", lang, pending=pending_count)
            return t("common.saved", lang)
        if self.error_key == "error.validation":
            return t(self.error_key, lang, detail=self.error)
        if self.error_key:
            return t(self.error_key, lang)
        return self.error or t("error.unexpected", lang)


class BaseService:
    """
    Base for repositories: a logger named after the class and run(), which
    turns exceptions into failed ServiceResults.

    Offline and validation failures are logged as warnings; anything else
    with a traceback.
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def run(self, operation: str, func: Callable[..., Any], *args, **kwargs) -> ServiceResult:
        """
        Call func(*args, **kwargs) under a timed log line.

        A WriteOutcome becomes a result with pending set when the write was
        queued; any other return value becomes the result's data.
        """
        try:
            with LogContext(self.logger, operation, expected=EXPECTED_ERRORS):
                data = func(*args, **kwargs)
        except MadrasaError as e:
            return ServiceResult.from_error(e)
        except Exception as e:
            return ServiceResult.fail(str(e), error_code="EXCEPTION")

        if isinstance(data, WriteOutcome):
            return ServiceResult.from_outcome(data)
        return ServiceResult.ok(data)
