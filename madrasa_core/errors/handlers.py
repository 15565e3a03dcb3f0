# =============================================================================
# madrasa_core/errors/handlers.py
# Turning Madrasa Manager errors into log lines and localized messages
# =============================================================================
"""
Every MadrasaError subclass maps to a translation key and a severity:

    OfflineUnavailableError  -> warning  (online-only section while offline)
    ValidationError          -> warning  (bad form input)
    AuthenticationError      -> error
    RemoteStoreError, CacheStorageError, SyncError, ReportExportError -> error
    ConfigurationError or any non-recoverable error -> critical

Expected conditions (offline, validation) are logged at INFO/WARNING without a
traceback; everything else at ERROR with one.
"""

from __future__ import annotations
import functools
import logging
from enum import Enum
from typing import Any, Callable, Optional, Tuple, TypeVar

import streamlit as st

from madrasa_core.i18n import t
from madrasa_core.logging import get_logger
from .exceptions import (
    AuthenticationError,
    CacheStorageError,
    ConfigurationError,
    MadrasaError,
    OfflineUnavailableError,
    RemoteStoreError,
    ReportExportError,
    SyncError,
    ValidationError,
)

logger = get_logger(__name__)

T = TypeVar("T")

# Raised in normal use; no traceback in the log
EXPECTED_ERRORS = (OfflineUnavailableError, ValidationError)


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Most specific class first
MESSAGE_KEYS: Tuple[Tuple[type, str, Severity], ...] = (
    (OfflineUnavailableError, "sync.offline_unavailable", Severity.WARNING),
    (ValidationError, "error.validation", Severity.WARNING),
    (AuthenticationError, "auth.failed", Severity.ERROR),
    (RemoteStoreError, "error.remote", Severity.ERROR),
    (CacheStorageError, "error.cache", Severity.ERROR),
    (SyncError, "error.sync", Severity.ERROR),
    (ReportExportError, "error.report", Severity.ERROR),
    (ConfigurationError, "error.config", Severity.CRITICAL),
)


def _language(lang: Optional[str]) -> str:
    return lang or st.session_state.get("language", "en")


def classify(error: BaseException) -> Tuple[str, Severity]:
    """Translation key and severity for an exception."""
    for cls, key, severity in MESSAGE_KEYS:
        if isinstance(error, cls):
            if isinstance(error, MadrasaError) and not error.recoverable:
                return key, Severity.CRITICAL
            return key, severity
    return "error.unexpected", Severity.ERROR


def user_message(error: BaseException, lang: Optional[str] = None) -> str:
    """Localized one-line message for error."""
    key, _ = classify(error)
    lang = _language(lang)
    if isinstance(error, ValidationError):
        return t(key, lang, detail=error.message)
    return t(key, lang)


def log_error(error: BaseException, operation: Optional[str] = None) -> None:
    """Log error at a level matching how surprising it is."""
    prefix = f"{operation}: " if operation else ""
    code = error.code if isinstance(error, MadrasaError) else type(error).__name__

    if isinstance(error, OfflineUnavailableError):
        logger.info(f"{prefix}deferred while offline ({error.message})")
    elif isinstance(error, EXPECTED_ERRORS):
        logger.warning(f"{prefix}[{code}] {error}")
    else:
        logger.log(
            logging.CRITICAL if classify(error)[1] is Severity.CRITICAL else logging.ERROR,
            f"{prefix}[{code}] {error}",
            exc_info=error,
        )


def report_error(
    error: BaseException,
    lang: Optional[str] = None,
    operation: Optional[str] = None,
    show: bool = True,
) -> None:
    """
    Log error and, when show is True, tell the user in their language.

    With debug_mode on, MadrasaError details are shown in an expander.
    """
    log_error(error, operation)
    if not show:
        return

    lang = _language(lang)
    message = user_message(error, lang)
    _, severity = classify(error)
    if severity is Severity.WARNING:
        st.warning(message)
    elif severity is Severity.CRITICAL:
        st.error(f"{message} {t('error.contact_support', lang)}")
    else:
        st.error(message)

    if isinstance(error, MadrasaError) and error.details and st.session_state.get("debug_mode", False):
        with st.expander(t("error.details", lang), expanded=False):
            st.json(error.details)


def guarded_call(
    func: Callable[..., T],
    *args,
    fallback: Optional[T] = None,
    lang: Optional[str] = None,
    reraise: bool = False,
    **kwargs,
) -> Optional[T]:
    """
    Call func; on failure report the error and return fallback.

    Usage:
        pdf = guarded_call(build_report)
        if pdf is not None:
            st.download_button(...)
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        report_error(e, lang, operation=getattr(func, "__name__", None))
        if reraise:
            raise
        return fallback


class ErrorContext:
    """
    Report failures of a block of UI work.

    Recoverable MadrasaErrors and unexpected exceptions are reported and
    suppressed; non-recoverable MadrasaErrors propagate after reporting.

    Usage:
        with ErrorContext("Requeueing failed changes", success_key="common.saved"):
            stack.queue.requeue_dead_letters()
    """

    def __init__(self, operation: str, lang: Optional[str] = None, success_key: Optional[str] = None):
        self.operation = operation
        self.lang = lang
        self.success_key = success_key
        self.error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def __enter__(self) -> ErrorContext:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            if self.success_key:
                st.success(t(self.success_key, _language(self.lang)))
            return False

        self.error = exc_val
        report_error(exc_val, self.lang, operation=self.operation)
        if isinstance(exc_val, MadrasaError):
            return exc_val.recoverable
        return isinstance(exc_val, Exception)


def error_boundary(fallback: Any = None, message_key: Optional[str] = None):
    """
    Decorator for render helpers: a failure logs, optionally shows
    message_key, and returns fallback instead of breaking the page.

    Usage:
        @error_boundary(message_key="dashboard.chart_unavailable")
        def render_trend(entries) -> None:
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log_error(e, operation=func.__name__)
                if message_key:
                    st.warning(t(message_key, _language(None)))
                return fallback

        return wrapper

    return decorator
