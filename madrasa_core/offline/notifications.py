# =============================================================================
# madrasa_core/offline/notifications.py
# User notices raised by the offline layer
# =============================================================================
"""
Notices are raised from background threads, where Streamlit calls are not
allowed. They carry a translation key and are rendered later, in the
script thread, by madrasa_core.ui.components.render_notifications.
"""

from __future__ import annotations
import threading
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List

from madrasa_core.logging import get_logger

logger = get_logger(__name__)


class NoticeLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# Translation keys used by the offline layer
WENT_OFFLINE = "sync.went_offline"
BACK_ONLINE = "sync.back_online"
SAVED_OFFLINE = "sync.saved_offline"
SYNC_COMPLETE = "sync.complete"
SYNC_PARTIAL = "sync.partial"
SYNC_ERROR = "sync.error"
SYNC_OFFLINE = "sync.offline_cannot_sync"


@dataclass(frozen=True)
class Notice:
    """A translatable message for the user."""
    level: NoticeLevel
    key: str
    params: Dict[str, Any] = field(default_factory=dict)


class Notifier(ABC):
    """Sink for notices."""

    @abstractmethod
    def notify(self, notice: Notice) -> None:
        ...

    def info(self, key: str, **params) -> None:
        self.notify(Notice(NoticeLevel.INFO, key, params))

    def success(self, key: str, **params) -> None:
        self.notify(Notice(NoticeLevel.SUCCESS, key, params))

    def warning(self, key: str, **params) -> None:
        self.notify(Notice(NoticeLevel.WARNING, key, params))

    def error(self, key: str, **params) -> None:
        self.notify(Notice(NoticeLevel.ERROR, key, params))


class LoggingNotifier(Notifier):
    """Writes notices to the log only."""

    _LEVELS = {
        NoticeLevel.INFO: 20,
        NoticeLevel.SUCCESS: 20,
        NoticeLevel.WARNING: 30,
        NoticeLevel.ERROR: 40,
    }

    def notify(self, notice: Notice) -> None:
        logger.log(self._LEVELS[notice.level], f"Notice {notice.key} {notice.params}")


class QueuedNotifier(Notifier):
    """
    Buffers notices until the UI drains them.

    Bounded so a long offline period cannot grow it without limit.
    """

    def __init__(self, maxlen: int = 50):
        self._notices: Deque[Notice] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def notify(self, notice: Notice) -> None:
        logger.debug(f"Queued notice {notice.key}")
        with self._lock:
            self._notices.append(notice)

    def drain(self) -> List[Notice]:
        """Return and forget every buffered notice, oldest first."""
        with self._lock:
            notices = list(self._notices)
            self._notices.clear()
        return notices

    def __len__(self) -> int:
        return len(self._notices)
