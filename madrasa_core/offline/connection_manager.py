# =============================================================================
# madrasa_core/offline/connection_manager.py
# Connectivity Monitor: reachability transitions and the periodic replay timer
# =============================================================================
"""
ConnectionManager - detects online/offline transitions and drives replay.

Features:
- Socket reachability check (public DNS + Supabase host)
- Background daemon thread checking every check_interval seconds
- Replay triggered once on every offline -> online transition
- Periodic replay every sync_interval seconds while reachable
- Transition notices and a replay trigger when connectivity returns
"""

from __future__ import annotations
import socket
import threading
import time
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple
from urllib.parse import urlparse

from madrasa_core.logging import get_logger
from madrasa_core.offline.notifications import (
    BACK_ONLINE,
    WENT_OFFLINE,
    LoggingNotifier,
    Notifier,
)
from madrasa_core.offline.state import SyncState

logger = get_logger(__name__)


class ConnectionStatus(Enum):
    """Connection status states."""
    ONLINE = "online"
    OFFLINE = "offline"


class SocketCheck:
    """
    Reachability check: True when a public DNS host and the Supabase host
    both accept a TCP connection.

    Usage:
        check = SocketCheck(settings.supabase.url, timeout=5)
        if check():
            ...
    """

    INTERNET_HOSTS: Sequence[Tuple[str, int]] = (
        ("8.8.8.8", 53),          # Google DNS
        ("1.1.1.1", 53),          # Cloudflare DNS
        ("208.67.222.222", 53),   # OpenDNS
    )

    def __init__(self, supabase_url: str = "", timeout: float = 5.0):
        self.supabase_url = supabase_url
        self.timeout = timeout

    def _can_connect(self, host: str, port: int) -> bool:
        try:
            with socket.create_connection((host, port), timeout=self.timeout):
                return True
        except OSError:
            return False

    def check_internet(self) -> bool:
        return any(self._can_connect(host, port) for host, port in self.INTERNET_HOSTS)

    def check_supabase(self) -> bool:
        if not self.supabase_url:
            # Nothing configured to reach
            return False
        parsed = urlparse(self.supabase_url)
        if not parsed.hostname:
            logger.debug(f"Cannot parse Supabase host from {self.supabase_url!r}")
            return False
        port = parsed.port or (80 if parsed.scheme == "http" else 443)
        return self._can_connect(parsed.hostname, port)

    def __call__(self) -> bool:
        return self.check_internet() and self.check_supabase()


class ConnectionManager:
    """
    Connectivity monitor.

    Owns the online flag of the shared SyncState. On the transition to
    online it calls the replay trigger once; while online it also calls it
    every sync_interval seconds.

    Usage:
        manager = ConnectionManager(state, check, notifier)
        manager.set_replay_trigger(engine.replay)
        manager.initialize()          # initial check + monitor thread
        ...
        manager.stop_monitoring()
    """

    CHECK_INTERVAL = 10     # Seconds between reachability checks
    SYNC_INTERVAL = 30      # Seconds between periodic replay attempts

    def __init__(
        self,
        state: SyncState,
        check: Callable[[], bool],
        notifier: Optional[Notifier] = None,
        check_interval: float = CHECK_INTERVAL,
        sync_interval: float = SYNC_INTERVAL,
    ):
        self._state = state
        self._check = check
        self._notifier = notifier or LoggingNotifier()
        self.check_interval = check_interval
        self.sync_interval = sync_interval

        self._replay_trigger: Optional[Callable[[], object]] = None
        self._monitor_thread: Optional[threading.Thread] = None
        self._stop_monitoring = threading.Event()
        self._initialized = False

        self.last_check: Optional[datetime] = None
        self.last_online: Optional[datetime] = None
        self.consecutive_failures = 0
        self._last_periodic_sync = time.monotonic()

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return ConnectionStatus.ONLINE if self._state.online else ConnectionStatus.OFFLINE

    @property
    def is_online(self) -> bool:
        return self._state.online

    @property
    def is_monitoring(self) -> bool:
        return self._monitor_thread is not None and self._monitor_thread.is_alive()

    def set_replay_trigger(self, trigger: Callable[[], object]) -> None:
        """Set the function called to start a replay pass."""
        self._replay_trigger = trigger

    def initialize(self, start_monitoring: bool = True) -> None:
        """
        Seed the online flag from one check and optionally start monitoring.

        The initial check result is not treated as a transition.
        """
        if self._initialized:
            return

        reachable = self._run_check()
        self._state.set_online(reachable)
        if reachable:
            self.last_online = datetime.now()

        if start_monitoring:
            self.start_monitoring()

        self._initialized = True
        logger.info(f"ConnectionManager initialized. Status: {self.status.value}")

    def _run_check(self) -> bool:
        self.last_check = datetime.now()
        try:
            reachable = bool(self._check())
        except Exception as e:
            logger.debug(f"Reachability check failed: {e}")
            reachable = False

        if reachable:
            self.consecutive_failures = 0
        else:
            self.consecutive_failures += 1
        return reachable

    def check_connection(self) -> ConnectionStatus:
        """
        Check once and act on a transition.

        Returns:
            The status after the check
        """
        reachable = self._run_check()
        if reachable and not self._state.online:
            self.handle_online()
        elif not reachable and self._state.online:
            self.handle_offline()
        return self.status

    def handle_online(self) -> None:
        """Connectivity became available: flag it, tell the user, replay once."""
        logger.info("Connection restored, triggering sync")
        self._state.set_online(True)
        self.last_online = datetime.now()
        self._notifier.success(BACK_ONLINE)
        self._trigger_replay()

    def handle_offline(self) -> None:
        """Connectivity lost: flag it and tell the user. Nothing else."""
        logger.info("Connection lost, switching to offline mode")
        self._state.set_online(False)
        self._notifier.info(WENT_OFFLINE)

    def tick(self) -> bool:
        """
        Periodic timer body: replay only if currently reachable.

        Returns:
            True if a replay was triggered
        """
        self._last_periodic_sync = time.monotonic()
        if not self._state.online:
            logger.debug("Periodic sync skipped: offline")
            return False
        self._trigger_replay()
        return True

    def _trigger_replay(self) -> None:
        if self._replay_trigger is None:
            logger.debug("No replay trigger registered")
            return
        try:
            self._replay_trigger()
        except Exception as e:
            logger.error(f"Replay trigger failed: {e}")

    # =========================================================================
    # BACKGROUND MONITORING
    # =========================================================================

    def start_monitoring(self) -> None:
        """Start background connection monitoring."""
        if self.is_monitoring:
            return

        self._stop_monitoring.clear()
        self._last_periodic_sync = time.monotonic()
        self._monitor_thread = threading.Thread(
            target=self._monitoring_loop,
            daemon=True,
            name="ConnectionMonitor",
        )
        self._monitor_thread.start()
        logger.debug("Connection monitoring started")

    def stop_monitoring(self) -> None:
        """Stop the monitor thread and drop the replay trigger."""
        self._stop_monitoring.set()
        if self._monitor_thread and self._monitor_thread is not threading.current_thread():
            self._monitor_thread.join(timeout=5)
        self._monitor_thread = None
        self._replay_trigger = None
        logger.debug("Connection monitoring stopped")

    def _monitoring_loop(self) -> None:
        """Background monitoring loop."""
        while not self._stop_monitoring.is_set():
            if self._stop_monitoring.wait(timeout=self.check_interval):
                break

            try:
                self.check_connection()
                if time.monotonic() - self._last_periodic_sync >= self.sync_interval:
                    self.tick()
            except Exception as e:
                logger.error(f"Error in connection check: {e}")

    def get_status_display(self) -> dict:
        """Last check results for the sidebar."""
        return {
            "status": self.status.value,
            "last_check": self.last_check,
            "last_online": self.last_online,
            "failures": self.consecutive_failures,
        }
