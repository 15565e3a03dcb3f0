# =============================================================================
# madrasa_core/config/settings.py
# Application Settings (Streamlit secrets -> environment -> defaults)
# =============================================================================
"""
Settings loader for Madrasa Manager.

Expected secrets.toml format:

    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [offline]
    db_path = "local_data/madrasa_offline.db"
    sync_interval = 30
    check_interval = 10
    connection_timeout = 5
    max_sync_attempts = 5

    [app]
    language = "ur"
    log_level = "INFO"
    pdf_font = "fonts/NotoNastaliqUrdu-Regular.ttf"

Every value may also come from the environment (a local .env file is
loaded with python-dotenv): SUPABASE_URL, SUPABASE_KEY, MADRASA_OFFLINE_DB,
MADRASA_SYNC_INTERVAL, MADRASA_CHECK_INTERVAL, MADRASA_CONNECTION_TIMEOUT,
MADRASA_MAX_SYNC_ATTEMPTS, MADRASA_LANGUAGE, MADRASA_LOG_LEVEL,
MADRASA_PDF_FONT.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from dotenv import load_dotenv

from madrasa_core.errors.exceptions import ConfigurationError
from madrasa_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = Path("local_data") / "madrasa_offline.db"
SUPPORTED_LANGUAGES = ("en", "ur")


@dataclass(frozen=True)
class SupabaseSettings:
    """Remote store credentials."""
    url: str = ""
    key: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)


@dataclass(frozen=True)
class OfflineSettings:
    """Local cache, connectivity monitor and replay settings."""
    db_path: Path = DEFAULT_DB_PATH
    sync_interval: float = 30.0       # Seconds between periodic replay attempts
    check_interval: float = 10.0      # Seconds between reachability checks
    connection_timeout: float = 5.0   # Socket timeout for the reachability check
    max_sync_attempts: int = 5        # Attempts before a mutation is dead-lettered


@dataclass(frozen=True)
class Settings:
    """Complete application settings."""
    supabase: SupabaseSettings = field(default_factory=SupabaseSettings)
    offline: OfflineSettings = field(default_factory=OfflineSettings)
    language: str = "ur"
    log_level: str = "INFO"
    pdf_font: Optional[Path] = None   # TrueType font for Urdu text in PDF exports


def _read_streamlit_secrets() -> Mapping[str, Any]:
    """Return st.secrets as a plain mapping, or {} when no secrets file exists."""
    try:
        import streamlit as st
        return {name: dict(section) for name, section in st.secrets.items()
                if isinstance(section, Mapping)}
    except Exception as e:
        # st.secrets raises when no secrets.toml is present
        logger.debug(f"Streamlit secrets not available: {e}")
        return {}


def _lookup(
    secrets: Mapping[str, Any],
    environ: Mapping[str, str],
    section: str,
    key: str,
    env_var: str,
    default: Any,
) -> Any:
    value = secrets.get(section, {}).get(key)
    if value is None or value == "":
        value = environ.get(env_var)
    if value is None or value == "":
        return default
    return value


def _coerce(value: Any, cast: Callable[[Any], Any], config_key: str, positive: bool = True) -> Any:
    try:
        result = cast(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid value {value!r} for {config_key}",
            config_key=config_key,
            expected_type=cast.__name__,
        )
    if positive and result <= 0:
        raise ConfigurationError(
            f"{config_key} must be positive, got {result}",
            config_key=config_key,
        )
    return result


def _optional_path(value: Any) -> Optional[Path]:
    return Path(value) if value else None


def load_settings(
    secrets: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from Streamlit secrets, the environment and defaults.

    Args:
        secrets: Secrets mapping (defaults to st.secrets)
        environ: Environment mapping (defaults to os.environ after load_dotenv)

    Returns:
        Settings

    Raises:
        ConfigurationError: when a value cannot be parsed or is out of range
    """
    if environ is None:
        load_dotenv()
        environ = os.environ
    if secrets is None:
        secrets = _read_streamlit_secrets()

    def get(section: str, key: str, env_var: str, default: Any) -> Any:
        return _lookup(secrets, environ, section, key, env_var, default)

    supabase = SupabaseSettings(
        url=str(get("supabase", "url", "SUPABASE_URL", "")),
        key=str(get("supabase", "key", "SUPABASE_KEY", "")),
    )

    offline = OfflineSettings(
        db_path=Path(get("offline", "db_path", "MADRASA_OFFLINE_DB", DEFAULT_DB_PATH)),
        sync_interval=_coerce(
            get("offline", "sync_interval", "MADRASA_SYNC_INTERVAL", 30), float, "offline.sync_interval"
        ),
        check_interval=_coerce(
            get("offline", "check_interval", "MADRASA_CHECK_INTERVAL", 10), float, "offline.check_interval"
        ),
        connection_timeout=_coerce(
            get("offline", "connection_timeout", "MADRASA_CONNECTION_TIMEOUT", 5),
            float,
            "offline.connection_timeout",
        ),
        max_sync_attempts=_coerce(
            get("offline", "max_sync_attempts", "MADRASA_MAX_SYNC_ATTEMPTS", 5), int, "offline.max_sync_attempts"
        ),
    )

    language = str(get("app", "language", "MADRASA_LANGUAGE", "ur")).lower()
    if language not in SUPPORTED_LANGUAGES:
        raise ConfigurationError(
            f"Unsupported language {language!r}; expected one of {SUPPORTED_LANGUAGES}",
            config_key="app.language",
        )

    settings = Settings(
        supabase=supabase,
        offline=offline,
        language=language,
        log_level=str(get("app", "log_level", "MADRASA_LOG_LEVEL", "INFO")).upper(),
        pdf_font=_optional_path(get("app", "pdf_font", "MADRASA_PDF_FONT", None)),
    )

    if not supabase.is_configured:
        logger.warning("Supabase credentials not configured; remote store unavailable")

    return settings


# Singleton accessor
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide Settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
