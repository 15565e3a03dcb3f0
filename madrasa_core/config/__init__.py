from .settings import (
    Settings,
    SupabaseSettings,
    OfflineSettings,
    SUPPORTED_LANGUAGES,
    load_settings,
    get_settings,
)

__all__ = [
    "Settings",
    "SupabaseSettings",
    "OfflineSettings",
    "SUPPORTED_LANGUAGES",
    "load_settings",
    "get_settings",
]
