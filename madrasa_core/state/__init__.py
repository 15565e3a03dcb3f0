from .session import SESSION_DEFAULTS, init_state, get_language, set_language, clear_ui_state

__all__ = ["SESSION_DEFAULTS", "init_state", "get_language", "set_language", "clear_ui_state"]
