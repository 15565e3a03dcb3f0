import streamlit as st

from madrasa_core.config.settings import SUPPORTED_LANGUAGES, get_settings

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    # Auth
    "authenticated": False,
    "user_id": None,
    "email": None,
    "name": None,
    "role": None,
    "roles": [],
    "madrasa_name": None,
    # UI
    "editing_id": None,
    "confirm_delete_id": None,
    "debug_mode": False,
}


def init_state():
    """Initialize session state with defaults and the configured language."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = list(v) if isinstance(v, list) else v

    if "language" not in st.session_state:
        st.session_state["language"] = get_settings().language


def get_language() -> str:
    return st.session_state.get("language") or get_settings().language


def set_language(lang: str) -> None:
    if lang not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {lang}")
    st.session_state["language"] = lang


def clear_ui_state():
    """Forget in-progress edits (after sign-out or a page switch)."""
    for key in ("editing_id", "confirm_delete_id"):
        st.session_state[key] = None
