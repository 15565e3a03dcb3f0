"""
Common page bootstrap.

Usage (top of every page):
    stack, lang = setup_page("nav.students", "👨‍🎓")
"""
from __future__ import annotations
from typing import Tuple

import streamlit as st

from madrasa_core.auth import require_admin_access, require_authentication
from madrasa_core.config.settings import get_settings
from madrasa_core.i18n import t
from madrasa_core.logging import setup_logging
from madrasa_core.offline.stack import OfflineStack, get_offline_stack
from madrasa_core.state import get_language, init_state
from .components import header
from .sidebar_brand import render_sidebar
from .theme import apply_css

_logging_ready = False


def configure_logging() -> None:
    global _logging_ready
    if not _logging_ready:
        setup_logging(get_settings().log_level)
        _logging_ready = True


def setup_page(
    title_key: str,
    icon: str = "🕌",
    admin_only: bool = False,
    subtitle_key: str = "app.subtitle",
) -> Tuple[OfflineStack, str]:
    """
    Configure the page, check access and render the shared chrome.

    Returns:
        (offline stack, active language)
    """
    st.set_page_config(page_title=t(title_key, get_language()), page_icon=icon, layout="wide")
    configure_logging()
    init_state()

    stack = get_offline_stack()
    lang = get_language()
    apply_css(lang)

    if admin_only:
        require_admin_access(lang)
    else:
        require_authentication(lang)

    lang = render_sidebar(stack)
    header(t(title_key, lang), t(subtitle_key, lang), icon)
    return stack, lang
