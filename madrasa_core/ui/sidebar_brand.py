# =============================================================================
# madrasa_core/ui/sidebar_brand.py - Sidebar brand, language and sync status
# =============================================================================
"""
Sidebar shared by every page: brand, language toggle, offline indicator with
a "sync now" button, retry for changes that could not be synced, and the
signed-in user with sign-out.

Call render_sidebar() right after st.set_page_config() and init_state().
"""
from __future__ import annotations
import streamlit as st

from madrasa_core.auth import AuthService, check_authentication, logout_user
from madrasa_core.config.settings import SUPPORTED_LANGUAGES
from madrasa_core.errors import ErrorContext
from madrasa_core.i18n import t
from madrasa_core.logging import get_logger
from madrasa_core.offline.stack import OfflineStack
from madrasa_core.state import clear_ui_state, get_language, set_language
from .components import render_notifications, sync_status_text

logger = get_logger(__name__)

LANGUAGE_NAMES = {"en": "English", "ur": "اردو"}


def inject_sidebar_style():
    """Sidebar CSS, injected once per session."""
    if st.session_state.get("_sidebar_style_injected", False):
        return

    st.markdown(
        """
        <style>
        section[data-testid="stSidebar"] .mm-brand {
            display: flex; align-items: center; gap: 12px;
            padding: 1rem 0.75rem; margin-bottom: 1rem;
            border-bottom: 1px solid rgba(15, 118, 110, 0.15);
        }
        .mm-brand-icon { font-size: 2rem; }
        .mm-brand-title { font-weight: 800; font-size: 1.1rem; color: #0f766e; line-height: 1.2; }
        .mm-brand-tag { font-size: 0.75rem; color: #64748b; }
        .mm-sync {
            margin: 0.5rem 0; padding: 0.6rem 0.75rem; border-radius: 10px;
            background: rgba(15, 118, 110, 0.06); border: 1px solid rgba(15, 118, 110, 0.15);
            font-size: 0.85rem; font-weight: 600;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_sidebar_style_injected"] = True


def render_sidebar_brand(lang: str) -> None:
    madrasa = st.session_state.get("madrasa_name") or t("app.subtitle", lang)
    st.sidebar.markdown(
        f"""
        <div class="mm-brand">
            <div class="mm-brand-icon">🕌</div>
            <div>
                <div class="mm-brand-title">{t("app.title", lang)}</div>
                <div class="mm-brand-tag">{madrasa}</div>
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_language_toggle(lang: str) -> str:
    """Language selector; reruns the page on change."""
    options = list(SUPPORTED_LANGUAGES)
    choice = st.sidebar.radio(
        t("common.language", lang),
        options,
        index=options.index(lang) if lang in options else 0,
        format_func=lambda code: LANGUAGE_NAMES.get(code, code),
        horizontal=True,
        key="language_toggle",
    )
    if choice != lang:
        set_language(choice)
        st.rerun()
    return choice


def render_sync_status(stack: OfflineStack, lang: str) -> None:
    """Offline indicator, pending count, sync-now and dead-letter retry."""
    snapshot = stack.state.snapshot()
    st.sidebar.markdown(
        f"<div class='mm-sync'>{sync_status_text(snapshot, lang)}</div>",
        unsafe_allow_html=True,
    )

    if stack.engine is not None:
        if st.sidebar.button(
            f"🔄 {t('sync.sync_now', lang)}",
            use_container_width=True,
            key="sync_now_btn",
            disabled=snapshot.syncing,
        ):
            stack.connection_manager.check_connection()
            stack.engine.sync_now()
            st.rerun()

    if not snapshot.online:
        status = stack.connection_manager.get_status_display()
        if status.get("last_online"):
            st.sidebar.caption(t("sync.last_online", lang, time=status["last_online"].strftime("%H:%M")))

    if snapshot.dead_letters:
        st.sidebar.warning(t("sync.dead_letters", lang, count=snapshot.dead_letters))
        if st.sidebar.button(t("sync.retry_failed", lang), use_container_width=True, key="retry_dead_btn"):
            with ErrorContext("Requeueing failed changes", lang=lang):
                stack.queue.requeue_dead_letters()
                stack.state.set_queue_counts(stack.queue.count(), stack.queue.count_dead())
            st.rerun()


def render_user_box(stack: OfflineStack, lang: str) -> None:
    if not check_authentication():
        return

    who = st.session_state.get("email") or st.session_state.get("name")
    role = st.session_state.get("role")
    st.sidebar.caption(t("auth.signed_in_as", lang, email=who))
    if role:
        st.sidebar.caption(t(f"role.{role}", lang))

    if st.session_state.get("local_mode"):
        return

    if st.sidebar.button(f"🚪 {t('common.sign_out', lang)}", use_container_width=True, key="sign_out_btn"):
        client = getattr(stack.remote, "client", None)
        if client is not None:
            AuthService(client).sign_out()
        logout_user()
        clear_ui_state()
        logger.info(f"Signed out {who}")
        st.rerun()


def render_sidebar(stack: OfflineStack) -> str:
    """
    Render the full sidebar and show queued sync notices.

    Returns:
        The active language code
    """
    lang = get_language()
    inject_sidebar_style()
    render_sidebar_brand(lang)
    lang = render_language_toggle(lang)
    st.sidebar.divider()
    render_sync_status(stack, lang)
    st.sidebar.divider()
    render_user_box(stack, lang)
    render_notifications(stack.notifier, lang)
    return lang
