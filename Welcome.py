from __future__ import annotations
import streamlit as st

from madrasa_core.auth import AuthService, check_authentication, login_local_user, login_user
from madrasa_core.auth.authentication import MIN_PASSWORD_LENGTH
from madrasa_core.config.settings import get_settings
from madrasa_core.data.models import Role
from madrasa_core.errors import AuthenticationError
from madrasa_core.i18n import t
from madrasa_core.logging import get_logger
from madrasa_core.offline.stack import get_offline_stack
from madrasa_core.services.repositories import PendingUserRoleRepository
from madrasa_core.state import get_language, init_state
from madrasa_core.ui import apply_css, configure_logging, render_sidebar

logger = get_logger(__name__)

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="Madrasa Manager",
    page_icon="🕌",
    layout="wide",
)

configure_logging()
init_state()
stack = get_offline_stack()
lang = get_language()
apply_css(lang)
lang = render_sidebar(stack)

# ============================================================================
# HERO
# ============================================================================
st.markdown(
    f"""
    <div class="main-header" style="text-align:center;">
        <div style="font-size:3.5rem;">🕌</div>
        <h1 style="margin:0;color:white;">{t("app.welcome", lang)}</h1>
        <p style="color:rgba(255,255,255,.85);font-size:1.1rem;margin-top:.5rem;">{t("app.tagline", lang)}</p>
    </div>
    """,
    unsafe_allow_html=True,
)

settings = get_settings()

# ============================================================================
# SIGN IN, SIGN UP AND JOIN REQUESTS
# ============================================================================
if check_authentication():
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        who = st.session_state.get("email") or st.session_state.get("name")
        st.success(t("auth.signed_in_as", lang, email=who))
        if st.button(t("nav.dashboard", lang), type="primary", use_container_width=True):
            st.switch_page("pages/01_Dashboard.py")

elif not settings.supabase.is_configured:
    # Local mode: no remote store, data lives only in the offline cache
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.info(t("sync.offline_unavailable", lang))
        if st.button(t("nav.dashboard", lang), type="primary", use_container_width=True):
            login_local_user()
            st.switch_page("pages/01_Dashboard.py")

else:
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        online = stack.state.online
        if not online:
            st.warning(t("auth.offline_unavailable", lang))
        auth = AuthService(stack.remote.client)

        tab_in, tab_up, tab_join = st.tabs([t("auth.sign_in", lang), t("auth.sign_up", lang), t("auth.join", lang)])

        with tab_in:
            with st.form("sign_in_form"):
                email = st.text_input(t("auth.email", lang))
                password = st.text_input(t("auth.password", lang), type="password")
                submitted = st.form_submit_button(
                    t("auth.sign_in", lang), type="primary", use_container_width=True, disabled=not online
                )

            if submitted:
                try:
                    session = auth.sign_in(email, password)
                except AuthenticationError as e:
                    logger.warning(f"Sign-in rejected: {e}")
                    st.error(t("auth.failed", lang))
                else:
                    login_user(session)
                    st.switch_page("pages/01_Dashboard.py")

        with tab_up:
            with st.form("sign_up_form"):
                full_name = st.text_input(t("auth.full_name", lang))
                madrasa_name = st.text_input(t("auth.madrasa_name", lang))
                new_email = st.text_input(t("auth.email", lang), key="sign_up_email")
                new_password = st.text_input(t("auth.password", lang), type="password", key="sign_up_password")
                created = st.form_submit_button(
                    t("auth.sign_up", lang), type="primary", use_container_width=True, disabled=not online
                )

            if created:
                if not (full_name and madrasa_name and new_email and new_password):
                    st.warning(t("auth.fill_all", lang))
                elif len(new_password) < MIN_PASSWORD_LENGTH:
                    st.warning(t("auth.password_short", lang, count=MIN_PASSWORD_LENGTH))
                else:
                    try:
                        session = auth.sign_up(new_email, new_password, full_name, madrasa_name)
                    except AuthenticationError as e:
                        logger.warning(f"Sign-up rejected: {e}")
                        st.error(t("auth.sign_up_failed", lang, error=e.message))
                    else:
                        if session is None:
                            st.success(t("auth.sign_up_done", lang))
                        else:
                            login_user(session)
                            st.switch_page("pages/01_Dashboard.py")

        with tab_join:
            st.caption(t("auth.join_hint", lang))
            madrasas = auth.list_madrasas() if online else []
            join_roles = [r.value for r in Role if r != Role.ADMIN]
            with st.form("join_form"):
                join_name = st.text_input(t("auth.full_name", lang), key="join_name")
                join_email = st.text_input(t("auth.email", lang), key="join_email")
                join_madrasa = st.selectbox(
                    t("auth.select_madrasa", lang),
                    madrasas,
                    index=None,
                    placeholder=t("auth.select_madrasa", lang) if madrasas else t("auth.no_madrasas", lang),
                )
                join_role = st.selectbox(
                    t("field.role", lang), join_roles, format_func=lambda r: t(f"role.{r}", lang)
                )
                requested = st.form_submit_button(
                    t("auth.join_submit", lang), type="primary", use_container_width=True,
                    disabled=not (online and madrasas),
                )

            if requested:
                result = PendingUserRoleRepository(stack.data_service).request_to_join(
                    join_email, join_name, join_madrasa, join_role
                )
                if result.success:
                    st.success(t("auth.join_sent", lang))
                elif result.error_code == "DATA_001":
                    st.warning(t("auth.fill_all", lang))
                else:
                    st.error(t("auth.join_failed", lang, error=result.message(lang)))

# ============================================================================
# FOOTER
# ============================================================================
st.markdown("<div style='margin-top: 3rem;'></div>", unsafe_allow_html=True)
st.caption(f"{t('app.title', lang)} · {t('app.subtitle', lang)}")
