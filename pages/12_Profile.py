# =============================================================================
# 12_Profile.py - My account: profile and role change requests
# =============================================================================
from __future__ import annotations
import streamlit as st

from madrasa_core.auth import AuthService, get_user_id
from madrasa_core.data.models import ENTITIES, Role
from madrasa_core.errors import AuthenticationError
from madrasa_core.i18n import label, t
from madrasa_core.services.repositories import RoleChangeRequestRepository
from madrasa_core.ui import entity_table, setup_page, show_result

stack, lang = setup_page("nav.profile", "👤")
service = stack.data_service
user_id = get_user_id()

# =============================================================================
# PROFILE
# =============================================================================
st.subheader(t("nav.profile", lang))
st.write(f"{label('email', lang)}: {st.session_state.get('email') or '-'}")
role = st.session_state.get("role")
st.write(f"{label('role', lang)}: {t('role.' + role, lang) if role else '-'}")

with st.form("profile_form"):
    full_name = st.text_input(t("profile.full_name", lang), value=st.session_state.get("name") or "")
    madrasa_name = st.text_input(t("profile.madrasa_name", lang), value=st.session_state.get("madrasa_name") or "")
    submitted = st.form_submit_button(t("common.save", lang))

if submitted:
    changes = {"full_name": full_name.strip() or None, "madrasa_name": madrasa_name.strip() or None}
    if st.session_state.get("local_mode") or user_id is None:
        st.session_state.madrasa_name = changes["madrasa_name"]
        st.session_state.name = changes["full_name"] or st.session_state.get("name")
        st.success(t("profile.updated", lang))
    elif not service.is_online:
        st.warning(t("sync.offline_unavailable", lang))
    else:
        try:
            AuthService(stack.remote.client).update_profile(user_id, changes)
        except AuthenticationError as e:
            st.error(str(e))
        else:
            st.session_state.madrasa_name = changes["madrasa_name"]
            st.session_state.name = changes["full_name"] or st.session_state.get("email")
            st.success(t("profile.updated", lang))

# =============================================================================
# ROLE CHANGE REQUESTS
# =============================================================================
if user_id is not None:
    st.markdown("---")
    st.subheader(t("roles.request_change", lang))
    if not service.is_online:
        st.info(t("sync.offline_unavailable", lang))
    else:
        requests_repo = RoleChangeRequestRepository(service, user_id)
        with st.form("role_request_form", clear_on_submit=True):
            requested = st.selectbox(
                label("requested_role", lang),
                [r.value for r in Role],
                format_func=lambda r: t(f"role.{r}", lang),
            )
            message = st.text_area(label("request_message", lang))
            sent = st.form_submit_button(t("common.save", lang))
        if sent:
            show_result(requests_repo.create({"requested_role": requested, "request_message": message or None}), lang)

        st.subheader(t("roles.my_requests", lang))
        mine = requests_repo.list_mine()
        if not mine.success:
            st.error(mine.error)
        entity_table(mine.data or [], ENTITIES["role_change_requests"], lang=lang)
