# =============================================================================
# 11_User_Roles.py - Role management (admin only)
# =============================================================================
"""
Assigned roles, roles pre-assigned by e-mail before sign-up, and the review
queue of role change requests. Role tables are not mirrored offline.
"""
from __future__ import annotations
import streamlit as st

from madrasa_core.auth import get_user_id
from madrasa_core.data.models import ENTITIES, RequestStatus, Role
from madrasa_core.i18n import label, t
from madrasa_core.services.repositories import (
    PendingUserRoleRepository,
    RoleChangeRequestRepository,
    UserRoleRepository,
)
from madrasa_core.ui import confirm_delete, entity_table, setup_page, show_result

stack, lang = setup_page("nav.user_roles", "🛡️", admin_only=True)
service = stack.data_service

if not service.is_online:
    st.warning(t("sync.offline_unavailable", lang))
    st.stop()

admin_id = get_user_id()
roles_repo = UserRoleRepository(service, admin_id)
pending_repo = PendingUserRoleRepository(service, admin_id)
requests_repo = RoleChangeRequestRepository(service, admin_id)
ROLES = [r.value for r in Role]

tab_roles, tab_pending, tab_requests = st.tabs(
    [f"👥 {t('nav.user_roles', lang)}", f"✉️ {t('roles.pending', lang)}", f"📨 {t('roles.requests', lang)}"]
)

# =============================================================================
# ASSIGNED ROLES
# =============================================================================
with tab_roles:
    entity_table(roles_repo.list().data or [], ENTITIES["user_roles"], lang=lang)

    st.subheader(t("roles.assign", lang))
    with st.form("assign_role"):
        user_id = st.text_input(label("user_id", lang), key="assign_user")
        role = st.selectbox(label("role", lang), ROLES, format_func=lambda r: t(f"role.{r}", lang), key="assign_role_choice")
        submitted = st.form_submit_button(t("common.save", lang))
    if submitted and user_id.strip():
        if show_result(roles_repo.assign(user_id.strip(), role), lang):
            st.rerun()

# =============================================================================
# PRE-ASSIGNED BY E-MAIL
# =============================================================================
with tab_pending:
    pending_rows = pending_repo.list().data or []
    entity_table(pending_rows, ENTITIES["pending_user_roles"], lang=lang)

    with st.form("pending_role", clear_on_submit=True):
        email = st.text_input(label("email", lang), key="pending_email")
        role = st.selectbox(label("role", lang), ROLES, format_func=lambda r: t(f"role.{r}", lang), key="pending_role_choice")
        submitted = st.form_submit_button(t("common.add", lang))
    if submitted:
        if show_result(pending_repo.create({"email": email, "role": role}), lang):
            st.rerun()

    for row in pending_rows:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.write(f"{row.get('email')} · {t('role.' + str(row.get('role')), lang)}")
        with col2:
            if confirm_delete(str(row["id"]), f"pending_{row['id']}", lang):
                if show_result(pending_repo.delete(str(row["id"])), lang, "common.deleted"):
                    st.rerun()

# =============================================================================
# ROLE CHANGE REQUESTS
# =============================================================================
with tab_requests:
    requests = requests_repo.list().data or []
    open_requests = [r for r in requests if r.get("status", RequestStatus.PENDING.value) == RequestStatus.PENDING.value]

    if not open_requests:
        st.info(t("common.no_records", lang))
    for request in open_requests:
        with st.container(border=True):
            st.markdown(
                f"**{request.get('user_id')}** → {t('role.' + str(request.get('requested_role')), lang)}"
            )
            if request.get("request_message"):
                st.caption(request["request_message"])
            response = st.text_input(label("admin_response", lang), key=f"response_{request['id']}")
            col1, col2 = st.columns(2)
            with col1:
                if st.button(f"✅ {t('roles.approve', lang)}", key=f"approve_{request['id']}"):
                    if show_result(requests_repo.approve(request, response or None), lang):
                        st.rerun()
            with col2:
                if st.button(f"❌ {t('roles.reject', lang)}", key=f"reject_{request['id']}"):
                    if show_result(requests_repo.reject(request, response or None), lang):
                        st.rerun()

    reviewed = [r for r in requests if r not in open_requests]
    if reviewed:
        st.subheader(label("status", lang))
        entity_table(reviewed, ENTITIES["role_change_requests"], lang=lang)
