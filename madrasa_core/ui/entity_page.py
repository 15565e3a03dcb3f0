# =============================================================================
# madrasa_core/ui/entity_page.py
# Generic list / add / edit / delete page for one table
# =============================================================================

from __future__ import annotations
import uuid
from typing import Any, Dict, List, Optional

import streamlit as st

from madrasa_core.auth import get_user_id
from madrasa_core.data.models import EntitySpec, get_entity, record_label
from madrasa_core.errors import RemoteStoreError
from madrasa_core.i18n import label, t
from madrasa_core.logging import get_logger
from madrasa_core.offline.stack import OfflineStack
from madrasa_core.services.analytics import lookup_names
from madrasa_core.services.repositories import EntityRepository, get_repository
from .components import confirm_delete, entity_form, entity_table, show_result

logger = get_logger(__name__)


def build_lookups(stack: OfflineStack, spec: EntitySpec) -> Dict[str, Dict[str, str]]:
    """field name -> {id: display name} for every reference field of spec."""
    lookups: Dict[str, Dict[str, str]] = {}
    for field in spec.fields:
        if field.kind != "ref" or not field.ref_table:
            continue
        ref_spec = get_entity(field.ref_table)
        rows = get_repository(field.ref_table, stack.data_service).list().data or []
        lookups[field.name] = lookup_names(rows, label=ref_spec.label_field)
    return lookups


def upload_files(
    stack: OfflineStack,
    uploads: Dict[str, str],
    values: Dict[str, Any],
    files: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Upload chosen files to storage and put their public URLs into values.

    Uploads need a connection; offline the URL fields are left unchanged.
    """
    remote = stack.remote
    for field_name, uploaded in files.items():
        if uploaded is None:
            continue
        if not stack.data_service.is_online or not hasattr(remote, "upload_file"):
            st.warning(t("sync.offline_unavailable", st.session_state.get("language", "en")))
            continue
        path = f"{uuid.uuid4().hex}_{uploaded.name}"
        try:
            values[field_name] = remote.upload_file(uploads[field_name], path, uploaded.getvalue(), uploaded.type)
        except RemoteStoreError as e:
            logger.error(f"Upload to {uploads[field_name]} failed: {e}")
            st.error(str(e))
    return values


def _file_inputs(uploads: Dict[str, str], key: str, lang: str) -> Dict[str, Any]:
    return {
        field_name: st.file_uploader(label(field_name, lang), type=["png", "jpg", "jpeg"], key=f"{key}_{field_name}_file")
        for field_name in uploads
    }


def render_entity_page(
    stack: OfflineStack,
    lang: str,
    table: str,
    uploads: Optional[Dict[str, str]] = None,
    repository: Optional[EntityRepository] = None,
) -> List[Dict[str, Any]]:
    """
    Tabs for listing, adding and editing records of table.

    Args:
        stack: Offline stack
        lang: UI language
        table: Table name
        uploads: field name -> storage bucket for image fields
        repository: Repository to use (defaults to get_repository(table))

    Returns:
        The listed rows
    """
    uploads = uploads or {}
    repo = repository or get_repository(table, stack.data_service, get_user_id())
    spec = repo.spec
    lookups = build_lookups(stack, spec)

    result = repo.list()
    if not result.success:
        st.error(result.error)
    rows: List[Dict[str, Any]] = result.data or []

    tab_list, tab_add, tab_edit = st.tabs(
        [f"📋 {t(f'nav.{table}', lang)}", f"➕ {t('common.add', lang)}", f"✏️ {t('common.edit', lang)}"]
    )

    with tab_list:
        search = st.text_input(f"🔍 {t('common.search', lang)}", key=f"{table}_search")
        shown = rows
        if search:
            needle = search.strip().lower()
            shown = [r for r in rows if any(needle in str(v).lower() for v in r.values())]
        entity_table(shown, spec, lookups, lang)
        st.caption(f"{t('common.total', lang)}: {len(shown)}")

    with tab_add:
        files = _file_inputs(uploads, f"{table}_add", lang)
        values = entity_form(spec, f"{table}_add_form", lookups=lookups, lang=lang)
        if values is not None:
            values = upload_files(stack, uploads, values, files)
            if show_result(repo.create(values), lang, pending_count=stack.state.pending_changes):
                st.rerun()

    with tab_edit:
        if not rows:
            st.info(t("common.no_records", lang))
        else:
            by_id = {str(r["id"]): r for r in rows if r.get("id") is not None}
            record_id = st.selectbox(
                t("common.select", lang),
                list(by_id.keys()),
                format_func=lambda rid: record_label(by_id[rid], spec),
                key=f"{table}_edit_select",
            )
            record = by_id[record_id]
            files = _file_inputs(uploads, f"{table}_edit_{record_id}", lang)
            values = entity_form(spec, f"{table}_edit_form_{record_id}", record=record, lookups=lookups, lang=lang)
            if values is not None:
                values = upload_files(stack, uploads, values, files)
                if show_result(repo.update(record_id, values), lang, pending_count=stack.state.pending_changes):
                    st.rerun()

            if confirm_delete(record_id, f"{table}_delete_{record_id}", lang):
                if show_result(repo.delete(record_id), lang, "common.deleted", stack.state.pending_changes):
                    st.rerun()

    return rows
