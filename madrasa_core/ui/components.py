from __future__ import annotations
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from madrasa_core.data.models import EntitySpec, FieldSpec
from madrasa_core.i18n import label, status_label, t
from madrasa_core.offline.notifications import Notice, NoticeLevel, QueuedNotifier
from madrasa_core.offline.state import SyncPhase, SyncSnapshot
from madrasa_core.services.analytics import replace_ids
from madrasa_core.services.base_service import ServiceResult
from .theme import GRID_COLOR, SUBTLE_TEXT, TEXT_COLOR, CARD_BG_LIGHT, status_color

NOTICE_ICONS = {
    NoticeLevel.INFO: "📴",
    NoticeLevel.SUCCESS: "✅",
    NoticeLevel.WARNING: "⚠️",
    NoticeLevel.ERROR: "❌",
}

PHASE_ICONS = {
    SyncPhase.OFFLINE: "🔴",
    SyncPhase.SYNCING: "🔄",
    SyncPhase.PENDING: "🟡",
    SyncPhase.SYNCED: "🟢",
    SyncPhase.ERROR: "⚠️",
}


def header(title: str, subtitle: str = "", icon: str = "🕌"):
    st.markdown(f"""
        <div class="main-header">
            <div style="display:flex;gap:1.2rem;align-items:center;">
                <div style="font-size:2.6rem;">{icon}</div>
                <div>
                    <h1 style="margin:0; font-size:2.1rem; color:white;">{title}</h1>
                    <p style="margin:.35rem 0 0 0;color:rgba(255,255,255,.85);font-size:1rem">{subtitle}</p>
                </div>
            </div>
        </div>
    """, unsafe_allow_html=True)


def stat_card(label_text: str, value: Any, color: str = TEXT_COLOR):
    st.markdown(f"""
        <div class="metric-card">
            <div class="metric-label">{label_text}</div>
            <div class="metric-value" style="color:{color}">{value}</div>
        </div>
    """, unsafe_allow_html=True)


def add_grid(fig):
    """Shared plotly styling."""
    fig.update_xaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_yaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_layout(plot_bgcolor=CARD_BG_LIGHT, paper_bgcolor=CARD_BG_LIGHT,
                      font=dict(family="Segoe UI, sans-serif", size=12, color=TEXT_COLOR),
                      margin=dict(l=20, r=20, t=40, b=20))
    return fig


def status_badge(status: Any, lang: str = "en") -> str:
    """Inline HTML badge for a status value."""
    color = status_color(status)
    return (
        f"<span style='background:{color}22;color:{color};padding:2px 10px;"
        f"border-radius:9999px;font-size:.8rem;font-weight:600'>{status_label(status, lang)}</span>"
    )


# =============================================================================
# SYNC STATUS
# =============================================================================

def sync_status_text(snapshot: SyncSnapshot, lang: str = "en") -> str:
    """One-line sync status: online/offline plus what is waiting."""
    phase = snapshot.phase
    icon = PHASE_ICONS[phase]
    if phase == SyncPhase.SYNCING:
        return f"{icon} {t('sync.syncing', lang)}"
    if phase == SyncPhase.ERROR:
        if snapshot.dead_letters:
            return f"{icon} {t('sync.error_state', lang)} · {t('sync.dead_letters', lang, count=snapshot.dead_letters)}"
        return f"{icon} {t('sync.error_state', lang)}"
    if phase == SyncPhase.SYNCED:
        return f"{icon} {t('sync.online', lang)} · {t('sync.synced', lang)}"

    state_text = t("sync.offline", lang) if phase == SyncPhase.OFFLINE else t("sync.online", lang)
    if snapshot.pending_changes > 0:
        return f"{icon} {state_text} · {t('sync.pending_count', lang, count=snapshot.pending_changes)}"
    return f"{icon} {state_text}"


def notice_text(notice: Notice, lang: str = "en") -> str:
    return t(notice.key, lang, **notice.params)


def render_notifications(notifier, lang: str = "en") -> int:
    """Show queued sync notices as toasts. Returns how many were shown."""
    if not isinstance(notifier, QueuedNotifier):
        return 0
    notices = notifier.drain()
    for notice in notices:
        st.toast(notice_text(notice, lang), icon=NOTICE_ICONS.get(notice.level))
    return len(notices)


def show_result(
    result: ServiceResult,
    lang: str = "en",
    success_key: str = "common.saved",
    pending_count: int = 0,
) -> bool:
    """Report a write result; queued writes get the offline message."""
    if not result.success:
        if result.offline or result.error_key == "error.validation":
            st.warning(result.message(lang))
        else:
            st.error(result.message(lang))
        return False
    if result.pending:
        st.toast(result.message(lang, pending_count), icon="📴")
    else:
        st.toast(t(success_key, lang), icon="✅")
    return True


# =============================================================================
# ENTITY TABLE & FORM
# =============================================================================

def entity_table(
    rows: List[Dict[str, Any]],
    spec: EntitySpec,
    lookups: Optional[Dict[str, Dict[str, str]]] = None,
    lang: str = "en",
) -> pd.DataFrame:
    """
    Render rows as a table with translated headers.

    Args:
        rows: Records
        spec: Entity descriptor (display_columns)
        lookups: column -> {id: name} used to show names instead of ids
        lang: UI language

    Returns:
        The displayed DataFrame
    """
    if not rows:
        st.info(t("common.no_records", lang))
        return pd.DataFrame()

    df = pd.DataFrame(rows)
    columns = [c for c in spec.display_columns if c in df.columns]
    df = df[columns].copy()

    for column, names in (lookups or {}).items():
        if column in df.columns:
            df = replace_ids(df, column, names, unknown=t("common.unknown", lang))

    for column in ("status", "type"):
        if column in df.columns:
            df[column] = df[column].map(lambda v: status_label(v, lang))
    for column in ("role", "requested_role"):
        if column in df.columns:
            df[column] = df[column].map(lambda v: t(f"role.{v}", lang))

    df.columns = [label(c, lang) for c in df.columns]
    st.dataframe(df, use_container_width=True, hide_index=True)
    return df


def as_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def as_time(value: Any) -> Optional[time]:
    if value in (None, ""):
        return None
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value)[:8])
    except ValueError:
        return None


def _field_input(
    field: FieldSpec,
    current: Any,
    lookups: Dict[str, Dict[str, str]],
    key: str,
    lang: str,
) -> Any:
    """One Streamlit input for one FieldSpec."""
    text = label(field.name, lang) + (" *" if field.required else "")
    widget_key = f"{key}_{field.name}"
    value = current if current is not None else field.default

    if field.kind == "textarea":
        return st.text_area(text, value=value or "", key=widget_key)
    if field.kind == "number":
        return st.number_input(text, value=float(value or 0), min_value=0.0, step=100.0, key=widget_key)
    if field.kind == "int":
        return int(st.number_input(text, value=int(value or 0), step=1, key=widget_key))
    if field.kind == "date":
        return st.date_input(text, value=as_date(value) or date.today(), key=widget_key)
    if field.kind == "time":
        return st.time_input(text, value=as_time(value), key=widget_key)
    if field.kind == "select":
        options = list(field.options)
        index = options.index(value) if value in options else 0
        return st.selectbox(text, options, index=index, key=widget_key,
                            format_func=lambda v: status_label(v, lang))
    if field.kind == "ref":
        names = lookups.get(field.name, {})
        options = [None] + list(names.keys())
        index = options.index(str(value)) if value is not None and str(value) in options else 0
        return st.selectbox(text, options, index=index, key=widget_key,
                            format_func=lambda v: t("common.none", lang) if v is None else names.get(v, v))
    if field.kind == "bool":
        return st.checkbox(text, value=bool(value), key=widget_key)
    return st.text_input(text, value="" if value is None else str(value), key=widget_key)


def entity_form(
    spec: EntitySpec,
    key: str,
    record: Optional[Dict[str, Any]] = None,
    lookups: Optional[Dict[str, Dict[str, str]]] = None,
    lang: str = "en",
    columns: int = 2,
) -> Optional[Dict[str, Any]]:
    """
    Add/edit form generated from the entity descriptor.

    Returns:
        The submitted values, or None when the form was not submitted
    """
    lookups = lookups or {}
    record = record or {}
    values: Dict[str, Any] = {}

    with st.form(key, clear_on_submit=not record):
        cols = st.columns(columns)
        for i, field in enumerate(spec.fields):
            with cols[i % columns]:
                values[field.name] = _field_input(field, record.get(field.name), lookups, key, lang)
        submitted = st.form_submit_button(t("common.save", lang), use_container_width=True)

    if not submitted:
        return None
    return {k: (v.isoformat() if isinstance(v, time) else v) for k, v in values.items()}


def confirm_delete(record_id: str, key: str, lang: str = "en") -> bool:
    """
    Two-step delete: first click asks, second click confirms.

    Returns:
        True once the user confirmed deleting record_id
    """
    pending = st.session_state.get("confirm_delete_id")
    if pending != record_id:
        if st.button(f"🗑️ {t('common.delete', lang)}", key=f"{key}_ask"):
            st.session_state.confirm_delete_id = record_id
            st.rerun()
        return False

    st.warning(t("common.confirm_delete", lang))
    col1, col2 = st.columns(2)
    with col1:
        if st.button(t("common.delete", lang), key=f"{key}_yes", type="primary"):
            st.session_state.confirm_delete_id = None
            return True
    with col2:
        if st.button(t("common.cancel", lang), key=f"{key}_no"):
            st.session_state.confirm_delete_id = None
            st.rerun()
    return False
