# =============================================================================
# 01_Dashboard.py - Madrasa overview
# =============================================================================
"""
Dashboard: headline numbers, fee collection, today's attendance and the
income / expense trend. Everything is read through the offline data
service, so the page works from the local cache while disconnected.
"""
from __future__ import annotations
import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from madrasa_core.errors import error_boundary
from madrasa_core.i18n import status_label, t
from madrasa_core.services import analytics
from madrasa_core.services.repositories import get_repository
from madrasa_core.ui import add_grid, setup_page, stat_card
from madrasa_core.ui.theme import DANGER_COLOR, PRIMARY_COLOR, SUCCESS_COLOR, status_color

stack, lang = setup_page("nav.dashboard", "📊")
service = stack.data_service


def _rows(table: str):
    result = get_repository(table, service).list()
    if not result.success:
        st.warning(result.error)
    return result.data or []


students = _rows("students")
teachers = _rows("teachers")
classes = _rows("classes")
attendance = _rows("attendance")
fees = _rows("fees")

# =============================================================================
# HEADLINE NUMBERS
# =============================================================================
stats = analytics.dashboard_stats(students, teachers, classes, attendance)
fee_stats = analytics.fee_summary(fees)

c1, c2, c3, c4, c5 = st.columns(5)
with c1:
    stat_card(t("dashboard.total_students", lang), stats["total_students"])
with c2:
    stat_card(t("dashboard.active_students", lang), stats["active_students"], SUCCESS_COLOR)
with c3:
    stat_card(t("dashboard.total_teachers", lang), stats["total_teachers"])
with c4:
    stat_card(t("dashboard.total_classes", lang), stats["total_classes"])
with c5:
    rate = stats["attendance_rate"]
    stat_card(t("dashboard.attendance_rate", lang), "-" if rate is None else f"{rate}%", PRIMARY_COLOR)

st.markdown("---")

# =============================================================================
# FEES & ATTENDANCE
# =============================================================================
left, right = st.columns(2)

with left:
    st.subheader(t("dashboard.fee_collection", lang))
    counts = fee_stats["counts"]
    if sum(counts.values()) == 0:
        st.info(t("common.no_records", lang))
    else:
        statuses = [s for s, n in counts.items() if n > 0]
        fig = go.Figure(go.Pie(
            labels=[status_label(s, lang) for s in statuses],
            values=[counts[s] for s in statuses],
            marker=dict(colors=[status_color(s) for s in statuses]),
            hole=0.5,
        ))
        fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
        st.caption(
            f"{t('common.total', lang)}: {fee_stats['total_amount']:,.0f} · "
            f"{status_label('paid', lang)}: {fee_stats['paid_amount']:,.0f} ({fee_stats['collection_rate']}%)"
        )

with right:
    st.subheader(t("attendance.summary", lang))
    summary = analytics.attendance_summary(attendance, students)
    if summary.empty:
        st.info(t("common.no_records", lang))
    else:
        totals = summary[["present", "absent", "late", "excused"]].sum()
        fig = px.bar(
            x=[status_label(s, lang) for s in totals.index],
            y=totals.values,
            color=list(totals.index),
            color_discrete_map={s: status_color(s) for s in totals.index},
        )
        fig.update_layout(height=320, showlegend=False, xaxis_title="", yaxis_title="")
        st.plotly_chart(add_grid(fig), use_container_width=True)

# =============================================================================
# INCOME / EXPENSE TREND
# =============================================================================
@error_boundary(message_key="dashboard.chart_unavailable")
def render_trend(entries) -> None:
    trend = analytics.monthly_trend(entries)
    fig = go.Figure()
    fig.add_bar(x=trend["month"], y=trend["income"], name=t("expenses.income", lang), marker_color=SUCCESS_COLOR)
    fig.add_bar(x=trend["month"], y=trend["expense"], name=t("expenses.expense", lang), marker_color=DANGER_COLOR)
    fig.add_scatter(x=trend["month"], y=trend["net"], name=t("expenses.balance", lang), mode="lines+markers")
    fig.update_layout(barmode="group", height=340)
    st.plotly_chart(add_grid(fig), use_container_width=True)


if not service.is_tracked("expenses") and not service.is_online:
    st.info(t("sync.offline_unavailable", lang))
else:
    st.subheader(t("expenses.trend", lang))
    render_trend(_rows("expenses"))

# =============================================================================
# RECENT STUDENTS
# =============================================================================
st.subheader(t("dashboard.recent_students", lang))
recent = pd.DataFrame(students[:5])
if recent.empty:
    st.info(t("common.no_records", lang))
else:
    names = analytics.lookup_names(classes)
    recent = analytics.replace_ids(recent, "class_id", names, unknown=t("common.unknown", lang))
    columns = [c for c in ("name", "father_name", "class_id", "admission_date") if c in recent.columns]
    st.dataframe(recent[columns], use_container_width=True, hide_index=True)
