# =============================================================================
# 06_Attendance.py - Daily attendance per class
# =============================================================================
"""
Mark attendance for every student of a class on a day, review the day's
records and see per-student summaries for a period. Marking works offline;
the rows are queued and synced on reconnect.
"""
from __future__ import annotations
from datetime import date, datetime, timedelta

import streamlit as st

from madrasa_core.auth import get_user_id
from madrasa_core.data.models import ENTITIES, AttendanceStatus
from madrasa_core.i18n import label, status_label, t
from madrasa_core.services import analytics
from madrasa_core.services.repositories import AttendanceRepository, get_repository
from madrasa_core.ui import entity_table, setup_page, show_result

stack, lang = setup_page("nav.attendance", "📝")
service = stack.data_service
repo = AttendanceRepository(service, get_user_id())

students = get_repository("students", service).list().data or []
classes = get_repository("classes", service).list().data or []
class_names = analytics.lookup_names(classes)
student_names = analytics.lookup_names(students)

tab_mark, tab_day, tab_summary = st.tabs(
    [f"✅ {t('attendance.mark_class', lang)}", f"📅 {label('date', lang)}", f"📊 {t('attendance.summary', lang)}"]
)

# =============================================================================
# MARK A CLASS
# =============================================================================
with tab_mark:
    col1, col2 = st.columns(2)
    with col1:
        day = st.date_input(label("date", lang), value=date.today(), key="mark_date")
    with col2:
        class_id = st.selectbox(
            label("class_id", lang),
            list(class_names.keys()),
            format_func=lambda cid: class_names.get(cid, cid),
            key="mark_class",
        ) if class_names else None

    roster = [s for s in students if class_id is None or str(s.get("class_id")) == str(class_id)]
    if not roster:
        st.info(t("common.no_records", lang))
    else:
        existing = {
            str(row.get("student_id")): row.get("status")
            for row in (repo.list_for_date(day).data or [])
        }
        options = [s.value for s in AttendanceStatus]
        with st.form(f"attendance_{day}_{class_id}"):
            statuses = {}
            for student in roster:
                sid = str(student["id"])
                current = existing.get(sid, AttendanceStatus.PRESENT.value)
                statuses[sid] = st.radio(
                    student.get("name", sid),
                    options,
                    index=options.index(current) if current in options else 0,
                    format_func=lambda v: status_label(v, lang),
                    horizontal=True,
                    key=f"att_{day}_{sid}",
                )
            noted_by = st.text_input(label("noted_by", lang), value=st.session_state.get("name") or "")
            submitted = st.form_submit_button(t("common.save", lang), use_container_width=True)

        if submitted:
            result = repo.mark_class(
                day,
                class_id,
                statuses,
                noted_by=noted_by or None,
                time=datetime.now().strftime("%H:%M:%S"),
            )
            if show_result(result, lang, pending_count=stack.state.pending_changes):
                st.success(t("attendance.saved", lang, created=result.data["created"], updated=result.data["updated"]))

# =============================================================================
# RECORDS OF A DAY
# =============================================================================
with tab_day:
    view_day = st.date_input(label("date", lang), value=date.today(), key="view_date")
    result = repo.list_for_date(view_day)
    if not result.success:
        st.error(result.error)
    entity_table(
        result.data or [],
        ENTITIES["attendance"],
        {"student_id": student_names, "class_id": class_names},
        lang,
    )

# =============================================================================
# SUMMARY
# =============================================================================
with tab_summary:
    col1, col2 = st.columns(2)
    with col1:
        start = st.date_input(t("common.from", lang), value=date.today() - timedelta(days=30), key="sum_start")
    with col2:
        end = st.date_input(t("common.to", lang), value=date.today(), key="sum_end")

    summary = analytics.attendance_summary(repo.list().data or [], students, start, end)
    if summary.empty:
        st.info(t("common.no_records", lang))
    else:
        shown = summary.drop(columns=["student_id"]).rename(
            columns={
                "name": label("name", lang),
                **{s.value: status_label(s.value, lang) for s in AttendanceStatus},
                "total": t("common.total", lang),
                "rate": "%",
            }
        )
        st.dataframe(shown, use_container_width=True, hide_index=True)
