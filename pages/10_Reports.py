# =============================================================================
# 10_Reports.py - PDF exports
# =============================================================================
"""
Generate PDF reports from the data currently available (remote when online,
the offline cache otherwise).
"""
from __future__ import annotations
from datetime import date, timedelta

import streamlit as st

from madrasa_core.auth import get_madrasa_name
from madrasa_core.config.settings import get_settings
from madrasa_core.errors import guarded_call
from madrasa_core.i18n import label, t
from madrasa_core.logging import get_logger
from madrasa_core.reports import (
    export_attendance_pdf,
    export_education_pdf,
    export_fees_pdf,
    export_students_pdf,
)
from madrasa_core.services import analytics
from madrasa_core.services.repositories import get_repository
from madrasa_core.ui import setup_page

logger = get_logger(__name__)

stack, lang = setup_page("nav.reports", "📄")
service = stack.data_service
madrasa_name = get_madrasa_name()
font_path = get_settings().pdf_font


def _rows(table: str):
    result = get_repository(table, service).list()
    if not result.success:
        st.warning(result.error)
    return result.data or []


students = _rows("students")
classes = _rows("classes")

col1, col2 = st.columns(2)
with col1:
    start = st.date_input(t("common.from", lang), value=date.today() - timedelta(days=30))
with col2:
    end = st.date_input(t("common.to", lang), value=date.today())

REPORTS = {
    "students": t("reports.students", lang),
    "fees": t("reports.fees", lang),
    "attendance": t("reports.attendance", lang),
    "education": t("reports.education", lang),
}
choice = st.radio(t("common.select", lang), list(REPORTS.keys()), format_func=REPORTS.get, horizontal=True)

student_id = None
if choice == "education":
    names = analytics.lookup_names(students)
    student_id = st.selectbox(
        label("student_id", lang),
        [None] + list(names.keys()),
        format_func=lambda sid: t("common.none", lang) if sid is None else names.get(sid, sid),
    )

def build_report() -> bytes:
    if choice == "students":
        return export_students_pdf(students, classes, madrasa_name=madrasa_name, font_path=font_path)
    if choice == "fees":
        return export_fees_pdf(_rows("fees"), students, start, end, madrasa_name=madrasa_name, font_path=font_path)
    if choice == "attendance":
        return export_attendance_pdf(
            _rows("attendance"), students, classes, start, end, madrasa_name=madrasa_name, font_path=font_path
        )
    return export_education_pdf(
        _rows("education_reports"), students, classes,
        student_id=student_id, start=start, end=end, madrasa_name=madrasa_name, font_path=font_path,
    )


if st.button(f"📄 {t('reports.generate', lang)}", type="primary"):
    logger.info(f"Generating {choice} report")
    pdf = guarded_call(build_report, lang=lang)
    if pdf is not None:
        st.session_state["_report_pdf"] = (choice, pdf)

if st.session_state.get("_report_pdf"):
    name, pdf = st.session_state["_report_pdf"]
    st.download_button(
        f"⬇️ {t('common.download', lang)} {REPORTS.get(name, name)}",
        data=pdf,
        file_name=f"{name}_report_{date.today().isoformat()}.pdf",
        mime="application/pdf",
    )
