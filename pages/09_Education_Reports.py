# =============================================================================
# 09_Education_Reports.py - Daily Quran progress (sabak / sabqi / manzil)
# =============================================================================
from __future__ import annotations
from datetime import date
from typing import Any, Dict, Optional

import pandas as pd
import streamlit as st

from madrasa_core.auth import get_madrasa_name, get_user_id
from madrasa_core.i18n import label, t
from madrasa_core.reports import export_education_pdf
from madrasa_core.services import analytics
from madrasa_core.services.repositories import EducationReportRepository, get_repository
from madrasa_core.ui import confirm_delete, setup_page, show_result
from madrasa_core.ui.components import as_date

stack, lang = setup_page("nav.education_reports", "📖")
service = stack.data_service
repo = EducationReportRepository(service, get_user_id())

students = get_repository("students", service).list().data or []
classes = get_repository("classes", service).list().data or []
student_names = analytics.lookup_names(students)
class_names = analytics.lookup_names(classes)
students_by_id = {str(s["id"]): s for s in students if s.get("id") is not None}

result = repo.list()
if not result.success:
    st.error(result.error)
reports = result.data or []


def report_form(key: str, record: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Form with the three progress parts; returns flat values on submit."""
    flat = repo.flatten_progress(record or {})
    student_ids = list(student_names.keys())
    current_student = str(flat.get("student_id")) if flat.get("student_id") is not None else None

    with st.form(key, clear_on_submit=record is None):
        col1, col2 = st.columns(2)
        with col1:
            student_id = st.selectbox(
                label("student_id", lang) + " *",
                student_ids,
                index=student_ids.index(current_student) if current_student in student_ids else 0,
                format_func=lambda sid: student_names.get(sid, sid),
                key=f"{key}_student",
            ) if student_ids else None
            report_date = st.date_input(label("date", lang) + " *", value=as_date(flat.get("date")) or date.today(),
                                        key=f"{key}_date")
        with col2:
            father_name = st.text_input(label("father_name", lang), value=flat.get("father_name") or "", key=f"{key}_father")
            remarks = st.text_area(label("remarks", lang), value=flat.get("remarks") or "", key=f"{key}_remarks")

        s1, s2, s3 = st.columns(3)
        with s1:
            st.markdown(f"**{t('education.sabak', lang)}**")
            sabak_para_no = st.number_input(t("education.para_no", lang), min_value=0, max_value=30,
                                            value=int(flat.get("sabak_para_no") or 0), step=1, key=f"{key}_para")
            sabak_amount = st.text_input(label("amount", lang), value=flat.get("sabak_amount") or "", key=f"{key}_sa")
        with s2:
            st.markdown(f"**{t('education.sabqi', lang)}**")
            sabqi_recited = st.checkbox(t("education.recited", lang), value=bool(flat.get("sabqi_recited")),
                                        key=f"{key}_recited")
            sabqi_amount = st.text_input(label("amount", lang), value=flat.get("sabqi_amount") or "", key=f"{key}_qa")
            sabqi_heard_by = st.text_input(t("education.heard_by", lang), value=flat.get("sabqi_heard_by") or "",
                                           key=f"{key}_qh")
        with s3:
            st.markdown(f"**{t('education.manzil', lang)}**")
            manzil_number = st.text_input(t("education.number", lang), value=flat.get("manzil_number") or "",
                                          key=f"{key}_number")
            manzil_heard_by = st.text_input(t("education.heard_by", lang), value=flat.get("manzil_heard_by") or "",
                                            key=f"{key}_mh")

        submitted = st.form_submit_button(t("common.save", lang), use_container_width=True)

    if not submitted:
        return None

    # Father's name and class default to the student's own record
    student = students_by_id.get(str(student_id), {})
    return {
        "student_id": student_id,
        "father_name": father_name or student.get("father_name"),
        "class_id": student.get("class_id"),
        "date": report_date,
        "remarks": remarks or None,
        "sabak_para_no": sabak_para_no or None,
        "sabak_amount": sabak_amount,
        "sabqi_recited": sabqi_recited,
        "sabqi_amount": sabqi_amount,
        "sabqi_heard_by": sabqi_heard_by,
        "manzil_number": manzil_number,
        "manzil_heard_by": manzil_heard_by,
    }


tab_list, tab_add, tab_edit = st.tabs(
    [f"📋 {t('nav.education_reports', lang)}", f"➕ {t('common.add', lang)}", f"✏️ {t('common.edit', lang)}"]
)

# =============================================================================
# LIST
# =============================================================================
with tab_list:
    options = [None] + list(student_names.keys())
    chosen = st.selectbox(
        label("student_id", lang),
        options,
        format_func=lambda sid: t("common.select", lang) if sid is None else student_names.get(sid, sid),
    )
    shown = [r for r in reports if chosen is None or str(r.get("student_id")) == chosen]
    if not shown:
        st.info(t("common.no_records", lang))
    else:
        table = pd.DataFrame([
            {
                label("date", lang): r.get("date"),
                label("student_id", lang): student_names.get(str(r.get("student_id")), t("common.unknown", lang)),
                t("education.sabak", lang): " ".join(str(v) for v in (r.get("sabak") or {}).values()),
                t("education.sabqi", lang): "✓" if (r.get("sabqi") or {}).get("recited") else "✗",
                t("education.manzil", lang): (r.get("manzil") or {}).get("number", ""),
                label("remarks", lang): r.get("remarks") or "",
            }
            for r in shown
        ])
        st.dataframe(table, use_container_width=True, hide_index=True)

        pdf = export_education_pdf(shown, students, classes, student_id=chosen, madrasa_name=get_madrasa_name())
        st.download_button(
            f"📄 {t('common.download', lang)} PDF",
            data=pdf,
            file_name=f"education_report_{date.today().isoformat()}.pdf",
            mime="application/pdf",
        )

# =============================================================================
# ADD / EDIT
# =============================================================================
with tab_add:
    values = report_form("education_add")
    if values is not None:
        if show_result(repo.create(values), lang, pending_count=stack.state.pending_changes):
            st.rerun()

with tab_edit:
    by_id = {str(r["id"]): r for r in reports if r.get("id") is not None}
    if not by_id:
        st.info(t("common.no_records", lang))
    else:
        record_id = st.selectbox(
            t("common.select", lang),
            list(by_id.keys()),
            format_func=lambda rid: (
                f"{by_id[rid].get('date')} · {student_names.get(str(by_id[rid].get('student_id')), '')}"
            ),
        )
        values = report_form(f"education_edit_{record_id}", by_id[record_id])
        if values is not None:
            if show_result(repo.update(record_id, values), lang, pending_count=stack.state.pending_changes):
                st.rerun()
        if confirm_delete(record_id, f"education_delete_{record_id}", lang):
            if show_result(repo.delete(record_id), lang, "common.deleted", stack.state.pending_changes):
                st.rerun()
