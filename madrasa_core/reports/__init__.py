from .pdf_export import (
    ReportBuilder,
    register_font,
    export_students_pdf,
    export_fees_pdf,
    export_attendance_pdf,
    export_education_pdf,
)

__all__ = [
    "ReportBuilder",
    "register_font",
    "export_students_pdf",
    "export_fees_pdf",
    "export_attendance_pdf",
    "export_education_pdf",
]
