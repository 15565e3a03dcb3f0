# =============================================================================
# madrasa_core/data/models.py
# Entity descriptors for every remote table
# =============================================================================
"""
Descriptors for the Supabase tables used by Madrasa Manager.

Each EntitySpec lists the editable fields (drives the generic forms), the
columns shown in tables, the default sort column and whether the table is
mirrored in the offline cache.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from madrasa_core.offline.local_cache import TRACKED_COLLECTIONS


# =============================================================================
# STATUS VALUES
# =============================================================================

class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class FeeStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STAFF = "staff"
    PARENT = "parent"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


LEVELS = ("Beginner", "Intermediate", "Advanced", "All Levels")
PAYMENT_METHODS = ("cash", "bank", "check", "online")

CATEGORIES: Dict[str, Tuple[str, ...]] = {
    TransactionType.INCOME.value: ("Donations", "Fees", "Grants", "Other Income"),
    TransactionType.EXPENSE.value: (
        "Salaries", "Utilities", "Maintenance", "Supplies", "Food", "Transport", "Other Expense",
    ),
}


def _values(enum_cls) -> Tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


# =============================================================================
# DESCRIPTORS
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """One editable column."""
    name: str
    kind: str = "text"      # text | textarea | number | int | date | time | select | ref | bool
    required: bool = False
    options: Sequence[str] = ()
    ref_table: Optional[str] = None
    default: Optional[object] = None


@dataclass(frozen=True)
class EntitySpec:
    """Descriptor of one remote table."""
    table: str
    fields: Tuple[FieldSpec, ...]
    display_columns: Tuple[str, ...]
    order_by: str = "created_at"
    ascending: bool = False
    label_field: str = "name"

    @property
    def offline(self) -> bool:
        """True when the table is mirrored locally and writable while offline."""
        return self.table in TRACKED_COLLECTIONS

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def required_fields(self) -> List[str]:
        return [f.name for f in self.fields if f.required]

    def get_field(self, name: str) -> Optional[FieldSpec]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


ENTITIES: Dict[str, EntitySpec] = {
    "students": EntitySpec(
        table="students",
        fields=(
            FieldSpec("name", required=True),
            FieldSpec("father_name", required=True),
            FieldSpec("class_id", kind="ref", ref_table="classes"),
            FieldSpec("admission_date", kind="date", required=True),
            FieldSpec("contact"),
            FieldSpec("age", kind="int"),
            FieldSpec("grade"),
            FieldSpec("status", kind="select", options=_values(StudentStatus), default="active"),
            FieldSpec("photo_url"),
        ),
        display_columns=("name", "father_name", "class_id", "admission_date", "contact", "status"),
    ),
    "teachers": EntitySpec(
        table="teachers",
        fields=(
            FieldSpec("name", required=True),
            FieldSpec("qualification", required=True),
            FieldSpec("subject", required=True),
            FieldSpec("contact", required=True),
            FieldSpec("email", required=True),
            FieldSpec("specialization"),
            FieldSpec("classes_count", kind="int", default=0),
            FieldSpec("students_count", kind="int", default=0),
        ),
        display_columns=("name", "qualification", "subject", "contact", "email"),
    ),
    "classes": EntitySpec(
        table="classes",
        fields=(
            FieldSpec("name", required=True),
            FieldSpec("section"),
            FieldSpec("teacher_id", kind="ref", ref_table="teachers"),
            FieldSpec("year"),
            FieldSpec("schedule"),
            FieldSpec("duration"),
            FieldSpec("room"),
            FieldSpec("level", kind="select", options=LEVELS[:3]),
            FieldSpec("students_count", kind="int", default=0),
        ),
        display_columns=("name", "section", "teacher_id", "schedule", "room", "level", "students_count"),
    ),
    "courses": EntitySpec(
        table="courses",
        fields=(
            FieldSpec("title", required=True),
            FieldSpec("description", kind="textarea"),
            FieldSpec("duration"),
            FieldSpec("level", kind="select", options=LEVELS),
            FieldSpec("modules", kind="int", default=0),
            FieldSpec("progress", kind="int", default=0),
            FieldSpec("students_count", kind="int", default=0),
        ),
        display_columns=("title", "duration", "level", "modules", "progress", "students_count"),
        label_field="title",
    ),
    "attendance": EntitySpec(
        table="attendance",
        fields=(
            FieldSpec("date", kind="date", required=True),
            FieldSpec("class_id", kind="ref", ref_table="classes"),
            FieldSpec("student_id", kind="ref", ref_table="students"),
            FieldSpec("status", kind="select", options=_values(AttendanceStatus), required=True, default="present"),
            FieldSpec("time", kind="time"),
            FieldSpec("noted_by"),
        ),
        display_columns=("date", "student_id", "class_id", "status", "time", "noted_by"),
        label_field="date",
    ),
    "fees": EntitySpec(
        table="fees",
        fields=(
            FieldSpec("student_id", kind="ref", ref_table="students", required=True),
            FieldSpec("amount", kind="number", required=True),
            FieldSpec("due_date", kind="date", required=True),
            FieldSpec("status", kind="select", options=_values(FeeStatus), required=True, default="pending"),
            FieldSpec("fee_type", required=True),
            FieldSpec("academic_year", required=True),
            FieldSpec("payment_screenshot_url"),
        ),
        display_columns=("student_id", "fee_type", "amount", "due_date", "status", "academic_year"),
        label_field="fee_type",
    ),
    "expenses": EntitySpec(
        table="expenses",
        fields=(
            FieldSpec("title", required=True),
            FieldSpec("description", kind="textarea"),
            FieldSpec("amount", kind="number", required=True),
            FieldSpec("type", kind="select", options=_values(TransactionType), required=True, default="expense"),
            FieldSpec("category", kind="select", required=True,
                      options=CATEGORIES["income"] + CATEGORIES["expense"]),
            FieldSpec("date", kind="date", required=True),
            FieldSpec("payment_method", kind="select", options=PAYMENT_METHODS, default="cash"),
            FieldSpec("receipt_url"),
        ),
        display_columns=("date", "title", "type", "category", "amount", "payment_method"),
        order_by="date",
        label_field="title",
    ),
    "budgets": EntitySpec(
        table="budgets",
        fields=(
            FieldSpec("category", kind="select", options=CATEGORIES["expense"], required=True),
            FieldSpec("amount", kind="number", required=True),
            FieldSpec("month", kind="int", required=True),
            FieldSpec("year", kind="int", required=True),
        ),
        display_columns=("category", "amount", "month", "year"),
        order_by="year",
        label_field="category",
    ),
    "education_reports": EntitySpec(
        table="education_reports",
        fields=(
            FieldSpec("student_id", kind="ref", ref_table="students", required=True),
            FieldSpec("father_name", required=True),
            FieldSpec("class_id", kind="ref", ref_table="classes"),
            FieldSpec("date", kind="date", required=True),
            FieldSpec("remarks", kind="textarea"),
        ),
        display_columns=("date", "student_id", "father_name", "class_id", "remarks"),
        order_by="date",
        label_field="date",
    ),
    "user_roles": EntitySpec(
        table="user_roles",
        fields=(
            FieldSpec("user_id", required=True),
            FieldSpec("role", kind="select", options=_values(Role), required=True),
        ),
        display_columns=("user_id", "role", "created_at"),
        label_field="role",
    ),
    "pending_user_roles": EntitySpec(
        table="pending_user_roles",
        fields=(
            FieldSpec("email", required=True),
            FieldSpec("role", kind="select", options=_values(Role), required=True),
            FieldSpec("full_name"),
            FieldSpec("madrasa_name"),
        ),
        display_columns=("email", "full_name", "madrasa_name", "role", "created_at"),
        label_field="email",
    ),
    "role_change_requests": EntitySpec(
        table="role_change_requests",
        fields=(
            FieldSpec("requested_role", kind="select", options=_values(Role), required=True),
            FieldSpec("request_message", kind="textarea"),
        ),
        display_columns=("user_id", "requested_role", "status", "request_message", "created_at"),
        label_field="requested_role",
    ),
}


def get_entity(table: str) -> EntitySpec:
    """Descriptor for table; KeyError for unknown tables."""
    return ENTITIES[table]


def record_label(record: Dict[str, object], spec: EntitySpec) -> str:
    """Short human label for a record (used in select boxes)."""
    value = record.get(spec.label_field)
    return str(value) if value not in (None, "") else str(record.get("id", ""))
