# =============================================================================
# madrasa_core/services/repositories.py
# Per-table repositories on top of the OfflineDataService
# =============================================================================
"""
Repositories give pages one object per table with list/get/create/update/
delete returning ServiceResult. Writes on offline-capable tables succeed
while disconnected and come back with pending=True.
"""

from __future__ import annotations
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from madrasa_core.data.models import (
    ENTITIES,
    AttendanceStatus,
    EntitySpec,
    RequestStatus,
    Role,
)
from madrasa_core.errors.exceptions import ValidationError
from madrasa_core.offline.unified_data_service import OfflineDataService, WriteOutcome
from madrasa_core.services.base_service import BaseService, ServiceResult


def _iso(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class EntityRepository(BaseService):
    """
    CRUD for one table.

    Usage:
        students = EntityRepository(service, ENTITIES["students"])
        result = students.create({"name": "Ahmad", "father_name": "Ali", ...})
        if result.pending:
            st.info("Saved offline")
    """

    # Stamp created_by with the acting user on create
    stamps_creator = False

    def __init__(self, service: OfflineDataService, spec: EntitySpec, user_id: Optional[str] = None):
        super().__init__()
        self.service = service
        self.spec = spec
        self.user_id = user_id

    @property
    def table(self) -> str:
        return self.spec.table

    def validate(self, data: Dict[str, Any], partial: bool = False) -> None:
        """Raise ValidationError when a required field is empty."""
        fields = self.spec.required_fields
        if partial:
            fields = [f for f in fields if f in data]
        missing = [f for f in fields if data.get(f) in (None, "")]
        if missing:
            raise ValidationError(
                f"Missing required fields for {self.table}: {', '.join(missing)}",
                field=missing[0],
            )

    def prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Normalise form values before they are written."""
        return {k: _iso(v) for k, v in data.items()}

    # =========================================================================
    # CRUD
    # =========================================================================

    def list(self) -> ServiceResult:
        return self.run(
            f"Loading {self.table}",
            self.service.list,
            self.table,
            order_by=self.spec.order_by,
            ascending=self.spec.ascending,
        )

    def list_frame(self) -> pd.DataFrame:
        """Rows as a DataFrame; empty on failure."""
        result = self.list()
        if not result.success or not result.data:
            return pd.DataFrame()
        return pd.DataFrame(result.data)

    def get(self, record_id: str) -> ServiceResult:
        return self.run(f"Loading {self.table}/{record_id}", self.service.get, self.table, record_id)

    def create(self, data: Dict[str, Any]) -> ServiceResult:
        def _create() -> WriteOutcome:
            row = self.prepare(data)
            if self.stamps_creator and self.user_id and not row.get("created_by"):
                row["created_by"] = self.user_id
            self.validate(row)
            return self.service.create(self.table, row)

        return self.run(f"Creating {self.table}", _create)

    def update(self, record_id: str, changes: Dict[str, Any]) -> ServiceResult:
        def _update() -> WriteOutcome:
            prepared = self.prepare(changes)
            self.validate(prepared, partial=True)
            return self.service.update(self.table, record_id, prepared)

        return self.run(f"Updating {self.table}/{record_id}", _update)

    def delete(self, record_id: str) -> ServiceResult:
        return self.run(
            f"Deleting {self.table}/{record_id}", self.service.delete, self.table, record_id
        )


class CreatorStampedRepository(EntityRepository):
    """Fees, expenses, budgets and education reports record who created them."""
    stamps_creator = True


# =============================================================================
# ATTENDANCE
# =============================================================================

class AttendanceRepository(EntityRepository):
    """Attendance rows filtered by date and marked in bulk for a class."""

    def __init__(self, service: OfflineDataService, user_id: Optional[str] = None):
        super().__init__(service, ENTITIES["attendance"], user_id)

    def list_for_date(self, on: Any) -> ServiceResult:
        day = _iso(on)
        return self.run(
            f"Loading attendance for {day}", self.service.select_where, self.table, {"date": day}
        )

    def mark_class(
        self,
        on: Any,
        class_id: Optional[str],
        statuses: Dict[str, str],
        noted_by: Optional[str] = None,
        time: Optional[str] = None,
    ) -> ServiceResult:
        """
        Record one status per student for a day.

        An existing row for (date, student) is updated; otherwise a new row
        is created.

        Returns:
            ServiceResult whose data is {"created": n, "updated": n}
        """
        allowed = {s.value for s in AttendanceStatus}
        day = _iso(on)

        def _mark() -> Dict[str, Any]:
            for student_id, status in statuses.items():
                if status not in allowed:
                    raise ValidationError(f"Unknown attendance status '{status}'", field="status", value=status)

            existing = {
                str(row.get("student_id")): row
                for row in self.service.select_where(self.table, {"date": day})
            }
            counts = {"created": 0, "updated": 0, "queued": 0}
            for student_id, status in statuses.items():
                changes = {"status": status, "class_id": class_id, "noted_by": noted_by, "time": time}
                changes = {k: v for k, v in changes.items() if v is not None}
                row = existing.get(str(student_id))
                if row is not None:
                    outcome = self.service.update(self.table, str(row["id"]), changes)
                    counts["updated"] += 1
                else:
                    outcome = self.service.create(
                        self.table, {**changes, "date": day, "student_id": student_id}
                    )
                    counts["created"] += 1
                if outcome.queued:
                    counts["queued"] += 1
            return counts

        result = self.run(f"Marking attendance for {day}", _mark)
        if result.success:
            result.pending = result.data["queued"] > 0
        return result


# =============================================================================
# ROLES
# =============================================================================

def _check_role(role: str) -> None:
    if role not in {r.value for r in Role}:
        raise ValidationError(f"Unknown role '{role}'", field="role", value=role)


class UserRoleRepository(EntityRepository):
    """Assigned roles; online only."""

    def __init__(self, service: OfflineDataService, user_id: Optional[str] = None):
        super().__init__(service, ENTITIES["user_roles"], user_id)

    def roles_for(self, user_id: str) -> List[str]:
        rows = self.service.select_where(self.table, {"user_id": user_id})
        return [row["role"] for row in rows if row.get("role")]

    def assign(self, user_id: str, role: str) -> ServiceResult:
        """Replace every role of user_id with role."""
        def _assign() -> WriteOutcome:
            _check_role(role)
            self.service.delete_where(self.table, {"user_id": user_id})
            return self.service.create(self.table, {"user_id": user_id, "role": role})

        return self.run(f"Assigning {role} to {user_id}", _assign)


class PendingUserRoleRepository(EntityRepository):
    """Roles pre-assigned to an e-mail before the user signs up."""

    def __init__(self, service: OfflineDataService, user_id: Optional[str] = None):
        super().__init__(service, ENTITIES["pending_user_roles"], user_id)

    def prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        row = super().prepare(data)
        if row.get("email"):
            row["email"] = str(row["email"]).strip().lower()
        if row.get("role"):
            _check_role(row["role"])
        if self.user_id and not row.get("created_by"):
            row["created_by"] = self.user_id
        return row

    def request_to_join(self, email: str, full_name: str, madrasa_name: str, role: str) -> ServiceResult:
        """
        Ask to join an existing madrasa. An admin of that madrasa accepts the
        request by assigning the role once the user has signed up.

        Admin rights cannot be requested this way.
        """
        def _request() -> WriteOutcome:
            values = {
                "email": (email or "").strip(),
                "full_name": (full_name or "").strip(),
                "madrasa_name": (madrasa_name or "").strip(),
                "role": role,
            }
            missing = [k for k, v in values.items() if not v]
            if missing:
                raise ValidationError(f"Join request is missing {', '.join(missing)}", field=missing[0])
            if role == Role.ADMIN.value:
                raise ValidationError("Admin access cannot be requested", field="role", value=role)
            row = self.prepare(values)
            self.validate(row)
            return self.service.create(self.table, row)

        return self.run(f"Join request for {madrasa_name}", _request)


class RoleChangeRequestRepository(EntityRepository):
    """Requests from users to change their role, reviewed by an admin."""

    def __init__(self, service: OfflineDataService, user_id: Optional[str] = None):
        super().__init__(service, ENTITIES["role_change_requests"], user_id)

    def list_mine(self) -> ServiceResult:
        return self.run(
            "Loading my role requests", self.service.select_where, self.table, {"user_id": self.user_id}
        )

    def prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        row = super().prepare(data)
        if row.get("requested_role"):
            _check_role(row["requested_role"])
        if self.user_id and not row.get("user_id"):
            row["user_id"] = self.user_id
        return row

    def _review(self, request_id: str, status: RequestStatus, admin_response: Optional[str]) -> WriteOutcome:
        return self.service.update(
            self.table,
            request_id,
            {
                "status": status.value,
                "admin_response": admin_response,
                "reviewed_by": self.user_id,
                "reviewed_at": datetime.now().isoformat(),
            },
        )

    def approve(self, request: Dict[str, Any], admin_response: Optional[str] = None) -> ServiceResult:
        """Mark the request approved and replace the requester's role."""
        def _approve() -> WriteOutcome:
            _check_role(request["requested_role"])
            outcome = self._review(str(request["id"]), RequestStatus.APPROVED, admin_response)
            self.service.delete_where("user_roles", {"user_id": request["user_id"]})
            self.service.create("user_roles", {"user_id": request["user_id"], "role": request["requested_role"]})
            return outcome

        return self.run(f"Approving role request {request.get('id')}", _approve)

    def reject(self, request: Dict[str, Any], admin_response: Optional[str] = None) -> ServiceResult:
        return self.run(
            f"Rejecting role request {request.get('id')}",
            self._review,
            str(request["id"]),
            RequestStatus.REJECTED,
            admin_response,
        )


# =============================================================================
# EDUCATION REPORTS
# =============================================================================

# Quran progress parts and their sub-fields
PROGRESS_PARTS: Dict[str, Tuple[str, ...]] = {
    "sabak": ("para_no", "amount"),
    "sabqi": ("recited", "amount", "heard_by"),
    "manzil": ("number", "heard_by"),
}


class EducationReportRepository(CreatorStampedRepository):
    """
    Daily Quran progress per student.

    Forms use flat keys such as sabak_para_no or manzil_heard_by; rows store
    one object per part: {"sabak": {"para_no": 3, "amount": "1 page"}, ...}.
    """

    def __init__(self, service: OfflineDataService, user_id: Optional[str] = None):
        super().__init__(service, ENTITIES["education_reports"], user_id)

    @staticmethod
    def nest_progress(values: Dict[str, Any]) -> Dict[str, Any]:
        """Fold flat <part>_<field> keys into one dict per part, dropping blanks."""
        row = {k: v for k, v in values.items() if not any(k.startswith(f"{p}_") for p in PROGRESS_PARTS)}
        for part, fields in PROGRESS_PARTS.items():
            if part not in values and not any(f"{part}_{name}" in values for name in fields):
                continue
            nested = {}
            for name in fields:
                value = values.get(f"{part}_{name}")
                if value in (None, ""):
                    continue
                if name == "para_no":
                    value = int(value)
                nested[name] = value
            if part in values and isinstance(values[part], dict):
                nested = {**values[part], **nested}
            row[part] = nested
        return row

    @staticmethod
    def flatten_progress(record: Dict[str, Any]) -> Dict[str, Any]:
        """Inverse of nest_progress, used to pre-fill the edit form."""
        flat = {k: v for k, v in record.items() if k not in PROGRESS_PARTS}
        for part, fields in PROGRESS_PARTS.items():
            nested = record.get(part) or {}
            for name in fields:
                flat[f"{part}_{name}"] = nested.get(name)
        return flat

    def prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.nest_progress(super().prepare(data))

    def list_for_student(self, student_id: str) -> ServiceResult:
        return self.run(
            f"Loading education reports for {student_id}",
            self.service.select_where,
            self.table,
            {"student_id": student_id},
        )


# =============================================================================
# FACTORY
# =============================================================================

_CREATOR_STAMPED = ("fees", "expenses", "budgets")


def get_repository(table: str, service: OfflineDataService, user_id: Optional[str] = None) -> EntityRepository:
    """Repository for table, specialised where the table has domain operations."""
    specialised = {
        "attendance": AttendanceRepository,
        "education_reports": EducationReportRepository,
        "user_roles": UserRoleRepository,
        "pending_user_roles": PendingUserRoleRepository,
        "role_change_requests": RoleChangeRequestRepository,
    }
    if table in specialised:
        return specialised[table](service, user_id)
    if table in _CREATOR_STAMPED:
        return CreatorStampedRepository(service, ENTITIES[table], user_id)
    return EntityRepository(service, ENTITIES[table], user_id)
