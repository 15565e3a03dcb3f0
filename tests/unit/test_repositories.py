# =============================================================================
# tests/unit/test_repositories.py
# Unit Tests for per-table repositories
# =============================================================================

from datetime import date

import pytest


def student_form(**overrides):
    values = {"name": "Hamid", "father_name": "Umar", "admission_date": date(2024, 4, 1), "status": "active"}
    values.update(overrides)
    return values


class TestEntityRepository:
    """Generic CRUD returning ServiceResult"""

    def test_create_online(self, stack):
        from madrasa_core.services import get_repository

        result = get_repository("students", stack.data_service).create(student_form())

        assert result.success
        assert not result.pending
        assert result.data["admission_date"] == "2024-04-01"

    def test_create_offline_is_pending(self, stack, network):
        from madrasa_core.services import get_repository

        network.offline()
        result = get_repository("students", stack.data_service).create(student_form())

        assert result.success
        assert result.pending
        assert result.data["id"].startswith("temp-")

    def test_missing_required_field_fails(self, stack, remote):
        from madrasa_core.services import get_repository

        result = get_repository("students", stack.data_service).create(student_form(father_name=""))

        assert not result.success
        assert result.error_code == "DATA_001"
        assert "father_name" in result.error
        assert remote.ops("insert") == []

    def test_partial_update_only_checks_given_fields(self, stack):
        from madrasa_core.services import get_repository

        repo = get_repository("students", stack.data_service)

        assert repo.update("s1", {"status": "graduated"}).success
        assert not repo.update("s1", {"name": ""}).success

    def test_remote_error_becomes_failed_result(self, stack, remote):
        from madrasa_core.services import get_repository

        remote.fail_ops.add(("classes", "delete"))

        result = get_repository("classes", stack.data_service).delete("c1")

        assert not result.success
        assert result.error_code == "REMOTE_001"

    def test_list_sorted_by_spec(self, stack):
        from madrasa_core.services import get_repository

        result = get_repository("students", stack.data_service).list()

        assert result.success
        assert [r["id"] for r in result.data] == ["s2", "s1"]

    def test_list_frame(self, stack):
        from madrasa_core.services import get_repository

        df = get_repository("classes", stack.data_service).list_frame()

        assert list(df["name"]) == ["Hifz A"]

    def test_creator_stamped_on_fees(self, stack):
        from madrasa_core.services import get_repository

        repo = get_repository("fees", stack.data_service, user_id="admin-1")
        result = repo.create({
            "student_id": "s1", "amount": 1500, "due_date": date(2024, 4, 1),
            "status": "pending", "fee_type": "monthly", "academic_year": "2024",
        })

        assert result.data["created_by"] == "admin-1"

    def test_factory_picks_specialised_repositories(self, stack):
        from madrasa_core.services.repositories import (
            AttendanceRepository,
            CreatorStampedRepository,
            EducationReportRepository,
            EntityRepository,
            get_repository,
        )

        assert isinstance(get_repository("attendance", stack.data_service), AttendanceRepository)
        assert isinstance(get_repository("education_reports", stack.data_service), EducationReportRepository)
        assert type(get_repository("budgets", stack.data_service)) is CreatorStampedRepository
        assert type(get_repository("teachers", stack.data_service)) is EntityRepository


class TestAttendanceRepository:
    """Bulk marking for a class"""

    def test_mark_class_creates_and_updates(self, stack, remote):
        from madrasa_core.services.repositories import AttendanceRepository

        remote.tables["attendance"] = [
            {"id": "a1", "date": "2024-03-04", "student_id": "s1", "status": "absent", "class_id": "c1"},
        ]
        repo = AttendanceRepository(stack.data_service)

        result = repo.mark_class(date(2024, 3, 4), "c1", {"s1": "present", "s2": "late"}, noted_by="Ustad")

        assert result.success
        assert result.data == {"created": 1, "updated": 1, "queued": 0}
        assert not result.pending
        rows = {r["student_id"]: r for r in remote.tables["attendance"]}
        assert rows["s1"]["status"] == "present"
        assert rows["s2"]["status"] == "late"
        assert rows["s2"]["date"] == "2024-03-04"

    def test_mark_class_offline_uses_cache(self, stack, network):
        from madrasa_core.services.repositories import AttendanceRepository

        stack.cache.put("attendance", "a1", {"id": "a1", "date": "2024-03-04", "student_id": "s1", "status": "absent"})
        network.offline()

        result = AttendanceRepository(stack.data_service).mark_class("2024-03-04", "c1", {"s1": "excused"})

        assert result.pending
        assert result.data["updated"] == 1
        assert stack.cache.get("attendance", "a1")["status"] == "excused"

    def test_unknown_status_rejected(self, stack, remote):
        from madrasa_core.services.repositories import AttendanceRepository

        result = AttendanceRepository(stack.data_service).mark_class(date(2024, 3, 4), "c1", {"s1": "leave"})

        assert not result.success
        assert remote.ops("insert", "update") == []

    def test_list_for_date(self, stack, remote):
        from madrasa_core.services.repositories import AttendanceRepository

        remote.tables["attendance"] = [
            {"id": "a1", "date": "2024-03-04", "student_id": "s1", "status": "present"},
            {"id": "a2", "date": "2024-03-05", "student_id": "s1", "status": "present"},
        ]

        result = AttendanceRepository(stack.data_service).list_for_date(date(2024, 3, 5))

        assert [r["id"] for r in result.data] == ["a2"]


class TestEducationReportRepository:
    """Sabak / sabqi / manzil progress"""

    def test_nest_progress(self):
        from madrasa_core.services.repositories import EducationReportRepository

        row = EducationReportRepository.nest_progress({
            "student_id": "s1",
            "sabak_para_no": "3",
            "sabak_amount": "1 page",
            "sabqi_recited": True,
            "sabqi_amount": "",
            "manzil_number": "",
        })

        assert row == {
            "student_id": "s1",
            "sabak": {"para_no": 3, "amount": "1 page"},
            "sabqi": {"recited": True},
            "manzil": {},
        }

    def test_untouched_parts_left_out(self):
        from madrasa_core.services.repositories import EducationReportRepository

        row = EducationReportRepository.nest_progress({"remarks": "Good", "sabqi_heard_by": "Qari Sahib"})

        assert row == {"remarks": "Good", "sabqi": {"heard_by": "Qari Sahib"}}

    def test_flatten_prefills_form(self):
        from madrasa_core.services.repositories import EducationReportRepository

        flat = EducationReportRepository.flatten_progress({
            "id": "r1",
            "sabak": {"para_no": 2, "amount": "half page"},
            "manzil": {"number": "5"},
        })

        assert flat["id"] == "r1"
        assert flat["sabak_para_no"] == 2
        assert flat["sabqi_recited"] is None
        assert flat["manzil_number"] == "5"

    def test_create_stores_nested_row(self, stack, remote):
        from madrasa_core.services.repositories import EducationReportRepository

        repo = EducationReportRepository(stack.data_service, "teacher-1")

        result = repo.create({
            "student_id": "s1", "father_name": "Ali", "date": date(2024, 3, 4),
            "sabak_para_no": 1, "sabak_amount": "3 lines",
        })

        stored = remote.tables["education_reports"][0]
        assert result.success
        assert stored["sabak"] == {"para_no": 1, "amount": "3 lines"}
        assert stored["created_by"] == "teacher-1"
        assert stored["date"] == "2024-03-04"


class TestRoleRepositories:
    """Role assignment and change requests"""

    def test_assign_replaces_roles(self, stack, remote):
        from madrasa_core.services.repositories import UserRoleRepository

        remote.tables["user_roles"] = [
            {"id": "r1", "user_id": "u1", "role": "teacher"},
            {"id": "r2", "user_id": "u2", "role": "staff"},
        ]
        repo = UserRoleRepository(stack.data_service, "admin-1")

        assert repo.assign("u1", "admin").success

        assert repo.roles_for("u1") == ["admin"]
        assert repo.roles_for("u2") == ["staff"]

    def test_assign_unknown_role_fails(self, stack):
        from madrasa_core.services.repositories import UserRoleRepository

        result = UserRoleRepository(stack.data_service).assign("u1", "superuser")

        assert not result.success

    def test_pending_role_email_normalised(self, stack, remote):
        from madrasa_core.services.repositories import PendingUserRoleRepository

        PendingUserRoleRepository(stack.data_service, "admin-1").create({"email": " Teacher@Madrasa.PK ", "role": "teacher"})

        stored = remote.tables["pending_user_roles"][0]
        assert stored["email"] == "teacher@madrasa.pk"
        assert stored["created_by"] == "admin-1"

    def test_approve_request(self, stack, remote):
        from madrasa_core.services.repositories import RoleChangeRequestRepository

        remote.tables["role_change_requests"] = [
            {"id": "q1", "user_id": "u1", "requested_role": "teacher", "status": "pending"},
        ]
        remote.tables["user_roles"] = [{"id": "r1", "user_id": "u1", "role": "parent"}]
        repo = RoleChangeRequestRepository(stack.data_service, "admin-1")

        result = repo.approve(remote.tables["role_change_requests"][0], "Welcome")

        request = remote.tables["role_change_requests"][0]
        assert result.success
        assert request["status"] == "approved"
        assert request["reviewed_by"] == "admin-1"
        assert [r["role"] for r in remote.tables["user_roles"]] == ["teacher"]

    def test_reject_request(self, stack, remote):
        from madrasa_core.services.repositories import RoleChangeRequestRepository

        remote.tables["role_change_requests"] = [
            {"id": "q1", "user_id": "u1", "requested_role": "admin", "status": "pending"},
        ]

        result = RoleChangeRequestRepository(stack.data_service, "admin-1").reject(
            remote.tables["role_change_requests"][0], "Not now"
        )

        assert result.success
        assert remote.tables["role_change_requests"][0]["admin_response"] == "Not now"

    def test_requests_need_connection(self, stack, network):
        from madrasa_core.services.repositories import RoleChangeRequestRepository

        network.offline()

        result = RoleChangeRequestRepository(stack.data_service, "u1").create({"requested_role": "teacher"})

        assert not result.success
        assert result.error_code == "OFFLINE_001"

    def test_join_request_stored(self, stack, remote):
        from madrasa_core.services.repositories import PendingUserRoleRepository

        result = PendingUserRoleRepository(stack.data_service).request_to_join(
            "Bilal@Mail.com", "Bilal Ahmed", "Madrasa Noor", "teacher"
        )

        assert result.success
        stored = remote.tables["pending_user_roles"][0]
        assert stored["email"] == "bilal@mail.com"
        assert stored["full_name"] == "Bilal Ahmed"
        assert stored["madrasa_name"] == "Madrasa Noor"
        assert stored["role"] == "teacher"
        assert "created_by" not in stored

    def test_join_request_cannot_ask_for_admin(self, stack, remote):
        from madrasa_core.services.repositories import PendingUserRoleRepository

        result = PendingUserRoleRepository(stack.data_service).request_to_join(
            "x@mail.com", "X", "Madrasa Noor", "admin"
        )

        assert not result.success
        assert result.error_code == "DATA_001"
        assert "pending_user_roles" not in remote.tables

    def test_join_request_needs_every_field(self, stack):
        from madrasa_core.services.repositories import PendingUserRoleRepository

        result = PendingUserRoleRepository(stack.data_service).request_to_join("x@mail.com", " ", "Madrasa Noor", "staff")

        assert not result.success
        assert "full_name" in result.error

    def test_join_request_offline(self, stack, network):
        from madrasa_core.services.repositories import PendingUserRoleRepository

        network.offline()
        result = PendingUserRoleRepository(stack.data_service).request_to_join(
            "x@mail.com", "X", "Madrasa Noor", "parent"
        )

        assert not result.success
        assert result.offline


class TestServiceResult:
    """ServiceResult messages and BaseService.run"""

    def test_offline_failure_message(self, stack, network):
        from madrasa_core.services.repositories import RoleChangeRequestRepository

        network.offline()
        result = RoleChangeRequestRepository(stack.data_service, "u1").create({"requested_role": "teacher"})

        assert result.offline
        assert result.message("en") == "This section needs an internet connection."

    def test_validation_failure_message(self, stack):
        from madrasa_core.services import get_repository

        result = get_repository("students", stack.data_service).create(student_form(name=""))

        assert not result.offline
        assert result.message("en").startswith("Please check the form: Missing required fields")

    def test_pending_write_message(self, stack, network):
        from madrasa_core.services import get_repository

        network.offline()
        result = get_repository("students", stack.data_service).create(student_form())

        assert result.message("en", pending_count=1) == (
            "Saved offline. 1 changes will sync when you are back online."
        )

    def test_confirmed_write_message(self, stack):
        from madrasa_core.services import get_repository

        result = get_repository("students", stack.data_service).create(student_form())

        assert result.message("en") == "Saved successfully"

    def test_unexpected_exception_keeps_text(self):
        from madrasa_core.services import BaseService

        def broken():
            raise ZeroDivisionError("division by zero")

        result = BaseService().run("Summarising fees", broken)

        assert not result
        assert result.error_code == "EXCEPTION"
        assert result.message("en") == "division by zero"

    def test_plain_return_value_is_data(self):
        from madrasa_core.services import BaseService

        result = BaseService().run("Counting", len, [1, 2, 3])

        assert result.success
        assert result.data == 3
        assert not result.pending
