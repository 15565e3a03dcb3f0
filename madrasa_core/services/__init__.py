# =============================================================================
# madrasa_core/services/__init__.py
# Service Layer for Madrasa Manager
# Separates business logic from UI presentation
# =============================================================================
"""
Service Layer for Madrasa Manager

Usage Example:
-------------
    from madrasa_core.offline import get_data_service
    from madrasa_core.services import get_repository, analytics

    fees = get_repository("fees", get_data_service(), user_id=current_user_id)
    result = fees.create({"student_id": sid, "amount": 500, ...})
    if result.pending:
        st.info("Saved offline, will sync when back online")

    summary = analytics.fee_summary(fees.list_frame())
"""

from .base_service import BaseService, ServiceResult
from .repositories import (
    EntityRepository,
    CreatorStampedRepository,
    AttendanceRepository,
    UserRoleRepository,
    PendingUserRoleRepository,
    RoleChangeRequestRepository,
    EducationReportRepository,
    get_repository,
)
from . import analytics

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Repositories
    "EntityRepository",
    "CreatorStampedRepository",
    "AttendanceRepository",
    "UserRoleRepository",
    "PendingUserRoleRepository",
    "RoleChangeRequestRepository",
    "EducationReportRepository",
    "get_repository",
    # Summaries
    "analytics",
]
