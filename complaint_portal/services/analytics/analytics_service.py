"""
Complaint analytics: status, category and completion aggregates for the
supervisor and admin dashboards.

Supervisors are always scoped to their own category; admins and
maintenance may pick one or look at everything.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from complaint_portal.models.base.enums import (
    ComplaintCategory,
    ComplaintStatus,
    UserRole,
    match_enum_value,
)
from complaint_portal.models.complaint import Complaint
from complaint_portal.models.user import User
from complaint_portal.repositories.complaint import ComplaintRepository, ComplaintScope
from complaint_portal.schemas.analytics import AnalyticsSummary, DashboardStats
from complaint_portal.services.base import BaseService, ServiceResult
from complaint_portal.services.complaint import complaint_scope_for
from complaint_portal.utils.datetime_utils import DateTimeHelper


def status_counts(complaints: Iterable[Complaint]) -> Dict[str, int]:
    """Total plus one entry per status, zero-filled."""
    counts = {status.value: 0 for status in ComplaintStatus}
    total = 0
    for complaint in complaints:
        counts[ComplaintStatus.normalize(complaint.status).value] += 1
        total += 1
    return {"total": total, **counts}


def summarize(complaints: List[Complaint]) -> Dict[str, Any]:
    by_status = {status.value: 0 for status in ComplaintStatus}
    completed_by_date: Counter = Counter()
    by_category: Counter = Counter()

    for complaint in complaints:
        status = ComplaintStatus.normalize(complaint.status)
        by_status[status.value] += 1
        by_category[complaint.category.value] += 1
        if status == ComplaintStatus.COMPLETED and complaint.created_at is not None:
            completed_by_date[DateTimeHelper.day_key(complaint.created_at)] += 1

    return {
        "total": len(complaints),
        "by_status": by_status,
        "completed_by_date": dict(sorted(completed_by_date.items())),
        "by_category": dict(sorted(by_category.items())),
    }


def dashboard_stats(complaints: List[Complaint], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Headline numbers for the dashboard home.

    ``averageResponseHours`` is the mean time from creation to the last
    update over completed complaints; ``efficiency`` is the completed share
    as a whole percentage.
    """
    now = DateTimeHelper.as_utc(now) if now else DateTimeHelper.now()
    day_start = DateTimeHelper.start_of_day(now)
    window_start = now - timedelta(hours=24)

    new_today = completed_total = completed_recent = updated_recent = 0
    response_hours: List[float] = []

    for complaint in complaints:
        created = DateTimeHelper.as_utc(complaint.created_at)
        updated = DateTimeHelper.as_utc(complaint.updated_at) or created
        completed = ComplaintStatus.normalize(complaint.status) == ComplaintStatus.COMPLETED

        if completed:
            completed_total += 1
        if created and created >= day_start:
            new_today += 1
        if updated and updated >= window_start:
            updated_recent += 1
            if completed:
                completed_recent += 1
        if completed and created and updated:
            response_hours.append(DateTimeHelper.hours_between(created, updated))

    total = len(complaints)
    average = round(sum(response_hours) / len(response_hours), 1) if response_hours else 0.0
    efficiency = round(completed_total / total * 100) if total else 0

    return {
        "total": total,
        "new_today": new_today,
        "completed_last24h": completed_recent,
        "updated_last24h": updated_recent,
        "average_response_hours": average,
        "efficiency": efficiency,
        "status_counts": status_counts(complaints),
    }


class AnalyticsService(BaseService[Complaint, ComplaintRepository]):
    def __init__(self, complaint_repository: ComplaintRepository, db_session: Session):
        super().__init__(complaint_repository, db_session)

    def resolve_scope(
        self,
        user: User,
        category: Optional[str] = None,
    ) -> ServiceResult[Tuple[ComplaintScope, Optional[str]]]:
        """Scope and category label for ``user``; submitters have no analytics."""
        if user.role == UserRole.SUPERVISOR:
            label = user.category.value if user.category else None
            return ServiceResult.success((complaint_scope_for(user), label))
        if user.role not in (UserRole.ADMIN, UserRole.MAINTENANCE):
            return ServiceResult.forbidden("view", "analytics")
        if not category:
            return ServiceResult.success((ComplaintScope(), None))

        matched = match_enum_value(ComplaintCategory, category)
        if matched is None:
            return ServiceResult.validation_failure(f"Invalid category: {category}", field="category")
        return ServiceResult.success((ComplaintScope(category=matched), matched.value))

    def scoped_complaints(
        self,
        user: User,
        category: Optional[str] = None,
    ) -> ServiceResult[Tuple[List[Complaint], Optional[str]]]:
        scoped = self.resolve_scope(user, category)
        if not scoped:
            return scoped
        scope, label = scoped.data
        try:
            return ServiceResult.success((self.repository.list_scoped(scope), label))
        except Exception as e:
            return self._handle_exception(e, "load analytics", user.id)

    def summary(self, user: User, category: Optional[str] = None) -> ServiceResult[AnalyticsSummary]:
        loaded = self.scoped_complaints(user, category)
        if not loaded:
            return loaded
        complaints, label = loaded.data
        return ServiceResult.success(AnalyticsSummary(category=label, **summarize(complaints)))

    def dashboard(
        self,
        user: User,
        category: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult[DashboardStats]:
        loaded = self.scoped_complaints(user, category)
        if not loaded:
            return loaded
        complaints, label = loaded.data
        return ServiceResult.success(DashboardStats(category=label, **dashboard_stats(complaints, now)))
