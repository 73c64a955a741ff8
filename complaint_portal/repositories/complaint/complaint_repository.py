"""
Complaint repository: role-scoped listing, filtering and aggregation.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, false, func, not_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from complaint_portal.core.exceptions import RepositoryError
from complaint_portal.models.base.enums import ComplaintCategory, ComplaintStatus
from complaint_portal.models.complaint import Complaint
from complaint_portal.repositories.base.base_repository import BaseRepository, escape_like


@dataclass
class ComplaintScope:
    """
    Which complaints a caller may see: their own, one category, or all.

    ``empty`` scopes match nothing, e.g. a supervisor whose work area has
    no complaint category.
    """

    user_id: Optional[str] = None
    category: Optional[ComplaintCategory] = None
    empty: bool = False


@dataclass
class ComplaintFilters:
    status: Optional[ComplaintStatus] = None
    category: Optional[ComplaintCategory] = None
    building: Optional[str] = None
    room: Optional[str] = None
    search: Optional[str] = None
    search_submitted_by: bool = False
    user_type: Optional[str] = None


class ComplaintRepository(BaseRepository[Complaint]):
    def __init__(self, db: Session):
        super().__init__(Complaint, db)

    # ------------------------------------------------------------------ #
    # Query building
    # ------------------------------------------------------------------ #
    def scoped_query(self, scope: ComplaintScope) -> Query:
        query = self.db.query(Complaint)
        if scope.empty:
            return query.filter(false())
        if scope.user_id is not None:
            query = query.filter(Complaint.user_id == scope.user_id)
        if scope.category is not None:
            query = query.filter(Complaint.category == scope.category)
        return query

    @staticmethod
    def _apply_filters(query: Query, filters: ComplaintFilters) -> Query:
        if filters.status is not None:
            query = query.filter(Complaint.status == filters.status)
        if filters.category is not None:
            query = query.filter(Complaint.category == filters.category)
        if filters.building:
            query = query.filter(Complaint.building == filters.building)
        if filters.room:
            query = query.filter(Complaint.room == filters.room)

        if filters.search and filters.search.strip():
            pattern = f"%{escape_like(filters.search.strip())}%"
            columns = [Complaint.title, Complaint.description]
            if filters.search_submitted_by:
                columns.append(Complaint.submitted_by)
            query = query.filter(or_(*[col.ilike(pattern, escape="\\") for col in columns]))

        if filters.user_type:
            student = Complaint.user_email.ilike("%@gmail.com")
            staff = Complaint.user_email.ilike("%@staff.com")
            kind = filters.user_type.strip().lower()
            if kind == "student":
                query = query.filter(student)
            elif kind == "staff":
                query = query.filter(staff)
            elif kind == "unknown":
                query = query.filter(and_(not_(student), not_(staff)))
        return query

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def list_scoped(self, scope: ComplaintScope, filters: Optional[ComplaintFilters] = None) -> List[Complaint]:
        """Complaints within scope matching filters, newest first."""
        try:
            query = self._apply_filters(self.scoped_query(scope), filters or ComplaintFilters())
            return query.order_by(Complaint.created_at.desc(), Complaint.id).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"List complaints failed: {str(e)}") from e

    def status_counts(self, scope: ComplaintScope) -> Dict[ComplaintStatus, int]:
        """Count per status within scope; every status is present."""
        try:
            rows = (
                self.scoped_query(scope)
                .with_entities(Complaint.status, func.count(Complaint.id))
                .group_by(Complaint.status)
                .all()
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Status counts failed: {str(e)}") from e
        counts = {status: 0 for status in ComplaintStatus}
        for status, count in rows:
            counts[ComplaintStatus.normalize(status)] = count
        return counts

    def distinct_locations(self, scope: ComplaintScope) -> Tuple[List[str], List[str]]:
        """Sorted unique buildings and rooms within scope."""
        try:
            query = self.scoped_query(scope)
            buildings = [row[0] for row in query.with_entities(Complaint.building).distinct().all()]
            rooms = [row[0] for row in query.with_entities(Complaint.room).distinct().all()]
        except SQLAlchemyError as e:
            raise RepositoryError(f"Distinct locations failed: {str(e)}") from e
        return (
            sorted(b for b in buildings if b),
            sorted(r for r in rooms if r),
        )

    def list_updated_by_role(self, role: str) -> List[Complaint]:
        """Complaints last touched by the given handler role, most recent update first."""
        try:
            return (
                self.db.query(Complaint)
                .filter(Complaint.last_updated_by_role == role)
                .order_by(Complaint.updated_at.desc(), Complaint.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"List updated complaints failed: {str(e)}") from e
