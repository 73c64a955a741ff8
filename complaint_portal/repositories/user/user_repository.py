"""
User repository: lookups by email and role.
"""

from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_portal.core.exceptions import RepositoryError
from complaint_portal.models.base.enums import UserRole
from complaint_portal.models.user import User
from complaint_portal.repositories.base.base_repository import BaseRepository


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup."""
        try:
            return (
                self.db.query(User)
                .filter(func.lower(User.email) == normalize_email(email))
                .first()
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by email failed: {str(e)}") from e

    def email_exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def find_by_roles(self, roles: Iterable[UserRole]) -> List[User]:
        return self.find_by_criteria({"role": list(roles)}, order_by=["created_at"])
