"""User repository - read access to user profiles"""

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from models.user import User


class UserRepository:
    """Read-only lookups of user profiles."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID, or None."""
        return self.db.query(User).filter(User.id == user_id).first()
