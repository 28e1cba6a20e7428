"""Declaration repository - read access to declaration templates"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from models.declaration import Declaration


class DeclarationRepository:
    """Read-only lookups of declaration templates."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, declaration_id: UUID) -> Optional[Declaration]:
        """Get a declaration by ID, or None."""
        return self.db.query(Declaration).filter(Declaration.id == declaration_id).first()

    def list_all(self) -> List[Declaration]:
        """All declarations ordered by type label."""
        return self.db.query(Declaration).order_by(Declaration.type).all()
