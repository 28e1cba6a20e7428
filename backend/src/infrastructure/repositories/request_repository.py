"""Request repository for database operations"""

from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.util import identity_key

from models.base import utcnow
from models.declaration_request import DeclarationRequest


class RequestRepository:
    """Repository for request table operations.

    Every mutation is a single UPDATE ... WHERE id = :id with last-writer-wins
    semantics; there is no optimistic version check.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(self, user_id: UUID, declaration_id: UUID, **fields: Any) -> DeclarationRequest:
        """Insert a new request and flush it to obtain defaults.

        Raises:
            sqlalchemy.exc.IntegrityError: If the pending-request unique
                index rejects the row
        """
        request = DeclarationRequest(
            user_id=user_id,
            declaration_id=declaration_id,
            **fields,
        )
        self.db.add(request)
        self.db.flush()
        return request

    def find_by_id(self, request_id: UUID) -> Optional[DeclarationRequest]:
        """Get a request by ID, or None."""
        return self.find_one(DeclarationRequest.id == request_id)

    def find_one(self, *criteria) -> Optional[DeclarationRequest]:
        """Return the first request matching all criteria, or None."""
        return self.db.query(DeclarationRequest).filter(*criteria).first()

    def find(self, *criteria, order_by=None) -> List[DeclarationRequest]:
        """Return all requests matching criteria with owner data eager-loaded.

        Args:
            criteria: SQLAlchemy filter expressions
            order_by: Optional ORDER BY clause(s), single or tuple

        Returns:
            List of DeclarationRequest rows
        """
        query = self.db.query(DeclarationRequest).options(
            joinedload(DeclarationRequest.user),
            joinedload(DeclarationRequest.declaration),
            joinedload(DeclarationRequest.attendant),
        ).filter(*criteria)

        if order_by is not None:
            if not isinstance(order_by, (list, tuple)):
                order_by = (order_by,)
            query = query.order_by(*order_by)

        return query.all()

    def update(self, request_id: UUID, **fields: Any) -> int:
        """Apply fields to one request in a single UPDATE statement.

        Args:
            request_id: Request to update
            fields: Column values to set

        Returns:
            Number of rows updated (0 if the request vanished)
        """
        fields.setdefault("updated_at", utcnow())
        rowcount = self.db.query(DeclarationRequest).filter(
            DeclarationRequest.id == request_id
        ).update(fields, synchronize_session=False)

        # Drop any stale copy held by this session
        cached = self.db.identity_map.get(identity_key(DeclarationRequest, request_id))
        if cached is not None:
            self.db.expire(cached)

        return rowcount
