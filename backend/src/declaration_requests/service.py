"""Request lifecycle service - submission, listing and admin review.

Every operation resolves the caller through the user repository and checks
the role policy (auth.roles.OPERATION_ROLES) before touching any request.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from audit.service import log_audit_event, REQUEST_CREATED, REQUEST_STATUS_CHANGED
from auth.roles import Operation, authorize
from config import get_settings
from domain.requests.errors import Conflict, NotFound
from domain.requests.request_status import RequestStatus, is_status_update_allowed
from infrastructure.repositories.declaration_repository import DeclarationRepository
from infrastructure.repositories.request_repository import RequestRepository
from infrastructure.repositories.user_repository import UserRepository
from models.base import utcnow
from models.declaration_request import DeclarationRequest
from models.user import User
from observability.metrics import requests_created_total, request_status_updates_total
from .schemas import AdminRequestView, UserRequestView
from .views import to_admin_view, to_user_view

logger = logging.getLogger(__name__)


class RequestLifecycleService:
    """Service for declaration request operations."""

    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = utcnow,
        recent_days: Optional[int] = None,
    ):
        self.db = db
        self.clock = clock
        self.recent_days = recent_days if recent_days is not None else get_settings().RECENT_GENERATION_DAYS
        self.requests = RequestRepository(db)
        self.users = UserRepository(db)
        self.declarations = DeclarationRepository(db)

    def authorize_caller(self, caller_id: Optional[UUID], operation: Operation) -> User:
        """Resolve the caller and check the role policy for operation.

        Raises:
            PermissionDenied: If the caller is unknown or lacks the role
        """
        caller = self.users.find_by_id(caller_id) if caller_id else None
        authorize(caller, operation)
        return caller

    def list_all_requests(self, caller_id: UUID) -> List[AdminRequestView]:
        """All requests, newest first (admin only)."""
        self.authorize_caller(caller_id, Operation.LIST_ALL_REQUESTS)

        requests = self.requests.find(order_by=DeclarationRequest.created_at.desc())
        return [to_admin_view(r) for r in requests]

    def list_recent_generated(self, caller_id: UUID) -> List[AdminRequestView]:
        """Requests whose document was generated in the recent window (admin only).

        The window is open on its lower bound: a document generated exactly
        recent_days ago is excluded.
        """
        self.authorize_caller(caller_id, Operation.LIST_RECENT_GENERATED)

        cutoff = self.clock() - timedelta(days=self.recent_days)
        requests = self.requests.find(
            DeclarationRequest.url.isnot(None),
            DeclarationRequest.generation_date > cutoff,
            order_by=DeclarationRequest.generation_date.desc(),
        )
        return [to_admin_view(r) for r in requests]

    def create_request(self, caller_id: UUID, declaration_id: UUID) -> DeclarationRequest:
        """Submit a new PENDING request for a declaration (requesters only).

        Raises:
            PermissionDenied: If the caller is an admin or unknown
            NotFound: If the declaration does not exist
            Conflict: If the caller already has a PENDING request for it
        """
        caller = self.authorize_caller(caller_id, Operation.CREATE_REQUEST)

        declaration = self.declarations.find_by_id(declaration_id)
        if declaration is None:
            raise NotFound("Declaration not found.")

        pending = self.requests.find_one(
            DeclarationRequest.user_id == caller.id,
            DeclarationRequest.declaration_id == declaration.id,
            DeclarationRequest.status == RequestStatus.PENDING.value,
        )
        if pending is not None:
            raise Conflict("You already have a pending request for this declaration.")

        now = self.clock()
        try:
            request = self.requests.create(
                caller.id,
                declaration.id,
                status=RequestStatus.PENDING.value,
                created_at=now,
                updated_at=now,
            )
            log_audit_event(
                db=self.db,
                action=REQUEST_CREATED,
                actor_id=caller.id,
                entity_type="request",
                entity_id=request.id,
                metadata={"declaration_id": str(declaration.id)},
            )
            self.db.commit()
        except IntegrityError:
            # A concurrent submission won the partial unique index
            self.db.rollback()
            raise Conflict("You already have a pending request for this declaration.")

        requests_created_total.inc()
        logger.info(
            f"Request created: declaration={declaration.id}",
            extra={"user_id": caller.id, "declaration_request_id": request.id},
        )
        return request

    def list_own_requests(self, caller_id: UUID) -> List[UserRequestView]:
        """The caller's own requests, newest first (requesters only)."""
        caller = self.authorize_caller(caller_id, Operation.LIST_OWN_REQUESTS)

        requests = self.requests.find(
            DeclarationRequest.user_id == caller.id,
            order_by=DeclarationRequest.created_at.desc(),
        )
        return [to_user_view(r) for r in requests]

    def update_status(
        self,
        caller_id: UUID,
        request_ids: List[UUID],
        target_status: RequestStatus,
    ) -> List[AdminRequestView]:
        """Move each request to target_status where the transition is allowed.

        Ids that do not exist, or whose transition is refused (see
        is_status_update_allowed), are skipped and left out of the result.

        Returns:
            Post-update views of the requests that were changed, in input order
        """
        caller = self.authorize_caller(caller_id, Operation.UPDATE_STATUS)
        target_status = RequestStatus(target_status)

        updated = []
        for request_id in request_ids:
            request = self.requests.find_by_id(request_id)
            if request is None:
                logger.warning(
                    "Status update skipped: request not found",
                    extra={"declaration_request_id": request_id, "outcome": "skipped"},
                )
                continue

            current = RequestStatus(request.status)
            if not is_status_update_allowed(current, target_status):
                logger.info(
                    f"Status update skipped: {current.value} -> {target_status.value} not allowed",
                    extra={"declaration_request_id": request_id, "outcome": "skipped"},
                )
                continue

            self.requests.update(request_id, status=target_status.value, updated_at=self.clock())
            log_audit_event(
                db=self.db,
                action=REQUEST_STATUS_CHANGED,
                actor_id=caller.id,
                entity_type="request",
                entity_id=request_id,
                metadata={"from": current.value, "to": target_status.value},
            )
            self.db.commit()
            request_status_updates_total.labels(status=target_status.value).inc()

            refreshed = self.requests.find(DeclarationRequest.id == request_id)
            if refreshed:
                updated.append(to_admin_view(refreshed[0]))

        return updated
