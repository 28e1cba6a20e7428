"""Batch document generation for PENDING declaration requests.

For each submitted id the orchestrator fills the declaration template from
the owner's profile, renders a PDF into a scratch file, publishes it to the
blob store and moves the request to PROCESSING with the signed URL.

Items are processed one after another and in isolation: a skipped or failed
item is recorded in the report and the batch moves on to the next id.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from audit.service import log_audit_event, DOCUMENT_GENERATED
from auth.roles import Operation
from config import Settings, get_settings
from domain.declarations.placeholders import (
    build_placeholder_values,
    find_tokens,
    render_placeholders,
)
from domain.documents.ports import BlobPublisherPort, DocumentRendererPort
from domain.requests.errors import DeclarationRequestError
from domain.requests.request_status import RequestStatus
from infrastructure.rendering.scratch import scratch_file
from models.base import utcnow
from models.declaration_request import DeclarationRequest
from observability.metrics import documents_generated_total, document_render_seconds
from .schemas import AdminRequestView
from .service import RequestLifecycleService
from .views import to_admin_view

logger = logging.getLogger(__name__)


class GenerationOutcome(str, Enum):
    """Result of one id in a generation batch"""
    GENERATED = "GENERATED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass
class ItemOutcome:
    """Outcome for one request id.

    view is only set for GENERATED items.
    """
    request_id: UUID
    outcome: GenerationOutcome
    reason: Optional[str] = None
    view: Optional[AdminRequestView] = None


@dataclass
class GenerationReport:
    """Outcomes of a whole batch, in submission order."""
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def generated(self) -> List[AdminRequestView]:
        """Post-update views of the successfully generated requests."""
        return [o.view for o in self.outcomes if o.outcome == GenerationOutcome.GENERATED]

    def add(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)
        documents_generated_total.labels(outcome=outcome.outcome.value.lower()).inc()


class DocumentGenerationService:
    """Orchestrates batch document generation for admins."""

    def __init__(
        self,
        db: Session,
        renderer: DocumentRendererPort,
        publisher: BlobPublisherPort,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.renderer = renderer
        self.publisher = publisher
        self.settings = settings or get_settings()
        self.clock = clock
        self.lifecycle = RequestLifecycleService(db, clock=clock)
        self.requests = self.lifecycle.requests
        self.users = self.lifecycle.users
        self.declarations = self.lifecycle.declarations

    async def generate_documents(self, caller_id: UUID, request_ids: List[UUID]) -> GenerationReport:
        """Generate and publish documents for the given PENDING requests.

        Args:
            caller_id: Admin running the batch (recorded as attendant)
            request_ids: Requests to process, in order

        Returns:
            GenerationReport with one outcome per submitted id

        Raises:
            PermissionDenied: If the caller is not an admin (no item is processed)
        """
        caller = self.lifecycle.authorize_caller(caller_id, Operation.GENERATE_DOCUMENTS)
        attendant_id = caller.id

        report = GenerationReport()
        for request_id in request_ids:
            try:
                outcome = await self._generate_one(attendant_id, request_id)
            except DeclarationRequestError as e:
                self.db.rollback()
                logger.error(
                    f"Document generation failed: {e.message}",
                    extra={"declaration_request_id": request_id, "outcome": "failed"},
                    exc_info=True,
                )
                outcome = ItemOutcome(request_id, GenerationOutcome.FAILED, reason=e.message)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"Document generation failed on database update: {e}",
                    extra={"declaration_request_id": request_id, "outcome": "failed"},
                    exc_info=True,
                )
                outcome = ItemOutcome(request_id, GenerationOutcome.FAILED, reason="Database error")
            except Exception as e:
                self.db.rollback()
                logger.error(
                    f"Document generation failed: {e}",
                    extra={"declaration_request_id": request_id, "outcome": "failed"},
                    exc_info=True,
                )
                outcome = ItemOutcome(request_id, GenerationOutcome.FAILED, reason=type(e).__name__)

            report.add(outcome)

        logger.info(
            f"Generation batch finished: {len(report.generated)}/{len(request_ids)} generated",
            extra={"user_id": attendant_id},
        )
        return report

    async def _generate_one(self, attendant_id: UUID, request_id: UUID) -> ItemOutcome:
        request = self.requests.find_by_id(request_id)
        if request is None:
            return self._skip(request_id, "Request not found")

        if request.status != RequestStatus.PENDING.value:
            return self._skip(request_id, f"Request is {request.status}, not PENDING")

        declaration = self.declarations.find_by_id(request.declaration_id)
        if declaration is None:
            return self._skip(request_id, "Declaration not found")

        owner = self.users.find_by_id(request.user_id)
        if owner is None:
            return self._skip(request_id, "Requesting user not found")

        now = self.clock()
        # Letters carry the calendar date of the issuing office
        letter_date = now.astimezone(ZoneInfo(self.settings.LETTER_TIMEZONE)).date()
        values = build_placeholder_values(owner, letter_date)
        body = render_placeholders(declaration.content, values)
        footer = render_placeholders(declaration.footer or "", values)

        unresolved = find_tokens(body) | find_tokens(footer)
        if unresolved:
            logger.warning(
                f"Declaration {declaration.id} has unresolved placeholders: {sorted(unresolved)}",
                extra={"declaration_request_id": request_id},
            )

        file_name = f"{request.id}_{int(now.timestamp() * 1000)}.{self.renderer.extension}"
        with scratch_file(Path(self.settings.SCRATCH_DIR), file_name) as destination:
            with document_render_seconds.time():
                data = await run_in_threadpool(
                    self.renderer.render, declaration.title, body, footer, destination
                )

        published = await self.publisher.upload(
            namespace=self.settings.DECLARATION_NAMESPACE,
            file_name=file_name,
            data=data,
            content_type=self.renderer.content_type,
        )

        rowcount = self.requests.update(
            request.id,
            url=published.signed_url,
            status=RequestStatus.PROCESSING.value,
            generation_date=now,
            attendant_id=attendant_id,
            updated_at=now,
        )
        if rowcount == 0:
            self.db.rollback()
            return self._skip(request_id, "Request removed during generation")

        log_audit_event(
            db=self.db,
            action=DOCUMENT_GENERATED,
            actor_id=attendant_id,
            entity_type="request",
            entity_id=request.id,
            metadata={"storage_key": published.storage_key, "size_bytes": published.size_bytes},
        )
        self.db.commit()

        logger.info(
            f"Document generated: {published.storage_key}",
            extra={"declaration_request_id": request_id, "user_id": attendant_id, "outcome": "generated"},
        )

        refreshed = self.requests.find(DeclarationRequest.id == request_id)
        return ItemOutcome(
            request_id,
            GenerationOutcome.GENERATED,
            view=to_admin_view(refreshed[0]),
        )

    def _skip(self, request_id: UUID, reason: str) -> ItemOutcome:
        logger.warning(
            f"Document generation skipped: {reason}",
            extra={"declaration_request_id": request_id, "outcome": "skipped"},
        )
        return ItemOutcome(request_id, GenerationOutcome.SKIPPED, reason=reason)
