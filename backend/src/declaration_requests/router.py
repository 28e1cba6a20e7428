"""Declaration Requests API Router

Submission and listing for requesters; listing, review and batch document
generation for admins. Role checks happen inside the services, which raise
PermissionDenied (mapped to 403 in main.py).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth.dependencies import CurrentUser
from database import get_db
from domain.documents.ports import BlobPublisherPort, DocumentRendererPort
from models.base import as_utc
from .dependencies import get_blob_publisher, get_document_renderer
from .generation import DocumentGenerationService
from .schemas import (
    AdminRequestView,
    CreateRequestBody,
    GenerateDocumentsBody,
    GenerateDocumentsResponse,
    ItemOutcomeResponse,
    RequestCreatedResponse,
    UpdateStatusBody,
    UserRequestView,
)
from .service import RequestLifecycleService


router = APIRouter(prefix="/requests", tags=["requests"])


@router.get(
    "",
    response_model=List[AdminRequestView],
    summary="List all requests",
    description="All declaration requests, newest first. **Permissions:** admin only",
)
def list_all_requests(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> List[AdminRequestView]:
    return RequestLifecycleService(db).list_all_requests(current_user.id)


@router.get(
    "/generated",
    response_model=List[AdminRequestView],
    summary="List recently generated requests",
    description="""
    Requests whose document was generated within the last 7 days, most
    recently generated first.

    **Permissions:** admin only
    """,
)
def list_recent_generated(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> List[AdminRequestView]:
    return RequestLifecycleService(db).list_recent_generated(current_user.id)


@router.post(
    "",
    response_model=RequestCreatedResponse,
    status_code=201,
    summary="Submit a declaration request",
    description="""
    Ask for a declaration document. The request starts as PENDING.

    **Errors:**
    - 403: caller is an admin
    - 404: declaration does not exist
    - 409: caller already has a PENDING request for this declaration

    **Permissions:** requesters only
    """,
)
def create_request(
    body: CreateRequestBody,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> RequestCreatedResponse:
    request = RequestLifecycleService(db).create_request(current_user.id, body.declaration_id)
    return RequestCreatedResponse(
        id=request.id,
        declaration_id=request.declaration_id,
        status=request.status,
        request_date=as_utc(request.created_at),
    )


@router.get(
    "/me",
    response_model=List[UserRequestView],
    summary="List own requests",
    description="The caller's requests, newest first. **Permissions:** requesters only",
)
def list_own_requests(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> List[UserRequestView]:
    return RequestLifecycleService(db).list_own_requests(current_user.id)


@router.patch(
    "/status",
    response_model=List[AdminRequestView],
    summary="Update request status",
    description="""
    Move requests to a new status. Ids whose transition is not allowed
    (already COMPLETED/REJECTED, or a terminal target for a request that is
    not PROCESSING) are left untouched and omitted from the response.

    **Permissions:** admin only
    """,
)
def update_status(
    body: UpdateStatusBody,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> List[AdminRequestView]:
    return RequestLifecycleService(db).update_status(current_user.id, body.request_ids, body.status)


@router.post(
    "/generate",
    response_model=GenerateDocumentsResponse,
    summary="Generate declaration documents",
    description="""
    Render, publish and attach a signed download URL to each PENDING
    request in the batch, moving it to PROCESSING. Every id gets an outcome
    (GENERATED, SKIPPED or FAILED); a failing item does not abort the batch.

    **Permissions:** admin only
    """,
)
async def generate_documents(
    body: GenerateDocumentsBody,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
    renderer: DocumentRendererPort = Depends(get_document_renderer),
    publisher: BlobPublisherPort = Depends(get_blob_publisher),
) -> GenerateDocumentsResponse:
    service = DocumentGenerationService(db, renderer=renderer, publisher=publisher)
    report = await service.generate_documents(current_user.id, body.request_ids)

    return GenerateDocumentsResponse(
        requests=report.generated,
        outcomes=[
            ItemOutcomeResponse(
                request_id=o.request_id,
                outcome=o.outcome.value,
                reason=o.reason,
            )
            for o in report.outcomes
        ],
    )
