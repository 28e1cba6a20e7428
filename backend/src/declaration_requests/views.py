"""Conversions from DeclarationRequest rows to API views"""

from models.base import as_utc
from models.declaration_request import DeclarationRequest
from .schemas import AdminRequestView, UserRequestView


def to_admin_view(request: DeclarationRequest) -> AdminRequestView:
    """Build the admin view of a request (owner name plus review data)."""
    return AdminRequestView(
        id=request.id,
        name=request.user.name if request.user else "",
        request_date=as_utc(request.created_at),
        status=request.status,
        url=request.url,
        generation_date=as_utc(request.generation_date),
    )


def to_user_view(request: DeclarationRequest) -> UserRequestView:
    """Build the requester view of a request."""
    return UserRequestView(
        id=request.id,
        declaration=request.declaration.type if request.declaration else "",
        attendant_name=request.attendant.name if request.attendant else "",
        request_date=as_utc(request.created_at),
        status=request.status,
        generation_date=as_utc(request.generation_date),
    )
