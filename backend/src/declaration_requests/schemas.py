"""Pydantic schemas for the declaration request API

Request bodies and the two read views of a request: the admin view (owner
name, review data) and the requester view (declaration label, attendant).
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.requests.request_status import RequestStatus


# ============================================================================
# Views
# ============================================================================

class AdminRequestView(BaseModel):
    """Request as seen by admins.

    url and generation_date are only set once a document was generated.
    """
    id: UUID
    name: str = Field(..., description="Name of the user who asked for the declaration")
    request_date: datetime
    status: RequestStatus
    url: Optional[str] = None
    generation_date: Optional[datetime] = None


class UserRequestView(BaseModel):
    """Request as seen by its owner"""
    id: UUID
    declaration: str = Field(..., description="Declaration type label")
    attendant_name: str = Field("", description="Admin who generated the document, empty if none")
    request_date: datetime
    status: RequestStatus
    generation_date: Optional[datetime] = None


class RequestCreatedResponse(BaseModel):
    """Response for POST /requests"""
    id: UUID
    declaration_id: UUID
    status: RequestStatus
    request_date: datetime


# ============================================================================
# Request bodies
# ============================================================================

class CreateRequestBody(BaseModel):
    """Schema for POST /requests"""
    declaration_id: UUID

    model_config = ConfigDict(extra='forbid')


class UpdateStatusBody(BaseModel):
    """Schema for PATCH /requests/status"""
    request_ids: List[UUID] = Field(..., min_length=1)
    status: RequestStatus

    model_config = ConfigDict(extra='forbid')


class GenerateDocumentsBody(BaseModel):
    """Schema for POST /requests/generate"""
    request_ids: List[UUID] = Field(..., min_length=1)

    model_config = ConfigDict(extra='forbid')


# ============================================================================
# Batch generation report
# ============================================================================

class ItemOutcomeResponse(BaseModel):
    """Per-id result of a generation batch"""
    request_id: UUID
    outcome: str  # GENERATED, SKIPPED, FAILED
    reason: Optional[str] = None


class GenerateDocumentsResponse(BaseModel):
    """Response for POST /requests/generate

    requests lists the generated requests only; outcomes covers every id
    that was submitted, in submission order.
    """
    requests: List[AdminRequestView]
    outcomes: List[ItemOutcomeResponse]
