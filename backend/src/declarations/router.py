"""Declarations API Router - read-only listing of declaration templates.

Template authoring happens outside this service.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth.dependencies import CurrentUser
from auth.roles import Operation, authorize
from database import get_db
from infrastructure.repositories.declaration_repository import DeclarationRepository
from .schemas import DeclarationResponse


router = APIRouter(prefix="/declarations", tags=["declarations"])


@router.get(
    "",
    response_model=List[DeclarationResponse],
    summary="List declarations",
    description="Declaration templates that can be requested, ordered by type label.",
)
def list_declarations(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> List[DeclarationResponse]:
    authorize(current_user, Operation.LIST_DECLARATIONS)
    declarations = DeclarationRepository(db).list_all()
    return [DeclarationResponse.model_validate(d) for d in declarations]
