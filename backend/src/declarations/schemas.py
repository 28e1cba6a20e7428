"""Pydantic schemas for the declarations API"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class DeclarationResponse(BaseModel):
    """Declaration template summary offered to requesters"""
    id: UUID
    type: str
    title: str

    model_config = ConfigDict(from_attributes=True)
