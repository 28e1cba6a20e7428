"""Declaration SQLAlchemy model

A declaration is a reusable document template. Its content and footer carry
{{token}} placeholders that are filled from the requesting user's profile.
"""

from uuid import uuid4

from sqlalchemy import Column, DateTime, Text, Uuid

from .base import Base, utcnow


class Declaration(Base):
    """Declaration template (read-only for the request lifecycle)."""
    __tablename__ = "declaration"

    id = Column(Uuid, primary_key=True, default=uuid4)
    type = Column(Text, nullable=False)  # Label shown to requesters
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    footer = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
