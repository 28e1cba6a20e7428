"""DeclarationRequest SQLAlchemy model

One row per user asking for a declaration document. Tracks the review
lifecycle and, once generated, the signed download URL.
"""

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, Uuid, CheckConstraint, text
from sqlalchemy.orm import relationship

from domain.requests.request_status import RequestStatus
from .base import Base, utcnow


class DeclarationRequest(Base):
    """Request for a declaration document.

    State flow: PENDING → PROCESSING → COMPLETED or REJECTED

    url and generation_date are written together with status PROCESSING by
    the document generation batch. At most one PENDING request may exist per
    (user, declaration) pair, enforced by a partial unique index.
    """
    __tablename__ = "request"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    declaration_id = Column(Uuid, ForeignKey("declaration.id", ondelete="RESTRICT"), nullable=False)
    status = Column(Text, nullable=False, default=RequestStatus.PENDING.value)
    url = Column(Text, nullable=True)
    generation_date = Column(DateTime(timezone=True), nullable=True)
    attendant_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Read-only associations
    user = relationship("User", foreign_keys=[user_id], viewonly=True)
    declaration = relationship("Declaration", viewonly=True)
    attendant = relationship("User", foreign_keys=[attendant_id], viewonly=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'PROCESSING', 'COMPLETED', 'REJECTED')",
            name='ck_request_status'
        ),
        Index("ix_request_user_id_created_at", "user_id", "created_at"),
        Index("ix_request_generation_date", "generation_date"),
        Index(
            "uq_request_pending_user_declaration",
            "user_id",
            "declaration_id",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )
