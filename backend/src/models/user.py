"""User SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Text, Uuid, UniqueConstraint
from sqlalchemy.orm import validates
import re

from .base import Base, utcnow


class User(Base):
    """User profile as seen by the declaration backend.

    Users are created and maintained by the identity service; this backend
    only reads them. Admins review and generate declarations, everyone else
    submits requests. Address and identity-document fields feed the
    placeholders of the declaration templates.
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)

    # Address
    street = Column(Text, nullable=True)
    house_number = Column(Text, nullable=True)
    complement = Column(Text, nullable=True)
    neighborhood = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    postal_code = Column(Text, nullable=True)

    # Identity documents
    rg = Column(Text, nullable=True)
    cpf = Column(Text, nullable=True)
    issuing_agency = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('email', name='uq_user_email'),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()
