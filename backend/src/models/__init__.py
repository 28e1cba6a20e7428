"""SQLAlchemy Models for the declaration request backend"""

from .base import Base
from .user import User
from .declaration import Declaration
from .declaration_request import DeclarationRequest
from .audit_log import AuditLog

__all__ = [
    "Base",
    "User",
    "Declaration",
    "DeclarationRequest",
    "AuditLog",
]
