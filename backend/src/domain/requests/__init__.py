"""Requests domain module - status state machine and lifecycle errors"""

from .request_status import (
    RequestStatus,
    TERMINAL_STATUSES,
    is_status_update_allowed,
    is_terminal,
)
from .errors import (
    DeclarationRequestError,
    PermissionDenied,
    NotFound,
    Conflict,
    RenderError,
    TransientIOError,
)

__all__ = [
    "RequestStatus",
    "TERMINAL_STATUSES",
    "is_status_update_allowed",
    "is_terminal",
    "DeclarationRequestError",
    "PermissionDenied",
    "NotFound",
    "Conflict",
    "RenderError",
    "TransientIOError",
]
