"""Domain errors raised by the request lifecycle and document generation.

The HTTP layer maps each class to a status code (see main.py).
"""


class DeclarationRequestError(Exception):
    """Base class for request lifecycle errors."""

    code = "request_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PermissionDenied(DeclarationRequestError):
    """Caller's role does not match the role the operation requires."""

    code = "permission_denied"


class NotFound(DeclarationRequestError):
    """Referenced declaration, request or user does not exist."""

    code = "not_found"


class Conflict(DeclarationRequestError):
    """Caller already has a PENDING request for the same declaration."""

    code = "conflict"


class RenderError(DeclarationRequestError):
    """Document artifact could not be produced (unwritable or empty output)."""

    code = "render_error"


class TransientIOError(DeclarationRequestError):
    """Publishing or persistence failed; retrying later may succeed."""

    code = "transient_io_error"
