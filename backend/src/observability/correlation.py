"""Per-request correlation for logs and error responses.

Each HTTP request gets a RequestContext holding its X-Request-ID and, once
the bearer token is resolved, the id of the calling user. The context object
is shared by reference: FastAPI runs dependencies and endpoints in copied
contexts, so binding the caller mutates the object instead of re-setting the
variable, and the middleware still sees the caller when the request ends.
"""

import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "no-request-id"


@dataclass
class RequestContext:
    request_id: str
    caller_id: Optional[str] = None


_current: ContextVar[Optional[RequestContext]] = ContextVar("declara_request_context", default=None)


def begin_request(incoming_id: Optional[str] = None) -> RequestContext:
    """Start a fresh context, reusing the client's request id when given."""
    context = RequestContext(request_id=incoming_id or str(uuid.uuid4()))
    _current.set(context)
    return context


def bind_caller(user_id: Optional[UUID]) -> None:
    """Record the authenticated caller on the current request."""
    context = _current.get()
    if context is None:
        # Outside HTTP (scripts, direct service calls)
        context = begin_request(NO_REQUEST_ID)
    context.caller_id = str(user_id) if user_id is not None else None


def get_request_id() -> str:
    context = _current.get()
    return context.request_id if context else NO_REQUEST_ID


def get_caller_id() -> Optional[str]:
    context = _current.get()
    return context.caller_id if context else None
