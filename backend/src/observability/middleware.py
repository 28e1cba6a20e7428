"""HTTP middleware tagging every request with a correlation id."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .correlation import REQUEST_ID_HEADER, begin_request, get_caller_id

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign the request id, echo it back and log the finished request.

    The id is taken from an incoming X-Request-ID header or generated. The
    completion line names the caller bound by authentication, if any.
    Uncaught errors propagate to the application's generic handler.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        context = begin_request(request.headers.get(REQUEST_ID_HEADER))
        started = time.perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = context.request_id
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s (caller=%s)",
            request.method,
            request.url.path,
            response.status_code,
            get_caller_id() or "anonymous",
            extra={
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response
