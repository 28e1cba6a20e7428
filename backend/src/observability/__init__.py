"""Observability module.

Provides structured logging, request correlation, metrics, and health checks.
"""

from .logging_config import configure_logging
from .metrics import (
    requests_created_total,
    request_status_updates_total,
    documents_generated_total,
    document_render_seconds,
)
from .correlation import (
    REQUEST_ID_HEADER,
    begin_request,
    bind_caller,
    get_caller_id,
    get_request_id,
)
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    # Metrics
    "requests_created_total",
    "request_status_updates_total",
    "documents_generated_total",
    "document_render_seconds",
    # Correlation
    "REQUEST_ID_HEADER",
    "begin_request",
    "bind_caller",
    "get_caller_id",
    "get_request_id",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
