"""Declara Backend - Main FastAPI Application

Declaration request lifecycle and batch document generation.

This module creates and configures the main FastAPI application, including:
- API routers (requests, declarations)
- Middleware (request ID correlation, CORS)
- Exception handlers
- Health and observability endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import settings

# Observability
from observability.logging_config import configure_logging
from observability.correlation import REQUEST_ID_HEADER, get_caller_id, get_request_id
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router

# Domain
from domain.requests.errors import (
    DeclarationRequestError,
    PermissionDenied,
    NotFound,
    Conflict,
    RenderError,
    TransientIOError,
)
from declaration_requests.router import router as requests_router
from declarations.router import router as declarations_router

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

IS_PRODUCTION = settings.ENVIRONMENT == "production"

# Domain error class -> HTTP status
ERROR_STATUS_CODES: Dict[Type[DeclarationRequestError], int] = {
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    RenderError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    TransientIOError: status.HTTP_502_BAD_GATEWAY,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Handles startup and shutdown events for the application.
    """
    # Startup
    logger.info("Declara API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    yield

    # Shutdown
    logger.info("Declara API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="Declara API",
    description="Declaration requests and document generation",
    version="0.1.0",
    docs_url=None if IS_PRODUCTION else "/docs",
    redoc_url=None if IS_PRODUCTION else "/redoc",
    openapi_url=None if IS_PRODUCTION else "/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request ID Middleware (must be first for proper correlation)
app.add_middleware(RequestIDMiddleware)

# CORS Middleware
ALLOWED_ORIGINS = [origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def status_code_for(exc: DeclarationRequestError) -> int:
    """Most specific HTTP status registered for the error's class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, content: Dict[str, Any]) -> JSONResponse:
    """JSON error body carrying the request's correlation id header.

    The generic handler runs outside RequestIDMiddleware, so the header is
    set here rather than relying on the middleware.
    """
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={REQUEST_ID_HEADER: get_request_id()},
    )


@app.exception_handler(DeclarationRequestError)
async def declaration_request_exception_handler(
    request: Request,
    exc: DeclarationRequestError
) -> JSONResponse:
    """Handle domain errors raised by the request lifecycle.

    Caller errors (403/404/409) are logged at INFO, server-side failures
    at ERROR. The log line names the authenticated caller.
    """
    status_code = status_code_for(exc)
    logger.log(
        logging.ERROR if status_code >= 500 else logging.INFO,
        "%s on %s %s by %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        get_caller_id() or "anonymous",
        exc.message,
        extra={"status_code": status_code},
    )
    return error_response(
        status_code,
        {
            "error": exc.code,
            "message": exc.message,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns a structured error response with field-level details.
    """
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"errors": exc.errors()}
    )
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation error details without non-serializable ctx values."""
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle uncaught exceptions.

    Catches all unhandled exceptions and returns a generic error response.
    Full details are logged but not exposed to the client.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics, ready)
app.include_router(observability_router)

# Declaration requests & templates
app.include_router(requests_router, prefix="/api/v1")
app.include_router(declarations_router, prefix="/api/v1")


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "Declara API",
        "version": "0.1.0",
        "status": "running",
        "docs": None if IS_PRODUCTION else "/docs",
    }


@app.get("/api/v1", include_in_schema=False)
async def api_root() -> dict[str, Any]:
    """API v1 root endpoint."""
    return {
        "version": "v1",
        "status": "active",
        "endpoints": {
            "requests": "/api/v1/requests",
            "declarations": "/api/v1/declarations",
        }
    }


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
