"""Error Handlers — global exception handlers for the CRM API.

Invariants:
    - Every error response body is exactly {"message": str}
    - CrmError → its own http_status and message
    - RequestValidationError → 400 naming each violated field
    - SQLAlchemyError escaping a route → stale-schema 400 or database 500
    - Exception (catch-all) → 500, never leaks a traceback

Design Decisions:
    - Three-layer handler: domain (CrmError), validation (Pydantic), catch-all
      (Exception), plus the store layer in between
    - Extracted from main.py to keep its import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from travelcrm.core.errors import CrmError, FieldViolation, RequestValidationFailed
from travelcrm.core.store_errors import classify_store_error

logger = logging.getLogger(__name__)

# Request sections FastAPI prefixes onto error locations
_LOC_SECTIONS = {"body", "query", "path", "header", "cookie"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_crm_error_handler(app)
    _register_validation_error_handler(app)
    _register_store_error_handler(app)
    _register_generic_error_handler(app)


def _error_response(request: Request, exc: CrmError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _register_crm_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CrmError)
    async def crm_error_handler(request: Request, exc: CrmError):
        """Handle all CRM domain/infrastructure errors."""
        return _error_response(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Translate Pydantic errors into one field-specific message."""
        return _error_response(request, to_validation_failure(exc))


def _register_store_error_handler(app: FastAPI) -> None:

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        return _error_response(request, classify_store_error(exc, "request"))


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An unexpected error occurred"},
        )


def field_name(loc: tuple) -> str:
    """Wire-level field path: ("body", "headcountEmail") -> "headcountEmail"."""
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOC_SECTIONS:
        section, parts = parts[0], parts[1:]
        if not parts:
            return section
    return ".".join(parts)


def to_validation_failure(exc: RequestValidationError) -> RequestValidationFailed:
    violations = [
        FieldViolation(field=field_name(tuple(e.get("loc", ()))), reason=e["msg"])
        for e in exc.errors()
    ]
    return RequestValidationFailed(violations)
