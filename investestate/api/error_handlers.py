"""Error Handlers: global exception handlers for the InvestEstate API.

Invariants:
    - InvestEstateError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with a readable message plus field-level details
    - Exception (catch-all) → 500, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from investestate.core.errors import ErrorSeverity, InvestEstateError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(InvestEstateError)
    async def domain_error_handler(request: Request, exc: InvestEstateError):
        """Handle all InvestEstate domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "user_id": exc.context.user_id,
                "project_id": exc.context.project_id,
                "model_id": exc.context.model_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _field_path(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI adds
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path", "cookie", "header"):
        parts = parts[1:]
    return ".".join(parts)


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    details = [
        {
            "field": _field_path(e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    summary = "; ".join(
        f"{d['message']} at \"{d['field']}\"" if d["field"] else d["message"]
        for d in details
    )
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": f"Validation error: {summary}",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": details,
        },
    }
