"""
Exception handlers for the scheduling API.

Every error body has the same shape::

    {"error": true, "code": ..., "message": ..., "details": ..., "status_code": ..., "correlation_id": ...}
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agenda.core.domain import DomainException

logger = logging.getLogger(__name__)

# Domain error code -> HTTP status
DOMAIN_STATUS_CODES: dict[str, int] = {
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NO_MATCHING_SLOT": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_SLOT_ALIGNMENT": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "SLOT_ALREADY_TAKEN": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "SLOT_OVERLAP": status.HTTP_409_CONFLICT,
    "CONCURRENT_MODIFICATION": status.HTTP_409_CONFLICT,
}


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "code": code,
            "message": message,
            "details": details,
            "status_code": status_code,
            "correlation_id": getattr(request.state, "correlation_id", None),
        },
        headers=headers,
    )


def _format_errors(errors) -> list[dict]:
    """Flatten pydantic errors; the request location prefix ("body", "query") is dropped."""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error["loc"]]
        if len(loc) > 1 and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        formatted.append({"field": ".".join(loc), "message": error["msg"], "type": error["type"]})
    return formatted


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    status_code = DOMAIN_STATUS_CODES.get(exc.code, status.HTTP_400_BAD_REQUEST)
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.code} - {exc.message}")
    return _error_response(request, status_code, exc.code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, HTTPException):
        return await global_exception_handler(request, exc)
    return _error_response(
        request, exc.status_code, "HTTP_ERROR", str(exc.detail), headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Malformed request bodies and query strings (RequestValidationError and bare pydantic errors)."""
    if not isinstance(exc, (RequestValidationError, ValidationError)):
        return await global_exception_handler(request, exc)

    errors = _format_errors(exc.errors())
    logger.warning(f"Invalid request on {request.url.path}: {[e['field'] for e in errors]}")
    return _error_response(
        request, status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", "Validation error", errors
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc!s}", exc_info=exc)
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
