"""Exception handlers producing ``{"error", "message", "details"}`` bodies."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import DeskException, ErrorCode

logger = logging.getLogger(__name__)

# Path segments FastAPI prepends to validation error locations.
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie", "form"})


async def desk_exception_handler(request: Request, exc: DeskException) -> JSONResponse:
    """Convert a DeskException into its structured JSON response."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"DeskException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def _field_from_location(loc) -> str:
    parts = [str(p) for p in loc if str(p) not in _LOCATION_PREFIXES]
    # Discriminated unions add the tag value ("bookmark", "password", ...).
    return parts[-1] if parts else ""


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with the first offending field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = _field_from_location(first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    details = {"field": field} if field else {}
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "field": field},
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": ErrorCode.VALIDATION_ERROR.value,
            "message": message,
            "details": details,
        },
    )
