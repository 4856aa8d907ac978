"""Exception handlers turning domain errors into structured HTTP responses.

Every error body carries the HTTP status, the error kind, a readable
message and a timestamp. Validation failures itemize messages per field.
"""

from datetime import UTC, datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.exceptions import ValidationError as DomainValidationError

from shared.errors import ErrorKind, ShopStreamError, ValidationError

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.CART_EMPTY: 400,
    ErrorKind.DUPLICATE_PAYMENT: 409,
    ErrorKind.PAYMENT_VERIFICATION: 400,
    ErrorKind.REFUND: 422,
    ErrorKind.GATEWAY: 502,
    ErrorKind.TRANSIENT_INFRA: 503,
}


def error_body(status: int, kind: str, message: str, errors: dict[str, list[str]] | None = None) -> dict:
    body = {
        "status": status,
        "error": kind,
        "message": message,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if errors:
        body["errors"] = errors
    return body


async def handle_domain_error(request: Request, exc: ShopStreamError) -> JSONResponse:
    status = STATUS_BY_KIND.get(exc.kind, 500)
    errors = exc.errors if isinstance(exc, ValidationError) else None
    if status >= 500:
        logger.error("Request failed", path=request.url.path, kind=exc.kind.value, error=exc.message)
    else:
        logger.info("Request rejected", path=request.url.path, kind=exc.kind.value, error=exc.message)
    return JSONResponse(status_code=status, content=error_body(status, exc.kind.value, exc.message, errors))


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = ".".join(location) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content=error_body(400, ErrorKind.VALIDATION.value, "Validation failed", errors),
    )


async def handle_entity_validation(request: Request, exc: DomainValidationError) -> JSONResponse:
    # Raised by aggregate field and invariant checks
    errors = {
        field: [str(m) for m in messages] if isinstance(messages, list) else [str(messages)]
        for field, messages in (exc.messages or {}).items()
    }
    logger.info("Request rejected", path=request.url.path, kind=ErrorKind.VALIDATION.value, errors=errors)
    return JSONResponse(
        status_code=400,
        content=error_body(400, ErrorKind.VALIDATION.value, "Validation failed", errors),
    )


async def handle_object_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=error_body(404, ErrorKind.NOT_FOUND.value, "Resource not found"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopStreamError, handle_domain_error)
    app.add_exception_handler(DomainValidationError, handle_entity_validation)
    app.add_exception_handler(ObjectNotFoundError, handle_object_not_found)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
