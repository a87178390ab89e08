"""Map domain and request exceptions onto enveloped HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from protean.exceptions import ExpectedVersionError, InvalidOperationError, ObjectNotFoundError, ValidationError

from storefront.api.responses import failure
from storefront.errors import StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _field_errors(messages):
    errors = []
    for field, field_messages in (messages or {}).items():
        if isinstance(field_messages, str):
            field_messages = [field_messages]
        for message in field_messages:
            errors.append({"field": field, "message": str(message)})
    return errors


async def request_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return failure("Validation failed", 400, errors=errors)


async def domain_validation_error(request: Request, exc: ValidationError):
    errors = _field_errors(getattr(exc, "messages", None))
    return failure(getattr(exc, "message", None) or "Validation failed", 400, errors=errors)


async def not_found_error(request: Request, exc: ObjectNotFoundError):
    return failure(getattr(exc, "message", None) or "Resource not found", 404)


async def invalid_operation_error(request: Request, exc: InvalidOperationError):
    return failure(getattr(exc, "message", None) or "Operation could not be completed", 409)


async def version_conflict_error(request: Request, exc: ExpectedVersionError):
    logger.warning("version_conflict", method=request.method, path=request.url.path)
    return failure("The resource was modified concurrently, please try again", 409)


async def storefront_error(request: Request, exc: StorefrontError):
    return failure(exc.message, exc.status_code)


async def unexpected_error(request: Request, exc: Exception):
    logger.exception(
        "unhandled_api_error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
    )
    return failure("Internal server error", 500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_error)
    app.add_exception_handler(ValidationError, domain_validation_error)
    app.add_exception_handler(ObjectNotFoundError, not_found_error)
    app.add_exception_handler(InvalidOperationError, invalid_operation_error)
    app.add_exception_handler(ExpectedVersionError, version_conflict_error)
    app.add_exception_handler(StorefrontError, storefront_error)
    app.add_exception_handler(Exception, unexpected_error)
