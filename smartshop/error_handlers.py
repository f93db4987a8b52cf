"""
JSON rendering of errors.

Every error body has `error` and `path`, plus `requestId` when the logging
middleware tagged the request. Application errors also carry their class
name as `type` and a `details` object.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from smartshop.core.exceptions import AppException, StorageFailure
from smartshop.logging_config import get_logger

logger = get_logger("errors")


def _body(request: Request, error: str, **extra) -> dict:
    body = {"error": error, "path": request.url.path}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        body["requestId"] = request_id
    body.update(extra)
    return body


async def app_exception_handler(request: Request, exc: AppException):
    # Client mistakes (bad quantity, unknown product) are warnings, not errors
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message} {exc.details}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_body(request, exc.message, type=type(exc).__name__, details=exc.details)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(f"Rejected {request.method} {request.url.path}: {len(errors)} invalid field(s)")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_body(request, "Validation failed", validation_errors=errors)
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Database errors that escaped the local store are storage failures."""
    return await app_exception_handler(request, StorageFailure(request.url.path, str(exc)))


async def generic_exception_handler(request: Request, exc: Exception):
    logger.critical(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_body(request, "Internal server error", type=type(exc).__name__)
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
