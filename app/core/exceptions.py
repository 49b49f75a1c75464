"""
Domain exceptions and the FastAPI handlers that turn them into the
``{"success": false, "error": ...}`` envelope.

Each exception carries two kinds of information:
- ``message``: safe to show to the API client
- ``context``: operator diagnostics (SQL, driver message, field names) that
  only ever reach the log
"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logger import logger


class ClinicError(Exception):
    """Base class for all errors raised by the clinic backend."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.__class__.message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class NotFoundError(ClinicError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class DatabaseConnectionError(ClinicError, ConnectionError):
    """The database could not be reached (network, auth, missing database)."""

    message = "The database is currently unavailable"


class PoolExhaustedError(DatabaseConnectionError):
    """No connection became free within the allowed wait."""

    message = "The server is busy, please try again later"


class RegistrationError(ClinicError):
    """The identity + profile pair could not be written."""

    message = "Registration failed"


class DuplicateIdentityError(RegistrationError):
    """Username or email already belongs to another identity."""

    message = "An account with this email or username already exists"


async def clinic_exception_handler(request: Request, exc: ClinicError) -> JSONResponse:
    logger.warning(
        f"{exc.__class__.__name__}: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({".".join(str(part) for part in err["loc"][1:]) for err in exc.errors()})
    logger.info(f"Rejected {request.method} {request.url.path}: invalid fields {fields}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": f"Invalid request fields: {', '.join(fields)}"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {exc.__class__.__name__} on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": ClinicError.message},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicError, clinic_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
