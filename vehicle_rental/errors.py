"""
Domain errors raised by the service layer and their HTTP mapping.

Services never raise ``HTTPException`` directly; the handlers registered by
``register_exception_handlers`` turn these into ``{"message": ...}`` bodies.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RentalAppError(Exception):
    """Base class for errors with a known HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(RentalAppError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(RentalAppError):
    status_code = status.HTTP_403_FORBIDDEN


class BadRequestError(RentalAppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(RentalAppError):
    status_code = status.HTTP_401_UNAUTHORIZED


async def rental_app_error_handler(request: Request, exc: RentalAppError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RentalAppError, rental_app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
