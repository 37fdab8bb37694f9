"""
Error taxonomy for the BusTrack service and the FastAPI handlers that turn
each error into the `{"success": false, "error": ...}` response shape.
"""

import logging
from typing import Any, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BusTrackError(Exception):
    """Base class for all service errors"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(BusTrackError):
    """Missing or invalid input; the caller must correct it before continuing"""

    status_code = status.HTTP_400_BAD_REQUEST


class BookingFlowError(ValidationError):
    """An operation was attempted from a booking step that does not allow it"""


class NotFound(BusTrackError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(BusTrackError):
    """The underlying key-value storage failed"""


class PaymentError(BusTrackError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED


def error_body(error: str, details: Optional[Any] = None) -> dict:
    body = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body


async def bustrack_error_handler(request: Request, exc: BusTrackError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.details),
    )


def validation_details(errors: List[dict]) -> List[dict]:
    # Pydantic error entries may carry exception objects in "ctx"
    return [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = validation_details(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("Invalid request", details),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("An unexpected error occurred.", str(exc)),
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(BusTrackError, bustrack_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
