"""Error types and their JSON rendering.

Every error response carries ``{"error_code", "error_description"}``. Services
raise the ``ReadingError`` subclasses below the same way they would raise a
plain ``HTTPException``; ``register_exception_handlers`` turns them into the
shared body shape.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ReadingError(HTTPException):
    """Base class for errors reported with an error code."""

    error_code: str = "SERVER_ERROR"
    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error."

    def __init__(self, detail: str | None = None, status_code: int | None = None) -> None:
        super().__init__(
            status_code=status_code or self.default_status,
            detail=detail or self.default_detail,
        )


class InvalidDataError(ReadingError):
    error_code = "INVALID_DATA"
    default_status = status.HTTP_400_BAD_REQUEST
    default_detail = "The request data is invalid."


class InvalidTypeError(ReadingError):
    error_code = "INVALID_TYPE"
    default_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Measure type not allowed."


class MeasureNotFoundError(ReadingError):
    """Raised with 400 when no value could be extracted and 404 for unknown readings."""

    error_code = "MEASURE_NOT_FOUND"
    default_status = status.HTTP_404_NOT_FOUND
    default_detail = "Reading not found."


class MeasuresNotFoundError(ReadingError):
    error_code = "MEASURES_NOT_FOUND"
    default_status = status.HTTP_404_NOT_FOUND
    default_detail = "No readings found."


class DoubleReportError(ReadingError):
    error_code = "DOUBLE_REPORT"
    default_status = status.HTTP_409_CONFLICT
    default_detail = "A reading for this month has already been taken."


class ConfirmationDuplicateError(ReadingError):
    error_code = "CONFIRMATION_DUPLICATE"
    default_status = status.HTTP_409_CONFLICT
    default_detail = "Reading has already been confirmed."


class ServerError(ReadingError):
    pass


def error_body(error_code: str, description: str) -> dict[str, str]:
    return {"error_code": error_code, "error_description": description}


async def reading_error_handler(request: Request, exc: ReadingError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.detail),
    )


def describe_validation_error(error: dict[str, Any]) -> str:
    """Human-readable description of one pydantic error."""
    if error["type"] == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    field = next((part for part in error["loc"][1:] if isinstance(part, str)), None)
    if field is None:
        return "The request body must be a JSON object."
    return f"The '{field}' field is invalid: {error['msg']}"


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first failed check as invalid data."""
    errors = exc.errors()
    description = (
        describe_validation_error(errors[0]) if errors else InvalidDataError.default_detail
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(InvalidDataError.error_code, description),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ServerError.error_code, ServerError.default_detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to an application."""
    app.add_exception_handler(ReadingError, reading_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_error_handler)
