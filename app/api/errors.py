from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from app.schemas.distance import ApiError
from app.services.outcomes import Failure, FailureKind

logger = logging.getLogger(__name__)

FAILURE_STATUS: dict[FailureKind, tuple[int, str]] = {
    FailureKind.INVALID_INPUT: (status.HTTP_400_BAD_REQUEST, "INVALID_INPUT"),
    FailureKind.AIRPORT_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "AIRPORT_NOT_FOUND"),
    FailureKind.UPSTREAM_ERROR: (status.HTTP_502_BAD_GATEWAY, "EXTERNAL_SERVICE_ERROR"),
    FailureKind.MALFORMED_RESPONSE: (status.HTTP_502_BAD_GATEWAY, "MALFORMED_UPSTREAM_RESPONSE"),
    FailureKind.CANCELLED: (status.HTTP_408_REQUEST_TIMEOUT, "OPERATION_CANCELLED"),
    FailureKind.UNEXPECTED: (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR"),
}

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ApiError},
    status.HTTP_404_NOT_FOUND: {"model": ApiError},
    status.HTTP_408_REQUEST_TIMEOUT: {"model": ApiError},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ApiError},
    status.HTTP_502_BAD_GATEWAY: {"model": ApiError},
}


def error_response(status_code: int, error_code: str, message: str, details: str | None = None) -> JSONResponse:
    body = ApiError(error_code=error_code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def failure_response(failure: Failure) -> JSONResponse:
    status_code, error_code = FAILURE_STATUS[failure.kind]
    if failure.kind is FailureKind.INVALID_INPUT and failure.code:
        error_code = failure.code
    if failure.kind is FailureKind.UNEXPECTED:
        # Internal detail stays in the logs
        logger.error("Unexpected lookup failure: %s (%s)", failure.message, failure.detail)
        return error_response(status_code, error_code, "Internal server error")
    logger.warning(
        "Lookup failed with %s (%s), retryable=%s", failure.kind, failure.message, failure.retryable
    )
    return error_response(status_code, error_code, failure.message, failure.detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    details = "; ".join(errors)
    logger.warning("Request validation failed on %s: %s", request.url.path, details)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )
