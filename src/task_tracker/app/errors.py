"""
Uniform JSON error bodies.

Every error leaves the API as ``{message, status, timestamp, fieldErrors}``:

- request body fails validation -> 400 with per-field messages
- query/path value can't be parsed, or the body isn't JSON at all -> 400, no fieldErrors
- anything else -> 500 with a generic message; details go to the log only
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_snake

from task_tracker.domain.task_models import ErrorResponse, TaskStatus

logger = logging.getLogger("tasks.errors")

VALIDATION_FAILED = "Validation failed"
MALFORMED_BODY = "Malformed JSON request"
UNEXPECTED = "An unexpected error occurred"

_PARAM_SOURCES = ("query", "path", "header", "cookie")


def error_response(status: int, message: str, field_errors: Optional[dict[str, str]] = None) -> JSONResponse:
    body = ErrorResponse(message=message, status=status, field_errors=field_errors)
    return JSONResponse(
        status_code=status,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _label(field: str) -> str:
    # "dueDate" -> "Due date"
    return to_snake(field).replace("_", " ").capitalize()


def _field_message(field: str, err: dict[str, Any]) -> str:
    if err["type"] == "missing" or err.get("input", "") is None:
        return f"{_label(field)} is required"
    if err["type"] == "timezone_naive":
        return f"{_label(field)} must be a local date-time without a timezone offset"
    if err["type"] == "enum":
        allowed = ", ".join(s.value for s in TaskStatus)
        return f"{_label(field)} must be one of {allowed}"
    return err["msg"]


def _malformed_param_message(err: dict[str, Any]) -> str:
    name = str(err["loc"][-1])
    if err["type"] == "missing":
        return f"Required parameter '{name}' is missing"
    return f"Invalid value '{err.get('input')}' for parameter '{name}'"


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()

    for err in errors:
        if err["loc"] and err["loc"][0] in _PARAM_SOURCES:
            message = _malformed_param_message(err)
            logger.info(
                "request.malformed",
                extra={"category": "http", "event": "request.malformed", "path": request.url.path, "detail": message},
            )
            return error_response(400, message)

    field_errors: dict[str, str] = {}
    for err in errors:
        loc = err["loc"]
        # whole-body problems: not JSON, not an object, or no body at all
        if err["type"] == "json_invalid" or len(loc) < 2:
            logger.info(
                "request.malformed",
                extra={"category": "http", "event": "request.malformed", "path": request.url.path, "detail": MALFORMED_BODY},
            )
            return error_response(400, MALFORMED_BODY)
        field = str(loc[-1])
        field_errors.setdefault(field, _field_message(field, err))

    logger.info(
        "request.invalid",
        extra={"category": "http", "event": "request.invalid", "path": request.url.path, "fields": sorted(field_errors)},
    )
    return error_response(400, VALIDATION_FAILED, field_errors)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request.unhandled",
        exc_info=exc,
        extra={"category": "http", "event": "request.unhandled", "path": request.url.path},
    )
    response = error_response(500, UNEXPECTED)
    # AccessLogMiddleware never sees this response, it re-raised instead
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
