# nilhub/core/error_handler.py
"""
Central error translation.

Every error that escapes a route is rendered as

    {"success": false, "error": "<message>"}

plus "stack" and "originalError" when detailed errors are enabled
(any environment other than production).

The mapping is an ordered list of rules evaluated first-match-wins: the
first rule whose predicate accepts the error decides status and message.
"""

import logging
import traceback
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import ExpiredSignatureError, JWTError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from nilhub.core.errors import (
    DuplicateKeyError,
    FieldValidationError,
    LIMIT_FILE_COUNT,
    LIMIT_FILE_SIZE,
    LIMIT_UNEXPECTED_FILE,
    StorageError,
    UploadLimitError,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Internal server error"

# Words that identify the image host in an error message
STORAGE_PROVIDER_MARKERS = ("supabase", "storage")


@dataclass(frozen=True)
class ErrorRule:
    name: str
    matches: Callable[[Exception], bool]
    translate: Callable[[Exception], tuple[int, str]]


# ----- Helpers -----


def _validation_errors(exc: Exception) -> list[dict[str, Any]]:
    if isinstance(exc, (RequestValidationError, ValidationError)):
        return list(exc.errors())
    return []


def _is_invalid_identifier(exc: Exception) -> bool:
    """A path parameter that failed UUID parsing."""
    errors = _validation_errors(exc)
    return bool(errors) and any(
        err.get("loc", ())[:1] == ("path",) and "uuid" in str(err.get("type", ""))
        for err in errors
    )


def _format_validation_error(err: dict[str, Any]) -> str:
    msg = str(err.get("msg", "invalid value"))
    # pydantic prefixes messages raised from validators
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    if loc:
        return f"{'.'.join(loc)}: {msg}"
    return msg


def _join_validation(exc: Exception) -> tuple[int, str]:
    messages = [_format_validation_error(err) for err in _validation_errors(exc)]
    return 400, ", ".join(messages) or "Validation error"


def _duplicate_key(exc: DuplicateKeyError) -> tuple[int, str]:
    if not exc.key_value:
        return 400, "Duplicate value"
    field, value = next(iter(exc.key_value.items()))
    if value is None:
        return 400, f"The {field} already exists"
    return 400, f"The {field} '{value}' already exists"


def _upload_code(exc: Exception) -> str | None:
    return exc.code if isinstance(exc, UploadLimitError) else None


def _file_too_large(exc: UploadLimitError) -> tuple[int, str]:
    if exc.limit:
        limit_mb = exc.limit / (1024 * 1024)
        return 400, f"File too large. Maximum size is {limit_mb:g}MB"
    return 400, "File too large"


def _too_many_files(exc: UploadLimitError) -> tuple[int, str]:
    if exc.limit:
        return 400, f"Too many files. Maximum is {exc.limit}"
    return 400, "Too many files"


def _mentions_storage_provider(exc: Exception) -> bool:
    if isinstance(exc, StarletteHTTPException):
        return False
    if isinstance(exc, StorageError):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in STORAGE_PROVIDER_MARKERS)


def _http_exception(exc: StarletteHTTPException) -> tuple[int, str]:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return exc.status_code, detail


def _fallback(exc: Exception) -> tuple[int, str]:
    status_code = getattr(exc, "status_code", None)
    if not isinstance(status_code, int):
        status_code = 500
    return status_code, str(exc) or GENERIC_MESSAGE


# ----- Rule table (first match wins) -----

RULES: list[ErrorRule] = [
    ErrorRule(
        "schema_validation",
        lambda e: bool(_validation_errors(e)) and not _is_invalid_identifier(e),
        _join_validation,
    ),
    ErrorRule(
        "invalid_identifier",
        _is_invalid_identifier,
        lambda e: (404, "Resource not found"),
    ),
    ErrorRule(
        "duplicate_key",
        lambda e: isinstance(e, DuplicateKeyError),
        _duplicate_key,
    ),
    ErrorRule(
        "token_expired",
        lambda e: isinstance(e, ExpiredSignatureError),
        lambda e: (401, "Session expired"),
    ),
    ErrorRule(
        "token_invalid",
        lambda e: isinstance(e, JWTError),
        lambda e: (401, "Invalid token"),
    ),
    ErrorRule(
        "upload_file_size",
        lambda e: _upload_code(e) == LIMIT_FILE_SIZE,
        _file_too_large,
    ),
    ErrorRule(
        "upload_file_count",
        lambda e: _upload_code(e) == LIMIT_FILE_COUNT,
        _too_many_files,
    ),
    ErrorRule(
        "upload_unexpected_field",
        lambda e: _upload_code(e) == LIMIT_UNEXPECTED_FILE,
        lambda e: (400, f"Unexpected file field: {e.field}" if e.field else "Unexpected file field"),
    ),
    ErrorRule(
        "field_validation",
        lambda e: isinstance(e, FieldValidationError),
        lambda e: (400, ", ".join(err["message"] for err in e.errors) or "Validation error"),
    ),
    ErrorRule(
        "storage_provider",
        _mentions_storage_provider,
        lambda e: (500, "Failed to upload image"),
    ),
    ErrorRule(
        "http_exception",
        lambda e: isinstance(e, StarletteHTTPException),
        _http_exception,
    ),
]


def translate_error(exc: Exception) -> tuple[int, str, str]:
    """
    Resolve (status, message, rule name) for an error.
    Falls back to 500 / the error's own message when no rule matches.
    """
    for rule in RULES:
        if rule.matches(exc):
            status_code, message = rule.translate(exc)
            return status_code, message, rule.name
    status_code, message = _fallback(exc)
    return status_code, message, "fallback"


def build_error_body(exc: Exception, message: str, detailed_errors: bool) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "error": message}
    if detailed_errors:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
        body["originalError"] = type(exc).__name__
    return body


def make_error_handler(detailed_errors: bool):
    """
    Build the FastAPI exception handler.

    Args:
        detailed_errors: include stack and originalError in responses.
    """

    async def handle_error(request: Request, exc: Exception) -> JSONResponse:
        status_code, message, rule = translate_error(exc)

        if status_code >= 500:
            logger.error(
                "%s %s failed (%s): %s",
                request.method, request.url.path, rule, exc,
                exc_info=exc if detailed_errors else None,
            )
        elif detailed_errors:
            logger.info(
                "%s %s -> %s (%s): %s",
                request.method, request.url.path, status_code, rule, message,
            )

        headers = getattr(exc, "headers", None)
        return JSONResponse(
            status_code=status_code,
            content=build_error_body(exc, message, detailed_errors),
            headers=headers,
        )

    return handle_error


# Errors handled inside the routing layer; a bare Exception handler is also
# registered so unexpected failures still get the envelope.
HANDLED_ERROR_TYPES: tuple[type[Exception], ...] = (
    StarletteHTTPException,
    RequestValidationError,
    ValidationError,
    DuplicateKeyError,
    JWTError,
    UploadLimitError,
    FieldValidationError,
    StorageError,
)


def install_error_handlers(app: FastAPI, detailed_errors: bool) -> None:
    handler = make_error_handler(detailed_errors)
    for error_type in HANDLED_ERROR_TYPES:
        app.add_exception_handler(error_type, handler)
    app.add_exception_handler(Exception, handler)
