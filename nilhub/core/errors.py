# nilhub/core/errors.py
"""
Error taxonomy for the NilHub API.

HTTP-facing errors subclass FastAPI's HTTPException so routers and services
can raise them directly. The remaining exceptions carry library-shaped
details (duplicate keys, upload limits, storage failures) and are turned into
responses by `nilhub.core.error_handler`.
"""

from fastapi import HTTPException, status


# ---------------------------------------------------------------------------
# HTTP-facing errors
# ---------------------------------------------------------------------------


class Unauthenticated(HTTPException):
    """
    401 raised by the authentication chain.

    `reason` classifies the failure for logging and tests:
      no_token | malformed | expired | invalid | account_not_found |
      account_inactive | credentials
    """

    def __init__(self, detail: str, reason: str = "invalid"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.reason = reason


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationFailed(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Conflict(HTTPException):
    """Business-level uniqueness clash (e.g. email already registered)."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UploadRejected(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class TooManyRequests(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
        )


# ---------------------------------------------------------------------------
# Errors translated by rule
# ---------------------------------------------------------------------------


class DuplicateKeyError(Exception):
    """
    Unique-constraint violation raised by the persistence layer.

    Attributes:
        key_value: {field: offending value}, e.g. {"email": "a@b.com"}
    """

    def __init__(self, key_value: dict[str, object]):
        self.key_value = key_value
        fields = ", ".join(key_value) or "unknown"
        super().__init__(f"Duplicate key for {fields}")


class FieldValidationError(Exception):
    """
    Aggregated field-level validation failure raised by services.

    Attributes:
        errors: list of {"field": ..., "message": ...}
    """

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        super().__init__(", ".join(e["message"] for e in errors))

    @classmethod
    def single(cls, field: str, message: str) -> "FieldValidationError":
        return cls([{"field": field, "message": message}])


# Upload limit codes, mirroring the multipart parser vocabulary.
LIMIT_FILE_SIZE = "LIMIT_FILE_SIZE"
LIMIT_FILE_COUNT = "LIMIT_FILE_COUNT"
LIMIT_UNEXPECTED_FILE = "LIMIT_UNEXPECTED_FILE"


class UploadLimitError(Exception):
    """Upload violated a size/count/field limit."""

    def __init__(
        self,
        code: str,
        field: str | None = None,
        limit: int | None = None,
    ):
        self.code = code
        self.field = field
        self.limit = limit
        super().__init__(f"{code} ({field})" if field else code)


class StorageError(Exception):
    """Opaque failure from the image host; details never reach the client."""
