"""Error taxonomy and Litestar exception handlers."""

import logging

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from folio.lib import observability

logger = logging.getLogger(__name__)


class FolioError(Exception):
    """Base class for errors reported back to dashboard users."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FolioError):
    """Malformed input, reported with per-field messages."""

    status_code = HTTP_400_BAD_REQUEST
    default_message = "Please check the submitted data."

    def __init__(self, message: str | None = None, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors = field_errors or {}

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, {field: message})


class PermissionDenied(FolioError):
    """The acting user's role is not allowed to perform the operation."""

    status_code = HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action."


class NotFound(FolioError):
    """The referenced item or scope does not exist."""

    status_code = HTTP_404_NOT_FOUND
    default_message = "The requested item was not found."


class StorageError(FolioError):
    """A query or transaction failed. The cause is chained, never shown."""

    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "The change could not be saved. Please try again."


def log_unexpected(msg: str, **kwargs) -> None:
    """Log the active exception via Logfire, falling back to stdlib logging."""
    if not observability.exception(msg, **kwargs):
        logger.exception(msg.format(**kwargs))


def folio_exception_handler(request: Request, exc: FolioError) -> Response:
    """Render a FolioError raised outside the action boundary."""
    content: dict = {"status_code": exc.status_code, "detail": exc.message}
    if isinstance(exc, ValidationError) and exc.field_errors:
        content["field_errors"] = exc.field_errors
    if isinstance(exc, StorageError):
        log_unexpected("Storage error on {method} {path}", method=request.method, path=request.url.path)
    return Response(content=content, status_code=exc.status_code, media_type="application/json")


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return Response(
        content={"status_code": exc.status_code, "detail": detail},
        status_code=exc.status_code,
        media_type="application/json",
    )


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    log_unexpected("Unhandled exception on {method} {path}", method=request.method, path=request.url.path)
    return Response(
        content={"status_code": HTTP_500_INTERNAL_SERVER_ERROR, "detail": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json",
    )


EXCEPTION_HANDLERS = {
    FolioError: folio_exception_handler,
    HTTPException: http_exception_handler,
    Exception: internal_server_error_handler,
}
