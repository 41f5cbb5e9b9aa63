import typing
from logging import getLogger

import sentry_sdk
from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

log = getLogger(__name__)

__all__ = [
    "CustomHTTPException",
    "DomainError",
    "ErrorBody",
    "http_exception_handler",
    "internal_error_handler",
]


class CustomHTTPException(HTTPException): ...


class ErrorBody(typing.TypedDict, total=False):
    """Wire shape of every error response."""

    success: bool
    message: str
    extra: dict[str, typing.Any]


def http_exception_handler(_: Request, exc: HTTPException) -> Response[ErrorBody]:
    """Render an HTTP exception as the standard error envelope.

    Args:
        _: The failing request.
        exc: The raised HTTP exception.

    Returns:
        Response with ``{"success": false, "message": ...}`` and the exception status.
    """
    body: ErrorBody = {"success": False, "message": exc.detail}
    if exc.extra:
        body["extra"] = exc.extra if isinstance(exc.extra, dict) else {"detail": exc.extra}
    return Response(content=body, status_code=exc.status_code, headers=exc.headers)


def internal_error_handler(request: Request, exc: Exception) -> Response[ErrorBody]:
    """Log an unexpected exception and render it as a 500 envelope.

    Args:
        request: The failing request.
        exc: The unhandled exception.

    Returns:
        Response with a generic message and status 500.
    """
    log.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    sentry_sdk.capture_exception(exc)
    return Response(
        content={"success": False, "message": "Server error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
    )


class DomainError(Exception):
    """Base exception for domain-level business rule violations.

    Attributes:
        message: Human-readable error message.
        context: Additional context about the error.

    """

    def __init__(self, message: str, **context: typing.Any) -> None:  # noqa: ANN401
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            **context: Additional context (e.g., field names, identifiers).

        """
        super().__init__(message)
        self.message = message
        self.context = context
