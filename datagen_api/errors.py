"""Error taxonomy shared by the gatekeeping layer and the data handlers.

Every failure a client can see is an ``ApiError``. The exception handler in
``main.py`` renders it as ``{"error": ..., "message": ...}`` with the status
code and any extra headers (``Retry-After`` on 429).
"""

from __future__ import annotations


class ApiError(Exception):
    """Base class for errors rendered as a structured JSON response."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.headers = headers or {}

    def to_body(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message}


class Unauthorized(ApiError):
    """No credential was supplied."""

    status_code = 401
    error = "Unauthorized"


class Forbidden(ApiError):
    """The credential is unknown or disabled."""

    status_code = 403
    error = "Forbidden"


class InvalidParameter(ApiError):
    """A query parameter failed validation."""

    status_code = 400
    error = "Bad Request"


class UnsupportedLocale(InvalidParameter):
    """The requested locale is not in the supported set."""


class TooManyRequests(ApiError):
    """The key has used up its budget for the current window."""

    status_code = 429
    error = "Too Many Requests"

    def __init__(self, retry_after: int) -> None:
        super().__init__(
            f"Rate limit exceeded. Try again in {retry_after} seconds.",
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


class ConfigurationError(ApiError):
    """Required infrastructure (the key store) is not bound."""

    def __init__(self, message: str = "Server configuration error.") -> None:
        super().__init__(message)


class InternalError(ApiError):
    """A collaborator failed. The message is generic, details go to the log."""
