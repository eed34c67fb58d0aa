"""Exceptions raised by the client, the API layer and the reply stream."""


class WhispiError(Exception):
    """Base class for all client errors."""


class ApiError(WhispiError):
    """A remote call failed at the HTTP level or the server reported an error.

    Attributes:
        status_code: HTTP status code, if a response was received
        code: Server-side error status (e.g. "NOT_FOUND"), if the server sent one
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class NotFoundError(ApiError):
    """The requested data does not exist yet (HTTP 404 or server status NOT_FOUND)."""


class StreamError(WhispiError):
    """The reply stream carried an error frame."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedFrameError(WhispiError):
    """A stream frame could not be decoded."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line[:80]}")
        self.line = line
        self.reason = reason


class AccountInputError(WhispiError, ValueError):
    """Display name or birth year rejected before contacting the server."""


def is_not_found(error: Exception) -> bool:
    """Return True if an error means "no data yet" rather than a failure.

    Prefers the structured signal; falls back to matching the message text
    for servers that only report "not found"/"empty" in prose.
    """
    if isinstance(error, NotFoundError):
        return True
    if isinstance(error, ApiError):
        text = error.message.lower()
        return "not found" in text or "empty" in text
    return False
