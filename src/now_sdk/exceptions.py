"""Exception classes for the Now SDK."""

from __future__ import annotations

from typing import Any


class NowError(Exception):
    """Base exception for all Now SDK errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(NowError):
    """No usable credentials could be resolved.

    This error is raised when:
    - An explicit token is empty or blank
    - No token is found in ~/.now.json or the environment
    - ~/.now.json exists but cannot be read as a JSON object
    """


class ClientClosedError(NowError):
    """An operation was called on a client after ``close()``."""

    def __init__(self, message: str = "Client is closed") -> None:
        super().__init__(message)


class TransportError(NowError):
    """Generic I/O failure while talking to the Now API.

    Attributes:
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class ConnectionError(TransportError):
    """Failed to connect to the Now API.

    This error is raised when:
    - Network is unavailable
    - API host is unreachable
    - The connection drops mid-request
    """

    def __init__(
        self,
        message: str = "Failed to connect to Now API",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause)


class TimeoutError(TransportError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: float | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(message, cause)


class MalformedResponseError(TransportError):
    """A successful response carried an empty or unparseable body."""


class UnsuccessfulResponseError(NowError):
    """The Now API answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code from the API.
        message: Server-provided error message, or the HTTP reason phrase.
        code: Machine-readable error code from the API, if any.
        details: The raw error payload.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.details = details or {}
        super().__init__(f"[{status_code}] {message}")
        self.message = message


class AuthenticationError(UnsuccessfulResponseError):
    """The token was rejected (401)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(401, message, code, details)


class ForbiddenError(UnsuccessfulResponseError):
    """The token lacks access to the resource or team (403)."""

    def __init__(
        self,
        message: str = "Forbidden",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(403, message, code, details)


class NotFoundError(UnsuccessfulResponseError):
    """Resource not found (404).

    This error is raised when:
    - A deployment, file, domain or record id doesn't exist
    - An alias, certificate or secret doesn't exist
    """

    def __init__(
        self,
        message: str = "Not found",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(404, message, code, details)


class ConflictError(UnsuccessfulResponseError):
    """Resource conflict (409), e.g. a domain or secret name already taken."""

    def __init__(
        self,
        message: str = "Resource conflict",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(409, message, code, details)


class ValidationError(UnsuccessfulResponseError):
    """Request validation failed (400 or 422)."""

    def __init__(
        self,
        status_code: int = 400,
        message: str = "Validation error",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code, message, code, details)


class RateLimitError(UnsuccessfulResponseError):
    """Rate limit exceeded (429).

    Attributes:
        retry_after: Seconds to wait before retrying (if provided by API).
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(429, message, code, details)


def _error_fields(data: Any) -> tuple[str | None, str | None]:
    """Pull (message, code) out of a Now error payload.

    The API answers ``{"error": {"code": ..., "message": ...}}``; older
    endpoints put ``message`` / ``code`` at the top level.
    """
    if not isinstance(data, dict):
        return None, None
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message"), error.get("code")
    if isinstance(error, str):
        return error, data.get("code")
    return data.get("message"), data.get("code")


def raise_for_status(
    status_code: int,
    response_data: Any = None,
    reason: str = "",
    retry_after: str | None = None,
) -> None:
    """Raise an appropriate exception for a non-2xx HTTP status code.

    Args:
        status_code: HTTP status code.
        response_data: Parsed JSON response data, if any.
        reason: HTTP reason phrase, used when the body carries no message.
        retry_after: Value of the Retry-After header, if any.

    Raises:
        AuthenticationError: For 401 status.
        ForbiddenError: For 403 status.
        NotFoundError: For 404 status.
        ConflictError: For 409 status.
        ValidationError: For 400 and 422 status.
        RateLimitError: For 429 status.
        UnsuccessfulResponseError: For any other status outside 2xx.
    """
    if 200 <= status_code < 300:
        return

    message, code = _error_fields(response_data)
    message = message or reason or f"HTTP {status_code}"
    details = response_data if isinstance(response_data, dict) else None

    if status_code == 401:
        raise AuthenticationError(message, code, details)
    elif status_code == 403:
        raise ForbiddenError(message, code, details)
    elif status_code == 404:
        raise NotFoundError(message, code, details)
    elif status_code == 409:
        raise ConflictError(message, code, details)
    elif status_code in (400, 422):
        raise ValidationError(status_code, message, code, details)
    elif status_code == 429:
        wait = int(retry_after) if retry_after and retry_after.isdigit() else None
        raise RateLimitError(message, wait, code, details)
    else:
        raise UnsuccessfulResponseError(status_code, message, code, details)
