"""Exception hierarchy for the push subscription client.

Errors are distinguished by cause: locally detected bad input or bad
server data, a response the remote service should never have produced,
and access failures reported by the session.

``AccessDeniedError`` is for ``APISession`` implementations to raise when
credentials are rejected; the subscription layer never raises or catches
it, so it reaches the caller unchanged.
"""

from typing import Optional, Dict, Any


class PushError(Exception):
    """Base exception for all push client errors.

    Every exception raised by this package inherits from this class, so
    callers can catch them all in one place.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidDataError(PushError):
    """Raised when input or server data fails validation.

    Examples:
        - Page number or page size below 1
        - Unsupported ordering field or direction
        - Unknown output type or hash type
        - Required field missing from a server response
        - Modifying a deleted subscription
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[Any] = None,
        actual: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the error with field details.

        Args:
            message: Human-readable error message
            field: Field name that failed validation
            expected: Expected value or type
            actual: Actual value or type
            details: Optional additional context
        """
        super().__init__(message, details)
        self.field = field
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        """Return string representation with validation details."""
        base = self.message
        if self.field:
            base = f"{base} (field: {self.field})"
        if self.expected is not None and self.actual is not None:
            base = f"{base} - Expected: {self.expected}, Got: {self.actual}"
        if self.details:
            base = f"{base}\nDetails: {self.details}"
        return base


class APIError(PushError):
    """Raised when the API answers with something this client cannot use.

    Examples:
        - ``output_type`` missing from a ``push/get`` response
        - ``subscriptions`` missing from a listing response
        - HTTP 4xx/5xx errors surfaced by a session implementation
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize API error with HTTP details.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            response_body: Raw response body
            details: Optional additional context
        """
        super().__init__(message, details)
        self.status_code = status_code
        self.response_body = response_body

    def __str__(self) -> str:
        """Return string representation including HTTP status."""
        base = self.message
        if self.status_code:
            base = f"[HTTP {self.status_code}] {base}"
        if self.response_body:
            base = f"{base}\nResponse: {self.response_body[:500]}"
        if self.details:
            base = f"{base}\nDetails: {self.details}"
        return base


class AccessDeniedError(PushError):
    """Raised by sessions when the credentials are rejected.

    The subscription layer never raises this itself; it passes through
    every operation that calls the API.
    """

    pass


class ConfigurationError(PushError):
    """Raised when configuration is invalid.

    Examples:
        - Non-numeric page size in the environment
        - Configuration file not found or not a mapping
    """

    pass
