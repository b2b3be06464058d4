"""Custom exceptions for ss-tools."""
from typing import Optional


class SSToolsError(Exception):
    """Base exception for all ss-tools errors."""

    pass


class APIError(SSToolsError):
    """API request failed at the transport or HTTP level."""

    pass


class RateLimitError(APIError):
    """API rate limit exceeded."""

    pass


class ParseError(SSToolsError):
    """Response body is not valid JSON or does not match the expected schema."""

    pass


class EmptyResultError(SSToolsError):
    """A title search parsed cleanly but returned no candidates."""

    pass


class RetryExhaustedError(SSToolsError):
    """Retry budget ran out before a usable response was obtained."""

    def __init__(
        self,
        operation: str,
        target: str,
        last_error: Optional[Exception] = None,
    ):
        self.operation = operation
        self.target = target
        self.last_error = last_error
        message = f"Failed to {operation}: {target}"
        if last_error is not None:
            message = f"{message} (last error: {last_error})"
        super().__init__(message)
