"""
TomTom Places exceptions

This module defines the exception hierarchy for the TomTom Places client.
All library errors inherit from TomTomPlacesError, except response validation
errors which are raised by pydantic and re-exported here unchanged.
"""

from typing import Optional

from pydantic import ValidationError

__all__ = [
    "TomTomPlacesError",
    "ConfigurationError",
    "TooManyRequestsError",
    "TransportError",
    "DisposedError",
    "ValidationError",
]


class TomTomPlacesError(Exception):
    """
    Base exception for all TomTom Places client errors.

    Catch this to handle any client error generically. Note that
    ValidationError (malformed API response) is a pydantic error and does
    not inherit from this class.
    """

    pass


class ConfigurationError(TomTomPlacesError):
    """
    Exception raised when the client cannot be configured.

    Raised eagerly, never retried:
    - No API key given and TOMTOM_API_KEY environment variable is empty
    - Rate limit delay is not a positive number
    """

    pass


class TooManyRequestsError(TomTomPlacesError):
    """
    Exception raised when the API answers with HTTP 429, dood!

    Used internally as a control signal to delay and retry the request.
    Callers only see it if the retried request is rate limited again.
    """

    def __init__(self) -> None:
        super().__init__("Too many requests")


class TransportError(TomTomPlacesError):
    """
    Exception raised when the HTTP request fails for any reason other than rate limiting.

    Wraps httpx errors such as:
    - Network errors and timeouts
    - HTTP error statuses (4xx other than 429, 5xx)
    - Non-JSON response bodies

    Args:
        message: Description of the failure
        originalError: The original exception that caused this error
        statusCode: HTTP status code if a response was received
    """

    def __init__(
        self,
        message: str,
        originalError: Optional[Exception] = None,
        statusCode: Optional[int] = None,
    ):
        super().__init__(message)
        self.originalError = originalError
        self.statusCode = statusCode


class DisposedError(TomTomPlacesError):
    """
    Exception set on queued requests when the client is disposed before they run.
    """

    def __init__(self, message: str = "Clearing queue"):
        super().__init__(message)
