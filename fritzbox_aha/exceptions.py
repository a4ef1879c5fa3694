"""Exceptions raised by the FRITZ!Box AHA client."""


class AhaClientError(Exception):
    """Base exception for AHA client errors."""


class AhaValueError(AhaClientError, ValueError):
    """Exception raised for malformed arguments or aggregate fields."""


class AhaRangeError(AhaValueError):
    """Exception raised when a value lies outside its allowed range."""


class AhaFunctionNotSupportedError(AhaClientError):
    """Exception raised when the device answers with the ``inval`` sentinel."""


class AhaDecodeError(AhaClientError, ValueError):
    """Exception raised when a response body is not the expected number."""


class AhaParseError(AhaClientError):
    """Exception raised for malformed or forbidden XML documents."""


class AhaUnsupportedChallengeError(AhaClientError):
    """Exception raised for login challenges the client cannot answer."""


class AhaRequestError(AhaClientError):
    """Exception raised when the gateway answers with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        """Initialize the error with the HTTP status code."""
        super().__init__(message)
        self.status_code = status_code


class AhaAuthError(AhaRequestError):
    """Exception raised when the gateway rejects the session (HTTP 403)."""


class AhaUnsupportedCommandError(AhaRequestError):
    """Exception raised for commands the firmware does not know (HTTP 400)."""
