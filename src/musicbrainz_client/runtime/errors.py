"""
MusicBrainz Client Error Model

Every failure surfaced by the client is one of a small, closed set of kinds so
that callers can branch on ``error.code`` instead of parsing messages.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error kinds raised by the client."""

    OK = 0
    UNKNOWN = 1

    # The physical send never completed (DNS, refused connection, timeout)
    TRANSPORT_FAILURE = 100

    # The server answered with a non-success status
    REMOTE_ERROR = 200

    # A success body did not have the expected shape
    DECODE_ERROR = 300

    # Operation invoked in a state where it makes no sense
    INVALID_STATE = 400
    DISPOSED = 401

    # Rejected option value
    CONFIGURATION_ERROR = 500

    # OAuth2 token exchange returned a different token type
    TOKEN_TYPE_MISMATCH = 600


class MusicBrainzError(Exception):
    """
    Base class for all client errors.

    Carries an error code plus optional structured details and the underlying
    exception, if any.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a client error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": self.code.value,
            "kind": self.code.name,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class TransportError(MusicBrainzError):
    """The physical send could not complete (network, DNS, timeout)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.TRANSPORT_FAILURE, details, cause)


class RemoteError(MusicBrainzError):
    """
    The web service answered with a non-success status.

    Attributes:
        status: HTTP status code
        reason: HTTP reason phrase
        body: Raw response body (for diagnostics)
        error: Error text reported by the service, if the body carried one
        help: Help text reported by the service, if any
    """

    def __init__(self, status: int, reason: str, body: bytes = b"",
                 error: Optional[str] = None, help: Optional[str] = None):
        message = f"HTTP {status}: {reason}"
        if error:
            message = f"{message} ({error})"
        super().__init__(message, ErrorCode.REMOTE_ERROR, {"status": status})
        self.status = status
        self.reason = reason
        self.body = body
        self.error = error
        self.help = help

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500


class DecodeError(MusicBrainzError):
    """A success response body did not match the expected shape."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.DECODE_ERROR, details, cause)


class InvalidStateError(MusicBrainzError):
    """An operation was invoked in a state where it makes no sense."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_STATE,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code, details)


class DisposedError(InvalidStateError):
    """The object was shut down; no further requests are possible."""

    def __init__(self, owner: str):
        super().__init__(f"{owner} has been shut down", ErrorCode.DISPOSED, {"owner": owner})
        self.owner = owner


class ConfigurationError(MusicBrainzError):
    """An option value was rejected at the point of assignment."""

    def __init__(self, message: str, option: Optional[str] = None, value: Any = None):
        details = {"option": option, "value": value} if option else None
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
        self.option = option
        self.value = value


class TokenTypeError(MusicBrainzError):
    """An OAuth2 token request returned a token of the wrong type."""

    def __init__(self, expected: str, actual: Optional[str]):
        super().__init__(
            f"Token request returned a token of the wrong type ('{actual}' != '{expected}')",
            ErrorCode.TOKEN_TYPE_MISMATCH,
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


__all__ = [
    "ErrorCode",
    "MusicBrainzError",
    "TransportError",
    "RemoteError",
    "DecodeError",
    "InvalidStateError",
    "DisposedError",
    "ConfigurationError",
    "TokenTypeError",
]
