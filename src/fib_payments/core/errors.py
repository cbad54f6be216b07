"""
Error taxonomy shared by every layer of the FIB payments client.

Each failure is a :class:`FibError` subclass tagged with an :class:`ErrorKind`.
The human readable message is produced by :func:`format_error` so the
formatting stays a pure function of the kind and its fields.
"""

from __future__ import annotations

import enum
from typing import Any, Dict, Optional

import httpx

__all__ = [
    "ApiError",
    "ApiMessageError",
    "AuthenticationError",
    "ConfigError",
    "ErrorKind",
    "FibError",
    "InvalidUrlError",
    "NetworkError",
    "RetryExhaustedError",
    "SerializationError",
    "format_error",
]


class ErrorKind(enum.Enum):
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    API = "api"
    NETWORK = "network"
    RETRY_EXHAUSTED = "retry_exhausted"
    INVALID_URL = "invalid_url"
    SERIALIZATION = "serialization"
    API_ERROR = "api_error"


_TEMPLATES = {
    ErrorKind.CONFIGURATION: "Configuration error: {message}",
    ErrorKind.AUTHENTICATION: "Authentication failed: {message}",
    ErrorKind.API: "API error: {message}",
    ErrorKind.NETWORK: "Network error: {cause}",
    ErrorKind.RETRY_EXHAUSTED: "Retry exhausted: {message}",
    ErrorKind.INVALID_URL: "Invalid URL: {cause}",
    ErrorKind.SERIALIZATION: "Serialization error: {cause}",
    ErrorKind.API_ERROR: (
        "API error: {message} (Code: {code}, Status: {status_code}, Trace: {trace_id})"
    ),
}


def format_error(kind: ErrorKind, **fields: Any) -> str:
    """
    Render the message for an error of ``kind``.

    >>> format_error(ErrorKind.CONFIGURATION, message="FIB_BASE_URL not set")
    'Configuration error: FIB_BASE_URL not set'
    """
    return _TEMPLATES[kind].format(**fields)


class FibError(Exception):
    """Base class for every error raised by the client."""

    kind: ErrorKind

    def __init__(self, **fields: Any) -> None:
        super().__init__(format_error(self.kind, **fields))


class ConfigError(FibError):
    """Raised when the supplied configuration is missing or invalid."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message=message)


class AuthenticationError(FibError):
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message=message)


class ApiMessageError(FibError):
    """Generic API failure that only carries a message."""

    kind = ErrorKind.API

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message=message)


class NetworkError(FibError):
    """Raised when the transport fails before a response is received."""

    kind = ErrorKind.NETWORK

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(cause=cause)
        self.__cause__ = cause

    @property
    def is_transient(self) -> bool:
        """Connect and timeout failures are worth another attempt."""
        return isinstance(self.cause, (httpx.ConnectError, httpx.TimeoutException))


class RetryExhaustedError(FibError):
    kind = ErrorKind.RETRY_EXHAUSTED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message=message)


class InvalidUrlError(FibError):
    kind = ErrorKind.INVALID_URL

    def __init__(self, cause: Any) -> None:
        self.cause = cause
        super().__init__(cause=cause)
        if isinstance(cause, BaseException):
            self.__cause__ = cause


class SerializationError(FibError):
    """Raised when a payload cannot be encoded or decoded."""

    kind = ErrorKind.SERIALIZATION

    def __init__(self, cause: Any) -> None:
        self.cause = cause
        super().__init__(cause=cause)
        if isinstance(cause, BaseException):
            self.__cause__ = cause


class ApiError(FibError):
    """Structured failure reported by the payment gateway."""

    kind = ErrorKind.API_ERROR

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        trace_id: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.trace_id = trace_id
        super().__init__(
            status_code=status_code,
            code=code,
            message=message,
            trace_id=trace_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "code": self.code,
            "message": self.message,
            "traceId": self.trace_id,
        }
