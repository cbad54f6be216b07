"""
Core primitives: configuration, the retrying HTTP engine, token caching and
the payment repository.
"""

from .auth import USER_AGENT, TokenCache
from .client import FibClient
from .config import FibConfig, load_fib_config
from .environment import build_environment
from .errors import (
    ApiError,
    ApiMessageError,
    AuthenticationError,
    ConfigError,
    ErrorKind,
    FibError,
    InvalidUrlError,
    NetworkError,
    RetryExhaustedError,
    SerializationError,
    format_error,
)
from .http import DEFAULT_POLICY, BackoffPolicy, HttpExecutor
from .models import (
    ApiErrorDetail,
    ApiErrorResponse,
    CreatePaymentRequest,
    MonetaryValue,
    PaidBy,
    PaymentResponse,
    PaymentStatus,
    PaymentStatusResponse,
    TokenResponse,
)
from .repository import FibPaymentRepository, PaymentRepository

__all__ = [
    "DEFAULT_POLICY",
    "USER_AGENT",
    "ApiError",
    "ApiErrorDetail",
    "ApiErrorResponse",
    "ApiMessageError",
    "AuthenticationError",
    "BackoffPolicy",
    "ConfigError",
    "CreatePaymentRequest",
    "ErrorKind",
    "FibClient",
    "FibConfig",
    "FibError",
    "FibPaymentRepository",
    "HttpExecutor",
    "InvalidUrlError",
    "MonetaryValue",
    "NetworkError",
    "PaidBy",
    "PaymentRepository",
    "PaymentResponse",
    "PaymentStatus",
    "PaymentStatusResponse",
    "RetryExhaustedError",
    "SerializationError",
    "TokenCache",
    "TokenResponse",
    "build_environment",
    "format_error",
    "load_fib_config",
]
