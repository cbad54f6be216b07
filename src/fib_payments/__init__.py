"""
Public facade for the FIB payments client package.

The most useful pieces are re-exported here so integrators can
``from fib_payments import ...`` without navigating the package.
"""

from .api import create_payment, create_payment_client, get_payment_status
from .core import (
    ApiError,
    ApiMessageError,
    AuthenticationError,
    BackoffPolicy,
    ConfigError,
    CreatePaymentRequest,
    ErrorKind,
    FibClient,
    FibConfig,
    FibError,
    FibPaymentRepository,
    HttpExecutor,
    InvalidUrlError,
    MonetaryValue,
    NetworkError,
    PaidBy,
    PaymentRepository,
    PaymentResponse,
    PaymentStatus,
    PaymentStatusResponse,
    RetryExhaustedError,
    SerializationError,
    TokenCache,
    build_environment,
    format_error,
    load_fib_config,
)

__all__ = (
    "ApiError",
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
    "build_environment",
    "create_payment",
    "create_payment_client",
    "format_error",
    "get_payment_status",
    "load_fib_config",
)
