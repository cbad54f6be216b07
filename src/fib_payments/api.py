"""
Public, high-level helpers for interacting with the FIB payment gateway.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from .core.client import FibClient
from .core.config import ConfigError, FibConfig, load_fib_config
from .core.environment import build_environment
from .core.models import PaymentResponse, PaymentStatusResponse

__all__ = [
    "ConfigError",
    "FibClient",
    "FibConfig",
    "build_environment",
    "create_payment",
    "create_payment_client",
    "get_payment_status",
    "load_fib_config",
]


def create_payment_client(
    *,
    config: Optional[FibConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    base_url: Optional[str] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    callback_url: Optional[str] = None,
    refundable_for: Optional[str] = None,
    currency: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
) -> FibClient:
    """
    Construct a :class:`FibClient`.

    Callers can either supply a ready-made :class:`FibConfig` or let the
    helper assemble one from environment data.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            base_url,
            client_id,
            client_secret,
            callback_url,
            refundable_for,
            currency,
            timeout_seconds,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built FibConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_fib_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            base_url=base_url,
            client_id=client_id,
            client_secret=client_secret,
            callback_url=callback_url,
            refundable_for=refundable_for,
            currency=currency,
            timeout_seconds=timeout_seconds,
        )
    return FibClient(cfg, http_client=http_client)


async def create_payment(
    amount: float,
    *,
    payment_currency: Optional[str] = None,
    description: Optional[str] = None,
    status_callback_url: Optional[str] = None,
    payment_refundable_for: Optional[str] = None,
    **client_options: Any,
) -> PaymentResponse:
    """
    One-shot helper: open a client, create a single payment, close the client.

    ``client_options`` are forwarded to :func:`create_payment_client`.
    """
    async with create_payment_client(**client_options) as client:
        return await client.create_payment(
            amount,
            currency=payment_currency,
            callback_url=status_callback_url,
            description=description,
            refundable_for=payment_refundable_for,
        )


async def get_payment_status(payment_id: str, **client_options: Any) -> PaymentStatusResponse:
    """One-shot helper mirroring :func:`create_payment` for status polling."""
    async with create_payment_client(**client_options) as client:
        return await client.get_payment_status(payment_id)
