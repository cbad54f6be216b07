"""
Client facade for the FIB online-shop payment gateway.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .auth import TokenCache
from .config import FibConfig
from .http import HttpExecutor
from .models import (
    CreatePaymentRequest,
    MonetaryValue,
    PaymentResponse,
    PaymentStatusResponse,
)
from .repository import FibPaymentRepository, PaymentRepository

__all__ = ["FibClient"]

logger = logging.getLogger(__name__)


class FibClient:
    """
    Entry point for creating, polling, refunding and cancelling payments.

    Missing ``currency``, ``callback_url`` and ``refundable_for`` values are
    filled in from the configuration. Use as an async context manager so the
    underlying connection pool is released::

        async with FibClient(config) as client:
            payment = await client.create_payment(1000.0)
    """

    def __init__(
        self,
        config: FibConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        repository: Optional[PaymentRepository] = None,
    ) -> None:
        self.config = config
        self.http = HttpExecutor(http_client, timeout=config.timeout_seconds)
        if repository is None:
            tokens = TokenCache(config, self.http)
            repository = FibPaymentRepository(config, tokens, self.http)
        self.repository = repository

    async def __aenter__(self) -> "FibClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def create_payment(
        self,
        amount: float,
        *,
        currency: Optional[str] = None,
        callback_url: Optional[str] = None,
        description: Optional[str] = None,
        refundable_for: Optional[str] = None,
    ) -> PaymentResponse:
        request = CreatePaymentRequest(
            monetary_value=MonetaryValue(
                amount=amount,
                currency=currency or self.config.currency,
            ),
            status_callback_url=callback_url or self.config.callback_url,
            description=description,
            refundable_for=refundable_for or self.config.refundable_for,
        )
        logger.debug(
            "Creating payment of %s %s", amount, request.monetary_value.currency
        )
        return await self.repository.create_payment(request)

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResponse:
        return await self.repository.get_payment_status(payment_id)

    async def refund_payment(self, payment_id: str) -> PaymentResponse:
        return await self.repository.refund_payment(payment_id)

    async def cancel_payment(self, payment_id: str) -> PaymentResponse:
        return await self.repository.cancel_payment(payment_id)
