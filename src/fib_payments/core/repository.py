"""
Payment operations mapped onto authenticated gateway calls.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from .auth import TokenCache
from .config import FibConfig
from .http import HttpExecutor, read_json
from .models import CreatePaymentRequest, PaymentResponse, PaymentStatusResponse

__all__ = ["FibPaymentRepository", "PaymentRepository"]

logger = logging.getLogger(__name__)


class PaymentRepository(Protocol):
    async def create_payment(self, request: CreatePaymentRequest) -> PaymentResponse:
        ...

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResponse:
        ...

    async def refund_payment(self, payment_id: str) -> PaymentResponse:
        ...

    async def cancel_payment(self, payment_id: str) -> PaymentResponse:
        ...


class FibPaymentRepository:
    """
    Talks to ``protected/v1/payments`` on behalf of :class:`FibClient`.

    Errors from the token cache or the executor propagate untouched.
    """

    def __init__(self, config: FibConfig, tokens: TokenCache, http: HttpExecutor) -> None:
        self.config = config
        self.tokens = tokens
        self.http = http

    async def _call(self, method: str, path: str, body: Optional[Any] = None) -> Any:
        headers = await self.tokens.create_headers()
        url = self.config.endpoint(path)
        request = self.http.build_request(method, url, headers=headers, json=body)
        logger.info("%s %s", method, url)
        response = await self.http.send(request)
        return read_json(response)

    async def create_payment(self, request: CreatePaymentRequest) -> PaymentResponse:
        payload = await self._call("POST", "payments", request.to_payload())
        payment = PaymentResponse.from_response(payload)
        logger.info("Created payment %s", payment.payment_id)
        return payment

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResponse:
        payload = await self._call("GET", f"payments/{payment_id}/status")
        return PaymentStatusResponse.from_response(payload)

    async def refund_payment(self, payment_id: str) -> PaymentResponse:
        payload = await self._call("POST", f"payments/{payment_id}/refund")
        return PaymentResponse.from_response(payload)

    async def cancel_payment(self, payment_id: str) -> PaymentResponse:
        payload = await self._call("POST", f"payments/{payment_id}/cancel")
        return PaymentResponse.from_response(payload)
