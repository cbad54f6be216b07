"""
Shared fixtures: a scripted fake gateway, a fake clock and an in-memory
payment repository.
"""

from __future__ import annotations

import asyncio
import json
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from fib_payments.core.auth import TokenCache
from fib_payments.core.config import FibConfig
from fib_payments.core.http import HttpExecutor
from fib_payments.core.models import (
    CreatePaymentRequest,
    PaymentResponse,
    PaymentStatus,
    PaymentStatusResponse,
)
from fib_payments.core.repository import FibPaymentRepository

BASE_URL = "https://fib.test"
AUTH_PATH = "/auth/realms/fib-online-shop/protocol/openid-connect/token"
PAYMENTS_PATH = "/protected/v1/payments"

Reply = Union[httpx.Response, Exception, Callable[[httpx.Request], Any]]


def payment_body(payment_id: str = "pay-123") -> Dict[str, Any]:
    return {
        "paymentId": payment_id,
        "readableCode": "ABCD-EFGH-IJKL",
        "qrCode": "data:image/png;base64,iVBORw0KGgo=",
        "validUntil": "2026-10-18T12:00:00Z",
        "personalAppLink": f"https://personal.fib.test/pay/{payment_id}",
        "businessAppLink": f"https://business.fib.test/pay/{payment_id}",
        "corporateAppLink": f"https://corporate.fib.test/pay/{payment_id}",
    }


def status_body(payment_id: str = "pay-123", status: str = "UNPAID") -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "paymentId": payment_id,
        "status": status,
        "paidAt": None,
        "amount": {"amount": 1000.0, "currency": "IQD"},
        "decliningReason": None,
        "declinedAt": None,
        "paidBy": None,
    }
    if status == "PAID":
        body["paidAt"] = "2026-10-18T10:15:30Z"
        body["paidBy"] = {"name": "Ali Hassan", "iban": "IQ98NBIQ850123456789012"}
    return body


def token_body(token: str = "token-1") -> Dict[str, Any]:
    return {"access_token": token, "token_type": "Bearer", "expires_in": 300}


class FakeGateway:
    """
    Scripted stand-in for the FIB gateway behind ``httpx.MockTransport``.

    Replies are queued per ``(method, path)``; the last queued reply repeats
    once the queue is drained. Every request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._replies: Dict[Tuple[str, str], List[Reply]] = defaultdict(list)
        self.auth_delay = 0.0
        self.reply("POST", AUTH_PATH, httpx.Response(200, json=token_body()))

    def reply(self, method: str, path: str, *replies: Reply) -> None:
        self._replies[(method, path)] = list(replies)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == AUTH_PATH and self.auth_delay:
            await asyncio.sleep(self.auth_delay)

        queue = self._replies.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"traceId": "trace-404", "errors": []})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(request)
        return reply


class FakeClock:
    """Monotonic clock that only advances when ``sleep`` is awaited."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


class InMemoryPaymentRepository:
    """Test double satisfying the ``PaymentRepository`` protocol."""

    def __init__(self) -> None:
        self.created: List[CreatePaymentRequest] = []
        self.statuses: Dict[str, PaymentStatus] = {}
        self.refunded: List[str] = []
        self.cancelled: List[str] = []

    def _payment(self, payment_id: str) -> PaymentResponse:
        return PaymentResponse(
            payment_id=payment_id,
            readable_code="MEM-CODE",
            qr_code="qr",
            valid_until=datetime(2026, 10, 18, tzinfo=timezone.utc) + timedelta(hours=1),
            personal_app_link="personal",
            business_app_link="business",
            corporate_app_link="corporate",
        )

    async def create_payment(self, request: CreatePaymentRequest) -> PaymentResponse:
        self.created.append(request)
        payment_id = f"mem-{len(self.created)}"
        self.statuses[payment_id] = PaymentStatus.UNPAID
        return self._payment(payment_id)

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResponse:
        created = self.created[int(payment_id.split("-")[1]) - 1]
        return PaymentStatusResponse(
            payment_id=payment_id,
            status=self.statuses[payment_id],
            amount=created.monetary_value,
        )

    async def refund_payment(self, payment_id: str) -> PaymentResponse:
        self.refunded.append(payment_id)
        self.statuses[payment_id] = PaymentStatus.REFUND_REQUESTED
        return self._payment(payment_id)

    async def cancel_payment(self, payment_id: str) -> PaymentResponse:
        self.cancelled.append(payment_id)
        self.statuses[payment_id] = PaymentStatus.DECLINED
        return self._payment(payment_id)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture
def config() -> FibConfig:
    return FibConfig(
        base_url=BASE_URL,
        client_id="shop-client",
        client_secret="shop-secret",
    )


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def executor(gateway: FakeGateway, clock: FakeClock) -> HttpExecutor:
    return HttpExecutor(
        httpx.AsyncClient(transport=gateway.transport),
        sleep=clock.sleep,
        clock=clock,
    )


@pytest.fixture
def tokens(config: FibConfig, executor: HttpExecutor) -> TokenCache:
    return TokenCache(config, executor)


@pytest.fixture
def repository(
    config: FibConfig, tokens: TokenCache, executor: HttpExecutor
) -> FibPaymentRepository:
    return FibPaymentRepository(config, tokens, executor)


@pytest.fixture
def memory_repository() -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository()
