"""
HTTP execution engine for the FIB gateway.

Every outgoing call goes through :meth:`HttpExecutor.send`, which retries
connect and timeout failures with capped exponential backoff and turns
non-2xx responses into :class:`~fib_payments.core.errors.ApiError`.

Invariants:
    - Connect/timeout failures are transient; they are retried until the next
      interval would exceed ``max_elapsed_time``, then the last error is
      raised unchanged.
    - 401 and every other non-2xx status are permanent: no retry.
    - Intervals double from ``initial_interval`` up to ``max_interval``,
      without jitter.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, Mapping, Optional

import httpx

from .errors import ApiError, InvalidUrlError, NetworkError, SerializationError
from .models import ApiErrorResponse

__all__ = [
    "DEFAULT_POLICY",
    "BackoffPolicy",
    "HttpExecutor",
    "read_json",
]

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass(frozen=True)
class BackoffPolicy:
    initial_interval: float = 0.1
    multiplier: float = 2.0
    max_interval: float = 10.0
    max_elapsed_time: float = 30.0

    def intervals(self) -> Iterator[float]:
        """Yield the wait before each retry, in seconds."""
        interval = self.initial_interval
        while True:
            yield min(interval, self.max_interval)
            interval = min(interval * self.multiplier, self.max_interval)


DEFAULT_POLICY = BackoffPolicy()


def read_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise SerializationError(exc) from exc


def _error_from_response(response: httpx.Response) -> ApiError:
    try:
        body = ApiErrorResponse.from_response(response.json())
    except (ValueError, SerializationError):
        return ApiError(
            status_code=response.status_code,
            code=UNKNOWN_ERROR,
            message="Failed to parse error response",
            trace_id=None,
        )

    first = body.errors[0] if body.errors else None
    code = first.code if first is not None else UNKNOWN_ERROR
    message = first.detail if first is not None and first.detail else None
    return ApiError(
        status_code=response.status_code,
        code=code,
        message=message or f"API error occurred with code: {code}",
        trace_id=body.trace_id,
    )


class HttpExecutor:
    """
    Sends one logical request, retrying transient transport failures.

    The executor holds no per-call state; ``policy`` is a template that each
    :meth:`send` walks from the start. ``sleep`` and ``clock`` are injectable
    so the retry schedule can be driven without real time passing.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        policy: BackoffPolicy = DEFAULT_POLICY,
        timeout: float = 30.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self.policy = policy
        self._sleep = sleep
        self._clock = clock

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def build_request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[bytes | str] = None,
        json: Any = None,
    ) -> httpx.Request:
        try:
            return self.client.build_request(
                method, url, headers=headers, content=content, json=json
            )
        except httpx.InvalidURL as exc:
            raise InvalidUrlError(exc) from exc
        except (TypeError, ValueError) as exc:
            raise SerializationError(exc) from exc

    async def send(self, request: httpx.Request) -> httpx.Response:
        started = self._clock()
        intervals = self.policy.intervals()
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._attempt(request, attempt)
            except NetworkError as exc:
                if not exc.is_transient:
                    raise
                delay = next(intervals)
                elapsed = self._clock() - started
                if elapsed + delay > self.policy.max_elapsed_time:
                    logger.error(
                        "Giving up on %s %s after %d attempts (%.1fs): %s",
                        request.method,
                        request.url,
                        attempt,
                        elapsed,
                        exc.cause,
                    )
                    raise
                logger.warning(
                    "Transient failure on %s %s, retrying in %.2fs (attempt %d): %s",
                    request.method,
                    request.url,
                    delay,
                    attempt,
                    exc.cause,
                )
                await self._sleep(delay)

    async def _attempt(self, request: httpx.Request, attempt: int) -> httpx.Response:
        logger.debug("Sending %s %s (attempt %d)", request.method, request.url, attempt)
        try:
            response = await self.client.send(request)
        except httpx.InvalidURL as exc:
            raise InvalidUrlError(exc) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(exc) from exc

        if response.status_code == 401:
            raise ApiError(
                status_code=401,
                code="UNAUTHORIZED",
                message="Invalid or expired token",
                trace_id=None,
            )
        if not response.is_success:
            raise _error_from_response(response)
        return response
