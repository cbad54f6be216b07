"""
Bearer-token cache backed by the client-credentials grant.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional
from urllib.parse import urlencode

from .config import FibConfig
from .http import HttpExecutor, read_json
from .models import TokenResponse

__all__ = ["USER_AGENT", "TokenCache"]

logger = logging.getLogger(__name__)

USER_AGENT = "FibPaymentsSDK-Python"


class TokenCache:
    """
    Lazily fetches and memoizes the access token for one set of credentials.

    The whole fetch runs under ``lock`` so at most one token request is in
    flight; callers that arrive meanwhile wait and then see the stored token.
    A failed fetch leaves the slot empty.

    The token is kept for the lifetime of the cache: ``expires_in`` is not
    tracked and a 401 from the gateway does not clear it.
    """

    def __init__(self, config: FibConfig, http: HttpExecutor) -> None:
        self.config = config
        self.http = http
        self.lock = asyncio.Lock()
        self.token: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return self.token is not None

    async def get_token(self) -> str:
        async with self.lock:
            if self.token is not None:
                return self.token

            body = urlencode(
                {
                    "grant_type": "client_credentials",
                    "client_id": self.config.client_id,
                    "client_secret": self.config.client_secret,
                }
            )
            request = self.http.build_request(
                "POST",
                self.config.auth_url,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                content=body,
            )
            logger.info("Requesting access token from %s", self.config.auth_url)
            response = await self.http.send(request)

            token = TokenResponse.from_response(read_json(response))
            self.token = token.access_token
            logger.debug("Access token cached (expires_in=%s)", token.expires_in)
            return self.token

    async def create_headers(self) -> Dict[str, str]:
        token = await self.get_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
