"""
Configuration objects and helpers for the FIB payments client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urljoin, urlsplit

from .environment import build_environment
from .errors import ConfigError, InvalidUrlError

__all__ = [
    "ConfigError",
    "FibConfig",
    "load_fib_config",
]

AUTH_PATH = "/auth/realms/fib-online-shop/protocol/openid-connect/token"
API_PATH = "protected/v1/"

DEFAULT_REFUNDABLE_FOR = "P7D"
DEFAULT_CURRENCY = "IQD"
DEFAULT_TIMEOUT_SECONDS = 30.0

_PARAMETER_TO_ENV_KEY = {
    "base_url": "FIB_BASE_URL",
    "client_id": "FIB_CLIENT_ID",
    "client_secret": "FIB_CLIENT_SECRET",
    "callback_url": "FIB_CALLBACK_URL",
    "refundable_for": "FIB_REFUNDABLE_FOR",
    "currency": "FIB_CURRENCY",
    "timeout_seconds": "FIB_TIMEOUT_SECONDS",
}


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown configuration parameter '{key}'") from exc
        overrides[env_key] = str(value)
    return overrides


def _require(values: Mapping[str, str], key: str) -> str:
    value = values.get(key)
    if value is None or not value.strip():
        raise ConfigError(f"{key} not set")
    return value.strip()


def _normalize_base_url(raw_url: str) -> str:
    parts = urlsplit(raw_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidUrlError(f"'{raw_url}' is not an absolute http(s) URL")
    return raw_url


@dataclass(frozen=True)
class FibConfig:
    base_url: str
    client_id: str
    client_secret: str
    callback_url: Optional[str] = None
    refundable_for: str = DEFAULT_REFUNDABLE_FOR
    currency: str = DEFAULT_CURRENCY
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __repr__(self) -> str:
        return (
            f"FibConfig(base_url={self.base_url!r}, client_id={self.client_id!r}, "
            f"client_secret='***', callback_url={self.callback_url!r}, "
            f"refundable_for={self.refundable_for!r}, currency={self.currency!r}, "
            f"timeout_seconds={self.timeout_seconds!r})"
        )

    @property
    def auth_url(self) -> str:
        """Token endpoint for the client-credentials exchange."""
        return urljoin(self.base_url, AUTH_PATH)

    @property
    def api_url(self) -> str:
        """Root of the protected payments API, always ending in a slash."""
        return urljoin(self.base_url, API_PATH)

    def endpoint(self, path: str) -> str:
        return urljoin(self.api_url, path)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "FibConfig":
        base_url = _normalize_base_url(_require(values, "FIB_BASE_URL"))
        client_id = _require(values, "FIB_CLIENT_ID")
        client_secret = _require(values, "FIB_CLIENT_SECRET")

        callback_url = values.get("FIB_CALLBACK_URL") or None

        timeout_raw = values.get("FIB_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout_seconds = float(timeout_raw)
        except ValueError as exc:
            raise ConfigError(
                f"FIB_TIMEOUT_SECONDS must be a number, got '{timeout_raw}'"
            ) from exc
        if timeout_seconds <= 0:
            raise ConfigError("FIB_TIMEOUT_SECONDS must be greater than zero")

        return cls(
            base_url=base_url,
            client_id=client_id,
            client_secret=client_secret,
            callback_url=callback_url,
            refundable_for=values.get("FIB_REFUNDABLE_FOR") or DEFAULT_REFUNDABLE_FOR,
            currency=values.get("FIB_CURRENCY") or DEFAULT_CURRENCY,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_env(
        cls,
        *,
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
    ) -> "FibConfig":
        parameter_overrides = _collect_parameter_overrides(
            {
                "base_url": base_url,
                "client_id": client_id,
                "client_secret": client_secret,
                "callback_url": callback_url,
                "refundable_for": refundable_for,
                "currency": currency,
                "timeout_seconds": timeout_seconds,
            }
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment)


def load_fib_config(
    *,
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
) -> FibConfig:
    """
    Convenience wrapper that mirrors :meth:`FibConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, direct
    keyword arguments, or any combination of the three.
    """
    return FibConfig.from_env(
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
