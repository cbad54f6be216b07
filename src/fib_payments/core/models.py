"""
Value objects exchanged with the FIB payment gateway.

Request objects know how to render their JSON body; response objects are only
ever produced from a decoded payload via ``from_response``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import SerializationError

__all__ = [
    "ApiErrorDetail",
    "ApiErrorResponse",
    "CreatePaymentRequest",
    "MonetaryValue",
    "PaidBy",
    "PaymentResponse",
    "PaymentStatus",
    "PaymentStatusResponse",
    "TokenResponse",
    "parse_timestamp",
]

_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise SerializationError(f"expected an ISO-8601 timestamp, got {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat only accepts 3 or 6 fractional digits before 3.11
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise SerializationError(exc) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _optional_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return parse_timestamp(value)


def _field(payload: Mapping[str, Any], key: str) -> Any:
    try:
        return payload[key]
    except KeyError as exc:
        raise SerializationError(f"missing field '{key}'") from exc
    except TypeError as exc:
        raise SerializationError(f"expected a JSON object, got {payload!r}") from exc


def _string(payload: Mapping[str, Any], key: str) -> str:
    value = _field(payload, key)
    if not isinstance(value, str):
        raise SerializationError(f"field '{key}' must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class TokenResponse:
    access_token: str
    token_type: str
    expires_in: int

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "TokenResponse":
        expires_in = _field(payload, "expires_in")
        try:
            expires_in = int(expires_in)
        except (TypeError, ValueError) as exc:
            raise SerializationError(exc) from exc
        return cls(
            access_token=_string(payload, "access_token"),
            token_type=_string(payload, "token_type"),
            expires_in=expires_in,
        )


@dataclass(frozen=True)
class MonetaryValue:
    amount: float
    currency: str

    def to_payload(self) -> Dict[str, Any]:
        return {"amount": float(self.amount), "currency": self.currency}

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "MonetaryValue":
        amount = _field(payload, "amount")
        if isinstance(amount, bool):
            raise SerializationError(f"field 'amount' must be a number, got {amount!r}")
        try:
            amount = float(amount)
        except (TypeError, ValueError) as exc:
            raise SerializationError(exc) from exc
        return cls(amount=amount, currency=_string(payload, "currency"))


@dataclass(frozen=True)
class CreatePaymentRequest:
    monetary_value: MonetaryValue
    refundable_for: str
    status_callback_url: Optional[str] = None
    description: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON body for ``POST payments``; unset optionals are omitted."""
        body: Dict[str, Any] = {"monetaryValue": self.monetary_value.to_payload()}
        if self.status_callback_url is not None:
            body["statusCallbackUrl"] = self.status_callback_url
        if self.description is not None:
            body["description"] = self.description
        body["refundableFor"] = self.refundable_for
        return body


@dataclass(frozen=True)
class PaymentResponse:
    payment_id: str
    readable_code: str
    qr_code: str
    valid_until: datetime
    personal_app_link: str
    business_app_link: str
    corporate_app_link: str

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "PaymentResponse":
        return cls(
            payment_id=_string(payload, "paymentId"),
            readable_code=_string(payload, "readableCode"),
            qr_code=_string(payload, "qrCode"),
            valid_until=parse_timestamp(_field(payload, "validUntil")),
            personal_app_link=_string(payload, "personalAppLink"),
            business_app_link=_string(payload, "businessAppLink"),
            corporate_app_link=_string(payload, "corporateAppLink"),
        )


class PaymentStatus(enum.Enum):
    """Payment state as reported by the gateway; never changed locally."""

    UNPAID = "UNPAID"
    PAID = "PAID"
    REFUND_REQUESTED = "REFUND_REQUESTED"
    REFUND_IN_PROGRESS = "REFUND_IN_PROGRESS"
    REFUNDED = "REFUNDED"
    DECLINED = "DECLINED"


@dataclass(frozen=True)
class PaidBy:
    name: str
    iban: str

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "PaidBy":
        return cls(name=_string(payload, "name"), iban=_string(payload, "iban"))


@dataclass(frozen=True)
class PaymentStatusResponse:
    payment_id: str
    status: PaymentStatus
    amount: MonetaryValue
    paid_at: Optional[datetime] = None
    declining_reason: Optional[str] = None
    declined_at: Optional[datetime] = None
    paid_by: Optional[PaidBy] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "PaymentStatusResponse":
        raw_status = _field(payload, "status")
        try:
            status = PaymentStatus(raw_status)
        except ValueError as exc:
            raise SerializationError(f"unknown payment status {raw_status!r}") from exc

        paid_by = payload.get("paidBy")
        return cls(
            payment_id=_string(payload, "paymentId"),
            status=status,
            amount=MonetaryValue.from_response(_field(payload, "amount")),
            paid_at=_optional_timestamp(payload.get("paidAt")),
            declining_reason=payload.get("decliningReason"),
            declined_at=_optional_timestamp(payload.get("declinedAt")),
            paid_by=PaidBy.from_response(paid_by) if paid_by is not None else None,
        )


@dataclass(frozen=True)
class ApiErrorDetail:
    code: str
    title: str
    detail: str

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "ApiErrorDetail":
        return cls(
            code=_string(payload, "code"),
            title=_string(payload, "title"),
            detail=_string(payload, "detail"),
        )


@dataclass(frozen=True)
class ApiErrorResponse:
    """Body of a non-2xx gateway response."""

    trace_id: str
    errors: Tuple[ApiErrorDetail, ...]

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "ApiErrorResponse":
        errors = _field(payload, "errors")
        if not isinstance(errors, list):
            raise SerializationError(f"field 'errors' must be a list, got {errors!r}")
        return cls(
            trace_id=_string(payload, "traceId"),
            errors=tuple(ApiErrorDetail.from_response(item) for item in errors),
        )
