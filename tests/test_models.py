"""
Tests for wire models.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import payment_body, status_body
from fib_payments.core.errors import SerializationError
from fib_payments.core.models import (
    ApiErrorResponse,
    CreatePaymentRequest,
    MonetaryValue,
    PaymentResponse,
    PaymentStatus,
    PaymentStatusResponse,
    TokenResponse,
    parse_timestamp,
)


class TestParseTimestamp:
    def test_zulu_suffix(self):
        assert parse_timestamp("2026-10-18T12:00:00Z") == datetime(
            2026, 10, 18, 12, tzinfo=timezone.utc
        )

    def test_offset_is_normalized_to_utc(self):
        parsed = parse_timestamp("2026-10-18T15:00:00+03:00")
        assert parsed == datetime(2026, 10, 18, 12, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    def test_naive_is_treated_as_utc(self):
        assert parse_timestamp("2026-10-18T12:00:00").tzinfo == timezone.utc

    def test_nanosecond_precision_is_truncated(self):
        parsed = parse_timestamp("2026-10-18T12:00:00.123456789Z")
        assert parsed.microsecond == 123456

    @pytest.mark.parametrize("value", ["yesterday", 1700000000, None])
    def test_invalid(self, value):
        with pytest.raises(SerializationError):
            parse_timestamp(value)


class TestCreatePaymentRequest:
    def test_minimal_payload(self):
        request = CreatePaymentRequest(
            monetary_value=MonetaryValue(amount=1000.0, currency="IQD"),
            refundable_for="P7D",
        )
        assert request.to_payload() == {
            "monetaryValue": {"amount": 1000.0, "currency": "IQD"},
            "refundableFor": "P7D",
        }

    def test_integer_amount_becomes_float(self):
        value = MonetaryValue(amount=1000, currency="IQD").to_payload()
        assert value == {"amount": 1000.0, "currency": "IQD"}
        assert isinstance(value["amount"], float)

    def test_full_payload(self):
        request = CreatePaymentRequest(
            monetary_value=MonetaryValue(amount=250.5, currency="USD"),
            refundable_for="PT12H",
            status_callback_url="https://shop.test/cb",
            description="Coffee",
        )
        assert request.to_payload() == {
            "monetaryValue": {"amount": 250.5, "currency": "USD"},
            "statusCallbackUrl": "https://shop.test/cb",
            "description": "Coffee",
            "refundableFor": "PT12H",
        }


class TestResponses:
    def test_payment_response(self):
        payment = PaymentResponse.from_response(payment_body("p-1"))
        assert payment.payment_id == "p-1"
        assert payment.readable_code == "ABCD-EFGH-IJKL"
        assert payment.personal_app_link.endswith("/p-1")

    def test_payment_response_missing_field(self):
        body = payment_body()
        del body["qrCode"]
        with pytest.raises(SerializationError, match="qrCode"):
            PaymentResponse.from_response(body)

    def test_unpaid_status_has_no_payer(self):
        status = PaymentStatusResponse.from_response(status_body())
        assert status.status is PaymentStatus.UNPAID
        assert status.paid_at is None
        assert status.paid_by is None

    def test_declined_status(self):
        body = status_body(status="DECLINED")
        body["decliningReason"] = "PAYMENT_CANCELLATION"
        body["declinedAt"] = "2026-10-18T11:00:00Z"

        status = PaymentStatusResponse.from_response(body)

        assert status.status is PaymentStatus.DECLINED
        assert status.declining_reason == "PAYMENT_CANCELLATION"
        assert status.declined_at == datetime(2026, 10, 18, 11, tzinfo=timezone.utc)

    def test_every_status_value_decodes(self):
        for member in PaymentStatus:
            body = status_body(status=member.value)
            assert PaymentStatusResponse.from_response(body).status is member

    def test_unknown_status(self):
        with pytest.raises(SerializationError):
            PaymentStatusResponse.from_response(status_body(status="ON_HOLD"))

    def test_integer_amount_is_accepted(self):
        value = MonetaryValue.from_response({"amount": 500, "currency": "IQD"})
        assert value.amount == 500.0

    def test_token_response(self):
        token = TokenResponse.from_response(
            {"access_token": "abc", "token_type": "Bearer", "expires_in": 300}
        )
        assert token == TokenResponse(access_token="abc", token_type="Bearer", expires_in=300)

    def test_error_response(self):
        body = ApiErrorResponse.from_response(
            {
                "traceId": "trace-1",
                "errors": [{"code": "C1", "title": "T1", "detail": "D1"}],
            }
        )
        assert body.trace_id == "trace-1"
        assert [e.code for e in body.errors] == ["C1"]

    def test_error_response_rejects_non_list(self):
        with pytest.raises(SerializationError):
            ApiErrorResponse.from_response({"traceId": "t", "errors": "boom"})
