"""Webhook verdicts: each check in order, and what a confirmed delivery writes."""

import json
from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from conftest import make_settings, sign, webhook_body
from paysgator.adapter.schemas import Confirmed, Ignored, Rejected, Verdict
from paysgator.adapter.webhook import build_transaction_update, verify_webhook
from paysgator.common.errors import (
    InvalidWebhookSignature,
    InvalidWebhookStructure,
    MissingCorrelationToken,
    UndecodableInvoiceId,
)


def _verify(body: bytes, **overrides):
    settings = make_settings(**overrides)
    return verify_webhook(body, sign(body), settings)


def test_success_delivery_is_confirmed():
    """Token issued for invoice 4821 decodes back to it."""

    verdict = _verify(webhook_body())
    assert isinstance(verdict, Confirmed)
    assert verdict.invoice_id == 4821
    assert verdict.gateway_transaction_id == "pg_tx_1"
    assert verdict.amount == Decimal("150.5")


def test_bad_signature_is_rejected_before_parsing():
    body = b"not even json"
    verdict = verify_webhook(body, "deadbeef", make_settings())
    assert isinstance(verdict, Rejected)
    assert verdict.reason == "invalid signature"
    with pytest.raises(InvalidWebhookSignature):
        verdict.raise_error()


def test_missing_secret_rejects_by_default():
    body = webhook_body()
    verdict = verify_webhook(body, None, make_settings(webhook_secret=""))
    assert isinstance(verdict, Rejected)
    assert verdict.error == "InvalidWebhookSignature"


def test_missing_secret_with_opt_in_skips_verification():
    body = webhook_body()
    verdict = verify_webhook(body, None, make_settings(webhook_secret="", allow_unsigned_webhooks=True))
    assert isinstance(verdict, Confirmed)


@pytest.mark.parametrize(
    "body",
    [
        b"{not json",
        b"[1, 2]",
        json.dumps({"event": "payment.success"}).encode(),
        json.dumps({"data": {"externalTransactionId": "1inv1"}}).encode(),
        json.dumps({"event": None, "data": {}}).encode(),
        json.dumps({"event": "payment.success", "data": "oops"}).encode(),
        json.dumps({"event": "payment.success", "data": {"amount": "lots"}}).encode(),
    ],
)
def test_malformed_envelope_is_rejected(body):
    verdict = _verify(body)
    assert isinstance(verdict, Rejected)
    assert verdict.reason == "invalid structure"
    with pytest.raises(InvalidWebhookStructure):
        verdict.raise_error()


@pytest.mark.parametrize("event", ["payment.failed", "payment.pending", "refund.success"])
def test_other_events_are_ignored_whatever_the_payload(event):
    verdict = _verify(webhook_body(token=None, status="garbage", event=event))
    assert isinstance(verdict, Ignored)


@pytest.mark.parametrize(
    "payload",
    [
        {"event": "payment.failed", "data": {"amount": "n/a", "status": "FAILED"}},
        {"event": "refund.created", "data": []},
        {"event": "payment.pending", "data": "queued"},
    ],
)
def test_other_events_with_odd_data_are_ignored(payload):
    """Payment data is only validated once the event is known to matter."""

    verdict = _verify(json.dumps(payload).encode())
    assert isinstance(verdict, Ignored)


def test_zero_invoice_prefix_is_rejected():
    verdict = _verify(webhook_body(token="000inv1700000"))
    assert isinstance(verdict, Rejected)
    assert verdict.error == "UndecodableInvoiceId"


def test_verdict_union_discriminates_on_kind():
    adapter = TypeAdapter(Verdict)
    assert isinstance(adapter.validate_python({"kind": "ignored", "reason": "x"}), Ignored)
    rejected = adapter.validate_python({"kind": "rejected", "reason": "invalid signature", "error": "InvalidWebhookSignature"})
    assert isinstance(rejected, Rejected)
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "settled", "reason": "x"})


@pytest.mark.parametrize("status", ["PENDING", "FAILED", "success", ""])
def test_non_success_status_is_ignored_not_rejected(status):
    verdict = _verify(webhook_body(status=status))
    assert isinstance(verdict, Ignored)


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token_is_rejected(token):
    verdict = _verify(webhook_body(token=token))
    assert isinstance(verdict, Rejected)
    assert verdict.reason == "missing correlation token"
    with pytest.raises(MissingCorrelationToken):
        verdict.raise_error()


def test_undecodable_token_is_rejected():
    verdict = _verify(webhook_body(token="inv1700000000"))
    assert isinstance(verdict, Rejected)
    assert verdict.reason == "cannot decode invoice id"
    with pytest.raises(UndecodableInvoiceId):
        verdict.raise_error()


def test_token_is_checked_before_status():
    """A pending delivery with a broken token still fails the token check."""

    verdict = _verify(webhook_body(token="xyz", status="PENDING"))
    assert isinstance(verdict, Rejected)


def test_missing_amount_and_status_use_defaults():
    body = json.dumps({"event": "payment.success", "data": {"externalTransactionId": "7inv1"}}).encode()
    verdict = _verify(body)
    assert isinstance(verdict, Ignored)

    body = json.dumps(
        {"event": "payment.success", "data": {"externalTransactionId": "7inv1", "status": "SUCCESS"}}
    ).encode()
    verdict = _verify(body)
    assert isinstance(verdict, Confirmed)
    assert verdict.amount == 0
    assert verdict.gateway_transaction_id is None


def test_numeric_token_is_accepted():
    body = json.dumps(
        {"event": "payment.success", "data": {"externalTransactionId": 4821, "status": "SUCCESS"}}
    ).encode()
    verdict = _verify(body)
    assert isinstance(verdict, Confirmed)
    assert verdict.invoice_id == 4821


def test_transaction_update_marks_processed():
    verdict = Confirmed(invoice_id=4821, gateway_transaction_id="pg_tx_1", amount=Decimal("150.5"))
    update = build_transaction_update(verdict, "host-tx-9")
    assert update.model_dump(mode="json") == {
        "id": "host-tx-9",
        "invoice_id": 4821,
        "txn_id": "pg_tx_1",
        "amount": "150.5",
        "status": "processed",
    }
