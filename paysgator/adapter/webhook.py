"""Inbound webhook verification.

`verify_webhook` turns one raw delivery into a verdict without touching the
host: Confirmed deliveries carry what to write, Ignored ones are valid but
not actionable, Rejected ones failed a check. Checks run in a fixed order
and the first failing one decides the verdict.
"""

import json

from pydantic import ValidationError

from paysgator.adapter.correlation import decode_invoice_id
from paysgator.adapter.schemas import (
    Confirmed,
    Ignored,
    Rejected,
    TransactionUpdate,
    Verdict,
    WebhookData,
    WebhookEnvelope,
)
from paysgator.adapter.signature import signature_matches
from paysgator.common.config import PaysgatorSettings
from paysgator.common.errors import UndecodableInvoiceId
from paysgator.common.logging import logger

PAYMENT_SUCCESS_EVENT = "payment.success"
SUCCESS_STATUS = "SUCCESS"


def _parse_envelope(raw_body: bytes) -> WebhookEnvelope | None:
    """Envelope with `event` and `data` present, otherwise None."""

    try:
        payload = json.loads(raw_body)
    except (ValueError, TypeError):
        return None
    if not isinstance(payload, dict):
        return None
    event = payload.get("event")
    data = payload.get("data")
    if event is None or data is None:
        return None
    return WebhookEnvelope(event=str(event), data=data)


def _parse_payment_data(data: object) -> WebhookData | None:
    """Typed view of a payment event's `data`, or None when it is malformed."""

    if not isinstance(data, dict):
        return None
    transaction_id = data.get("transactionId")
    token = data.get("externalTransactionId")
    amount = data.get("amount")
    status = data.get("status")
    try:
        return WebhookData(
            transaction_id=str(transaction_id) if transaction_id is not None else None,
            amount=amount if amount is not None else 0,
            status=str(status) if status is not None else "",
            external_transaction_id=str(token) if token is not None else None,
        )
    except ValidationError:
        return None


def _check_signature(raw_body: bytes, signature_header: str | None, settings: PaysgatorSettings) -> Rejected | None:
    if settings.webhook_secret:
        if not signature_matches(raw_body, signature_header, settings.webhook_secret):
            return Rejected(reason="invalid signature", error="InvalidWebhookSignature")
        return None
    if settings.allow_unsigned_webhooks:
        logger.warning("webhook secret not configured; accepting unsigned webhook")
        return None
    return Rejected(reason="webhook secret not configured", error="InvalidWebhookSignature")


def verify_webhook(raw_body: bytes, signature_header: str | None, settings: PaysgatorSettings) -> Verdict:
    """Authenticate one delivery and decide what it means for the host."""

    rejected = _check_signature(raw_body, signature_header, settings)
    if rejected is not None:
        logger.warning("webhook rejected reason=%s", rejected.reason)
        return rejected

    envelope = _parse_envelope(raw_body)
    if envelope is None:
        logger.warning("webhook rejected reason=invalid structure")
        return Rejected(reason="invalid structure", error="InvalidWebhookStructure")

    if envelope.event != PAYMENT_SUCCESS_EVENT:
        logger.info("webhook ignored event=%s", envelope.event)
        return Ignored(reason=f"event {envelope.event} not handled")

    data = _parse_payment_data(envelope.data)
    if data is None:
        logger.warning("webhook rejected reason=invalid structure")
        return Rejected(reason="invalid structure", error="InvalidWebhookStructure")

    if not data.external_transaction_id:
        logger.warning("webhook rejected reason=missing correlation token")
        return Rejected(reason="missing correlation token", error="MissingCorrelationToken")

    try:
        invoice_id = decode_invoice_id(data.external_transaction_id)
    except UndecodableInvoiceId as exc:
        logger.warning("webhook rejected token=%s reason=%s", data.external_transaction_id, exc.message)
        return Rejected(reason=exc.message, error="UndecodableInvoiceId")

    if data.status != SUCCESS_STATUS:
        logger.info("webhook ignored invoice_id=%s status=%s", invoice_id, data.status)
        return Ignored(reason=f"status {data.status or '<empty>'} is not terminal")

    return Confirmed(
        invoice_id=invoice_id,
        gateway_transaction_id=data.transaction_id,
        amount=data.amount,
        status=data.status,
    )


def build_transaction_update(verdict: Confirmed, transaction_id: str) -> TransactionUpdate:
    """Compute the host write that marks the transaction processed."""

    return TransactionUpdate(
        id=transaction_id,
        invoice_id=verdict.invoice_id,
        txn_id=verdict.gateway_transaction_id,
        amount=verdict.amount,
    )
