"""Shared fixtures: settings, invoices, signed webhook bodies and fake ports."""

import json
from decimal import Decimal

import httpx
import pytest

from paysgator.adapter.request_builder import PaysgatorClient
from paysgator.adapter.schemas import Invoice, Transaction
from paysgator.adapter.signature import compute_signature
from paysgator.adapter.service import PaysgatorAdapter
from paysgator.common.config import PaysgatorSettings

SECRET = "whsec-test"


def make_settings(**overrides) -> PaysgatorSettings:
    values = {
        "api_key": "pk-test",
        "webhook_secret": SECRET,
        "return_url": "https://billing.example.com/invoice/return",
        "base_url": "https://gateway.test",
    }
    values.update(overrides)
    return PaysgatorSettings(_env_file=None, **values)


def webhook_body(
    token: str | None = "4821inv17000000",
    status: str = "SUCCESS",
    event: str = "payment.success",
    transaction_id: str = "pg_tx_1",
    amount: float = 150.5,
) -> bytes:
    data = {"transactionId": transaction_id, "amount": amount, "status": status}
    if token is not None:
        data["externalTransactionId"] = token
    return json.dumps({"event": event, "data": data}).encode("utf-8")


def sign(body: bytes, secret: str = SECRET) -> str:
    return compute_signature(body, secret)


def success_handler(seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": {"transactionId": "pg_tx_1", "checkoutUrl": "https://gateway.test/checkout/pg_tx_1"},
            },
        )

    return handler


def make_adapter(handler, settings: PaysgatorSettings | None = None, now: float = 1700000000) -> PaysgatorAdapter:
    settings = settings or make_settings()
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return PaysgatorAdapter(settings, client=PaysgatorClient(settings, http_client=http), clock=lambda: now)


class FakeTransactions:
    """In-memory host transaction store."""

    def __init__(self, *ids: str) -> None:
        self.rows = {tx_id: Transaction(id=tx_id, amount=Decimal("0")) for tx_id in ids}
        self.updates = []

    def get(self, transaction_id: str) -> Transaction:
        return self.rows[transaction_id]

    def update(self, update) -> None:
        self.updates.append(update)


class FakeInvoices:
    def __init__(self, *invoices: Invoice) -> None:
        self.rows = {invoice.id: invoice for invoice in invoices}

    def get(self, invoice_id: int) -> Invoice:
        try:
            return self.rows[invoice_id]
        except KeyError:
            raise LookupError(invoice_id) from None


class RecordingRedirector:
    def __init__(self) -> None:
        self.urls = []

    def redirect(self, url: str) -> None:
        self.urls.append(url)


@pytest.fixture
def settings() -> PaysgatorSettings:
    return make_settings()


@pytest.fixture
def invoice() -> Invoice:
    return Invoice(
        id=4821,
        number="INV-2024-0042",
        total_with_tax=Decimal("150.50"),
        currency="mzn",
        buyer_email="buyer@example.com",
    )
