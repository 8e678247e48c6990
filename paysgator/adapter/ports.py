"""Host-platform collaborators the adapter talks to.

The host implements these; the adapter only calls them.
"""

from typing import Protocol, runtime_checkable

from paysgator.adapter.schemas import Invoice, PaymentOutcome, Transaction, TransactionUpdate, Verdict


class InvoiceAccessor(Protocol):
    def get(self, invoice_id: int) -> Invoice:
        """Return the invoice or raise `LookupError`."""
        ...


class TransactionStore(Protocol):
    def get(self, transaction_id: str) -> Transaction: ...

    def update(self, update: TransactionUpdate) -> None: ...


class Redirector(Protocol):
    def redirect(self, url: str) -> None: ...


@runtime_checkable
class GatewayAdapter(Protocol):
    """Gateway selected by host configuration."""

    def create_payment_request(self, invoice: Invoice, return_url: str | None = None) -> PaymentOutcome: ...

    def verify_webhook(self, raw_body: bytes, signature_header: str | None) -> Verdict: ...
