"""Paysgator gateway adapter exposed to the host billing platform."""

import time
from collections.abc import Callable

from paysgator.adapter.ports import Redirector, TransactionStore
from paysgator.adapter.request_builder import PaysgatorClient, build_payment_request
from paysgator.adapter.schemas import (
    Confirmed,
    Invoice,
    PaymentOutcome,
    RedirectTarget,
    Rejected,
    Transaction,
    TransactionStatus,
    Verdict,
)
from paysgator.adapter.webhook import build_transaction_update, verify_webhook
from paysgator.common.config import PaysgatorSettings
from paysgator.common.errors import PaysgatorError
from paysgator.common.logging import gateway_tx_id_ctx, invoice_id_ctx, logger
from paysgator.common.metrics import (
    payment_request_failures_total,
    payment_requests_total,
    webhook_verdicts_total,
)

ADAPTER_TYPE = "form"


def get_config() -> dict:
    """Plugin metadata and the host's configuration form definition."""

    return {
        "supports_one_time_payments": True,
        "supports_subscriptions": False,
        "description": "Accept payments via Paysgator - M-Pesa, E-mola, Cards and more",
        "logo": {"logo": "Paysgator.png", "height": "30px", "width": "100px"},
        "form": {
            "api_key": [
                "text",
                {
                    "label": "API Key",
                    "description": "Enter your Paysgator API Key (Live or Test)",
                    "validators": ["nonempty"],
                },
            ],
            "webhook_secret": [
                "text",
                {
                    "label": "Webhook Secret",
                    "description": "Enter your Paysgator Webhook Secret for signature verification",
                },
            ],
            "test_mode": [
                "radio",
                {
                    "multiOptions": {"1": "Yes", "0": "No"},
                    "label": "Test Mode",
                    "description": "Enable test mode for sandbox testing",
                },
            ],
        },
    }


class PaysgatorAdapter:
    """Creates hosted-checkout payments and settles them from webhooks."""

    def __init__(
        self,
        settings: PaysgatorSettings,
        client: PaysgatorClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self.client = client or PaysgatorClient(settings)
        self.clock = clock

    def get_type(self) -> str:
        return ADAPTER_TYPE

    def get_service_url(self) -> str:
        return self.client.service_url

    def create_payment_request(self, invoice: Invoice, return_url: str | None = None) -> PaymentOutcome:
        """Register the payment with the gateway and return where to send the buyer."""

        target_url = return_url or self.settings.return_url
        if not target_url:
            raise ValueError("return URL is required: pass one or set PAYSGATOR_RETURN_URL")

        invoice_id_ctx.set(str(invoice.id))
        request = build_payment_request(invoice, target_url, int(self.clock()))
        payment_requests_total.labels(service=self.settings.service_name).inc()
        try:
            response = self.client.create_payment(request)
        except PaysgatorError as exc:
            payment_request_failures_total.labels(
                service=self.settings.service_name,
                error=exc.__class__.__name__,
            ).inc()
            logger.error(
                "payment creation failed invoice_id=%s error=%s message=%s",
                invoice.id,
                exc.__class__.__name__,
                exc.message,
            )
            raise

        gateway_tx_id_ctx.set(response.transaction_id or "")
        logger.info(
            "payment created invoice_id=%s token=%s transaction_id=%s",
            invoice.id,
            request.external_transaction_id,
            response.transaction_id,
        )
        return PaymentOutcome(
            transaction=Transaction(
                invoice_id=invoice.id,
                gateway_transaction_id=response.transaction_id,
                amount=invoice.total_with_tax,
                currency=invoice.currency,
                status=TransactionStatus.PENDING,
            ),
            redirect=RedirectTarget(url=response.checkout_url),
            correlation_token=request.external_transaction_id,
        )

    def process(self, invoice: Invoice, redirector: Redirector, return_url: str | None = None) -> PaymentOutcome:
        """Create the payment and hand the checkout URL to the host's redirect."""

        outcome = self.create_payment_request(invoice, return_url)
        redirector.redirect(outcome.redirect.url)
        return outcome

    def verify_webhook(self, raw_body: bytes, signature_header: str | None) -> Verdict:
        verdict = verify_webhook(raw_body, signature_header, self.settings)
        webhook_verdicts_total.labels(service=self.settings.service_name, verdict=verdict.kind).inc()
        return verdict

    def process_transaction(
        self,
        transactions: TransactionStore,
        transaction_id: str,
        raw_body: bytes,
        signature_header: str | None,
    ) -> bool:
        """Apply one webhook delivery to the host's transaction.

        Returns True when the transaction was marked processed and False for
        ignored deliveries. Rejected deliveries raise a `WebhookRejected`.
        """

        verdict = self.verify_webhook(raw_body, signature_header)
        if isinstance(verdict, Rejected):
            verdict.raise_error()
        if not isinstance(verdict, Confirmed):
            return False

        invoice_id_ctx.set(str(verdict.invoice_id))
        gateway_tx_id_ctx.set(verdict.gateway_transaction_id or "")
        transactions.get(transaction_id)
        transactions.update(build_transaction_update(verdict, transaction_id))
        logger.info(
            "payment confirmed transaction_id=%s invoice_id=%s amount=%s",
            transaction_id,
            verdict.invoice_id,
            verdict.amount,
        )
        return True
