"""Reference HTTP wiring of the adapter into a host platform.

The host supplies invoice and transaction ports; this module only routes
requests to the adapter and maps its failures to status codes.
"""

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse

from paysgator.adapter.ports import InvoiceAccessor, TransactionStore
from paysgator.adapter.service import PaysgatorAdapter
from paysgator.common.config import PaysgatorSettings
from paysgator.common.errors import GatewayUnreachable, PaymentRejected, WebhookRejected
from paysgator.common.logging import configure_logging
from paysgator.common.metrics import metrics_response
from paysgator.common.startup import log_startup_config
from paysgator.common.tracing import instrument_app, setup_tracing


def create_app(
    settings: PaysgatorSettings,
    invoices: InvoiceAccessor,
    transactions: TransactionStore,
    adapter: PaysgatorAdapter | None = None,
) -> FastAPI:
    """Build the checkout/webhook app around host-provided ports."""

    configure_logging(settings)
    log_startup_config(
        settings,
        ["api_key", "webhook_secret", "test_mode", "allow_unsigned_webhooks", "base_url", "return_url"],
    )
    adapter = adapter or PaysgatorAdapter(settings)

    app = FastAPI(title="Paysgator Checkout")
    if settings.otel_exporter_otlp_endpoint:
        setup_tracing(settings.service_name, settings.otel_exporter_otlp_endpoint)
        instrument_app(app)

    @app.post("/invoices/{invoice_id}/pay")
    def pay_invoice(invoice_id: int, return_url: str | None = None):
        """Create the hosted checkout and redirect the buyer to it."""

        try:
            invoice = invoices.get(invoice_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail="invoice not found") from exc
        try:
            outcome = adapter.create_payment_request(invoice, return_url)
        except GatewayUnreachable as exc:
            raise HTTPException(status_code=502, detail=exc.message) from exc
        except PaymentRejected as exc:
            raise HTTPException(status_code=402, detail=exc.message) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return RedirectResponse(outcome.redirect.url, status_code=303)

    @app.post("/webhooks/paysgator/{transaction_id}")
    async def paysgator_webhook(
        transaction_id: str,
        request: Request,
        x_paysgator_signature: str | None = Header(default=None),
    ):
        """Verify one gateway notification and settle the transaction."""

        raw_body = await request.body()
        try:
            processed = await run_in_threadpool(
                adapter.process_transaction, transactions, transaction_id, raw_body, x_paysgator_signature
            )
        except WebhookRejected as exc:
            raise HTTPException(status_code=400, detail=exc.message) from exc
        return {"ok": True, "processed": processed}

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    @app.get("/health")
    def health():
        """Container health probe endpoint."""

        return {"ok": True}

    return app
