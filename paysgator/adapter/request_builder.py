"""Hosted-checkout payment creation against the Paysgator API.

One synchronous POST per payment attempt with a bounded timeout. Failures
are raised to the caller and never retried here.
"""

from time import perf_counter

import httpx

from paysgator.adapter.correlation import encode_token
from paysgator.adapter.schemas import (
    GatewayResponse,
    Invoice,
    PaymentMetadata,
    PaymentRequest,
)
from paysgator.common.config import PaysgatorSettings
from paysgator.common.errors import GatewayUnreachable, PaymentRejected
from paysgator.common.logging import logger
from paysgator.common.metrics import gateway_request_seconds

CREATE_PAYMENT_PATH = "/api/v1/payment/create"
DEFAULT_REJECTION = "Payment creation failed"


def build_payment_request(invoice: Invoice, return_url: str, issued_at: int) -> PaymentRequest:
    """Assemble the creation payload for one invoice."""

    return PaymentRequest(
        amount=invoice.total_with_tax,
        currency=invoice.currency,
        external_transaction_id=encode_token(invoice.id, issued_at),
        return_url=return_url,
        metadata=PaymentMetadata(
            description=f"Invoice #{invoice.number}",
            invoice_id=invoice.id,
            client_email=invoice.buyer_email,
        ),
    )


def _error_message(body: object) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return DEFAULT_REJECTION


def parse_create_response(status_code: int, body: object) -> GatewayResponse:
    """Translate an HTTP status + decoded body into a `GatewayResponse`.

    Raises `PaymentRejected` for anything but a 200 with `success: true`.
    """

    if status_code != 200 or not isinstance(body, dict) or not body.get("success"):
        raise PaymentRejected(_error_message(body))

    data = body.get("data") if isinstance(body.get("data"), dict) else {}
    checkout_url = data.get("checkoutUrl")
    if not checkout_url:
        raise PaymentRejected("gateway response missing checkout URL")
    transaction_id = data.get("transactionId")
    return GatewayResponse(
        success=True,
        transaction_id=str(transaction_id) if transaction_id is not None else None,
        checkout_url=str(checkout_url),
    )


class PaysgatorClient:
    """Thin synchronous client for the payment-creation endpoint."""

    def __init__(self, settings: PaysgatorSettings, http_client: httpx.Client | None = None) -> None:
        self.settings = settings
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(timeout=settings.request_timeout_seconds)

    @property
    def service_url(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}{CREATE_PAYMENT_PATH}"

    def create_payment(self, request: PaymentRequest) -> GatewayResponse:
        """POST the request and return the decoded success response."""

        start = perf_counter()
        try:
            resp = self.http.post(
                self.service_url,
                json=request.to_wire(),
                headers={
                    "Content-Type": "application/json",
                    "X-Api-Key": self.settings.api_key,
                },
                timeout=self.settings.request_timeout_seconds,
            )
        except httpx.TransportError as exc:
            logger.warning("gateway unreachable url=%s error=%s", self.service_url, exc)
            raise GatewayUnreachable(str(exc) or exc.__class__.__name__) from exc
        finally:
            gateway_request_seconds.labels(service=self.settings.service_name).observe(
                max(0.0, perf_counter() - start)
            )

        try:
            body = resp.json()
        except ValueError:
            body = None
        return parse_create_response(resp.status_code, body)

    def close(self) -> None:
        if self._owns_client:
            self.http.close()

    def __enter__(self) -> "PaysgatorClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
