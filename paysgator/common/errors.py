"""Failure taxonomy surfaced to the host platform.

None of these are retried inside the adapter.
"""


class PaysgatorError(Exception):
    """Base class for every adapter failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GatewayUnreachable(PaysgatorError):
    """Transport-level failure talking to the gateway."""


class PaymentRejected(PaysgatorError):
    """Gateway declined the request or answered with a non-success body."""


class WebhookRejected(PaysgatorError):
    """Inbound notification failed verification."""


class InvalidWebhookSignature(WebhookRejected):
    pass


class InvalidWebhookStructure(WebhookRejected):
    pass


class MissingCorrelationToken(WebhookRejected):
    pass


class UndecodableInvoiceId(WebhookRejected):
    pass


WEBHOOK_ERRORS: dict[str, type[WebhookRejected]] = {
    cls.__name__: cls
    for cls in (
        InvalidWebhookSignature,
        InvalidWebhookStructure,
        MissingCorrelationToken,
        UndecodableInvoiceId,
    )
}
