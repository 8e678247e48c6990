"""Prometheus metric definitions for the adapter."""

from fastapi import Response
from prometheus_client import Counter, Histogram, generate_latest


payment_requests_total = Counter("payment_requests_total", "Total payment creation requests", ["service"])
payment_request_failures_total = Counter(
    "payment_request_failures_total",
    "Payment creation requests that failed",
    ["service", "error"],
)
gateway_request_seconds = Histogram(
    "gateway_request_seconds",
    "Outbound gateway call duration seconds",
    ["service"],
)
webhook_verdicts_total = Counter(
    "webhook_verdicts_total",
    "Webhook deliveries by verdict",
    ["service", "verdict"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
