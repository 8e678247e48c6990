"""Structured JSON logging with invoice/transaction context fields."""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from paysgator.common.config import PaysgatorSettings


invoice_id_ctx: ContextVar[str] = ContextVar("invoice_id", default="")
gateway_tx_id_ctx: ContextVar[str] = ContextVar("gateway_transaction_id", default="")


class ContextFilter(logging.Filter):
    """Inject service and correlation identifiers into every log record."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        record.invoice_id = invoice_id_ctx.get()
        record.gateway_transaction_id = gateway_tx_id_ctx.get()
        return True


def configure_logging(settings: PaysgatorSettings) -> None:
    """Configure root logger once per host process."""

    handler = logging.StreamHandler(sys.stdout)
    context_filter = ContextFilter(settings.service_name)
    handler.addFilter(context_filter)
    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(service_name)s %(invoice_id)s %(gateway_transaction_id)s %(message)s"
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)
    root.addFilter(context_filter)


logger = logging.getLogger("paysgator")
