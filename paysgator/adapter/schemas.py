"""Data exchanged with the host platform and the gateway."""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from paysgator.common.errors import WEBHOOK_ERRORS


CHECKOUT_FIELDS = ["name", "email", "phone", "address"]
METADATA_SOURCE = "FOSSBilling"


class Invoice(BaseModel):
    """Read-only invoice view supplied by the host."""

    id: int = Field(gt=0)
    number: str
    total_with_tax: Decimal = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)
    buyer_email: str = Field(min_length=1)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.upper()


class PaymentMetadata(BaseModel):
    description: str
    source: str = METADATA_SOURCE
    invoice_id: int
    client_email: str


class PaymentRequest(BaseModel):
    """Body of `POST /api/v1/payment/create`."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Decimal = Field(gt=0)
    currency: str
    external_transaction_id: str = Field(alias="externalTransactionId", max_length=15)
    checkout_fields: list[str] = Field(default_factory=lambda: list(CHECKOUT_FIELDS), alias="fields")
    return_url: str = Field(alias="returnUrl")
    metadata: PaymentMetadata

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        # Gateway expects a JSON number, not a string.
        return float(amount)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class GatewayResponse(BaseModel):
    """Decoded outcome of a payment-creation call."""

    success: bool
    transaction_id: str | None = None
    checkout_url: str | None = None
    error_message: str | None = None


class TransactionStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"


class Transaction(BaseModel):
    """Local record of one payment attempt."""

    id: str | None = None
    invoice_id: int | None = None
    gateway_transaction_id: str | None = None
    amount: Decimal
    currency: str | None = None
    type: Literal["payment"] = "payment"
    status: TransactionStatus = TransactionStatus.PENDING


class TransactionUpdate(BaseModel):
    """Write applied to the host's transaction for a confirmed payment."""

    id: str
    invoice_id: int
    txn_id: str | None
    amount: Decimal
    status: TransactionStatus = TransactionStatus.PROCESSED


class RedirectTarget(BaseModel):
    url: str


class PaymentOutcome(BaseModel):
    """Result of creating a hosted-checkout payment."""

    transaction: Transaction
    redirect: RedirectTarget
    correlation_token: str


class WebhookData(BaseModel):
    transaction_id: str | None = None
    amount: Decimal = Decimal(0)
    status: str = ""
    external_transaction_id: str | None = None


class WebhookEnvelope(BaseModel):
    """Top-level delivery; `data` is only typed once the event is known."""

    event: str
    data: Any


class Ignored(BaseModel):
    """Valid but not actionable delivery."""

    kind: Literal["ignored"] = "ignored"
    reason: str


class Confirmed(BaseModel):
    kind: Literal["confirmed"] = "confirmed"
    invoice_id: int
    gateway_transaction_id: str | None
    amount: Decimal
    status: str = "SUCCESS"


class Rejected(BaseModel):
    """Delivery that failed verification; `error` names the exception class."""

    kind: Literal["rejected"] = "rejected"
    reason: str
    error: str

    def raise_error(self) -> None:
        raise WEBHOOK_ERRORS[self.error](self.reason)


Verdict = Annotated[Ignored | Confirmed | Rejected, Field(discriminator="kind")]
