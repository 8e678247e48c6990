"""Correlation token issued per payment attempt and echoed back by webhooks.

Format is `{invoice_id}inv{unix_ts}`, restricted to `[A-Za-z0-9_-]` and cut
to the gateway's 15 character external-reference limit. Invoice ids are
purely numeric, so decoding keeps the digits before the first `inv`. That
survives truncation of the timestamp and, for long ids, of the separator.
"""

import re

from paysgator.common.errors import UndecodableInvoiceId

SEPARATOR = "inv"
MAX_TOKEN_LENGTH = 15

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_NON_DIGITS = re.compile(r"[^0-9]")


def sanitize(value: str) -> str:
    """Drop every character the gateway does not accept in references."""

    return _UNSAFE_CHARS.sub("", value)


def encode_token(invoice_id: int, issued_at: int) -> str:
    """Build the token for one payment attempt.

    Raises `ValueError` when the invoice id has more digits than the token
    can hold, because the id could no longer be decoded.
    """

    if invoice_id <= 0:
        raise ValueError(f"invoice id must be positive, got {invoice_id}")
    if issued_at < 0:
        raise ValueError(f"issue timestamp must be non-negative, got {issued_at}")
    if len(str(invoice_id)) > MAX_TOKEN_LENGTH:
        raise ValueError(f"invoice id {invoice_id} does not fit in a {MAX_TOKEN_LENGTH} character token")
    token = sanitize(f"{invoice_id}{SEPARATOR}{issued_at}")
    return token[:MAX_TOKEN_LENGTH]


def decode_invoice_id(token: str) -> int:
    """Recover the invoice id from a (possibly truncated) token."""

    head = token.split(SEPARATOR, 1)[0]
    digits = _NON_DIGITS.sub("", head)
    # Invoice ids are positive; an all-zero prefix names no invoice.
    if not digits or int(digits) == 0:
        raise UndecodableInvoiceId("cannot decode invoice id")
    return int(digits)
