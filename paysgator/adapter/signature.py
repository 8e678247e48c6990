"""HMAC-SHA256 webhook signatures (hex digest of the raw body)."""

import hashlib
import hmac

SIGNATURE_HEADER = "X-Paysgator-Signature"


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the exact request body."""

    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def signature_matches(raw_body: bytes, signature_header: str | None, secret: str) -> bool:
    """Constant-time comparison against the signature header."""

    if not signature_header:
        return False
    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature_header.encode("utf-8"))
