"""Sign a webhook body the way Paysgator does and POST it to an endpoint.

Useful for sandbox checks of a deployed webhook route and for replaying a
captured delivery.
"""

import argparse
import json
from pathlib import Path

import httpx

from paysgator.adapter.signature import SIGNATURE_HEADER, compute_signature


def build_body(token: str, transaction_id: str, amount: float, status: str, event: str) -> bytes:
    """Encode a minimal payment webhook body."""

    payload = {
        "event": event,
        "data": {
            "transactionId": transaction_id,
            "amount": amount,
            "status": status,
            "externalTransactionId": token,
        },
    }
    return json.dumps(payload).encode("utf-8")


def send(url: str, body: bytes, secret: str | None, timeout_seconds: float) -> httpx.Response:
    """POST the raw body, signed when a secret is given."""

    headers = {"Content-Type": "application/json"}
    if secret:
        headers[SIGNATURE_HEADER] = compute_signature(body, secret)
    return httpx.post(url, content=body, headers=headers, timeout=timeout_seconds)


def main() -> None:
    """Parse CLI args and deliver one webhook."""

    parser = argparse.ArgumentParser(description="Send a signed Paysgator webhook.")
    parser.add_argument("--url", required=True, help="Webhook endpoint URL")
    parser.add_argument("--secret", default=None, help="Webhook secret used for the signature")
    parser.add_argument("--token", default=None, help="externalTransactionId echoed back")
    parser.add_argument("--transaction-id", default="test-txn-1")
    parser.add_argument("--amount", type=float, default=0.0)
    parser.add_argument("--status", default="SUCCESS")
    parser.add_argument("--event", default="payment.success")
    parser.add_argument("--file", dest="json_file", default=None, help="Send this raw JSON file instead")
    parser.add_argument("--timeout", type=float, default=10.0)
    args = parser.parse_args()

    if bool(args.token) == bool(args.json_file):
        raise SystemExit("Provide exactly one of --token or --file")

    if args.json_file:
        body = Path(args.json_file).read_bytes()
    else:
        body = build_body(args.token, args.transaction_id, args.amount, args.status, args.event)

    resp = send(args.url, body, args.secret, args.timeout)
    print(f"status={resp.status_code} body={resp.text}")


if __name__ == "__main__":
    main()
