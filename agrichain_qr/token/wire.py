"""Canonical text encoding of QR tokens.

The encoding is compact JSON with a fixed field order::

    {"productId":"prod-42","timestamp":1000,"signature":"<64 hex chars>"}

The field names match what the dashboard's scanner has always read from
printed labels, so codes issued by either side stay interchangeable.
"""

from __future__ import annotations

import json
from typing import Union

from ..errors import ParseError
from .types import QRToken

PRODUCT_ID_FIELD = "productId"
TIMESTAMP_FIELD = "timestamp"
SIGNATURE_FIELD = "signature"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def serialize(token: QRToken) -> str:
    payload = {
        PRODUCT_ID_FIELD: token.product_id,
        TIMESTAMP_FIELD: token.issued_at_ms,
        SIGNATURE_FIELD: token.signature,
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def deserialize(text: Union[str, bytes]) -> QRToken:
    """Parse token text; raise ``ParseError`` when it is not a well-formed token."""
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError("token text is not valid UTF-8") from exc
    if not isinstance(text, str):
        raise ParseError(f"token text must be str or bytes, got {type(text).__name__}")

    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise ParseError("token text is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise ParseError("token text must encode a JSON object")

    missing = [name for name in (PRODUCT_ID_FIELD, TIMESTAMP_FIELD, SIGNATURE_FIELD) if name not in payload]
    if missing:
        raise ParseError(f"token is missing required fields: {', '.join(missing)}")

    product_id = payload[PRODUCT_ID_FIELD]
    issued_at = payload[TIMESTAMP_FIELD]
    signature = payload[SIGNATURE_FIELD]

    if not isinstance(product_id, str) or not product_id:
        raise ParseError(f"{PRODUCT_ID_FIELD} must be a non-empty string")
    try:
        product_id.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ParseError(f"{PRODUCT_ID_FIELD} is not encodable as UTF-8") from exc
    # bool is an int subclass; "true" is not a timestamp.
    if isinstance(issued_at, bool) or not isinstance(issued_at, int):
        raise ParseError(f"{TIMESTAMP_FIELD} must be an integer")
    if not INT64_MIN <= issued_at <= INT64_MAX:
        raise ParseError(f"{TIMESTAMP_FIELD} is outside the signed 64-bit range")
    if not isinstance(signature, str):
        raise ParseError(f"{SIGNATURE_FIELD} must be a string")

    return QRToken(product_id=product_id, issued_at_ms=issued_at, signature=signature)
