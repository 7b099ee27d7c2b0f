"""Keyed hashing helpers."""

from __future__ import annotations

import hmac
from hashlib import sha256


def signing_message(product_id: str, issued_at_ms: int) -> bytes:
    """Return the byte string covered by a token signature."""
    return f"{product_id}:{issued_at_ms}".encode("utf-8")


def hmac_sha256_hex(key: bytes, message: bytes) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``message`` under ``key``."""
    return hmac.new(key, message, sha256).hexdigest()
