"""Utility helpers for hashing and time operations."""

from .hashing import hmac_sha256_hex, signing_message
from .time import epoch_ms, utc_now

__all__ = ["hmac_sha256_hex", "signing_message", "epoch_ms", "utc_now"]
