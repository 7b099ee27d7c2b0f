"""Signed, time-bound QR token issuance and verification."""

from .codec import QRTokenCodec
from .issuer import TokenIssuer
from .types import FailureReason, QRToken, VerificationResult
from .verifier import TokenVerifier
from .wire import deserialize, serialize

__all__ = [
    "QRTokenCodec",
    "TokenIssuer",
    "TokenVerifier",
    "QRToken",
    "VerificationResult",
    "FailureReason",
    "serialize",
    "deserialize",
]
