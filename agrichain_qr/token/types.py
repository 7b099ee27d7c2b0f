"""QR token datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class QRToken:
    """Signed reference to a product at a point in time."""

    product_id: str
    issued_at_ms: int
    signature: str


class FailureReason(str, Enum):
    """Internal reason a token was rejected."""

    MALFORMED = "malformed"
    SIGNATURE_MISMATCH = "signature_mismatch"
    EXPIRED = "expired"
    REPLAYED = "replayed"


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    reason: Optional[FailureReason] = None
    product_id: Optional[str] = None

    @property
    def outcome(self) -> str:
        """Generic caller-facing outcome which does not reveal the failed check."""
        return "ok" if self.valid else "invalid"
