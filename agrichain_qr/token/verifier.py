"""QR token verification: signature check plus freshness window."""

from __future__ import annotations

import hmac
import logging
from typing import Callable, Optional

from ..config import TokenSettings, get_settings
from ..utils.hashing import hmac_sha256_hex, signing_message
from ..utils.time import epoch_ms
from .types import FailureReason, QRToken, VerificationResult

logger = logging.getLogger(__name__)


class TokenVerifier:
    """Verify QR tokens against the shared secret and the freshness window.

    Verification never raises for a bad token; failures come back as a
    ``VerificationResult`` whose ``reason`` is meant for logs, not for the
    person holding the code.
    """

    def __init__(
        self,
        settings: Optional[TokenSettings] = None,
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock or epoch_ms

    def verify(self, token: QRToken) -> VerificationResult:
        try:
            message = signing_message(token.product_id, token.issued_at_ms)
        except UnicodeEncodeError:
            return self._reject(token, FailureReason.SIGNATURE_MISMATCH)
        expected = hmac_sha256_hex(self._settings.secret_key, message)
        if not _signature_matches(token.signature, expected):
            return self._reject(token, FailureReason.SIGNATURE_MISMATCH)

        now_ms = int(self._clock())
        age_ms = now_ms - token.issued_at_ms
        if age_ms >= self._settings.freshness_window_ms:
            return self._reject(token, FailureReason.EXPIRED, age_ms=age_ms)
        if -age_ms > self._settings.clock_skew_ms:
            return self._reject(token, FailureReason.EXPIRED, age_ms=age_ms)

        return VerificationResult(True, product_id=token.product_id)

    def expires_at_ms(self, token: QRToken) -> int:
        """First instant at which ``token`` is no longer fresh."""
        return token.issued_at_ms + self._settings.freshness_window_ms

    @staticmethod
    def _reject(token: QRToken, reason: FailureReason, *, age_ms: Optional[int] = None) -> VerificationResult:
        logger.info(
            "rejected QR token product_id=%r reason=%s age_ms=%s",
            token.product_id,
            reason.value,
            age_ms,
        )
        return VerificationResult(False, reason=reason)


def _signature_matches(given: str, expected: str) -> bool:
    # compare_digest needs ASCII-only str; anything else cannot be our hex.
    try:
        given_raw = given.encode("ascii")
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(given_raw, expected.encode("ascii"))
