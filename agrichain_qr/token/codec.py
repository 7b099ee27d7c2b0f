"""Single entry point bundling issue, serialize, deserialize and verify."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from ..config import TokenSettings, get_settings
from ..errors import ParseError
from .issuer import TokenIssuer
from .types import FailureReason, QRToken, VerificationResult
from .verifier import TokenVerifier
from .wire import deserialize, serialize

logger = logging.getLogger(__name__)


class QRTokenCodec:
    """Issue and verify signed, expiring product QR tokens."""

    def __init__(
        self,
        settings: Optional[TokenSettings] = None,
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.issuer = TokenIssuer(self.settings, clock=clock)
        self.verifier = TokenVerifier(self.settings, clock=clock)

    def issue(self, product_id: str) -> QRToken:
        return self.issuer.issue(product_id)

    def verify(self, token: QRToken) -> VerificationResult:
        return self.verifier.verify(token)

    @staticmethod
    def serialize(token: QRToken) -> str:
        return serialize(token)

    @staticmethod
    def deserialize(text: Union[str, bytes]) -> QRToken:
        return deserialize(text)

    def issue_text(self, product_id: str) -> str:
        """Issue a token and return its canonical text, ready for a barcode."""
        return serialize(self.issue(product_id))

    def verify_text(self, text: Union[str, bytes]) -> VerificationResult:
        """Parse and verify scanned text; malformed text is a failed result, not an error."""
        try:
            token = deserialize(text)
        except ParseError as exc:
            logger.info("rejected QR token text reason=%s detail=%s", FailureReason.MALFORMED.value, exc)
            return VerificationResult(False, reason=FailureReason.MALFORMED)
        return self.verify(token)
