"""HMAC-backed QR token issuer."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import TokenSettings, get_settings
from ..utils.hashing import hmac_sha256_hex, signing_message
from ..utils.time import epoch_ms
from .types import QRToken

logger = logging.getLogger(__name__)


class TokenIssuer:
    """Issue signed QR tokens binding a product ID to the current time."""

    def __init__(
        self,
        settings: Optional[TokenSettings] = None,
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock or epoch_ms

    def issue(self, product_id: str) -> QRToken:
        if not isinstance(product_id, str) or not product_id:
            raise ValueError("product_id must be a non-empty string")

        issued_at = int(self._clock())
        signature = hmac_sha256_hex(self._settings.secret_key, signing_message(product_id, issued_at))
        logger.debug("issued QR token product_id=%s issued_at_ms=%d", product_id, issued_at)
        return QRToken(product_id=product_id, issued_at_ms=issued_at, signature=signature)
