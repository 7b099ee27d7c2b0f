"""Scan flow: parse token text, verify it, then resolve the product."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .catalog.models import Product
from .catalog.storage import ProductCatalog
from .errors import ParseError
from .replay.storage import UsedTokenStore
from .token.codec import QRTokenCodec
from .token.types import FailureReason
from .token.wire import deserialize

logger = logging.getLogger(__name__)

VERIFIED = "verified"
MALFORMED = "malformed"
INVALID = "invalid"
NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ScanResult:
    """Caller-facing scan outcome.

    ``status`` is one of ``verified``, ``malformed``, ``invalid`` or
    ``not_found``. Signature, expiry and replay failures all map to
    ``invalid``.
    """

    status: str
    product: Optional[Product] = None

    @property
    def ok(self) -> bool:
        return self.status == VERIFIED


class ProductScanner:
    """Turn scanned QR text into a product record."""

    def __init__(
        self,
        *,
        codec: QRTokenCodec,
        catalog: ProductCatalog,
        used_tokens: Optional[UsedTokenStore] = None,
    ) -> None:
        self.codec = codec
        self.catalog = catalog
        self.used_tokens = used_tokens

    async def scan(self, text: Union[str, bytes]) -> ScanResult:
        try:
            token = deserialize(text)
        except ParseError as exc:
            logger.info("scan rejected: malformed token text (%s)", exc)
            return ScanResult(MALFORMED)

        check = self.codec.verify(token)
        if not check.valid:
            return ScanResult(INVALID)

        if self.used_tokens is not None:
            replayed = await self.used_tokens.mark_used(token.signature, self.codec.verifier.expires_at_ms(token))
            if replayed:
                logger.info(
                    "rejected QR token product_id=%s reason=%s",
                    token.product_id,
                    FailureReason.REPLAYED.value,
                )
                return ScanResult(INVALID)

        product = await self.catalog.get_product(token.product_id)
        if product is None:
            logger.warning("verified QR token references unknown product_id=%s", token.product_id)
            return ScanResult(NOT_FOUND)
        return ScanResult(VERIFIED, product=product)

    async def close(self) -> None:
        await self.catalog.close()
        if self.used_tokens is not None:
            await self.used_tokens.close()
