"""AgriChain QR package.

Signed, expiring QR tokens that bind a supply-chain product ID to the moment
its code was generated, plus the rendering, decoding and lookup helpers used
around them.
"""

from .config import TokenSettings, get_settings, reset_settings
from .errors import ConfigurationError, ParseError, QRTokenError
from .scanner import ProductScanner, ScanResult
from .token import FailureReason, QRToken, QRTokenCodec, TokenIssuer, TokenVerifier, VerificationResult

__all__ = [
    "TokenSettings",
    "get_settings",
    "reset_settings",
    "QRTokenError",
    "ParseError",
    "ConfigurationError",
    "QRToken",
    "QRTokenCodec",
    "TokenIssuer",
    "TokenVerifier",
    "VerificationResult",
    "FailureReason",
    "ProductScanner",
    "ScanResult",
]
