"""Exception types raised by the QR token library."""

from __future__ import annotations


class QRTokenError(Exception):
    """Base class for all library errors."""


class ParseError(QRTokenError, ValueError):
    """Token text (or the barcode carrying it) is malformed or incomplete."""


class ConfigurationError(QRTokenError, RuntimeError):
    """Process configuration is missing or invalid, e.g. no secret key."""
