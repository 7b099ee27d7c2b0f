"""Process-wide settings for QR token signing and verification."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SECRET_ENV = "AGRICHAIN_QR_SECRET"
FRESHNESS_ENV = "AGRICHAIN_QR_FRESHNESS_MS"
CLOCK_SKEW_ENV = "AGRICHAIN_QR_CLOCK_SKEW_MS"

DEFAULT_FRESHNESS_WINDOW_MS = 24 * 60 * 60 * 1000
DEFAULT_CLOCK_SKEW_MS = 5 * 60 * 1000


@dataclass(frozen=True)
class TokenSettings:
    """Secret key and time limits shared by token issuers and verifiers.

    ``freshness_window_ms`` is exclusive: a token exactly that old is expired.
    ``clock_skew_ms`` bounds how far in the future ``issued_at_ms`` may be.
    """

    secret_key: bytes = field(repr=False)
    freshness_window_ms: int = DEFAULT_FRESHNESS_WINDOW_MS
    clock_skew_ms: int = DEFAULT_CLOCK_SKEW_MS

    def __post_init__(self) -> None:
        if isinstance(self.secret_key, str):
            object.__setattr__(self, "secret_key", self.secret_key.encode("utf-8"))
        if not self.secret_key:
            raise ConfigurationError("secret key must not be empty")
        if self.freshness_window_ms <= 0:
            raise ConfigurationError("freshness window must be positive")
        if self.clock_skew_ms < 0:
            raise ConfigurationError("clock skew tolerance must not be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TokenSettings":
        """Build settings from ``AGRICHAIN_QR_*`` environment variables."""
        env = os.environ if environ is None else environ
        secret = env.get(SECRET_ENV, "")
        if not secret:
            raise ConfigurationError(f"{SECRET_ENV} is not set")
        return cls(
            secret_key=secret.encode("utf-8"),
            freshness_window_ms=_int_from_env(env, FRESHNESS_ENV, DEFAULT_FRESHNESS_WINDOW_MS),
            clock_skew_ms=_int_from_env(env, CLOCK_SKEW_ENV, DEFAULT_CLOCK_SKEW_MS),
        )


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


_settings: Optional[TokenSettings] = None


def get_settings() -> TokenSettings:
    """Return the process-wide settings, loading them from the environment once."""
    global _settings
    if _settings is None:
        _settings = TokenSettings.from_env()
        logger.debug(
            "loaded QR token settings freshness_window_ms=%d clock_skew_ms=%d",
            _settings.freshness_window_ms,
            _settings.clock_skew_ms,
        )
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next ``get_settings`` call reloads them."""
    global _settings
    _settings = None
