"""Opt-in single-use enforcement for QR tokens.

Tokens are reusable until they expire unless a scanner is given one of these
stores. Entries are keyed by token signature and dropped once the token would
have expired anyway.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

import asyncpg

from ..utils.time import epoch_ms


class UsedTokenStore(ABC):
    """Remember which tokens have already been redeemed."""

    @abstractmethod
    async def mark_used(self, token_key: str, expires_at_ms: int) -> bool:
        """Return True if the token was already used and still live; otherwise record it and return False."""

    async def close(self) -> None:
        """Close backend resources if needed."""


class InMemoryUsedTokenStore(UsedTokenStore):
    def __init__(self, *, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock = clock or epoch_ms
        self.used: Dict[str, int] = {}

    async def mark_used(self, token_key: str, expires_at_ms: int) -> bool:
        now_ms = int(self._clock())
        expired = [k for k, exp in self.used.items() if exp <= now_ms]
        for key in expired:
            self.used.pop(key, None)

        if token_key in self.used:
            return True
        self.used[token_key] = expires_at_ms
        return False


class PostgresUsedTokenStore(UsedTokenStore):
    """Postgres-backed used-token store using asyncpg."""

    def __init__(self, dsn: Optional[str] = None, *, pool: Optional[asyncpg.Pool] = None) -> None:
        self.dsn = dsn
        self.pool = pool

    async def connect(self) -> None:
        if self.pool is not None:
            return
        if not self.dsn:
            raise ValueError("Either `dsn` or `pool` must be provided for PostgresUsedTokenStore.")
        self.pool = await asyncpg.create_pool(dsn=self.dsn, min_size=1, max_size=4)

    async def close(self) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None

    async def mark_used(self, token_key: str, expires_at_ms: int) -> bool:
        await self.connect()
        assert self.pool is not None
        expires_at = datetime.fromtimestamp(expires_at_ms / 1000, tz=timezone.utc)
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute("DELETE FROM used_qr_tokens WHERE expires_at <= NOW()")
                inserted = await conn.fetchval(
                    """
                    INSERT INTO used_qr_tokens (token_key, expires_at)
                    VALUES ($1, $2)
                    ON CONFLICT (token_key) DO NOTHING
                    RETURNING token_key
                    """,
                    token_key,
                    expires_at,
                )
                return inserted is None


def create_used_token_store_from_env() -> Optional[UsedTokenStore]:
    """Return a store when ``AGRICHAIN_QR_SINGLE_USE`` is enabled, else ``None``."""
    if os.getenv("AGRICHAIN_QR_SINGLE_USE", "").strip().lower() not in {"1", "true", "yes"}:
        return None
    dsn = os.getenv("AGRICHAIN_QR_PG_DSN") or os.getenv("DATABASE_URL")
    if dsn:
        return PostgresUsedTokenStore(dsn=dsn)
    return InMemoryUsedTokenStore()
