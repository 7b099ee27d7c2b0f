"""Optional replay protection for scanned QR tokens."""

from .storage import InMemoryUsedTokenStore, PostgresUsedTokenStore, UsedTokenStore, create_used_token_store_from_env

__all__ = ["UsedTokenStore", "InMemoryUsedTokenStore", "PostgresUsedTokenStore", "create_used_token_store_from_env"]
