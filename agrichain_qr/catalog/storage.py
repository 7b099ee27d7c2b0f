"""Product catalog backends used to resolve verified product IDs."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Dict, Optional

import asyncpg

from .models import Product


class ProductCatalog(ABC):
    """Abstract product store keyed by the same IDs that QR tokens carry."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[Product]:
        """Fetch a product by ID, or ``None`` if it is unknown."""

    @abstractmethod
    async def add_product(self, product: Product) -> None:
        """Insert or replace a product."""

    async def close(self) -> None:
        """Close backend resources if needed."""


class InMemoryProductCatalog(ProductCatalog):
    """In-memory catalog for tests, demos and single-process deployments."""

    def __init__(self) -> None:
        self.products: Dict[str, Product] = {}

    async def get_product(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    async def add_product(self, product: Product) -> None:
        self.products[product.id] = product


UPSERT_PRODUCT_SQL = """
INSERT INTO products (
    id, batch_id, name, variety, category, farmer_id, current_owner_id,
    quantity, unit, status, harvest_date, expiry_date, blockchain_tx_id
)
VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
ON CONFLICT (id) DO UPDATE SET
    batch_id = EXCLUDED.batch_id,
    name = EXCLUDED.name,
    variety = EXCLUDED.variety,
    category = EXCLUDED.category,
    farmer_id = EXCLUDED.farmer_id,
    current_owner_id = EXCLUDED.current_owner_id,
    quantity = EXCLUDED.quantity,
    unit = EXCLUDED.unit,
    status = EXCLUDED.status,
    harvest_date = EXCLUDED.harvest_date,
    expiry_date = EXCLUDED.expiry_date,
    blockchain_tx_id = EXCLUDED.blockchain_tx_id
"""


class PostgresProductCatalog(ProductCatalog):
    """Postgres-backed catalog using asyncpg."""

    def __init__(self, dsn: Optional[str] = None, *, pool: Optional[asyncpg.Pool] = None) -> None:
        self.dsn = dsn
        self.pool = pool

    async def connect(self) -> None:
        if self.pool is not None:
            return
        if not self.dsn:
            raise ValueError("Either `dsn` or `pool` must be provided for PostgresProductCatalog.")
        self.pool = await asyncpg.create_pool(dsn=self.dsn, min_size=1, max_size=4)

    async def close(self) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None

    async def get_product(self, product_id: str) -> Optional[Product]:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM products WHERE id=$1", product_id)
            if row is None:
                return None
            return Product.from_row(dict(row))

    async def add_product(self, product: Product) -> None:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            await conn.execute(
                UPSERT_PRODUCT_SQL,
                product.id,
                product.batch_id,
                product.name,
                product.variety,
                product.category.value,
                product.farmer_id,
                product.current_owner_id,
                product.quantity,
                product.unit,
                product.status.value,
                product.harvest_date,
                product.expiry_date,
                product.blockchain_tx_id,
            )


def create_catalog_from_env() -> ProductCatalog:
    """Create Postgres catalog if env configured, otherwise in-memory."""
    dsn = os.getenv("AGRICHAIN_QR_PG_DSN") or os.getenv("DATABASE_URL")
    if dsn:
        return PostgresProductCatalog(dsn=dsn)
    return InMemoryProductCatalog()
