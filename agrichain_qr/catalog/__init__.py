"""Product lookup for verified QR tokens."""

from .models import Product, ProductCategory, ProductStatus
from .storage import InMemoryProductCatalog, PostgresProductCatalog, ProductCatalog, create_catalog_from_env

__all__ = [
    "Product",
    "ProductCategory",
    "ProductStatus",
    "ProductCatalog",
    "InMemoryProductCatalog",
    "PostgresProductCatalog",
    "create_catalog_from_env",
]
