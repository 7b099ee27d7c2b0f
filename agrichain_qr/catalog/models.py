"""Product records resolved from a verified QR token."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional


class ProductCategory(str, Enum):
    GRAINS = "grains"
    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    DAIRY = "dairy"
    MEAT = "meat"
    SPICES = "spices"


class ProductStatus(str, Enum):
    """Where a product currently sits in the supply chain."""

    REGISTERED = "registered"
    IN_TRANSIT = "in_transit"
    AT_DISTRIBUTOR = "at_distributor"
    AT_RETAILER = "at_retailer"
    SOLD = "sold"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Product:
    id: str
    batch_id: str
    name: str
    category: ProductCategory
    farmer_id: str
    current_owner_id: str
    quantity: float
    unit: str
    status: ProductStatus = ProductStatus.REGISTERED
    variety: str = ""
    harvest_date: Optional[date] = None
    expiry_date: Optional[date] = None
    blockchain_tx_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Product":
        """Build a product from a ``products`` table row."""
        return cls(
            id=row["id"],
            batch_id=row["batch_id"],
            name=row["name"],
            category=ProductCategory(row["category"]),
            farmer_id=row["farmer_id"],
            current_owner_id=row["current_owner_id"],
            quantity=float(row["quantity"]),
            unit=row["unit"],
            status=ProductStatus(row["status"]),
            variety=row.get("variety") or "",
            harvest_date=row.get("harvest_date"),
            expiry_date=row.get("expiry_date"),
            blockchain_tx_id=row.get("blockchain_tx_id"),
        )
