"""Example: label a product with a signed QR code, then scan it back."""

from __future__ import annotations

import asyncio
import os
from datetime import date

from agrichain_qr import ProductScanner, QRTokenCodec, TokenSettings
from agrichain_qr.barcode import decode_png, render_png
from agrichain_qr.catalog import InMemoryProductCatalog, Product, ProductCategory, create_catalog_from_env
from agrichain_qr.replay import create_used_token_store_from_env


async def main() -> None:
    os.environ.setdefault("AGRICHAIN_QR_SECRET", "example-only-secret")
    codec = QRTokenCodec(TokenSettings.from_env())
    catalog = create_catalog_from_env()
    scanner = ProductScanner(codec=codec, catalog=catalog, used_tokens=create_used_token_store_from_env())

    try:
        if isinstance(catalog, InMemoryProductCatalog):
            await catalog.add_product(
                Product(
                    id="prod-42",
                    batch_id="BATCH-2024-001",
                    name="Basmati Rice",
                    variety="Pusa 1121",
                    category=ProductCategory.GRAINS,
                    farmer_id="farmer-7",
                    current_owner_id="farmer-7",
                    quantity=500,
                    unit="kg",
                    harvest_date=date(2024, 10, 2),
                )
            )

        label_text = codec.issue_text("prod-42")
        png = render_png(label_text, width=512, border=4)
        print("QR payload:", label_text)
        print("PNG size:", len(png), "bytes")

        result = await scanner.scan(decode_png(png))
        print("Scan status:", result.status)
        if result.product is not None:
            print("Product:", result.product.name, result.product.batch_id)
    finally:
        await scanner.close()


if __name__ == "__main__":
    asyncio.run(main())
