import asyncio
import dataclasses
import logging
from datetime import date

from agrichain_qr import ProductScanner, QRTokenCodec, TokenSettings
from agrichain_qr.catalog import (
    InMemoryProductCatalog,
    PostgresProductCatalog,
    Product,
    ProductCategory,
    ProductStatus,
    create_catalog_from_env,
)
from agrichain_qr.replay import (
    InMemoryUsedTokenStore,
    PostgresUsedTokenStore,
    create_used_token_store_from_env,
)

DAY_MS = 86_400_000

RICE = Product(
    id="prod-42",
    batch_id="BATCH-2024-001",
    name="Basmati Rice",
    variety="Pusa 1121",
    category=ProductCategory.GRAINS,
    farmer_id="farmer-7",
    current_owner_id="retailer-3",
    quantity=500,
    unit="kg",
    status=ProductStatus.AT_RETAILER,
    harvest_date=date(2024, 10, 2),
)


async def _scanner(clock, *, single_use: bool = False) -> ProductScanner:
    codec = QRTokenCodec(TokenSettings(secret_key=b"unit-secret"), clock=clock)
    catalog = InMemoryProductCatalog()
    await catalog.add_product(RICE)
    used = InMemoryUsedTokenStore(clock=clock) if single_use else None
    return ProductScanner(codec=codec, catalog=catalog, used_tokens=used)


def test_scan_resolves_product(clock) -> None:
    scanner = asyncio.run(_scanner(clock))
    text = scanner.codec.issue_text("prod-42")

    result = asyncio.run(scanner.scan(text))
    assert result.ok is True
    assert result.status == "verified"
    assert result.product == RICE


def test_scan_malformed_text(clock) -> None:
    scanner = asyncio.run(_scanner(clock))
    result = asyncio.run(scanner.scan("{broken"))
    assert result.status == "malformed"
    assert result.product is None


def test_scan_hides_which_check_failed(clock, caplog) -> None:
    caplog.set_level(logging.INFO, logger="agrichain_qr")
    scanner = asyncio.run(_scanner(clock))
    token = scanner.codec.issue("prod-42")
    forged = scanner.codec.serialize(dataclasses.replace(token, signature="f" * 64))
    genuine = scanner.codec.serialize(token)

    forged_result = asyncio.run(scanner.scan(forged))
    clock.now_ms += DAY_MS
    expired_result = asyncio.run(scanner.scan(genuine))

    assert forged_result == expired_result
    assert forged_result.status == "invalid"
    assert "signature_mismatch" in caplog.text
    assert "expired" in caplog.text


def test_scan_unencodable_product_id_is_malformed(clock) -> None:
    scanner = asyncio.run(_scanner(clock))
    result = asyncio.run(scanner.scan('{"productId":"\\ud800","timestamp":1,"signature":"00"}'))
    assert result.status == "malformed"
    assert result.product is None


def test_scan_unknown_product(clock) -> None:
    scanner = asyncio.run(_scanner(clock))
    result = asyncio.run(scanner.scan(scanner.codec.issue_text("prod-404")))
    assert result.status == "not_found"


def test_scan_is_repeatable_without_single_use(clock) -> None:
    scanner = asyncio.run(_scanner(clock))
    text = scanner.codec.issue_text("prod-42")
    statuses = [asyncio.run(scanner.scan(text)).status for _ in range(3)]
    assert statuses == ["verified"] * 3


def test_single_use_blocks_second_scan(clock) -> None:
    async def run() -> None:
        scanner = await _scanner(clock, single_use=True)
        try:
            text = scanner.codec.issue_text("prod-42")
            other = scanner.codec.issue_text("prod-42")
            first = await scanner.scan(text)
            second = await scanner.scan(text)
            assert first.status == "verified"
            assert second.status == "invalid"
            assert (await scanner.scan(other)).status == "invalid"  # same product and ms => same signature

            clock.now_ms += 1
            fresh = scanner.codec.issue_text("prod-42")
            assert (await scanner.scan(fresh)).status == "verified"
        finally:
            await scanner.close()

    asyncio.run(run())


def test_used_token_store_forgets_expired_entries(clock) -> None:
    async def run() -> None:
        store = InMemoryUsedTokenStore(clock=clock)
        assert await store.mark_used("sig-1", clock.now_ms + 10) is False
        assert await store.mark_used("sig-1", clock.now_ms + 10) is True
        clock.now_ms += 10
        assert await store.mark_used("sig-1", clock.now_ms + 10) is False
        assert list(store.used) == ["sig-1"]

    asyncio.run(run())


def test_product_from_row() -> None:
    row = {
        "id": "prod-9",
        "batch_id": "BATCH-2024-009",
        "name": "Alphonso Mango",
        "variety": None,
        "category": "fruits",
        "farmer_id": "farmer-1",
        "current_owner_id": "distributor-2",
        "quantity": 120,
        "unit": "box",
        "status": "in_transit",
        "harvest_date": date(2024, 5, 1),
        "expiry_date": None,
        "blockchain_tx_id": "0xabc",
    }
    product = Product.from_row(row)
    assert product.category is ProductCategory.FRUITS
    assert product.status is ProductStatus.IN_TRANSIT
    assert product.variety == ""
    assert product.quantity == 120.0
    assert product.blockchain_tx_id == "0xabc"


def test_backends_selected_from_env(monkeypatch) -> None:
    monkeypatch.delenv("AGRICHAIN_QR_PG_DSN", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("AGRICHAIN_QR_SINGLE_USE", raising=False)
    assert isinstance(create_catalog_from_env(), InMemoryProductCatalog)
    assert create_used_token_store_from_env() is None

    monkeypatch.setenv("AGRICHAIN_QR_SINGLE_USE", "true")
    assert isinstance(create_used_token_store_from_env(), InMemoryUsedTokenStore)

    monkeypatch.setenv("AGRICHAIN_QR_PG_DSN", "postgresql://localhost/agrichain")
    assert isinstance(create_catalog_from_env(), PostgresProductCatalog)
    assert isinstance(create_used_token_store_from_env(), PostgresUsedTokenStore)
