import pytest
from unittest.mock import AsyncMock, patch
from backoffice.schemas.botbhai import ProductRecord, OrderRecord, CustomerInfo, OrderLine
from backoffice.services.botbhai_bridge import (
    BotBhaiBridge, BotBhaiConfig, SyncOk, SyncErr, SyncSkipped, load_botbhai_config
)
from conftest import TEST_API_KEY, make_order, make_product

PRODUCTS_URL = "https://botbhai.test/api/v1/external/products"
ORDERS_URL = "https://botbhai.test/api/v1/external/orders"

def make_bridge(upstream, api_key=TEST_API_KEY, **config) -> BotBhaiBridge:
    config.setdefault("batch_delay", 0)
    return BotBhaiBridge(
        BotBhaiConfig(api_key=api_key, products_url=PRODUCTS_URL, orders_url=ORDERS_URL, **config),
        transport=upstream.transport()
    )

def product_record(**overrides) -> ProductRecord:
    data = {"id": "p-1", "name": "Panjabi", "price": 900, "original_price": 1100, "stock": 7}
    data.update(overrides)
    return ProductRecord(**data)

def order_record(**overrides) -> OrderRecord:
    data = {
        "id": "o-1",
        "total": 960,
        "payment_status": "paid",
        "customer": CustomerInfo(name="Rahim", phone="01711000000", address="Dhaka"),
        "items": [OrderLine(product_id="p-1", qty=1, price=900)],
    }
    data.update(overrides)
    return OrderRecord(**data)

@pytest.mark.asyncio
async def test_sync_product_posts_mapped_payload(upstream):
    result = await make_bridge(upstream).sync_product(product_record())

    assert isinstance(result, SyncOk)
    assert result.ok
    assert len(upstream.requests) == 1
    request = upstream.requests[0]
    assert request["method"] == "POST"
    assert request["url"] == PRODUCTS_URL
    assert request["api_key"] == TEST_API_KEY
    assert request["json"]["product_id"] == "p-1"
    assert request["json"]["stock_status"] == "low_stock"
    assert request["json"]["discount_price"] == 900

@pytest.mark.asyncio
async def test_sync_order_posts_mapped_payload(upstream):
    result = await make_bridge(upstream).sync_order(order_record())

    assert result.ok
    request = upstream.requests[0]
    assert request["url"] == ORDERS_URL
    assert request["json"]["paid_amount"] == 960
    assert request["json"]["customer_id"] == "01711000000"

@pytest.mark.asyncio
async def test_delete_sends_id_body(upstream):
    bridge = make_bridge(upstream)

    assert (await bridge.delete_product("p-9")).ok
    assert (await bridge.delete_order("o-9")).ok

    assert [(r["method"], r["url"], r["json"]) for r in upstream.requests] == [
        ("DELETE", PRODUCTS_URL, {"id": "p-9"}),
        ("DELETE", ORDERS_URL, {"id": "o-9"}),
    ]

@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [None, "", "   "])
async def test_missing_api_key_is_a_silent_noop(upstream, api_key):
    bridge = make_bridge(upstream, api_key=api_key)

    results = [
        await bridge.sync_product(product_record()),
        await bridge.sync_order(order_record()),
        await bridge.delete_product("p-1"),
        await bridge.delete_order("o-1"),
    ]

    assert all(isinstance(r, SyncSkipped) for r in results)
    assert upstream.requests == []

@pytest.mark.asyncio
async def test_upstream_rejection_is_returned_not_raised(upstream):
    upstream.status_code = 422

    result = await make_bridge(upstream).sync_product(product_record())

    assert isinstance(result, SyncErr)
    assert not result.ok
    assert result.status == 422
    assert result.reason == "422"

@pytest.mark.asyncio
async def test_transport_failure_is_returned_not_raised(upstream):
    upstream.broken_ids.add("o-1")

    result = await make_bridge(upstream).sync_order(order_record())

    assert isinstance(result, SyncErr)
    assert result.status is None
    assert "connection refused" in result.reason

@pytest.mark.asyncio
async def test_sync_all_products_batches_of_five(db, upstream):
    for i in range(12):
        make_product(db, id=f"p-{i:02d}", name=f"Product {i}")
    make_product(db, id="p-hidden", is_active=False)

    bridge = make_bridge(upstream, batch_size=5, batch_delay=15)
    progress = []

    def on_progress(done, total):
        progress.append((done, total, len(upstream.requests)))

    with patch("backoffice.services.botbhai_bridge.asyncio.sleep", new_callable=AsyncMock) as sleep:
        summary = await bridge.sync_all_products(db, on_progress=on_progress)

    # 5 + 5 + 2, прогресс после каждой пачки, пауза только между пачками
    assert progress == [(5, 12, 5), (10, 12, 10), (12, 12, 12)]
    assert sleep.await_count == 2
    sleep.assert_awaited_with(15)

    assert summary.message == "Synced 12 products"
    assert summary.synced == 12
    assert summary.total == 12
    assert summary.errors == []
    assert "p-hidden" not in {r["json"]["product_id"] for r in upstream.requests}

@pytest.mark.asyncio
async def test_sync_all_products_collects_errors_without_aborting(db, upstream):
    for i in range(7):
        make_product(db, id=f"p-{i}")
    upstream.failing_ids["p-1"] = 500
    upstream.broken_ids.add("p-5")

    summary = await make_bridge(upstream).sync_all_products(db)

    assert len(upstream.requests) == 7
    assert summary.synced == 5
    assert summary.message == "Synced 5 products"
    assert "Product p-1: 500" in summary.errors
    assert any(e.startswith("Product p-5: ") for e in summary.errors)

@pytest.mark.asyncio
async def test_sync_all_products_without_key(db, upstream):
    make_product(db)
    progress = []

    summary = await make_bridge(upstream, api_key=None).sync_all_products(db, on_progress=lambda *a: progress.append(a))

    assert summary.ok is False
    assert upstream.requests == []
    assert progress == []

@pytest.mark.asyncio
async def test_sync_all_products_empty_catalog(db, upstream):
    progress = []
    summary = await make_bridge(upstream).sync_all_products(db, on_progress=lambda *a: progress.append(a))

    assert summary.message == "Synced 0 products"
    assert summary.total == 0
    assert progress == []

@pytest.mark.asyncio
async def test_sync_all_orders_sequential(db, upstream):
    first = make_order(db, payment_status="paid")
    second = make_order(db)
    upstream.failing_ids[second.id] = 503

    with patch("backoffice.services.botbhai_bridge.asyncio.sleep", new_callable=AsyncMock) as sleep:
        summary = await make_bridge(upstream).sync_all_orders(db)

    sleep.assert_not_awaited()
    assert len(upstream.requests) == 2
    assert summary.message == "Synced 1 orders"
    assert summary.errors == [f"Order {second.id}: 503"]
    paid = next(r["json"] for r in upstream.requests if r["json"]["order_id"] == first.id)
    assert paid["paid_amount"] == first.total
    assert paid["customer_address"] == "House 12, Road 5, Dhaka, Dhanmondi"

def test_load_config_reads_stored_key(db, api_key):
    config = load_botbhai_config(db)
    assert config.api_key == TEST_API_KEY
    assert config.enabled
    assert config.batch_size == 5
    assert config.batch_delay == 15.0

def test_load_config_without_key(db):
    assert load_botbhai_config(db).enabled is False
