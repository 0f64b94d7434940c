from backoffice.services.botbhai_bridge import API_KEY_MISSING
from conftest import TEST_API_KEY, make_order, make_product

RELAY_URL = "/api/v1/botbhai-sync"

PRODUCT_PAYLOAD = {
    "product_id": "p-1",
    "product_name": "Jamdani Saree",
    "stock": 3,
    "stock_status": "low_stock",
    "base_price": 5000,
    "selling_price": 4500,
    "discount_price": 4500,
    "is_available": True,
    "status": "active",
}

def test_relay_requires_api_key(client, upstream):
    response = client.post(RELAY_URL, json={"action": "sync_product", "data": PRODUCT_PAYLOAD})

    assert response.status_code == 400
    assert response.json()["detail"] == API_KEY_MISSING
    assert upstream.requests == []

def test_relay_unknown_action(client, api_key):
    response = client.post(RELAY_URL, json={"action": "sync_everything", "data": {}})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown action: sync_everything"

def test_relay_forwards_product_payload(client, api_key, upstream):
    response = client.post(RELAY_URL, json={"action": "sync_product", "data": PRODUCT_PAYLOAD})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["status"] == 200
    assert '"success"' in body["body"]

    request = upstream.requests[0]
    assert request["method"] == "POST"
    assert request["url"].endswith("/external/products")
    assert request["api_key"] == TEST_API_KEY
    assert request["json"]["product_name"] == "Jamdani Saree"
    assert request["json"]["discount_price"] == 4500

def test_relay_reports_upstream_rejection(client, api_key, upstream):
    upstream.status_code = 500

    response = client.post(RELAY_URL, json={"action": "sync_order", "data": {
        "order_id": "o-1", "customer_id": "01711000000", "total": 100,
    }})

    assert response.status_code == 200
    assert response.json()["ok"] is False
    assert response.json()["status"] == 500

def test_relay_rejects_invalid_payload(client, api_key, upstream):
    response = client.post(RELAY_URL, json={"action": "sync_product", "data": {"product_name": "No id"}})

    assert response.status_code == 422
    assert upstream.requests == []

def test_relay_delete_actions(client, api_key, upstream):
    client.post(RELAY_URL, json={"action": "delete_product", "data": {"id": "p-7"}})
    client.post(RELAY_URL, json={"action": "delete_order", "data": {"id": "o-7"}})

    assert [(r["method"], r["url"].rsplit("/", 1)[-1], r["json"]) for r in upstream.requests] == [
        ("DELETE", "products", {"id": "p-7"}),
        ("DELETE", "orders", {"id": "o-7"}),
    ]

def test_relay_delete_requires_id(client, api_key):
    response = client.post(RELAY_URL, json={"action": "delete_product", "data": {}})
    assert response.status_code == 400

def test_relay_transport_failure(client, api_key, upstream):
    upstream.broken_ids.add("p-1")

    response = client.post(RELAY_URL, json={"action": "sync_product", "data": PRODUCT_PAYLOAD})

    assert response.status_code == 502

def test_relay_sync_all_products(client, db, api_key, upstream):
    for i in range(3):
        make_product(db, id=f"p-{i}")
    upstream.failing_ids["p-2"] = 429

    response = client.post(RELAY_URL, json={"action": "sync_all"})

    assert response.status_code == 200
    assert response.json() == {
        "ok": True,
        "message": "Synced 2 products",
        "synced": 2,
        "total": 3,
        "errors": ["Product p-2: 429"],
    }

def test_relay_sync_all_orders(client, db, api_key, upstream):
    make_order(db)
    make_order(db, payment_status="paid")

    response = client.post(RELAY_URL, json={"action": "sync_all_orders"})

    assert response.status_code == 200
    assert response.json()["message"] == "Synced 2 orders"
    assert len(upstream.requests) == 2

def test_relay_requires_authentication(anonymous_client):
    response = anonymous_client.post(RELAY_URL, json={"action": "sync_all"})
    assert response.status_code == 401

def test_api_key_settings_form(client, upstream):
    assert client.get("/api/v1/botbhai/settings").json() == {"configured": False, "api_key_masked": None}

    response = client.put("/api/v1/botbhai/settings", json={"api_key": "  secret-key-1234  "})
    assert response.status_code == 200
    assert response.json() == {"configured": True, "api_key_masked": "***********1234"}

    # Повторное сохранение обновляет ту же строку
    client.put("/api/v1/botbhai/settings", json={"api_key": "another-key-9999"})
    client.post(RELAY_URL, json={"action": "delete_order", "data": {"id": "o-1"}})
    assert upstream.requests[0]["api_key"] == "another-key-9999"

def test_api_key_settings_rejects_blank(client):
    assert client.put("/api/v1/botbhai/settings", json={"api_key": "   "}).status_code == 400

def test_relay_forwards_payload_unchanged(client, api_key, upstream):
    partial = {"product_id": "p-1", "product_name": "Saree", "stock": 50}

    response = client.post(RELAY_URL, json={"action": "sync_product", "data": partial})

    assert response.status_code == 200
    # Недостающие поля не подставляются значениями по умолчанию
    assert upstream.requests[0]["json"] == partial

def test_relay_checks_api_key_before_action(client, upstream):
    response = client.post(RELAY_URL, json={"action": "sync_everything", "data": {}})

    assert response.status_code == 400
    assert response.json()["detail"] == API_KEY_MISSING
