from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from grocery_api.bootstrap import build_app
from grocery_api.config import Settings

CHECKOUT = {
    "customer_name": "Jane Wanjiku",
    "customer_phone": "+254712345678",
    "delivery_address": "Kilimani, Nairobi",
    "customer_id": "cust-1",
    "payment_method": "mpesa",
    "lines": [{"product_id": "tomatoes", "quantity": 2}],
}


@pytest.fixture(params=["memory", "sql"])
def client(request) -> TestClient:
    config = Settings(
        STORAGE_BACKEND=request.param,
        DATABASE_URL="sqlite://",
        SEED_DEMO_CATALOG=True,
        LOG_LEVEL="WARNING",
    )
    return TestClient(build_app(config))


@pytest.fixture
def order_id(client) -> str:
    res = client.post("/orders", json=CHECKOUT)
    assert res.status_code == 201, res.text
    return res.json()["order_id"]


def test_health_and_products(client):
    assert client.get("/health").json() == {"status": "ok"}

    products = client.get("/products", params={"available_only": True}).json()
    ids = {p["product_id"] for p in products}
    assert "tomatoes" in ids
    assert "avocado" not in ids


def test_place_and_fetch_order(client, order_id):
    res = client.get(f"/orders/{order_id}")
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == "100.00"
    assert body["currency"] == "KES"
    assert body["status"] == "pending"
    assert body["lines"][0]["product_name"] == "Tomatoes"


def test_place_order_location_header(client):
    res = client.post("/orders", json=CHECKOUT)
    assert res.headers["location"] == f"/orders/{res.json()['order_id']}"


def test_place_order_errors(client):
    empty = client.post("/orders", json={**CHECKOUT, "lines": []})
    missing = client.post(
        "/orders", json={**CHECKOUT, "lines": [{"product_id": "durian", "quantity": 1}]}
    )
    off = client.post(
        "/orders", json={**CHECKOUT, "lines": [{"product_id": "avocado", "quantity": 1}]}
    )

    assert empty.status_code == 400
    assert empty.json()["type"] == "RequestValidationError"
    assert missing.status_code == 404
    assert off.status_code == 409
    assert off.json()["type"] == "ProductUnavailable"


def test_get_order_errors(client):
    assert client.get("/orders/not-a-uuid").status_code == 400
    assert client.get("/orders/00000000-0000-4000-8000-000000000000").status_code == 404


def test_list_and_status(client, order_id):
    res = client.put(f"/orders/{order_id}/status", json={"status": "confirmed"})
    assert res.status_code == 200
    assert res.json()["status"] == "confirmed"

    listed = client.get("/orders", params={"status": "confirmed"}).json()
    assert [o["order_id"] for o in listed["items"]] == [order_id]

    bad = client.put(f"/orders/{order_id}/status", json={"status": "lost"})
    assert bad.status_code == 400


def test_receipt_is_plain_text(client, order_id):
    res = client.get(f"/orders/{order_id}/receipt")

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    assert "RECEIPT" in res.text
    assert "KSh 100.00" in res.text


def test_edit_flow(client, order_id):
    base = f"/orders/{order_id}/edit"

    assert client.post(f"{base}/items", json={"product_id": "onions"}).status_code == 409

    begun = client.post(f"{base}/begin").json()
    assert begun["mode"] == "editing"
    item_id = begun["items"][0]["item_id"]

    res = client.patch(f"{base}/items/{item_id}", json={"quantity": 3})
    assert res.json()["items_subtotal"] == "150.00"

    res = client.post(f"{base}/charges", json={"name": "Delivery Fee", "amount": "80"})
    body = res.json()
    assert body["grand_total"] == "230.00"
    assert body["dirty"] is True

    bad = client.post(f"{base}/charges", json={"name": "Tip", "amount": "0"})
    assert bad.status_code == 400

    committed = client.post(f"{base}/commit")
    assert committed.status_code == 200
    assert committed.json()["mode"] == "viewing"

    order = client.get(f"/orders/{order_id}").json()
    assert order["total"] == "230.00"
    assert order["charges"][0]["name"] == "Delivery Fee"

    assert client.post(f"{base}/commit").status_code == 409


def test_edit_discard_and_remove(client, order_id):
    base = f"/orders/{order_id}/edit"
    client.post(f"{base}/begin")

    charge = client.post(f"{base}/charges", json={"name": "Packaging", "amount": "15"})
    charge_id = charge.json()["charges"][0]["charge_id"]
    assert charge_id.startswith("temp-")

    removed = client.delete(f"{base}/charges/{charge_id}").json()
    assert removed["charges"] == []

    item_id = removed["items"][0]["item_id"]
    assert client.delete(f"{base}/items/{item_id}").json()["grand_total"] == "0.00"

    discarded = client.post(f"{base}/discard").json()
    assert discarded["dirty"] is False
    assert discarded["grand_total"] == "100.00"
    assert client.get(base).json()["mode"] == "viewing"


def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError):
        build_app(Settings(STORAGE_BACKEND="redis"))


@pytest.mark.parametrize("amount", ["0.004", "NaN", "Infinity"])
def test_unstorable_charge_amount_is_a_bad_request(client, order_id, amount):
    base = f"/orders/{order_id}/edit"
    client.post(f"{base}/begin")

    res = client.post(f"{base}/charges", json={"name": "Tip", "amount": amount})

    assert res.status_code == 400
    assert client.get(base).json()["dirty"] is False


def test_product_admin(client):
    created = client.post(
        "/products",
        json={"name": "Cabbage", "price": "45", "unit": "pieces", "category": "vegetables"},
    )
    assert created.status_code == 201, created.text
    product_id = created.json()["product_id"]
    assert created.headers["location"] == f"/products/{product_id}"

    patched = client.patch(f"/products/{product_id}", json={"price": "39.5"})
    assert patched.json()["price"] == "39.50"
    assert client.get(f"/products/{product_id}").json()["name"] == "Cabbage"

    dup = client.post("/products", json={"product_id": "tomatoes", "name": "X", "price": "1"})
    assert dup.status_code == 409
    assert dup.json()["type"] == "ProductExists"
    assert client.patch("/products/durian", json={"name": "Durian"}).status_code == 404
    assert client.post("/products", json={"name": "", "price": "1"}).status_code == 400


def test_marking_paid_confirms_order_and_feeds_analytics(client, order_id):
    res = client.put(f"/orders/{order_id}/payment", json={"payment_status": "paid"})
    assert res.status_code == 200
    assert res.json()["payment_status"] == "paid"
    assert res.json()["status"] == "confirmed"

    client.post("/orders", json=CHECKOUT)
    summary = client.get("/analytics/sales").json()

    assert summary["total_orders"] == 2
    assert summary["total_revenue"] == "100.00"
    assert summary["average_order_value"] == "50.00"
    assert summary["orders_by_status"]["confirmed"] == 1
    assert len(summary["revenue_by_day"]) == 7
    assert summary["revenue_by_day"][-1]["revenue"] == "100.00"

    bad = client.put(f"/orders/{order_id}/payment", json={"payment_status": "refunded"})
    assert bad.status_code == 400
    assert client.get("/analytics/sales", params={"days": 0}).status_code == 400
