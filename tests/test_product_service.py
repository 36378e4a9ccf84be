# tests/test_product_service.py
from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)


def reset():
    client.post("/reset")


def register(**fields):
    data = {"name": "Tst", "price": "10", "stock": "5"}
    data.update(fields)
    return client.post("/api/products", data=data)


def test_create_returns_product_json():
    reset()
    r = register(category="Electronics", productCode="T-1", orderName="batch 7")
    assert r.status_code == 201
    body = r.json()
    for key in ("id", "name", "description", "price", "stock", "category",
                "brand", "location", "sizes", "image_url", "createdAt"):
        assert key in body
    assert body["price"] == 10.0
    assert body["stock"] == 5
    assert body["image_url"] is None


def test_create_requires_name_price_and_stock():
    reset()
    r = client.post("/api/products", data={"name": "", "price": "1", "stock": "1"})
    assert r.status_code == 400
    assert r.json()["error"] == "Name, Price, and Stock are required."
    assert client.get("/api/products").json() == []


def test_negative_stock_is_rejected():
    reset()
    r = register(stock="-2")
    assert r.status_code == 400
    assert "stock" in r.json()["error"]


def test_search_route_is_not_shadowed_by_get_by_id():
    reset()
    register(name="Blue Vase")
    r = client.get("/api/products/search", params={"name": "vase"})
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Blue Vase"]


def test_update_rewrites_fields_but_not_codes():
    reset()
    pid = register(productCode="KEEP").json()["id"]
    r = client.put(f"/api/products/{pid}", data={"name": "Renamed", "price": "12", "stock": "0"})
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Renamed"
    assert body["stock"] == 0
    assert body["productCode"] == "KEEP"


def test_get_update_delete_unknown_id_is_404():
    reset()
    assert client.get("/api/products/nope").status_code == 404
    assert client.put("/api/products/nope", data={"name": "a", "price": "1", "stock": "1"}).status_code == 404
    assert client.delete("/api/products/nope").status_code == 404


def test_reset_clears_products():
    register()
    client.post("/reset")
    assert client.get("/api/products").json() == []
