# tests/test_client.py
import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from sdk.errors import ProductServiceError, ValidationError
from sdk.forms import ProductForm, pick_image
from sdk.pyinventory import AsyncInventoryClient, InventoryClient, cache_busted

client = TestClient(app)
store = InventoryClient(base_url="http://testserver", session=client)


def reset():
    client.post("/reset")


def test_create_list_get_roundtrip_through_sdk():
    reset()
    made = store.create_product(ProductForm(name="Lamp", price="25.5", stock="3", category="Household"))
    assert made.price == 25.5
    assert made.stock == 3
    assert made.created_at is not None

    listed = store.list_products()
    assert [p.id for p in listed] == [made.id]
    assert store.get_product(made.id).name == "Lamp"


def test_create_with_image_uploads_bytes(tmp_path):
    reset()
    img = tmp_path / "lamp.png"
    img.write_bytes(b"\x89PNG lamp")
    made = store.create_product(ProductForm(name="Lamp", price="25", stock="3", image=pick_image(str(img))))
    assert made.image_url.startswith("http://testserver/uploads/")

    r = client.get(made.image_url)
    assert r.status_code == 200
    assert r.content == b"\x89PNG lamp"
    assert r.headers["content-type"] == "image/png"


def test_search_is_server_side_and_case_insensitive():
    reset()
    store.create_product(ProductForm(name="Desk Lamp", price="25", stock="3"))
    store.create_product(ProductForm(name="Chair", price="80", stock="1"))
    assert [p.name for p in store.search_products("LAMP")] == ["Desk Lamp"]
    assert store.search_products("sofa") == []


def test_update_keeps_image_unless_new_file_is_picked(tmp_path):
    reset()
    first = tmp_path / "a.jpg"
    first.write_bytes(b"first")
    made = store.create_product(ProductForm(name="Mug", price="4", stock="10", image=pick_image(str(first))))

    form = ProductForm.from_product(store.get_product(made.id))
    form.update_field("stock", "12")
    updated = store.update_product(made.id, form)
    assert updated.stock == 12
    assert updated.image_url == made.image_url

    second = tmp_path / "b.webp"
    second.write_bytes(b"second")
    form.update_field("image", pick_image(str(second)))
    updated = store.update_product(made.id, form)
    assert updated.image_url != made.image_url
    assert client.get(updated.image_url).content == b"second"
    assert client.get(made.image_url).status_code == 404


def test_delete_and_missing_product_errors():
    reset()
    made = store.create_product(ProductForm(name="Mug", price="4", stock="10"))
    store.delete_product(made.id)
    assert store.list_products() == []

    with pytest.raises(ProductServiceError) as exc:
        store.delete_product(made.id)
    assert exc.value.status_code == 404
    assert exc.value.server_message == "product not found"


def test_server_error_field_is_surfaced():
    reset()
    form = ProductForm(name="Mug", stock="10")
    # digits and dots survive sanitizing but are not a number
    form.update_field("price", "4.0.1")
    with pytest.raises(ProductServiceError) as exc:
        store.create_product(form)
    assert exc.value.status_code == 400
    assert exc.value.server_message == "price must be a number"


def test_local_validation_happens_before_any_request():
    reset()
    with pytest.raises(ValidationError):
        store.create_product(ProductForm(name="", price="4", stock="1"))
    assert store.list_products() == []


def test_unreachable_service_raises_service_error():
    dead = InventoryClient(base_url="http://127.0.0.1:9", timeout=0.5)
    with pytest.raises(ProductServiceError) as exc:
        dead.list_products()
    assert exc.value.status_code is None


def test_async_client_against_dev_service():
    reset()
    aclient = AsyncInventoryClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))

    async def flow():
        made = await aclient.create_product(ProductForm(name="Fan", price="30", stock="2", category="Household"))
        found = await aclient.search_products("fan")
        await aclient.delete_product(made.id)
        remaining = await aclient.list_products()
        return made, found, remaining

    made, found, remaining = asyncio.run(flow())
    assert [p.id for p in found] == [made.id]
    assert remaining == []


def test_cache_busted_appends_timestamp():
    assert cache_busted("http://s/u/a.png", now_ms=123) == "http://s/u/a.png?t=123"
    assert cache_busted("http://s/u/a.png?v=2", now_ms=123) == "http://s/u/a.png?v=2&t=123"
    assert cache_busted(None) is None


def test_malformed_success_body_raises_service_error():
    def handler(request):
        return httpx.Response(201, text="<html>captive portal</html>")

    aclient = AsyncInventoryClient(base_url="http://inventory.test", transport=httpx.MockTransport(handler))
    with pytest.raises(ProductServiceError) as exc:
        asyncio.run(aclient.create_product(ProductForm(name="Fan", price="30", stock="2")))
    assert exc.value.status_code == 201
    assert "Malformed response" in exc.value.message
