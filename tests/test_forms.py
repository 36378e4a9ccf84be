# tests/test_forms.py
import pytest

from sdk.errors import ImagePermissionError, ValidationError
from sdk.forms import (
    ProductForm, build_create_payload, build_update_payload, guess_image_type,
    is_local_file, load_image, pick_image, sanitize_price, sanitize_stock,
)
from sdk.models import Product


def part_names(parts):
    return [name for name, _ in parts]


def test_sanitizers_strip_non_numeric_input():
    assert sanitize_price("12a.5b6") == "12.56"
    assert sanitize_stock("12a.5b6") == "1256"


def test_update_field_sanitizes_price_and_stock_only():
    form = ProductForm()
    form.update_field("price", "$1,299.99")
    form.update_field("stock", "-4 pcs")
    form.update_field("name", "Lamp 2.0")
    assert form.price == "1299.99"
    assert form.stock == "4"
    assert form.name == "Lamp 2.0"


def test_update_field_rejects_unknown_field():
    with pytest.raises(ValidationError):
        ProductForm().update_field("colour", "red")


def test_reset_clears_every_field():
    form = ProductForm(name="x", price="1", stock="2", order_name="o", image="file:///tmp/a.png")
    form.reset()
    assert form == ProductForm()


def test_from_product_formats_numbers_like_typed_text():
    p = Product.model_validate({
        "id": 9, "name": "Fan", "price": 10.0, "stock": 3,
        "category": "Household", "image_url": "http://srv/uploads/fan.png",
    })
    form = ProductForm.from_product(p)
    assert form.price == "10"
    assert form.stock == "3"
    assert form.brand == ""
    assert form.image == "http://srv/uploads/fan.png"


def test_missing_required_fields():
    form = ProductForm(description="only a description")
    assert form.missing_required() == ["name", "price", "stock"]
    with pytest.raises(ValidationError):
        build_create_payload(form)


@pytest.mark.parametrize("filename,expected", [
    ("photo.jpg", "image/jpeg"),
    ("PHOTO.JPEG", "image/jpeg"),
    ("shot.png", "image/png"),
    ("anim.webp", "image/webp"),
    ("no_extension", "image/jpeg"),
])
def test_guess_image_type(filename, expected):
    assert guess_image_type(filename) == expected


def test_is_local_file_only_for_file_scheme():
    assert is_local_file("file:///tmp/a.png")
    assert not is_local_file("http://srv/uploads/a.png")
    assert not is_local_file("/tmp/a.png")
    assert not is_local_file(None)


def test_pick_and_load_image(tmp_path):
    img = tmp_path / "shelf.png"
    img.write_bytes(b"\x89PNG fake")
    ref = pick_image(str(img))
    assert ref.startswith("file://")
    att = load_image(ref)
    assert att.filename == "shelf.png"
    assert att.content == b"\x89PNG fake"
    assert att.content_type == "image/png"


def test_pick_missing_image_is_a_permission_error(tmp_path):
    with pytest.raises(ImagePermissionError):
        pick_image(str(tmp_path / "nope.jpg"))


def test_create_payload_has_codes_and_image(tmp_path):
    img = tmp_path / "p.jpg"
    img.write_bytes(b"jpeg")
    form = ProductForm(name="Mug", price="4", stock="10", product_code="M-1", image=pick_image(str(img)))
    parts = build_create_payload(form)
    assert part_names(parts) == [
        "name", "description", "price", "stock", "category", "brand",
        "location", "sizes", "productCode", "orderName", "image",
    ]
    assert dict(parts)["productCode"] == (None, "M-1")
    assert dict(parts)["image"] == ("p.jpg", b"jpeg", "image/jpeg")


def test_update_payload_skips_remote_image():
    form = ProductForm(name="Mug", price="4", stock="10", image="http://srv/uploads/old.jpg")
    parts = build_update_payload(form)
    assert "image" not in part_names(parts)
    assert "productCode" not in part_names(parts)
    assert "orderName" not in part_names(parts)


def test_create_rejects_remote_image():
    form = ProductForm(name="Mug", price="4", stock="10", image="https://srv/x.jpg")
    with pytest.raises(ValidationError):
        build_create_payload(form)
