from datetime import datetime, timezone
from typing import Optional, Dict, Any

from pydantic import BaseModel


class ProductFields(BaseModel):
    """Text fields of a create/update multipart submission."""
    name: str = ""
    description: str = ""
    price: str = ""
    stock: str = ""
    category: str = ""
    brand: str = ""
    location: str = ""
    sizes: str = ""
    productCode: str = ""
    orderName: str = ""


class FieldError(ValueError):
    pass


def _parse_price(raw: str) -> float:
    try:
        price = float(raw)
    except ValueError:
        raise FieldError("price must be a number")
    if price < 0:
        raise FieldError("price must be >= 0")
    return price


def _parse_stock(raw: str) -> int:
    try:
        stock = int(raw)
    except ValueError:
        raise FieldError("stock must be an integer")
    if stock < 0:
        raise FieldError("stock must be >= 0")
    return stock


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _make_product_dict(product_id: str, p: ProductFields, image_url: Optional[str]) -> Dict[str, Any]:
    if not p.name or not p.price or not p.stock:
        raise FieldError("Name, Price, and Stock are required.")
    return {
        "id": product_id,
        "name": p.name,
        "description": p.description,
        "price": _parse_price(p.price),
        "stock": _parse_stock(p.stock),
        "category": p.category or None,
        "brand": p.brand or None,
        "location": p.location or None,
        "sizes": p.sizes or None,
        "productCode": p.productCode or None,
        "orderName": p.orderName or None,
        "image_url": image_url,
        "createdAt": _now_iso(),
    }


def _apply_update(product: Dict[str, Any], p: ProductFields) -> Dict[str, Any]:
    if not p.name or not p.price or not p.stock:
        raise FieldError("Name, Price, and Stock are required.")
    product.update({
        "name": p.name,
        "description": p.description,
        "price": _parse_price(p.price),
        "stock": _parse_stock(p.stock),
        "category": p.category or None,
        "brand": p.brand or None,
        "location": p.location or None,
        "sizes": p.sizes or None,
    })
    return product
