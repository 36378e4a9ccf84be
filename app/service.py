import logging
import uuid
from pathlib import Path
from typing import Optional, Tuple

from fastapi import HTTPException

# Import from other modules
from .core import ProductFields, _make_product_dict, _apply_update
from .database import PRODUCTS, IMAGES

logger = logging.getLogger(__name__)

# This file contains the core logic for all API endpoints.

# (filename, content type, bytes) of an uploaded image
Upload = Tuple[str, str, bytes]


def _store_image(upload: Upload, base_url: str) -> str:
    filename, content_type, content = upload
    suffix = Path(filename or "").suffix.lower() or ".jpg"
    name = f"{uuid.uuid4().hex}{suffix}"
    IMAGES[name] = (content_type or "image/jpeg", content)
    return f"{base_url.rstrip('/')}/uploads/{name}"


def _drop_image(image_url: Optional[str]):
    if image_url:
        IMAGES.pop(image_url.rsplit("/", 1)[-1], None)


async def list_products_logic():
    return list(PRODUCTS.values())


async def search_product_logic(name: str):
    term = name.lower()
    return [p for p in PRODUCTS.values() if term in p["name"].lower()]


async def get_product_logic(product_id: str):
    p = PRODUCTS.get(product_id)
    if not p:
        raise HTTPException(status_code=404, detail="product not found")
    return p


async def create_product_logic(fields: ProductFields, upload: Optional[Upload], base_url: str):
    pid = uuid.uuid4().hex
    product = _make_product_dict(pid, fields, None)
    if upload:
        product["image_url"] = _store_image(upload, base_url)
    PRODUCTS[pid] = product
    logger.info("created product %s (%s)", pid, fields.name)
    return product


async def update_product_logic(product_id: str, fields: ProductFields, upload: Optional[Upload], base_url: str):
    product = await get_product_logic(product_id)
    _apply_update(product, fields)
    if upload:
        _drop_image(product.get("image_url"))
        product["image_url"] = _store_image(upload, base_url)
    return product


async def delete_product_logic(product_id: str):
    product = PRODUCTS.pop(product_id, None)
    if not product:
        raise HTTPException(status_code=404, detail="product not found")
    _drop_image(product.get("image_url"))
    return {"status": "deleted", "id": product_id}


async def get_image_logic(name: str):
    img = IMAGES.get(name)
    if not img:
        raise HTTPException(status_code=404, detail="image not found")
    return img


# Utility: reset (for tests/demo)
async def reset_all_logic():
    PRODUCTS.clear()
    IMAGES.clear()
    return {"status": "reset"}
