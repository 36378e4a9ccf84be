# app/main.py
import logging
from typing import Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .core import ProductFields, FieldError
from .database import PRODUCTS, IMAGES
from .service import (
    list_products_logic, search_product_logic, get_product_logic,
    create_product_logic, update_product_logic, delete_product_logic,
    get_image_logic, reset_all_logic,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="inventory product service (in-memory dev server)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FieldError)
async def field_error_handler(request: Request, exc: FieldError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _read_upload(image: Optional[UploadFile]):
    if image is None or not image.filename:
        return None
    content = await image.read()
    return (image.filename, image.content_type, content)


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/api/products")
async def list_products():
    return await list_products_logic()


# must be registered before /api/products/{product_id}
@app.get("/api/products/search")
async def search_product(name: str = ""):
    return await search_product_logic(name)


@app.get("/api/products/{product_id}")
async def get_product(product_id: str):
    return await get_product_logic(product_id)


@app.post("/api/products", status_code=201)
async def create_product(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    stock: str = Form(""),
    category: str = Form(""),
    brand: str = Form(""),
    location: str = Form(""),
    sizes: str = Form(""),
    productCode: str = Form(""),
    orderName: str = Form(""),
    image: Optional[UploadFile] = File(None),
):
    fields = ProductFields(
        name=name, description=description, price=price, stock=stock,
        category=category, brand=brand, location=location, sizes=sizes,
        productCode=productCode, orderName=orderName,
    )
    upload = await _read_upload(image)
    return await create_product_logic(fields, upload, str(request.base_url))


@app.put("/api/products/{product_id}")
async def update_product(
    product_id: str,
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    stock: str = Form(""),
    category: str = Form(""),
    brand: str = Form(""),
    location: str = Form(""),
    sizes: str = Form(""),
    image: Optional[UploadFile] = File(None),
):
    fields = ProductFields(
        name=name, description=description, price=price, stock=stock,
        category=category, brand=brand, location=location, sizes=sizes,
    )
    upload = await _read_upload(image)
    return await update_product_logic(product_id, fields, upload, str(request.base_url))


@app.delete("/api/products/{product_id}")
async def delete_product(product_id: str):
    return await delete_product_logic(product_id)


@app.get("/uploads/{name}")
async def get_image(name: str):
    content_type, content = await get_image_logic(name)
    return Response(content=content, media_type=content_type)


# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    return await reset_all_logic()


# ---------------------------
# Debug: dump all products (helpful while testing)
# ---------------------------
@app.get("/debug/products")
async def debug_all_products():
    return {"PRODUCTS": PRODUCTS, "IMAGES": sorted(IMAGES)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3000)
