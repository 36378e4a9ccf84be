"""Product form state, input sanitizers and multipart payload building.

A form holds every editable field as text, exactly as typed, plus an image
reference. The reference is either a local file (``file://`` URI or a bare
path, as produced by :func:`pick_image`) or the remote ``image_url`` the
product was loaded with.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse, unquote
from urllib.request import url2pathname

from pydantic import BaseModel

from .errors import ImagePermissionError, ValidationError
from .models import Product

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "price", "stock")

_PRICE_JUNK = re.compile(r"[^0-9.]")
_STOCK_JUNK = re.compile(r"[^0-9]")


def sanitize_price(text: str) -> str:
    return _PRICE_JUNK.sub("", text)


def sanitize_stock(text: str) -> str:
    return _STOCK_JUNK.sub("", text)


_SANITIZERS = {
    "price": sanitize_price,
    "stock": sanitize_stock,
}


def _format_number(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ProductForm(BaseModel):
    name: str = ""
    description: str = ""
    price: str = ""
    stock: str = ""
    category: str = ""
    brand: str = ""
    location: str = ""
    sizes: str = ""
    product_code: str = ""
    order_name: str = ""
    image: Optional[str] = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductForm":
        return cls(
            name=product.name or "",
            description=product.description or "",
            price=_format_number(product.price),
            stock=_format_number(product.stock),
            category=product.category or "",
            brand=product.brand or "",
            location=product.location or "",
            sizes=product.sizes or "",
            image=product.image_url,
        )

    def update_field(self, field: str, value: Optional[str]) -> None:
        """Set one field, sanitizing numeric inputs the way they are typed."""
        if field not in type(self).model_fields:
            raise ValidationError(f"Unknown form field: {field}")
        if field == "image":
            self.image = value or None
            return
        value = value or ""
        sanitizer = _SANITIZERS.get(field)
        if sanitizer:
            value = sanitizer(value)
        setattr(self, field, value)

    def reset(self) -> None:
        for field, info in type(self).model_fields.items():
            setattr(self, field, info.default)

    def missing_required(self) -> List[str]:
        return [f for f in REQUIRED_FIELDS if not getattr(self, f)]

    def validate_required(self) -> None:
        if self.missing_required():
            raise ValidationError("Please fill in Name, Price, and Stock.")

    def form_fields(self, include_codes: bool = True) -> Dict[str, str]:
        data = {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "category": self.category,
            "brand": self.brand,
            "location": self.location,
            "sizes": self.sizes,
        }
        if include_codes:
            data["productCode"] = self.product_code
            data["orderName"] = self.order_name
        return data


# ---------------------------
# Image references
# ---------------------------
def is_local_file(ref: Optional[str]) -> bool:
    """True only for freshly picked images (file:// scheme)."""
    return bool(ref) and urlparse(ref).scheme == "file"


def is_remote(ref: Optional[str]) -> bool:
    return bool(ref) and urlparse(ref).scheme in ("http", "https")


def ref_to_path(ref: str) -> Path:
    parsed = urlparse(ref)
    if parsed.scheme == "file":
        return Path(url2pathname(unquote(parsed.path)))
    return Path(ref)


def guess_image_type(filename: str) -> str:
    ext = Path(filename).suffix.lower().lstrip(".")
    if not ext or ext in ("jpg", "jpeg"):
        return "image/jpeg"
    return f"image/{ext}"


@dataclass
class ImageAttachment:
    filename: str
    content: bytes
    content_type: str

    def as_file_tuple(self) -> Tuple[str, bytes, str]:
        return (self.filename, self.content, self.content_type)


def _check_readable(path: Path) -> None:
    if not path.is_file():
        raise ImagePermissionError(f"Image file not found: {path}")
    if not os.access(path, os.R_OK):
        raise ImagePermissionError(
            "Permission to access the image file is required to upload images."
        )


def pick_image(path: str) -> str:
    """Validate a user-chosen image file and return its file:// reference."""
    p = Path(path).expanduser()
    _check_readable(p)
    return p.resolve().as_uri()


def load_image(ref: str) -> ImageAttachment:
    """Read a local image reference into an attachment."""
    if is_remote(ref):
        raise ValidationError("Only local image files can be uploaded.")
    path = ref_to_path(ref)
    _check_readable(path)
    try:
        content = path.read_bytes()
    except PermissionError as e:
        raise ImagePermissionError(f"Cannot read image file: {e}") from e
    logger.debug("loaded image %s (%d bytes)", path, len(content))
    return ImageAttachment(path.name, content, guess_image_type(path.name))


MultipartParts = List[Tuple[str, tuple]]


def _parts(fields: Dict[str, str], image: Optional[ImageAttachment]) -> MultipartParts:
    # (None, value) parts keep the body multipart even without an image
    parts: MultipartParts = [(k, (None, v)) for k, v in fields.items()]
    if image is not None:
        parts.append(("image", image.as_file_tuple()))
    return parts


def build_create_payload(form: ProductForm) -> MultipartParts:
    """Multipart parts for POST /api/products. Validates first."""
    form.validate_required()
    image = load_image(form.image) if form.image else None
    return _parts(form.form_fields(include_codes=True), image)


def build_update_payload(form: ProductForm) -> MultipartParts:
    """Multipart parts for PUT /api/products/{id}.

    The image is attached only when it was freshly picked; a previously
    loaded remote URL is left alone on the server.
    """
    form.validate_required()
    image = load_image(form.image) if is_local_file(form.image) else None
    return _parts(form.form_fields(include_codes=False), image)
