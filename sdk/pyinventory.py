# sdk/pyinventory.py
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import requests

from .config import get_settings
from .errors import ProductServiceError
from .forms import ProductForm, build_create_payload, build_update_payload
from .models import Product

logger = logging.getLogger(__name__)

ProductId = Union[int, str]

API_PATH = "/api/products"


def _server_message(r: Any) -> Optional[str]:
    """Pull the server's message out of an error response, if it sent one."""
    try:
        body = r.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return None


def _check(r: Any) -> Any:
    # works for both requests.Response and httpx.Response
    if r.status_code >= 400:
        msg = _server_message(r)
        raise ProductServiceError(msg or f"HTTP {r.status_code}", status_code=r.status_code, server_message=msg)
    return r


def _decode(r: Any, parse: Callable[[Any], Any]) -> Any:
    """Parse a 2xx body; a non-JSON or off-schema body is a service error."""
    try:
        return parse(r.json())
    except (ValueError, TypeError) as e:
        # pydantic's ValidationError is a ValueError
        raise ProductServiceError(
            f"Malformed response from product service: {e}", status_code=r.status_code
        ) from e


def _products(r: Any) -> List[Product]:
    return _decode(r, lambda data: [Product.model_validate(p) for p in data])


def _product(r: Any) -> Product:
    return _decode(r, Product.model_validate)


def cache_busted(url: Optional[str], now_ms: Optional[int] = None) -> Optional[str]:
    """Append a timestamp so a re-uploaded image is not served from cache."""
    if not url:
        return url
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}t={stamp}"


class InventoryClient:
    """Blocking client on a requests session.

    Any object with the requests.Session call signature can be passed as
    ``session`` (the FastAPI TestClient works too).
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None, session: Any = None):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.session = session if session is not None else requests.Session()

    def _url(self, suffix: str = "") -> str:
        return f"{self.base_url}{API_PATH}{suffix}"

    def _request(self, method: str, url: str, **kwargs):
        logger.debug("%s %s", method, url)
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ProductServiceError(f"Could not reach product service: {e}") from e
        return _check(r)

    def reset(self):
        return self._request("POST", f"{self.base_url}/reset").json()

    def list_products(self) -> List[Product]:
        return _products(self._request("GET", self._url()))

    def search_products(self, name: str) -> List[Product]:
        r = self._request("GET", self._url("/search"), params={"name": name})
        return _products(r)

    def get_product(self, product_id: ProductId) -> Product:
        return _product(self._request("GET", self._url(f"/{product_id}")))

    def create_product(self, form: ProductForm) -> Product:
        parts = build_create_payload(form)
        r = self._request("POST", self._url(), files=parts)
        return _product(r)

    def update_product(self, product_id: ProductId, form: ProductForm) -> Product:
        parts = build_update_payload(form)
        r = self._request("PUT", self._url(f"/{product_id}"), files=parts)
        return _product(r)

    def delete_product(self, product_id: ProductId) -> None:
        self._request("DELETE", self._url(f"/{product_id}"))


class AsyncInventoryClient:
    """Non-blocking client; each call opens its own httpx.AsyncClient.

    ``transport`` lets tests route requests to an ASGI app or a mock handler.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport

    def _url(self, suffix: str = "") -> str:
        return f"{self.base_url}{API_PATH}{suffix}"

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ProductServiceError(f"Could not reach product service: {e}") from e
        return _check(r)

    async def list_products(self) -> List[Product]:
        r = await self._request("GET", self._url())
        return _products(r)

    async def search_products(self, name: str) -> List[Product]:
        r = await self._request("GET", self._url("/search"), params={"name": name})
        return _products(r)

    async def get_product(self, product_id: ProductId) -> Product:
        r = await self._request("GET", self._url(f"/{product_id}"))
        return _product(r)

    async def create_product(self, form: ProductForm) -> Product:
        parts = build_create_payload(form)
        r = await self._request("POST", self._url(), files=parts)
        return _product(r)

    async def update_product(self, product_id: ProductId, form: ProductForm) -> Product:
        parts = build_update_payload(form)
        r = await self._request("PUT", self._url(f"/{product_id}"), files=parts)
        return _product(r)

    async def delete_product(self, product_id: ProductId) -> None:
        await self._request("DELETE", self._url(f"/{product_id}"))


def as_dict(product: Product) -> Dict[str, Any]:
    return product.model_dump(by_alias=True, exclude_none=True)
