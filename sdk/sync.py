"""Sync controller for the product list, add and edit screens.

The controller owns one :class:`ViewState` per screen session and applies
service results to it. Operations that talk to the service report their
outcome through the ``notify`` callback instead of raising, so the hosting
UI always ends up in a previously valid state. Local misuse still raises:
``set_category`` rejects a value outside ``CATEGORIES`` with
:class:`ValidationError`. Failed fetches leave the collection untouched and
a failed delete is rolled back to the exact snapshot taken before it.

Concurrent fetches are not sequenced: whichever response resolves last is
what the state shows.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Union

from .errors import ImagePermissionError, InventoryError, ProductServiceError, ValidationError
from .forms import ProductForm
from .models import Product
from .pyinventory import AsyncInventoryClient, ProductId, cache_busted
from .viewstate import CATEGORIES, ViewState, build_view

logger = logging.getLogger(__name__)


@dataclass
class Notice:
    ok: bool
    title: str
    message: str


Notifier = Callable[[Notice], None]
Confirm = Callable[[], Union[bool, Awaitable[bool]]]


def _log_notice(notice: Notice) -> None:
    if notice.ok:
        logger.info("%s: %s", notice.title, notice.message)
    else:
        logger.error("%s: %s", notice.title, notice.message)


@dataclass
class OptimisticChange:
    """A local mutation applied ahead of server confirmation.

    ``snapshot`` is the full collection before the change; ``rollback``
    puts it back in place.
    """

    state: ViewState
    snapshot: List[Product]
    applied: List[Product] = field(default_factory=list)

    @classmethod
    def apply(cls, state: ViewState, mutate: Callable[[List[Product]], List[Product]]) -> "OptimisticChange":
        snapshot = list(state.products)
        applied = mutate(snapshot)
        state.products = applied
        return cls(state=state, snapshot=snapshot, applied=applied)

    def rollback(self) -> None:
        self.state.products = list(self.snapshot)


class SyncController:
    def __init__(self, client: AsyncInventoryClient, notify: Optional[Notifier] = None):
        self.client = client
        self.notify = notify or _log_notice
        self.state = ViewState()
        self._inflight = 0

    def _fail(self, title: str, error: InventoryError, fallback: Optional[str] = None) -> None:
        if isinstance(error, ProductServiceError):
            message = error.server_message or fallback or error.message
        else:
            message = error.message
        logger.error("%s: %s", title, error.message)
        self.notify(Notice(False, title, message))

    def _ok(self, title: str, message: str) -> None:
        self.notify(Notice(True, title, message))

    # ---------------------------
    # List screen
    # ---------------------------
    async def activate(self) -> Optional[List[Product]]:
        """Called by the UI every time the list screen becomes visible."""
        self.state = ViewState()
        return await self.fetch_all()

    async def _load(self, fetch: Callable[[], Awaitable[List[Product]]], title: str, fallback: str):
        self._inflight += 1
        self.state.loading = True
        try:
            products = await fetch()
        except InventoryError as e:
            self._fail(title, e, fallback)
            return None
        finally:
            # stays set while an overlapping fetch is still out
            self._inflight -= 1
            self.state.loading = self._inflight > 0
        self.state.products = products
        return products

    async def fetch_all(self) -> Optional[List[Product]]:
        return await self._load(self.client.list_products, "Error", "Failed to fetch products.")

    async def search(self, query: str) -> Optional[List[Product]]:
        result = await self._load(
            lambda: self.client.search_products(query), "Error", "Failed to search products."
        )
        if result is not None:
            self.state.search_text = query
        return result

    async def clear_search(self) -> Optional[List[Product]]:
        self.state.search_text = ""
        return await self.fetch_all()

    def set_category(self, category: str) -> None:
        if category not in CATEGORIES:
            raise ValidationError(f"Unknown category: {category}")
        self.state.active_category = category

    def toggle_sort(self):
        self.state.sort_mode = self.state.sort_mode.next()
        return self.state.sort_mode

    def visible_products(self, now: Optional[float] = None) -> List[Product]:
        return build_view(self.state, now=now)

    async def delete_product(self, product_id: ProductId, confirm: Confirm) -> bool:
        answer = confirm()
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            return False

        change = OptimisticChange.apply(
            self.state, lambda items: [p for p in items if str(p.id) != str(product_id)]
        )
        try:
            await self.client.delete_product(product_id)
        except InventoryError as e:
            change.rollback()
            self._fail("Error", e, "Failed to delete product.")
            return False
        self._ok("Deleted", "Product deleted successfully.")
        return True

    # ---------------------------
    # Add / edit screens
    # ---------------------------
    async def load_product(self, product_id: Optional[ProductId]) -> Optional[ProductForm]:
        if product_id is None or product_id == "":
            self._fail("Error", ValidationError("Product ID not found. Please go back and try again."))
            return None
        try:
            product = await self.client.get_product(product_id)
        except InventoryError as e:
            self._fail("Error", e, "Failed to load product data.")
            return None
        return ProductForm.from_product(product)

    async def create_product(self, form: ProductForm) -> Optional[Product]:
        try:
            product = await self.client.create_product(form)
        except ValidationError as e:
            self._fail("Required fields", e)
            return None
        except ImagePermissionError as e:
            self._fail("Permission required", e)
            return None
        except InventoryError as e:
            self._fail("Error", e, "Failed to add product.")
            return None
        self._ok("Success", "Product has been added.")
        form.reset()
        return product

    async def update_product(self, product_id: ProductId, form: ProductForm) -> Optional[Product]:
        try:
            updated = await self.client.update_product(product_id, form)
        except ValidationError as e:
            self._fail("Validation", e)
            return None
        except ImagePermissionError as e:
            self._fail("Permission required", e)
            return None
        except InventoryError as e:
            self._fail("Error", e, "Failed to update product.")
            return None
        self._ok("Success", "Product updated successfully.")

        try:
            product = await self.client.get_product(product_id)
        except InventoryError as e:
            # the update stands; show what the PUT returned
            self._fail("Error", e, "Failed to load product data.")
            product = updated
        product.image_url = cache_busted(product.image_url)
        form.update_field("image", product.image_url)
        return product
