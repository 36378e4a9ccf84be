"""List-screen state and the filtered/sorted view derived from it."""

import math
import time
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .models import Product

ALL_CATEGORIES = "All"
CATEGORIES = [ALL_CATEGORIES, "Electronics", "Accessories", "Household", "Clearance"]


class SortMode(str, Enum):
    LATEST = "latest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"

    def next(self) -> "SortMode":
        order = list(SortMode)
        return order[(order.index(self) + 1) % len(order)]

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortMode.LATEST: "Latest",
    SortMode.PRICE_ASC: "Price ▲",
    SortMode.PRICE_DESC: "Price ▼",
}


class ViewState(BaseModel):
    products: List[Product] = Field(default_factory=list)
    search_text: str = ""
    active_category: str = ALL_CATEGORIES
    sort_mode: SortMode = SortMode.LATEST
    loading: bool = False


def _parse_timestamp(value) -> Optional[float]:
    """Epoch seconds for a createdAt/id value, or None if it is not a time.

    Numbers (and numeric strings) are epoch milliseconds; other strings are
    read as ISO 8601. Naive datetimes are taken as UTC. NaN and infinities
    are not times.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite_ms(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return _finite_ms(float(text))
    except ValueError:
        pass
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _finite_ms(ms) -> Optional[float]:
    try:
        seconds = ms / 1000.0
    except OverflowError:
        return None
    return seconds if math.isfinite(seconds) else None


def sort_timestamp(product: Product, now: float) -> float:
    ts = _parse_timestamp(product.created_at)
    if ts is None:
        ts = _parse_timestamp(product.id)
    return now if ts is None else ts


def _price(product: Product) -> float:
    return product.price or 0


def build_view(state: ViewState, now: Optional[float] = None) -> List[Product]:
    """Filter by active category, then sort by the active mode.

    Python's sort is stable, so ties keep the server's order in every mode.
    """
    if state.active_category == ALL_CATEGORIES:
        items = list(state.products)
    else:
        items = [p for p in state.products if (p.category or "") == state.active_category]

    if state.sort_mode == SortMode.PRICE_ASC:
        return sorted(items, key=_price)
    if state.sort_mode == SortMode.PRICE_DESC:
        return sorted(items, key=_price, reverse=True)

    if now is None:
        now = time.time()
    return sorted(items, key=lambda p: sort_timestamp(p, now), reverse=True)
