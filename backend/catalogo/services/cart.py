"""Shopping cart: quantity policy, totals and per-browser storage.

A cart belongs to one browser, one store and one purchase mode. It is a plain
JSON document kept in a string key/value store, the same way the catalog
front-end keeps it in local storage: load, mutate, save. Nothing here talks to
the database; prices and stock limits are copied onto the line when the item
is added and re-checked at checkout.
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import MutableMapping
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class CartMode(str, enum.Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"

    @classmethod
    def parse(cls, raw: str) -> "CartMode":
        """Accept the public route names as well as the canonical values."""
        aliases = {"detal": cls.RETAIL, "mayor": cls.WHOLESALE}
        if raw in aliases:
            return aliases[raw]
        return cls(raw)


class CartError(ValueError):
    """A cart mutation that the quantity policy refuses."""


class CartItem(BaseModel):
    product_id: UUID
    name: str
    price: Decimal = Field(..., ge=0)
    qty: int = Field(..., ge=0)
    min_wholesale: int | None = None
    # None means unlimited
    stock: int | None = None
    image_url: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.qty


class CartState(BaseModel):
    store_id: UUID
    store_slug: str
    store_name: str
    whatsapp: str = ""
    mode: CartMode
    customer_name: str = ""
    customer_whatsapp: str = ""
    customer_note: str = ""
    items: list[CartItem] = Field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((i.subtotal for i in self.items), Decimal("0"))

    @property
    def count(self) -> int:
        return sum(i.qty for i in self.items)

    def find(self, product_id: UUID) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None


# ── Quantity policy ────────────────────────────────

def min_quantity(item: CartItem, mode: CartMode) -> int:
    """Smallest quantity a line may hold in the given mode."""
    if mode == CartMode.WHOLESALE:
        return max(1, item.min_wholesale or 1)
    return 1


def clamp_quantity(item: CartItem, qty: int, mode: CartMode) -> int:
    """Raise ``qty`` to the mode minimum, then cap it at available stock.

    Raises CartError when no valid quantity exists (sold out, or stock below
    the wholesale minimum).
    """
    low = min_quantity(item, mode)
    if item.stock is not None:
        if item.stock <= 0:
            raise CartError(f"'{item.name}' is out of stock")
        if item.stock < low:
            raise CartError(
                f"'{item.name}' has {item.stock} in stock, below the wholesale minimum of {low}"
            )
    qty = max(low, int(qty))
    if item.stock is not None:
        qty = min(qty, item.stock)
    return qty


def add_item(cart: CartState, item: CartItem) -> CartItem:
    """Add ``item`` to the cart, merging with an existing line for the same product."""
    existing = cart.find(item.product_id)
    if existing is None:
        line = item.model_copy(update={"qty": clamp_quantity(item, item.qty, cart.mode)})
        cart.items.append(line)
        return line

    # Refresh the snapshot, keep accumulating quantity
    existing.name = item.name
    existing.price = item.price
    existing.min_wholesale = item.min_wholesale
    existing.stock = item.stock
    existing.image_url = item.image_url
    existing.qty = clamp_quantity(existing, existing.qty + max(item.qty, 0), cart.mode)
    return existing


def set_quantity(cart: CartState, product_id: UUID, qty: int) -> CartItem | None:
    """Set a line's quantity. Zero or less removes the line and returns None."""
    item = cart.find(product_id)
    if item is None:
        raise CartError("Product is not in the cart")
    if qty <= 0:
        remove_item(cart, product_id)
        return None
    item.qty = clamp_quantity(item, qty, cart.mode)
    return item


def remove_item(cart: CartState, product_id: UUID) -> None:
    cart.items = [i for i in cart.items if i.product_id != product_id]


def empty(cart: CartState) -> None:
    cart.items = []


def below_minimum(cart: CartState) -> CartItem | None:
    """First line whose quantity is under its mode minimum, if any."""
    for item in cart.items:
        if item.qty < min_quantity(item, cart.mode):
            return item
    return None


# ── Storage ────────────────────────────────────────

def cart_key(session_id: str, store_id: UUID | str, mode: CartMode | str) -> str:
    mode_value = mode.value if isinstance(mode, CartMode) else mode
    return f"cart:{session_id}:{store_id}:{mode_value}"


class CartStorage:
    """JSON carts in a string key/value mapping. Last write wins."""

    def __init__(self, backend: MutableMapping[str, str] | None = None):
        self._backend: MutableMapping[str, str] = backend if backend is not None else {}

    def load(self, session_id: str, store_id: UUID, mode: CartMode) -> CartState | None:
        raw = self._backend.get(cart_key(session_id, store_id, mode))
        if not raw:
            return None
        try:
            return CartState.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError):
            logger.warning("Discarding unreadable cart for store %s (%s)", store_id, mode.value)
            return None

    def save(self, session_id: str, cart: CartState) -> None:
        self._backend[cart_key(session_id, cart.store_id, cart.mode)] = cart.model_dump_json()

    def clear(self, session_id: str, store_id: UUID, mode: CartMode) -> None:
        self._backend.pop(cart_key(session_id, store_id, mode), None)


cart_storage = CartStorage()


def get_cart_storage() -> CartStorage:
    return cart_storage
