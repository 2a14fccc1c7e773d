"""Order lifecycle: creation from a cart, token edits, status transitions."""

import logging
import secrets
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.models.order import Order, OrderItem, OrderStatus, CatalogType
from catalogo.models.product import Product
from catalogo.models.store import Store
from catalogo.services.cart import (
    CartError,
    CartItem,
    CartMode,
    CartState,
    below_minimum,
    clamp_quantity,
    min_quantity,
)

logger = logging.getLogger(__name__)

STATUS_SEQUENCE: tuple[OrderStatus, ...] = tuple(OrderStatus)
LOCKED_STATUSES = frozenset({OrderStatus.CONFIRMED, OrderStatus.COMPLETED})


class OrderLockedError(Exception):
    """The order was confirmed or completed and can no longer be edited."""


class InvalidStatusTransition(ValueError):
    pass


class OrderItemsError(ValueError):
    pass


def is_locked(status: str) -> bool:
    return OrderStatus(status) in LOCKED_STATUSES


def allowed_next_statuses(current: str) -> list[OrderStatus]:
    """Statuses reachable from ``current``; forward moves only."""
    idx = STATUS_SEQUENCE.index(OrderStatus(current))
    return list(STATUS_SEQUENCE[idx + 1:])


def ensure_transition(current: str, target: str) -> OrderStatus:
    target_status = OrderStatus(target)
    if target_status not in allowed_next_statuses(current):
        raise InvalidStatusTransition(
            f"Cannot move order from '{OrderStatus(current).value}' to '{target_status.value}'"
        )
    return target_status


def generate_order_token() -> str:
    """Opaque, unguessable id used in the shareable receipt link."""
    return secrets.token_urlsafe(24)


def catalog_type_for(mode: CartMode) -> CatalogType:
    return CatalogType.WHOLESALE if mode == CartMode.WHOLESALE else CatalogType.RETAIL


def compute_total(items: list[OrderItem]) -> Decimal:
    return sum((i.price * i.qty for i in items), Decimal("0"))


async def next_receipt_no(db: AsyncSession, store_id: UUID) -> int:
    result = await db.execute(
        select(func.coalesce(func.max(Order.receipt_no), 0)).where(Order.store_id == store_id)
    )
    return int(result.scalar_one()) + 1


async def _load_store_products(
    db: AsyncSession, store_id: UUID, product_ids: list[UUID]
) -> dict[UUID, Product]:
    result = await db.execute(
        select(Product).where(
            Product.id.in_(product_ids),
            Product.store_id == store_id,
            Product.active.is_(True),
        )
    )
    return {p.id: p for p in result.scalars().all()}


def _policy_line(product: Product, qty: int) -> CartItem:
    return CartItem(
        product_id=product.id,
        name=product.name,
        price=Decimal("0"),
        qty=qty,
        min_wholesale=product.min_wholesale,
        stock=product.stock,
    )


def _checked_quantity(product: Product, qty: int, mode: CartMode) -> int:
    """Quantity the order may hold; refuses rather than silently changing it."""
    line = _policy_line(product, qty)
    allowed = clamp_quantity(line, qty, mode)
    if allowed != qty:
        raise CartError(
            f"'{product.name}': quantity {qty} not allowed, use {allowed}"
        )
    return qty


async def create_order_from_cart(
    db: AsyncSession,
    store: Store,
    cart: CartState,
    status: OrderStatus = OrderStatus.SENT,
) -> Order:
    """Persist the cart as an order. Prices and names are snapshotted from the products.

    Raises CartError for an empty cart, a missing product or a quantity the
    policy refuses.
    """
    if not cart.items:
        raise CartError("Cart is empty")
    bad = below_minimum(cart)
    if bad is not None:
        raise CartError(
            f"'{bad.name}' requires at least {min_quantity(bad, cart.mode)} units"
        )

    product_ids = [i.product_id for i in cart.items]
    products = await _load_store_products(db, store.id, product_ids)
    missing = set(product_ids) - set(products.keys())
    if missing:
        raise CartError(f"Products not available: {', '.join(sorted(str(m) for m in missing))}")

    order_items = []
    for line in cart.items:
        product = products[line.product_id]
        qty = _checked_quantity(product, line.qty, cart.mode)
        order_items.append(
            OrderItem(
                product_id=product.id,
                name=product.name,
                image_url=product.image_url,
                price=product.price_for(cart.mode.value),
                qty=qty,
            )
        )

    order = Order(
        store_id=store.id,
        token=generate_order_token(),
        receipt_no=await next_receipt_no(db, store.id),
        status=status.value,
        catalog_type=catalog_type_for(cart.mode).value,
        total=compute_total(order_items),
        customer_name=cart.customer_name.strip() or None,
        customer_whatsapp=cart.customer_whatsapp or None,
        customer_note=cart.customer_note.strip() or None,
        items=order_items,
    )
    db.add(order)
    await db.flush()
    await db.refresh(order)
    logger.info(
        "Order #%s created for store %s (%s, %d items, total=%s)",
        order.receipt_no, store.slug, order.catalog_type, len(order_items), order.total,
    )
    return order


async def get_order_by_token(db: AsyncSession, token: str) -> Order | None:
    result = await db.execute(select(Order).where(Order.token == token))
    return result.scalar_one_or_none()


async def update_items_by_token(
    db: AsyncSession, order: Order, quantities: dict[UUID, int]
) -> Order:
    """Replace line quantities of an unlocked order and recompute its total."""
    if is_locked(order.status):
        raise OrderLockedError("Order is confirmed and can no longer be edited")

    by_product = {i.product_id: i for i in order.items}
    unknown = set(quantities) - set(by_product)
    if unknown:
        raise OrderItemsError("Items can only be changed, not added")

    mode = CartMode(order.catalog_type)
    products = await _load_store_products(db, order.store_id, list(quantities))
    for product_id, qty in quantities.items():
        item = by_product[product_id]
        product = products.get(product_id)
        if product is not None:
            qty = _checked_quantity(product, qty, mode)
        elif qty < 1:
            raise CartError(f"'{item.name}': quantity must be at least 1")
        item.qty = qty

    order.total = compute_total(order.items)
    await db.flush()
    await db.refresh(order)
    logger.info("Order #%s items updated by token (total=%s)", order.receipt_no, order.total)
    return order


async def confirm_by_token(db: AsyncSession, order: Order) -> Order:
    if is_locked(order.status):
        raise OrderLockedError("Order is already confirmed")
    order.status = OrderStatus.CONFIRMED.value
    await db.flush()
    await db.refresh(order)
    logger.info("Order #%s confirmed by customer", order.receipt_no)
    return order


async def set_status(db: AsyncSession, order: Order, target: str) -> Order:
    """Owner-driven status change, forward only."""
    previous = order.status
    order.status = ensure_transition(order.status, target).value
    await db.flush()
    await db.refresh(order)
    logger.info("Order #%s status %s -> %s", order.receipt_no, previous, order.status)
    return order
