"""Unit tests for order creation, token edits and status transitions."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
import uuid

import pytest
from fastapi import HTTPException

from catalogo.models.order import Order, OrderItem, OrderStatus
from catalogo.models.product import Product
from catalogo.models.store import Store
from catalogo.services.cart import CartError, CartItem, CartMode, CartState
from catalogo.services.orders import (
    InvalidStatusTransition,
    OrderItemsError,
    OrderLockedError,
    allowed_next_statuses,
    confirm_by_token,
    create_order_from_cart,
    ensure_transition,
    generate_order_token,
    is_locked,
    update_items_by_token,
)


# ── Helpers ──────────────────────────────────────────────────────────────────

def _store():
    return Store(
        id=uuid.uuid4(),
        name="Moda Linda",
        slug="moda-linda",
        whatsapp="573001112233",
        active=True,
        catalog_retail=True,
        catalog_wholesale=True,
    )


def _product(store_id, *, retail="30000", wholesale="22000", min_wholesale=1, stock=None, name="Blusa"):
    return Product(
        id=uuid.uuid4(),
        name=name,
        price_retail=Decimal(retail),
        price_wholesale=Decimal(wholesale),
        min_wholesale=min_wholesale,
        stock=stock,
        image_url=None,
        active=True,
        store_id=store_id,
    )


def _cart(store, mode, lines):
    return CartState(
        store_id=store.id,
        store_slug=store.slug,
        store_name=store.name,
        mode=mode,
        customer_name="  Ana ",
        items=[
            CartItem(
                product_id=p.id, name=p.name, price=Decimal("1"), qty=qty,
                min_wholesale=p.min_wholesale, stock=p.stock,
            )
            for p, qty in lines
        ],
    )


def _mock_db(products, max_receipt=0):
    products_result = MagicMock()
    products_result.scalars.return_value.all.return_value = products
    receipt_result = MagicMock()
    receipt_result.scalar_one.return_value = max_receipt

    mock_db = AsyncMock()
    mock_db.add = MagicMock()
    mock_db.execute.side_effect = [products_result, receipt_result]
    return mock_db


def _order(status=OrderStatus.SENT, catalog_type="retail", items=None):
    order = Order(
        id=uuid.uuid4(),
        store_id=uuid.uuid4(),
        token="tok",
        receipt_no=7,
        status=status.value,
        catalog_type=catalog_type,
        total=Decimal("0"),
        created_at=datetime(2026, 2, 25, 12, 0, tzinfo=timezone.utc),
        items=items or [],
    )
    return order


# ── Transitions ──────────────────────────────────

def test_status_sequence_forward_only():
    assert allowed_next_statuses("draft") == [
        OrderStatus.SENT, OrderStatus.CONFIRMED, OrderStatus.COMPLETED,
    ]
    assert allowed_next_statuses("completed") == []
    assert ensure_transition("sent", "confirmed") == OrderStatus.CONFIRMED
    assert ensure_transition("draft", "completed") == OrderStatus.COMPLETED


def test_status_never_moves_backwards():
    with pytest.raises(InvalidStatusTransition):
        ensure_transition("confirmed", "sent")
    with pytest.raises(InvalidStatusTransition):
        ensure_transition("sent", "sent")


def test_locked_statuses():
    assert not is_locked("draft")
    assert not is_locked("sent")
    assert is_locked("confirmed")
    assert is_locked("completed")


def test_order_token_is_unguessable():
    tokens = {generate_order_token() for _ in range(50)}
    assert len(tokens) == 50
    assert all(len(t) >= 32 for t in tokens)


# ── Creation from cart ───────────────────────────

@pytest.mark.asyncio
async def test_create_order_snapshots_wholesale_prices():
    store = _store()
    blusa = _product(store.id, min_wholesale=6)
    jean = _product(store.id, retail="90000", wholesale="70000", name="Jean")
    mock_db = _mock_db([blusa, jean], max_receipt=41)

    order = await create_order_from_cart(
        mock_db, store, _cart(store, CartMode.WHOLESALE, [(blusa, 6), (jean, 2)])
    )

    assert order.receipt_no == 42
    assert order.status == "sent"
    assert order.catalog_type == "wholesale"
    assert order.total == Decimal("22000") * 6 + Decimal("70000") * 2
    assert order.customer_name == "Ana"
    assert [i.price for i in order.items] == [Decimal("22000"), Decimal("70000")]
    mock_db.add.assert_called_once_with(order)
    mock_db.flush.assert_awaited()


@pytest.mark.asyncio
async def test_create_order_empty_cart():
    store = _store()
    with pytest.raises(CartError):
        await create_order_from_cart(AsyncMock(), store, _cart(store, CartMode.RETAIL, []))


@pytest.mark.asyncio
async def test_create_order_below_wholesale_minimum():
    store = _store()
    blusa = _product(store.id, min_wholesale=6)
    with pytest.raises(CartError):
        await create_order_from_cart(
            _mock_db([blusa]), store, _cart(store, CartMode.WHOLESALE, [(blusa, 2)])
        )


@pytest.mark.asyncio
async def test_create_order_product_gone():
    store = _store()
    blusa = _product(store.id)
    with pytest.raises(CartError) as exc_info:
        await create_order_from_cart(
            _mock_db([]), store, _cart(store, CartMode.RETAIL, [(blusa, 1)])
        )
    assert "not available" in str(exc_info.value)


@pytest.mark.asyncio
async def test_create_order_stock_dropped_since_added():
    store = _store()
    blusa = _product(store.id, stock=2)
    cart = _cart(store, CartMode.RETAIL, [(blusa, 5)])
    with pytest.raises(CartError):
        await create_order_from_cart(_mock_db([blusa]), store, cart)


# ── Token edits ──────────────────────────────────

@pytest.mark.asyncio
async def test_update_items_recomputes_total():
    store = _store()
    blusa = _product(store.id)
    item = OrderItem(id=uuid.uuid4(), product_id=blusa.id, name="Blusa", price=Decimal("30000"), qty=1)
    order = _order(items=[item])

    products_result = MagicMock()
    products_result.scalars.return_value.all.return_value = [blusa]
    mock_db = AsyncMock()
    mock_db.execute.return_value = products_result

    order = await update_items_by_token(mock_db, order, {blusa.id: 3})
    assert item.qty == 3
    assert order.total == Decimal("90000")


@pytest.mark.asyncio
async def test_update_items_on_confirmed_order_is_locked():
    order = _order(status=OrderStatus.CONFIRMED)
    with pytest.raises(OrderLockedError):
        await update_items_by_token(AsyncMock(), order, {uuid.uuid4(): 1})


@pytest.mark.asyncio
async def test_update_items_cannot_add_products():
    order = _order(items=[])
    with pytest.raises(OrderItemsError):
        await update_items_by_token(AsyncMock(), order, {uuid.uuid4(): 1})


@pytest.mark.asyncio
async def test_confirm_twice_rejected():
    order = _order()
    mock_db = AsyncMock()
    await confirm_by_token(mock_db, order)
    assert order.status == "confirmed"
    with pytest.raises(OrderLockedError):
        await confirm_by_token(mock_db, order)


# ── Routers ──────────────────────────────────────

def _token_lookup(order):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = order
    mock_db = AsyncMock()
    mock_db.execute.return_value = mock_result
    return mock_db


@pytest.mark.asyncio
async def test_public_edit_of_locked_order_is_423():
    from catalogo.api.public_orders import update_public_order_items
    from catalogo.schemas.order import OrderItemsUpdate, OrderItemQty

    order = _order(status=OrderStatus.COMPLETED)
    body = OrderItemsUpdate(items=[OrderItemQty(product_id=uuid.uuid4(), qty=2)])

    with pytest.raises(HTTPException) as exc_info:
        await update_public_order_items("tok", body, _token_lookup(order))
    assert exc_info.value.status_code == 423


@pytest.mark.asyncio
async def test_public_confirm_of_confirmed_order_is_423():
    from catalogo.api.public_orders import confirm_public_order

    order = _order(status=OrderStatus.CONFIRMED)
    with pytest.raises(HTTPException) as exc_info:
        await confirm_public_order("tok", _token_lookup(order))
    assert exc_info.value.status_code == 423


@pytest.mark.asyncio
async def test_public_order_unknown_token():
    from catalogo.api.public_orders import get_public_order

    with pytest.raises(HTTPException) as exc_info:
        await get_public_order("missing", _token_lookup(None))
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_dashboard_status_backwards_is_400():
    from catalogo.api.orders import update_order_status
    from catalogo.core.deps import StoreContext
    from catalogo.schemas.order import OrderStatusUpdate

    order = _order(status=OrderStatus.CONFIRMED)
    ctx = StoreContext(store=MagicMock(id=order.store_id), user=MagicMock())

    with pytest.raises(HTTPException) as exc_info:
        await update_order_status(
            order.id, OrderStatusUpdate(status=OrderStatus.SENT), ctx, _token_lookup(order)
        )
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_dashboard_status_forward_reports_lock():
    from catalogo.api.orders import update_order_status
    from catalogo.core.deps import StoreContext
    from catalogo.schemas.order import OrderStatusUpdate

    order = _order(status=OrderStatus.SENT)
    ctx = StoreContext(store=MagicMock(id=order.store_id), user=MagicMock())

    response = await update_order_status(
        order.id, OrderStatusUpdate(status=OrderStatus.CONFIRMED), ctx, _token_lookup(order)
    )
    assert response.status == OrderStatus.CONFIRMED
    assert response.locked
    assert response.next_statuses == [OrderStatus.COMPLETED]


# ── Admin cross-store list ───────────────────────

def _admin_rows(rows, total=None):
    count_result = MagicMock()
    count_result.scalar_one.return_value = len(rows) if total is None else total
    rows_result = MagicMock()
    rows_result.all.return_value = rows
    mock_db = AsyncMock()
    mock_db.execute.side_effect = [count_result, rows_result]
    return mock_db


@pytest.mark.asyncio
async def test_admin_orders_tagged_with_store():
    from catalogo.api.admin.orders import list_all_orders

    first, second = _order(), _order(status=OrderStatus.COMPLETED)
    mock_db = _admin_rows([(first, "Moda Linda", "moda-linda"), (second, "Tenis Ya", "tenis-ya")])

    response = await list_all_orders(
        limit=200, store_id=None, status_filter=None, q=None, _=MagicMock(), db=mock_db
    )

    assert response.total == 2
    assert [o.store_slug for o in response.items] == ["moda-linda", "tenis-ya"]
    assert response.items[1].status == OrderStatus.COMPLETED
    assert response.items[0].receipt_no == 7


@pytest.mark.asyncio
async def test_admin_orders_search_covers_store_and_limit():
    from catalogo.api.admin.orders import list_all_orders

    mock_db = _admin_rows([])

    await list_all_orders(
        limit=50, store_id=None, status_filter=None, q="linda", _=MagicMock(), db=mock_db
    )

    stmt = mock_db.execute.call_args_list[1][0][0]
    sql = str(stmt.compile(compile_kwargs={"literal_binds": True})).lower()
    assert "stores.name" in sql and "stores.slug" in sql
    assert "order by orders.created_at desc" in sql
    assert "limit 50" in sql
