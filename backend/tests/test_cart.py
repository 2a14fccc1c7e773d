"""Unit tests for the cart quantity policy and cart storage."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException

from catalogo.models.product import Product
from catalogo.models.store import Store
from catalogo.services import cart as cart_service
from catalogo.services.cart import (
    CartError,
    CartItem,
    CartMode,
    CartState,
    CartStorage,
    cart_key,
    clamp_quantity,
    min_quantity,
)


# ── Helpers ──────────────────────────────────────────────────────────────────

def _item(qty=1, price="1000", min_wholesale=None, stock=None, name="Camiseta"):
    return CartItem(
        product_id=uuid.uuid4(),
        name=name,
        price=Decimal(price),
        qty=qty,
        min_wholesale=min_wholesale,
        stock=stock,
    )


def _cart(mode=CartMode.RETAIL):
    return CartState(
        store_id=uuid.uuid4(),
        store_slug="tienda",
        store_name="Tienda",
        whatsapp="573001112233",
        mode=mode,
    )


# ── Mode parsing ─────────────────────────────────

def test_mode_aliases():
    assert CartMode.parse("detal") == CartMode.RETAIL
    assert CartMode.parse("mayor") == CartMode.WHOLESALE
    assert CartMode.parse("wholesale") == CartMode.WHOLESALE
    with pytest.raises(ValueError):
        CartMode.parse("vip")


# ── Quantity policy ──────────────────────────────

def test_retail_minimum_is_one():
    assert min_quantity(_item(min_wholesale=12), CartMode.RETAIL) == 1


def test_wholesale_minimum_never_below_one():
    assert min_quantity(_item(min_wholesale=0), CartMode.WHOLESALE) == 1
    assert min_quantity(_item(min_wholesale=None), CartMode.WHOLESALE) == 1
    assert min_quantity(_item(min_wholesale=6), CartMode.WHOLESALE) == 6


def test_clamp_raises_to_wholesale_minimum():
    assert clamp_quantity(_item(min_wholesale=6), 2, CartMode.WHOLESALE) == 6


def test_clamp_caps_at_stock():
    assert clamp_quantity(_item(stock=3), 10, CartMode.RETAIL) == 3


def test_clamp_unlimited_stock():
    assert clamp_quantity(_item(stock=None), 500, CartMode.RETAIL) == 500


def test_clamp_sold_out():
    with pytest.raises(CartError):
        clamp_quantity(_item(stock=0), 1, CartMode.RETAIL)


def test_clamp_stock_below_wholesale_minimum():
    with pytest.raises(CartError):
        clamp_quantity(_item(min_wholesale=10, stock=4), 10, CartMode.WHOLESALE)


# ── Cart mutations ───────────────────────────────

def test_add_item_merges_same_product():
    cart = _cart()
    item = _item(qty=2)
    cart_service.add_item(cart, item)
    cart_service.add_item(cart, item.model_copy(update={"qty": 3, "price": Decimal("1200")}))

    assert len(cart.items) == 1
    assert cart.items[0].qty == 5
    # Snapshot refreshed on re-add
    assert cart.items[0].price == Decimal("1200")
    assert cart.total == Decimal("6000")
    assert cart.count == 5


def test_add_item_wholesale_minimum_applied():
    cart = _cart(CartMode.WHOLESALE)
    line = cart_service.add_item(cart, _item(qty=1, min_wholesale=12))
    assert line.qty == 12


def test_add_item_merge_capped_by_stock():
    cart = _cart()
    item = _item(qty=4, stock=5)
    cart_service.add_item(cart, item)
    cart_service.add_item(cart, item.model_copy(update={"qty": 4}))
    assert cart.items[0].qty == 5


def test_set_quantity_zero_removes_line():
    cart = _cart()
    line = cart_service.add_item(cart, _item(qty=2))
    assert cart_service.set_quantity(cart, line.product_id, 0) is None
    assert cart.items == []


def test_set_quantity_clamped_in_wholesale():
    cart = _cart(CartMode.WHOLESALE)
    line = cart_service.add_item(cart, _item(qty=12, min_wholesale=12, stock=20))
    assert cart_service.set_quantity(cart, line.product_id, 3).qty == 12
    assert cart_service.set_quantity(cart, line.product_id, 50).qty == 20


def test_set_quantity_unknown_product():
    with pytest.raises(CartError):
        cart_service.set_quantity(_cart(), uuid.uuid4(), 1)


def test_below_minimum_detects_stale_line():
    cart = _cart(CartMode.WHOLESALE)
    cart.items.append(_item(qty=2, min_wholesale=6))
    assert cart_service.below_minimum(cart) is cart.items[0]


def test_empty_cart():
    cart = _cart()
    cart_service.add_item(cart, _item())
    cart_service.empty(cart)
    assert cart.items == []
    assert cart.total == Decimal("0")


# ── Storage ──────────────────────────────────────

def test_cart_key_format():
    sid = uuid.uuid4()
    assert cart_key("abc", sid, CartMode.WHOLESALE) == f"cart:abc:{sid}:wholesale"


def test_storage_round_trip_keeps_modes_apart():
    storage = CartStorage()
    retail = _cart(CartMode.RETAIL)
    cart_service.add_item(retail, _item(qty=2))
    storage.save("browser-1", retail)

    loaded = storage.load("browser-1", retail.store_id, CartMode.RETAIL)
    assert loaded is not None
    assert loaded.items[0].qty == 2
    assert storage.load("browser-1", retail.store_id, CartMode.WHOLESALE) is None
    assert storage.load("browser-2", retail.store_id, CartMode.RETAIL) is None


def test_storage_discards_corrupt_payload():
    backend = {}
    storage = CartStorage(backend)
    store_id = uuid.uuid4()
    backend[cart_key("s", store_id, CartMode.RETAIL)] = "{not json"
    assert storage.load("s", store_id, CartMode.RETAIL) is None


def test_storage_clear():
    storage = CartStorage()
    cart = _cart()
    storage.save("s", cart)
    storage.clear("s", cart.store_id, cart.mode)
    assert storage.load("s", cart.store_id, cart.mode) is None


# ── Endpoints ────────────────────────────────────

def _db_store(store, *extra_results):
    found = MagicMock()
    found.scalar_one_or_none.return_value = store
    mock_db = AsyncMock()
    mock_db.add = MagicMock()
    mock_db.execute.side_effect = [found, *extra_results]
    return mock_db


def _store():
    return Store(
        id=uuid.uuid4(),
        name="Moda Linda",
        slug="moda-linda",
        whatsapp="+57 300 111 2233",
        active=True,
        active_until=None,
        catalog_retail=True,
        catalog_wholesale=True,
        wholesale_key="clave",
    )


def _product(store, **overrides):
    fields = dict(
        id=uuid.uuid4(),
        name="Blusa",
        price_retail=Decimal("30000"),
        price_wholesale=Decimal("22000"),
        min_wholesale=6,
        stock=None,
        image_url=None,
        active=True,
        store_id=store.id,
    )
    fields.update(overrides)
    return Product(**fields)


@pytest.mark.asyncio
async def test_add_endpoint_applies_wholesale_minimum():
    from catalogo.api.cart import add_cart_item
    from catalogo.schemas.cart import CartAddRequest

    store = _store()
    product = _product(store)
    product_result = MagicMock()
    product_result.scalar_one_or_none.return_value = product
    storage = CartStorage()

    response = await add_cart_item(
        slug="moda-linda", mode="mayor", body=CartAddRequest(product_id=product.id, qty=1),
        key="clave", session_id="browser", storage=storage, db=_db_store(store, product_result),
    )

    assert response.mode == CartMode.WHOLESALE
    assert response.items[0].qty == 6
    assert response.total == Decimal("132000")
    assert storage.load("browser", store.id, CartMode.WHOLESALE).count == 6


@pytest.mark.asyncio
async def test_customer_endpoint_keeps_whatsapp_digits():
    from catalogo.api.cart import set_cart_customer
    from catalogo.schemas.cart import CartCustomerRequest

    store = _store()
    storage = CartStorage()

    response = await set_cart_customer(
        slug="moda-linda", mode="detal",
        body=CartCustomerRequest(customer_name="Ana", customer_whatsapp="+57 300 999-8877"),
        key=None, session_id="browser", storage=storage, db=_db_store(store),
    )

    assert response.customer_whatsapp == "573009998877"
    assert storage.load("browser", store.id, CartMode.RETAIL).customer_whatsapp == "573009998877"


@pytest.mark.asyncio
async def test_checkout_builds_whatsapp_link_and_empties_cart():
    from catalogo.api.cart import checkout

    store = _store()
    product = _product(store)
    storage = CartStorage()
    cart = CartState(
        store_id=store.id, store_slug=store.slug, store_name=store.name,
        whatsapp=store.whatsapp, mode=CartMode.RETAIL, customer_whatsapp="573009998877",
    )
    cart_service.add_item(cart, CartItem(
        product_id=product.id, name=product.name, price=Decimal("30000"), qty=2,
        min_wholesale=6,
    ))
    storage.save("browser", cart)

    products_result = MagicMock()
    products_result.scalars.return_value.all.return_value = [product]
    receipt_result = MagicMock()
    receipt_result.scalar_one.return_value = 0
    mock_db = _db_store(store, products_result, receipt_result)

    async def _refresh(order):
        order.id = uuid.uuid4()
        order.created_at = datetime(2026, 3, 1, tzinfo=timezone.utc)
        for item in order.items:
            item.id = uuid.uuid4()

    mock_db.refresh.side_effect = _refresh

    response = await checkout(
        slug="moda-linda", mode="detal", key=None,
        session_id="browser", storage=storage, db=mock_db,
    )

    assert response.order.receipt_no == 1
    assert response.order.total == Decimal("60000")
    assert response.order.customer_whatsapp == "573009998877"
    assert response.receipt_url.endswith(f"/pedido/{response.order.token}")
    assert response.whatsapp_url.startswith("https://wa.me/573001112233?text=")
    assert "🧾 Pedido (DETAL)" in response.message
    assert response.receipt_url in response.message
    assert storage.load("browser", store.id, CartMode.RETAIL).items == []


@pytest.mark.asyncio
async def test_checkout_empty_cart_is_400():
    from catalogo.api.cart import checkout

    store = _store()
    with pytest.raises(HTTPException) as exc_info:
        await checkout(
            slug="moda-linda", mode="detal", key=None,
            session_id="browser", storage=CartStorage(), db=_db_store(store),
        )
    assert exc_info.value.status_code == 400
