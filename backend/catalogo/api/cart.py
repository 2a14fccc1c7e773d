"""Shopper cart endpoints and WhatsApp checkout."""

import secrets
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.api.catalog import get_catalog_store
from catalogo.api.orders import to_order_response
from catalogo.core.config import settings
from catalogo.db.base import get_db
from catalogo.models.product import Product
from catalogo.models.store import Store
from catalogo.schemas.cart import (
    CartAddRequest,
    CartCustomerRequest,
    CartQtyRequest,
    CartResponse,
    CheckoutResponse,
)
from catalogo.services import cart as cart_service
from catalogo.services.cart import CartError, CartItem, CartMode, CartState, CartStorage, get_cart_storage
from catalogo.services.orders import create_order_from_cart
from catalogo.services.whatsapp import (
    MessageItem,
    OrderMessage,
    normalize_number,
    receipt_url,
    render_message,
    whatsapp_url,
)

router = APIRouter(prefix="/cart", tags=["cart"])


def get_cart_session(request: Request, response: Response) -> str:
    """Per-browser cart id, issued on first use."""
    session_id = request.cookies.get(settings.CART_COOKIE_NAME)
    if not session_id:
        session_id = secrets.token_urlsafe(16)
        response.set_cookie(
            settings.CART_COOKIE_NAME,
            session_id,
            max_age=settings.CART_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )
    return session_id


def open_cart(storage: CartStorage, session_id: str, store: Store, mode: CartMode) -> CartState:
    """Existing cart for this browser/store/mode, or a fresh saved one."""
    cart = storage.load(session_id, store.id, mode)
    if cart is None:
        cart = CartState(
            store_id=store.id,
            store_slug=store.slug,
            store_name=store.name,
            whatsapp=store.whatsapp,
            mode=mode,
        )
        storage.save(session_id, cart)
    return cart


def to_cart_response(cart: CartState) -> CartResponse:
    return CartResponse(
        store_id=cart.store_id,
        store_slug=cart.store_slug,
        store_name=cart.store_name,
        mode=cart.mode,
        customer_name=cart.customer_name,
        customer_whatsapp=cart.customer_whatsapp,
        customer_note=cart.customer_note,
        items=cart.items,
        total=cart.total,
        count=cart.count,
    )


@router.get("/{slug}/{mode}", response_model=CartResponse)
async def get_cart(
    slug: str,
    mode: str,
    key: str | None = None,
    session_id: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: AsyncSession = Depends(get_db),
):
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    return to_cart_response(open_cart(storage, session_id, store, cart_mode))


@router.post("/{slug}/{mode}/items", response_model=CartResponse)
async def add_cart_item(
    slug: str,
    mode: str,
    body: CartAddRequest,
    key: str | None = None,
    session_id: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: AsyncSession = Depends(get_db),
):
    """Add a product; the quantity is raised to the wholesale minimum and capped at stock."""
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    result = await db.execute(
        select(Product).where(
            Product.id == body.product_id,
            Product.store_id == store.id,
            Product.active.is_(True),
        )
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    cart = open_cart(storage, session_id, store, cart_mode)
    item = CartItem(
        product_id=product.id,
        name=product.name,
        price=product.price_for(cart_mode.value),
        qty=body.qty,
        min_wholesale=product.min_wholesale,
        stock=product.stock,
        image_url=product.image_url,
    )
    try:
        cart_service.add_item(cart, item)
    except CartError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    storage.save(session_id, cart)
    return to_cart_response(cart)


@router.patch("/{slug}/{mode}/items/{product_id}", response_model=CartResponse)
async def set_cart_item_qty(
    slug: str,
    mode: str,
    product_id: UUID,
    body: CartQtyRequest,
    key: str | None = None,
    session_id: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: AsyncSession = Depends(get_db),
):
    """Set a line quantity; zero removes the line."""
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    cart = open_cart(storage, session_id, store, cart_mode)
    try:
        cart_service.set_quantity(cart, product_id, body.qty)
    except CartError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    storage.save(session_id, cart)
    return to_cart_response(cart)


@router.delete("/{slug}/{mode}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    slug: str,
    mode: str,
    product_id: UUID,
    key: str | None = None,
    session_id: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: AsyncSession = Depends(get_db),
):
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    cart = open_cart(storage, session_id, store, cart_mode)
    cart_service.remove_item(cart, product_id)
    storage.save(session_id, cart)
    return to_cart_response(cart)


@router.delete("/{slug}/{mode}", response_model=CartResponse)
async def empty_cart(
    slug: str,
    mode: str,
    key: str | None = None,
    session_id: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: AsyncSession = Depends(get_db),
):
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    cart = open_cart(storage, session_id, store, cart_mode)
    cart_service.empty(cart)
    storage.save(session_id, cart)
    return to_cart_response(cart)


@router.put("/{slug}/{mode}/customer", response_model=CartResponse)
async def set_cart_customer(
    slug: str,
    mode: str,
    body: CartCustomerRequest,
    key: str | None = None,
    session_id: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: AsyncSession = Depends(get_db),
):
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    cart = open_cart(storage, session_id, store, cart_mode)
    cart.customer_name = body.customer_name
    cart.customer_whatsapp = normalize_number(body.customer_whatsapp)
    cart.customer_note = body.customer_note
    storage.save(session_id, cart)
    return to_cart_response(cart)


@router.post(
    "/{slug}/{mode}/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def checkout(
    slug: str,
    mode: str,
    key: str | None = None,
    session_id: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: AsyncSession = Depends(get_db),
):
    """Turn the cart into an order and hand back the WhatsApp link for the merchant."""
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    cart = open_cart(storage, session_id, store, cart_mode)

    try:
        order = await create_order_from_cart(db, store, cart)
    except CartError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    link = receipt_url(order.token)
    minimums = {i.product_id: i.min_wholesale for i in cart.items}
    message = render_message(
        OrderMessage(
            store_name=store.name,
            mode=cart_mode,
            items=[
                MessageItem(
                    name=item.name,
                    qty=item.qty,
                    price=item.price,
                    min_wholesale=minimums.get(item.product_id),
                )
                for item in order.items
            ],
            total=order.total,
            receipt_url=link,
            customer_name=order.customer_name,
            customer_note=order.customer_note,
        )
    )

    cart_service.empty(cart)
    storage.save(session_id, cart)

    return CheckoutResponse(
        order=to_order_response(order),
        receipt_url=link,
        message=message,
        whatsapp_url=whatsapp_url(store.whatsapp, message),
    )
