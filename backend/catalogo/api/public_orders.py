"""Token-addressable order receipt: view, edit quantities, confirm."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.api.orders import to_order_response
from catalogo.db.base import get_db
from catalogo.models.order import Order
from catalogo.schemas.order import OrderItemsUpdate, PublicOrderResponse
from catalogo.schemas.store import StorePublic, StoreProfileResponse
from catalogo.services.cart import CartError
from catalogo.services.orders import (
    OrderItemsError,
    OrderLockedError,
    confirm_by_token,
    get_order_by_token,
    update_items_by_token,
)

router = APIRouter(prefix="/public/orders", tags=["public-orders"])


async def _order_or_404(db: AsyncSession, token: str) -> Order:
    order = await get_order_by_token(db, token)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


def _public_response(order: Order) -> PublicOrderResponse:
    store = order.store
    return PublicOrderResponse(
        order=to_order_response(order),
        store=StorePublic.model_validate(store),
        profile=StoreProfileResponse.model_validate(store.profile) if store.profile else None,
    )


@router.get("/{token}", response_model=PublicOrderResponse)
async def get_public_order(token: str, db: AsyncSession = Depends(get_db)):
    return _public_response(await _order_or_404(db, token))


@router.put("/{token}/items", response_model=PublicOrderResponse)
async def update_public_order_items(
    token: str,
    body: OrderItemsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Change quantities while the order is still editable (draft or sent)."""
    order = await _order_or_404(db, token)
    try:
        order = await update_items_by_token(
            db, order, {i.product_id: i.qty for i in body.items}
        )
    except OrderLockedError as exc:
        raise HTTPException(status_code=status.HTTP_423_LOCKED, detail=str(exc))
    except (OrderItemsError, CartError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _public_response(order)


@router.post("/{token}/confirm", response_model=PublicOrderResponse)
async def confirm_public_order(token: str, db: AsyncSession = Depends(get_db)):
    """Customer confirmation; after this the order can no longer be edited."""
    order = await _order_or_404(db, token)
    try:
        order = await confirm_by_token(db, order)
    except OrderLockedError as exc:
        raise HTTPException(status_code=status.HTTP_423_LOCKED, detail=str(exc))
    return _public_response(order)
