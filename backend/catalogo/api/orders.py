"""Dashboard order endpoints: list, detail, status changes."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, func, or_, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.deps import StoreContext, get_store_context
from catalogo.db.base import get_db
from catalogo.models.order import Order, OrderStatus
from catalogo.schemas.order import (
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderSummary,
)
from catalogo.services.catalog import escape_like
from catalogo.services.orders import (
    InvalidStatusTransition,
    allowed_next_statuses,
    is_locked,
    set_status,
)

router = APIRouter(prefix="/dashboard/orders", tags=["orders"])


def to_order_response(order: Order) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    response.locked = is_locked(order.status)
    response.next_statuses = allowed_next_statuses(order.status)
    return response


async def _get_store_order(db: AsyncSession, ctx: StoreContext, order_id: UUID) -> Order:
    result = await db.execute(
        select(Order).where(Order.id == order_id, Order.store_id == ctx.store_id)
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    status_filter: OrderStatus | None = Query(None, alias="status"),
    q: str | None = Query(None, max_length=100),
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """List orders newest first, with status filter and free-text search."""
    offset = (page - 1) * size

    query = select(Order).where(Order.store_id == ctx.store_id)
    if status_filter:
        query = query.where(Order.status == status_filter.value)
    if q and q.strip():
        like = f"%{escape_like(q.strip())}%"
        query = query.where(
            or_(
                cast(Order.receipt_no, String).ilike(like, escape="\\"),
                Order.status.ilike(like, escape="\\"),
                Order.customer_name.ilike(like, escape="\\"),
                Order.customer_whatsapp.ilike(like, escape="\\"),
                Order.customer_note.ilike(like, escape="\\"),
            )
        )

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    query = query.order_by(Order.created_at.desc()).offset(offset).limit(size)
    result = await db.execute(query)
    orders = result.scalars().all()

    return OrderListResponse(
        items=[OrderSummary.model_validate(o) for o in orders],
        total=total,
        page=page,
        size=size,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a single order with its items."""
    return to_order_response(await _get_store_order(db, ctx, order_id))


@router.post("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """Move an order forward: draft -> sent -> confirmed -> completed."""
    order = await _get_store_order(db, ctx, order_id)
    try:
        order = await set_status(db, order, body.status.value)
    except InvalidStatusTransition as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return to_order_response(order)
