"""Platform admin: latest orders across every store."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func, or_, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.deps import require_admin
from catalogo.db.base import get_db
from catalogo.models.order import Order, OrderStatus
from catalogo.models.store import Store
from catalogo.schemas.auth import CurrentUser
from catalogo.schemas.order import AdminOrderListResponse, AdminOrderSummary, OrderSummary
from catalogo.services.catalog import escape_like

router = APIRouter(prefix="/admin/orders", tags=["admin"])


@router.get("", response_model=AdminOrderListResponse)
async def list_all_orders(
    limit: int = Query(200, ge=1, le=500),
    store_id: UUID | None = None,
    status_filter: OrderStatus | None = Query(None, alias="status"),
    q: str | None = Query(None, max_length=100),
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Newest orders first, each tagged with its store name and slug."""
    query = select(Order, Store.name, Store.slug).join(Store, Store.id == Order.store_id)
    if store_id is not None:
        query = query.where(Order.store_id == store_id)
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
                Store.name.ilike(like, escape="\\"),
                Store.slug.ilike(like, escape="\\"),
            )
        )

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(query.order_by(Order.created_at.desc()).limit(limit))

    items = [
        AdminOrderSummary(
            **OrderSummary.model_validate(order).model_dump(),
            store_name=store_name,
            store_slug=store_slug,
        )
        for order, store_name, store_slug in result.all()
    ]
    return AdminOrderListResponse(items=items, total=total)
