"""Order schemas for API request/response."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict

from catalogo.models.order import OrderStatus, CatalogType
from catalogo.schemas.store import StorePublic, StoreProfileResponse


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID | None
    name: str
    image_url: str | None = None
    price: Decimal
    qty: int
    subtotal: Decimal


class OrderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    token: str
    receipt_no: int
    status: OrderStatus
    catalog_type: CatalogType
    total: Decimal
    customer_name: str | None = None
    customer_whatsapp: str | None = None
    customer_note: str | None = None
    store_id: UUID
    created_at: datetime


class OrderResponse(OrderSummary):
    items: list[OrderItemResponse]
    locked: bool = False
    next_statuses: list[OrderStatus] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    items: list[OrderSummary]
    total: int
    page: int
    size: int


class AdminOrderSummary(OrderSummary):
    store_name: str
    store_slug: str


class AdminOrderListResponse(BaseModel):
    items: list[AdminOrderSummary]
    total: int


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


# ── Token-addressable receipt ──────────────────────
class OrderItemQty(BaseModel):
    product_id: UUID
    qty: int = Field(..., ge=1)


class OrderItemsUpdate(BaseModel):
    items: list[OrderItemQty] = Field(..., min_length=1)


class PublicOrderResponse(BaseModel):
    order: OrderResponse
    store: StorePublic
    profile: StoreProfileResponse | None = None
