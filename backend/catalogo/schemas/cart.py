"""Cart and checkout schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from catalogo.services.cart import CartItem, CartMode
from catalogo.schemas.order import OrderResponse


class CartAddRequest(BaseModel):
    product_id: UUID
    qty: int = Field(1, ge=1)


class CartQtyRequest(BaseModel):
    qty: int


class CartCustomerRequest(BaseModel):
    customer_name: str = Field("", max_length=255)
    customer_whatsapp: str = Field("", max_length=30)
    customer_note: str = Field("", max_length=2000)


class CartResponse(BaseModel):
    store_id: UUID
    store_slug: str
    store_name: str
    mode: CartMode
    customer_name: str
    customer_whatsapp: str
    customer_note: str
    items: list[CartItem]
    total: Decimal
    count: int


class CheckoutResponse(BaseModel):
    order: OrderResponse
    receipt_url: str
    message: str
    whatsapp_url: str
