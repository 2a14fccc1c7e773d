"""Product schemas for API request/response."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, field_validator


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price_retail: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    price_wholesale: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    min_wholesale: int = 1
    stock: int | None = Field(None, ge=0, description="Units available; null means unlimited")
    active: bool = True
    category_id: UUID | None = None

    @field_validator("min_wholesale")
    @classmethod
    def _min_wholesale_at_least_one(cls, v: int) -> int:
        return max(1, v)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price_retail: Decimal | None = Field(None, ge=0, decimal_places=2)
    price_wholesale: Decimal | None = Field(None, ge=0, decimal_places=2)
    min_wholesale: int | None = None
    stock: int | None = Field(None, ge=0)
    active: bool | None = None
    category_id: UUID | None = None

    @field_validator("min_wholesale")
    @classmethod
    def _min_wholesale_at_least_one(cls, v: int | None) -> int | None:
        return None if v is None else max(1, v)


class StockUpdate(BaseModel):
    """Quick stock edit: a number, or null for unlimited."""
    stock: int | None = Field(..., ge=0)


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    store_id: UUID
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    page: int
    size: int


ProductStatusFilter = Literal["all", "active", "inactive"]
ProductStockFilter = Literal["all", "in", "out", "unlimited"]
ProductSort = Literal["newest", "name", "price", "stock"]


# ── Public catalog ─────────────────────────────────
class CatalogProduct(BaseModel):
    """Shopper view: one price, already picked for the catalog mode."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    price: Decimal
    min_wholesale: int
    stock: int | None = None
    image_url: str | None = None
    category_id: UUID | None = None


class CatalogPage(BaseModel):
    items: list[CatalogProduct]
    total: int
    offset: int
    limit: int
    has_more: bool
