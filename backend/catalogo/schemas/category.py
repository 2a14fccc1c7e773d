"""Category schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    sort_order: int = 0
    active: bool = True


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    sort_order: int | None = None
    active: bool | None = None


class CategoryResponse(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    store_id: UUID
    image_url: str | None = None
    created_at: datetime


class CategoryListResponse(BaseModel):
    items: list[CategoryResponse]
    total: int
