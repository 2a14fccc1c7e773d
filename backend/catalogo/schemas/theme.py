"""Theme schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ThemeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    active: bool = True
    sort_order: int = 0
    config: dict = Field(default_factory=dict)


class ThemeCreate(ThemeBase):
    pass


class ThemeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    active: bool | None = None
    sort_order: int | None = None
    config: dict | None = None


class ThemeResponse(ThemeBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
