"""Admin notification schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    store_id: UUID
    kind: str
    title: str
    body: str
    expires_at: datetime | None = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    ok: bool = True
    unread: int
    items: list[NotificationResponse]


class GenerateResponse(BaseModel):
    ok: bool = True
    upserted: int


class MarkReadRequest(BaseModel):
    ids: list[UUID] = Field(default_factory=list)


class MarkReadResponse(BaseModel):
    ok: bool = True
    updated: int
