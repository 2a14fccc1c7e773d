"""Store expiry notifications for the admin bell."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.config import settings
from catalogo.core.deps import require_service_key
from catalogo.db.base import get_db
from catalogo.schemas.notification import (
    GenerateResponse,
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from catalogo.services.notifications import generate_notifications, list_notifications, mark_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/notifications", tags=["admin"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    caller: str = Depends(require_service_key),
    db: AsyncSession = Depends(get_db),
):
    """Classify every store by time left and upsert one reminder per bucket."""
    upserted = await generate_notifications(db)
    logger.info("Notifications generated by %s", caller)
    return GenerateResponse(upserted=upserted)


@router.get("/list", response_model=NotificationListResponse)
async def list_all(
    _: str = Depends(require_service_key),
    db: AsyncSession = Depends(get_db),
):
    items, unread = await list_notifications(db, settings.NOTIFICATION_LIST_LIMIT)
    return NotificationListResponse(
        unread=unread,
        items=[NotificationResponse.model_validate(n) for n in items],
    )


@router.post("/mark-read", response_model=MarkReadResponse)
async def mark_notifications_read(
    body: MarkReadRequest,
    _: str = Depends(require_service_key),
    db: AsyncSession = Depends(get_db),
):
    if not body.ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="ids is required")
    updated = await mark_read(db, body.ids)
    return MarkReadResponse(updated=updated)
