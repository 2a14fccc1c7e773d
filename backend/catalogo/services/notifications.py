"""Store expiry reminders for the platform administrator."""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Literal
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.models.notification import AdminNotification
from catalogo.models.store import Store

logger = logging.getLogger(__name__)

NotificationKind = Literal["d10", "d5", "d3", "d0", "expired"]

DAY = timedelta(days=1)


class NotificationMessage(BaseModel):
    title: str
    body: str


def days_left(remaining: timedelta) -> int:
    if remaining <= timedelta(0):
        return 0
    return math.ceil(remaining / DAY)


def minutes_left(remaining: timedelta) -> int:
    if remaining <= timedelta(0):
        return 0
    return math.ceil(remaining / timedelta(minutes=1))


def pick_kind(remaining: timedelta | None) -> NotificationKind | None:
    """Reminder bucket for the time left before a store expires."""
    if remaining is None:
        return None
    if remaining <= timedelta(0):
        return "expired"
    d = days_left(remaining)
    if d <= 1:
        return "d0"
    if d <= 3:
        return "d3"
    if d <= 5:
        return "d5"
    if d <= 10:
        return "d10"
    return None


def format_expiry(moment: datetime | None) -> str:
    if moment is None:
        return "—"
    return moment.strftime("%d/%m/%Y, %H:%M")


def build_message(
    store: Store, kind: NotificationKind, remaining: timedelta
) -> NotificationMessage:
    exp = format_expiry(store.active_until)
    tail = "Al vencer, se inactiva tienda y catálogos."

    if kind == "expired":
        return NotificationMessage(
            title=f"⛔ Tienda vencida: {store.name}",
            body=f"La tienda /{store.slug} venció ({exp}). {tail}",
        )
    if kind == "d0":
        return NotificationMessage(
            title=f"⏳ Vence en minutos: {store.name}",
            body=f"La tienda /{store.slug} vence en ~{minutes_left(remaining)} min ({exp}). {tail}",
        )

    prefix = {"d3": "🔥", "d5": "🧯"}.get(kind, "⚠️")
    return NotificationMessage(
        title=f"{prefix} Vence en {days_left(remaining)} día(s): {store.name}",
        body=f"La tienda /{store.slug} vence el {exp}. {tail}",
    )


async def generate_notifications(db: AsyncSession, now: datetime | None = None) -> int:
    """Upsert one reminder per (store, kind) for stores close to expiry.

    Returns how many rows were written. A failed upsert is logged and skipped.
    """
    now = now or datetime.now(timezone.utc)
    result = await db.execute(select(Store).where(Store.active_until.is_not(None)))
    stores = result.scalars().all()

    upserted = 0
    for store in stores:
        remaining = store.active_until - now
        kind = pick_kind(remaining)
        if kind is None:
            continue
        msg = build_message(store, kind, remaining)
        stmt = insert(AdminNotification).values(
            store_id=store.id,
            kind=kind,
            title=msg.title,
            body=msg.body,
            expires_at=store.active_until,
            is_read=False,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[AdminNotification.store_id, AdminNotification.kind],
            set_={
                "title": stmt.excluded.title,
                "body": stmt.excluded.body,
                "expires_at": stmt.excluded.expires_at,
                "is_read": False,
            },
        )
        try:
            async with db.begin_nested():
                await db.execute(stmt)
        except SQLAlchemyError:
            logger.exception("Notification upsert failed for store %s (%s)", store.slug, kind)
            continue
        upserted += 1

    logger.info("Generated %d admin notifications from %d stores", upserted, len(stores))
    return upserted


async def list_notifications(
    db: AsyncSession, limit: int
) -> tuple[list[AdminNotification], int]:
    """Newest notifications and how many of them are unread."""
    result = await db.execute(
        select(AdminNotification).order_by(AdminNotification.created_at.desc()).limit(limit)
    )
    items = list(result.scalars().all())
    unread = sum(1 for n in items if not n.is_read)
    return items, unread


async def mark_read(db: AsyncSession, ids: list[UUID]) -> int:
    result = await db.execute(
        update(AdminNotification).where(AdminNotification.id.in_(ids)).values(is_read=True)
    )
    return result.rowcount or 0
