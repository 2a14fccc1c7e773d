"""Admin notification model - store expiry reminders."""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogo.db.base import Base
from catalogo.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class AdminNotification(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "admin_notifications"
    __table_args__ = (
        UniqueConstraint("store_id", "kind", name="uq_admin_notifications_store_kind"),
    )

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    store_id: Mapped["uuid.UUID"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )

    store = relationship("Store")

    def __repr__(self) -> str:
        return f"<AdminNotification {self.kind} store={self.store_id}>"
