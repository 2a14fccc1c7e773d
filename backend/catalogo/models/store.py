"""Store (tenant) model plus its descriptive profile and social links."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, Text, Integer, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogo.db.base import Base
from catalogo.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Store(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "stores"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    whatsapp: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    phone: Mapped[str | None] = mapped_column(String(30))
    email: Mapped[str | None] = mapped_column(String(255))
    logo_url: Mapped[str | None] = mapped_column(String(500))
    banner_url: Mapped[str | None] = mapped_column(String(500))

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    active_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    catalog_retail: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    catalog_wholesale: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    wholesale_key: Mapped[str | None] = mapped_column(String(100))

    # Foreign keys
    owner_id: Mapped["uuid.UUID | None"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    theme_id: Mapped["uuid.UUID | None"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("themes.id", ondelete="SET NULL")
    )

    # Relationships
    owner = relationship("User", back_populates="stores")
    theme = relationship("Theme", back_populates="stores", lazy="selectin")
    profile = relationship(
        "StoreProfile", back_populates="store", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
    links = relationship(
        "StoreLink", back_populates="store", cascade="all, delete-orphan",
        order_by="StoreLink.sort_order", lazy="selectin",
    )
    categories = relationship("Category", back_populates="store", cascade="all, delete-orphan")
    products = relationship("Product", back_populates="store", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="store", cascade="all, delete-orphan")

    def is_active_at(self, now: datetime) -> bool:
        if not self.active:
            return False
        if self.active_until is None:
            return True
        return self.active_until > now

    @property
    def is_active_now(self) -> bool:
        return self.is_active_at(datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<Store {self.slug}: {self.name}>"


class StoreProfile(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "store_profiles"

    headline: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    address: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(100))
    department: Mapped[str | None] = mapped_column(String(100))
    google_maps_url: Mapped[str | None] = mapped_column(String(500))
    delivery_info: Mapped[str | None] = mapped_column(Text)
    payment_methods: Mapped[str | None] = mapped_column(Text)
    policies: Mapped[str | None] = mapped_column(Text)

    store_id: Mapped["uuid.UUID"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"),
        unique=True, nullable=False,
    )

    store = relationship("Store", back_populates="profile")


class StoreLink(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "store_links"

    type: Mapped[str] = mapped_column(String(30), nullable=False)  # instagram, tiktok, web...
    label: Mapped[str | None] = mapped_column(String(100))
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    icon_url: Mapped[str | None] = mapped_column(String(500))
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    store_id: Mapped["uuid.UUID"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )

    store = relationship("Store", back_populates="links")

    def __repr__(self) -> str:
        return f"<StoreLink {self.type}: {self.url}>"
