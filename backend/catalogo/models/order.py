"""Order & OrderItem models."""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import String, Numeric, Integer, ForeignKey, Text, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogo.db.base import Base
from catalogo.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class OrderStatus(str, enum.Enum):
    """Linear lifecycle; declaration order is the only allowed direction."""
    DRAFT = "draft"
    SENT = "sent"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class CatalogType(str, enum.Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"


class Order(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_store_created", "store_id", "created_at"),
        UniqueConstraint("store_id", "receipt_no", name="uq_orders_store_receipt"),
    )

    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    receipt_no: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatus.DRAFT.value, nullable=False, index=True
    )
    catalog_type: Mapped[str] = mapped_column(
        String(20), default=CatalogType.RETAIL.value, nullable=False
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)

    customer_name: Mapped[str | None] = mapped_column(String(255))
    customer_whatsapp: Mapped[str | None] = mapped_column(String(30))
    customer_note: Mapped[str | None] = mapped_column(Text)

    store_id: Mapped["uuid.UUID"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    store = relationship("Store", back_populates="orders", lazy="selectin")
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Order #{self.receipt_no} {self.status} total={self.total}>"


class OrderItem(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "order_items"

    # Snapshot at order time; later product edits do not change the receipt
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)

    order_id: Mapped["uuid.UUID"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped["uuid.UUID | None"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("products.id", ondelete="SET NULL")
    )

    order = relationship("Order", back_populates="items")

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.qty

    def __repr__(self) -> str:
        return f"<OrderItem product={self.product_id} qty={self.qty}>"
