"""Product model."""

import uuid
from decimal import Decimal

from sqlalchemy import String, Text, Numeric, Integer, Boolean, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogo.db.base import Base
from catalogo.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Product(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        Index("ix_products_store_name", "store_id", "name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    price_retail: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    price_wholesale: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    min_wholesale: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    # NULL means unlimited
    stock: Mapped[int | None] = mapped_column(Integer, default=None)
    image_url: Mapped[str | None] = mapped_column(String(500))
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Foreign keys
    store_id: Mapped["uuid.UUID"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped["uuid.UUID | None"] = mapped_column(
        UUID(as_uuid=True), ForeignKey("product_categories.id", ondelete="SET NULL")
    )

    # Relationships
    store = relationship("Store", back_populates="products")
    category = relationship("Category", back_populates="products")

    @property
    def is_unlimited(self) -> bool:
        return self.stock is None

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock is not None and self.stock <= 0

    def price_for(self, catalog_type: str) -> Decimal:
        if catalog_type == "wholesale":
            return self.price_wholesale
        return self.price_retail

    def __repr__(self) -> str:
        return f"<Product {self.name} stock={self.stock}>"
