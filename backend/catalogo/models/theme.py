"""Theme model - platform-wide catalog skins."""

from sqlalchemy import String, Boolean, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogo.db.base import Base
from catalogo.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Theme(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "themes"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Flat key/value: colors, gradient stops, angles, radius, glow
    config: Mapped[dict] = mapped_column(JSONB, default=dict, nullable=False)

    stores = relationship("Store", back_populates="theme")

    def __repr__(self) -> str:
        return f"<Theme {self.name}>"
