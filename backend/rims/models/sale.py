"""Sale ledger model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rims.db.base import Base, utcnow


class Sale(Base):
    """Append-only record of units sold. Never updated after creation."""

    __tablename__ = "sales"
    __table_args__ = (
        CheckConstraint("quantity_sold > 0", name="ck_sale_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity_sold: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )

    # Relationships
    menu_item: Mapped["MenuItem"] = relationship("MenuItem", back_populates="sales")


# Forward references
from rims.models.menu import MenuItem
