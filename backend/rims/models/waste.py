"""Waste log ledger model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rims.db.base import Base, utcnow


class WasteLog(Base):
    """Record of stock removed as waste (spoilage, spills, prep mistakes)."""

    __tablename__ = "waste_logs"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_waste_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    ingredient_id: Mapped[int] = mapped_column(
        ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )

    # Relationships
    ingredient: Mapped["Ingredient"] = relationship("Ingredient", back_populates="waste_logs")


# Forward references
from rims.models.ingredient import Ingredient
