"""Ingredient model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rims.db.base import Base, TimestampMixin


class Ingredient(Base, TimestampMixin):
    """A stocked ingredient. current_stock is in the ingredient's own unit."""

    __tablename__ = "ingredients"
    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_ingredient_name_not_empty"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)  # grams, pieces, ml...
    current_stock: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    par_level: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)  # reorder threshold
    unit_cost: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)  # currency per unit

    # Relationships
    recipe_items: Mapped[list["RecipeItem"]] = relationship(
        "RecipeItem",
        back_populates="ingredient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    waste_logs: Mapped[list["WasteLog"]] = relationship(
        "WasteLog",
        back_populates="ingredient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# Forward references
from rims.models.menu import RecipeItem
from rims.models.waste import WasteLog
