"""Menu item and recipe (ingredient-to-menu-item mapping) models."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rims.db.base import Base, TimestampMixin


class MenuItem(Base, TimestampMixin):
    """A sellable menu item."""

    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    base_price: Mapped[float] = mapped_column(Float, nullable=False)

    # Relationships
    recipe_items: Mapped[list["RecipeItem"]] = relationship(
        "RecipeItem",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RecipeItem.id",
    )
    sales: Mapped[list["Sale"]] = relationship(
        "Sale",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RecipeItem(Base, TimestampMixin):
    """Nominal consumption of one ingredient per unit of a menu item."""

    __tablename__ = "recipe_items"
    __table_args__ = (
        UniqueConstraint("menu_item_id", "ingredient_id", name="uq_recipe_menu_item_ingredient"),
        CheckConstraint("quantity_required > 0", name="ck_recipe_quantity_positive"),
        CheckConstraint("yield_factor >= 1.0", name="ck_recipe_yield_factor_min"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id: Mapped[int] = mapped_column(
        ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity_required: Mapped[float] = mapped_column(Float, nullable=False)
    # Inverse of usable yield: 1.0 = no prep waste, 1.25 = 20% waste
    yield_factor: Mapped[float] = mapped_column(Float, default=1.0, server_default="1.0", nullable=False)

    # Relationships
    menu_item: Mapped["MenuItem"] = relationship("MenuItem", back_populates="recipe_items")
    ingredient: Mapped["Ingredient"] = relationship("Ingredient", back_populates="recipe_items")


# Forward references
from rims.models.ingredient import Ingredient
from rims.models.sale import Sale
