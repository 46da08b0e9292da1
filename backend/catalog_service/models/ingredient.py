"""
Ingredient and ProductRecipe models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .catalog import Product


class Ingredient(UUIDPrimaryKeyMixin, SoftDeleteMixin, Base):
    __tablename__ = "ingredient"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    recipes: Mapped[list["ProductRecipe"]] = relationship(back_populates="ingredient")

    @classmethod
    def active_clause(cls):
        return cls.status.is_(True)

    def deactivate(self) -> None:
        self.status = False


class ProductRecipe(UUIDPrimaryKeyMixin, Base):
    """One recipe line: `quantity` `unit` of an ingredient in a product."""

    __tablename__ = "product_recipe"

    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("ingredient.id"), nullable=False, index=True
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)

    product: Mapped["Product"] = relationship(back_populates="recipes")
    ingredient: Mapped["Ingredient"] = relationship(back_populates="recipes")
