"""
Tag and ProductTag models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .catalog import Product


class Tag(UUIDPrimaryKeyMixin, SoftDeleteMixin, Base):
    """Free-form product label. No active flag."""

    __tablename__ = "tag"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    products: Mapped[list["ProductTag"]] = relationship(back_populates="tag")


class ProductTag(Base):
    """Product-tag link keyed by the pair."""

    __tablename__ = "product_tag"

    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("product.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    product: Mapped["Product"] = relationship(back_populates="tags")
    tag: Mapped["Tag"] = relationship(back_populates="products")
