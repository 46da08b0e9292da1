"""
Catalog models: Category, Product and the product sub-resources
(sizes, images, schedules).
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import ProductStatus
from .base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .ingredient import ProductRecipe
    from .tag import ProductTag
    from .question import QuestionProduct
    from .translation import Translation


class Category(UUIDPrimaryKeyMixin, SoftDeleteMixin, Base):
    __tablename__ = "category"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    translations: Mapped[list["Translation"]] = relationship(back_populates="category")

    @classmethod
    def active_clause(cls):
        return cls.status.is_(True)

    def deactivate(self) -> None:
        self.status = False


class Product(UUIDPrimaryKeyMixin, SoftDeleteMixin, Base):
    """
    Sellable product.

    status ACTIVE is the only state listed by find_all/search; soft delete
    moves the product to INACTIVE.
    """

    __tablename__ = "product"

    sku: Mapped[Optional[str]] = mapped_column(String(64), unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    base_price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    status: Mapped[ProductStatus] = mapped_column(
        Enum(ProductStatus, name="product_status", native_enum=False, length=20),
        default=ProductStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    sizes: Mapped[list["ProductSize"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    images: Mapped[list["ProductImage"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    schedules: Mapped[list["ProductSchedule"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    recipes: Mapped[list["ProductRecipe"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    tags: Mapped[list["ProductTag"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    question_links: Mapped[list["QuestionProduct"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    translations: Mapped[list["Translation"]] = relationship(back_populates="product")

    @classmethod
    def active_clause(cls):
        return cls.status == ProductStatus.ACTIVE

    def deactivate(self) -> None:
        self.status = ProductStatus.INACTIVE


class ProductSize(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "product_size"

    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    product: Mapped["Product"] = relationship(back_populates="sizes")


class ProductImage(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "product_image"

    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    product: Mapped["Product"] = relationship(back_populates="images")


class ProductSchedule(UUIDPrimaryKeyMixin, Base):
    """
    Availability window of a product on one day of the week.

    day_of_week is 0-6 with 0 = Sunday; times are zero-padded "HH:MM" so
    they compare correctly as strings.
    """

    __tablename__ = "product_schedule"

    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    product: Mapped["Product"] = relationship(back_populates="schedules")

    __table_args__ = (
        Index("ix_product_schedule_product_day", "product_id", "day_of_week"),
    )
