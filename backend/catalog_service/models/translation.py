"""
Translation model.

A translation belongs to exactly one of category, product or question and
is unique per (owner, language_code). Translations are hard-deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .catalog import Category, Product
    from .question import Question


class Translation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "translation"

    language_code: Mapped[str] = mapped_column(String(5), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    category_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("category.id", ondelete="SET NULL"), index=True
    )
    product_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("product.id", ondelete="SET NULL"), index=True
    )
    question_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("question.id", ondelete="SET NULL"), index=True
    )

    category: Mapped[Optional["Category"]] = relationship(back_populates="translations")
    product: Mapped[Optional["Product"]] = relationship(back_populates="translations")
    question: Mapped[Optional["Question"]] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("category_id", "language_code", name="uq_translation_category_language"),
        UniqueConstraint("product_id", "language_code", name="uq_translation_product_language"),
        UniqueConstraint("question_id", "language_code", name="uq_translation_question_language"),
    )
