"""
Question and QuestionProduct models.

QuestionProduct stores both edges of the customization graph:
- item_type QUESTION: `question` is asked about `product`
- item_type ANSWER: `product` is an answer option of `question`
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import ItemType, QuestionType
from .base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .catalog import Product
    from .translation import Translation


class Question(UUIDPrimaryKeyMixin, SoftDeleteMixin, Base):
    __tablename__ = "question"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    min: Mapped[Optional[int]] = mapped_column(Integer)
    max: Mapped[Optional[int]] = mapped_column(Integer)
    type: Mapped[QuestionType] = mapped_column(
        Enum(QuestionType, name="question_type", native_enum=False, length=20),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    links: Mapped[list["QuestionProduct"]] = relationship(
        back_populates="question", cascade="all, delete-orphan", passive_deletes=True
    )
    translations: Mapped[list["Translation"]] = relationship(back_populates="question")

    @classmethod
    def active_clause(cls):
        return cls.is_active.is_(True)

    def deactivate(self) -> None:
        self.is_active = False


class QuestionProduct(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "question_product"

    question_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("question.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    item_type: Mapped[ItemType] = mapped_column(
        Enum(ItemType, name="question_product_type", native_enum=False, length=20),
        nullable=False,
    )

    question: Mapped["Question"] = relationship(back_populates="links")
    product: Mapped["Product"] = relationship(back_populates="question_links")

    __table_args__ = (
        # Expansion looks links up by (product, type) and (question, type)
        Index("ix_question_product_product_type", "product_id", "item_type"),
        Index("ix_question_product_question_type", "question_id", "item_type"),
    )
