"""
Category and product schemas, including the product detail view and the
recursive question tree attached to it.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from shared.config.constants import ItemType, Limits, ProductStatus
from .common import AuditOutput, CommandInput
from .product_resources import ProductImageOutput, ProductScheduleOutput, ProductSizeOutput
from .question import QuestionOutput, QuestionWithTranslationsOutput
from .translation import TranslationOutput


# =============================================================================
# Category
# =============================================================================


class CategoryCreate(CommandInput):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None
    status: bool = True
    created_by: str | None = None


class CategoryUpdate(CommandInput):
    id: str
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None
    status: bool | None = None
    updated_by: str | None = None


class CategoryOutput(AuditOutput):
    id: str
    name: str
    description: str | None = None
    status: bool

    class Config:
        from_attributes = True


# =============================================================================
# Product
# =============================================================================


class ProductCreate(CommandInput):
    sku: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_SKU_LENGTH)
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None
    base_price: Decimal = Field(ge=0, max_digits=8, decimal_places=2)
    status: ProductStatus = ProductStatus.ACTIVE
    created_by: str | None = None


class ProductUpdate(CommandInput):
    id: str
    sku: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_SKU_LENGTH)
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None
    base_price: Decimal | None = Field(default=None, ge=0, max_digits=8, decimal_places=2)
    status: ProductStatus | None = None
    updated_by: str | None = None


class ProductOutput(AuditOutput):
    """Scalar product shape; base_price goes out as a number."""

    id: str
    sku: str | None = None
    name: str
    description: str | None = None
    base_price: float
    status: ProductStatus

    class Config:
        from_attributes = True


class ProductSummary(BaseModel):
    """Compact product reference used inside other resources."""

    id: str
    name: str
    sku: str | None = None
    base_price: float
    status: ProductStatus

    class Config:
        from_attributes = True


class TagSummary(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class RecipeLineOutput(BaseModel):
    id: str
    ingredient_id: str
    ingredient_name: str
    quantity: float
    unit: str


# =============================================================================
# Question tree
# =============================================================================


class QuestionNodeOutput(QuestionOutput):
    """A question asked about a product, with its expanded answer products."""

    answers: list[AnswerProductOutput] = Field(default_factory=list)


class AnswerProductOutput(ProductOutput):
    """An answer option: the product shape plus its own questions."""

    questions: list[QuestionNodeOutput] = Field(default_factory=list)


class ProductResourcesOutput(ProductOutput):
    """Product with its sub-resources, as returned by batch validation."""

    recipe: list[RecipeLineOutput] = Field(default_factory=list)
    tags: list[TagSummary] = Field(default_factory=list)
    sizes: list[ProductSizeOutput] = Field(default_factory=list)
    schedules: list[ProductScheduleOutput] = Field(default_factory=list)
    images: list[ProductImageOutput] = Field(default_factory=list)
    translations: list[TranslationOutput] = Field(default_factory=list)


class ProductDetailOutput(ProductResourcesOutput):
    questions: list[QuestionNodeOutput] = Field(default_factory=list)


QuestionNodeOutput.model_rebuild()
AnswerProductOutput.model_rebuild()
ProductDetailOutput.model_rebuild()


class ProductQuestionDetailOutput(BaseModel):
    """Question link with the side it points to loaded."""

    id: str
    question_id: str
    product_id: str
    position: int
    item_type: ItemType
    question: QuestionWithTranslationsOutput | None = None
    product: ProductSummary | None = None

    class Config:
        from_attributes = True
