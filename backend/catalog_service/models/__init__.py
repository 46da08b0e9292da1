"""
SQLAlchemy models for the catalog.

Import from here so every mapper is configured before use:
    from catalog_service.models import Base, Product, QuestionProduct
"""

from .base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin, new_uuid, utcnow
from .chain import Chain, Restaurant
from .catalog import Category, Product, ProductSize, ProductImage, ProductSchedule
from .ingredient import Ingredient, ProductRecipe
from .tag import Tag, ProductTag
from .question import Question, QuestionProduct
from .translation import Translation

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_uuid",
    "utcnow",
    "Chain",
    "Restaurant",
    "Category",
    "Product",
    "ProductSize",
    "ProductImage",
    "ProductSchedule",
    "Ingredient",
    "ProductRecipe",
    "Tag",
    "ProductTag",
    "Question",
    "QuestionProduct",
    "Translation",
]
