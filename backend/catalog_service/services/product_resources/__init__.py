"""
Services for product sub-resources.
"""

from .base import ProductResourceService
from .size_service import ProductSizeService
from .image_service import ProductImageService
from .schedule_service import ProductScheduleService
from .recipe_service import ProductRecipeService
from .product_tag_service import ProductTagService
from .product_question_service import ProductQuestionService

__all__ = [
    "ProductResourceService",
    "ProductSizeService",
    "ProductImageService",
    "ProductScheduleService",
    "ProductRecipeService",
    "ProductTagService",
    "ProductQuestionService",
]
