"""
Domain services, one per catalog entity.

Usage:
    from catalog_service.services.domain import ProductService

    service = ProductService(db, events=events)
    page = service.find_all(Pagination(page=1, limit=10))
"""

from .chain_service import ChainService, RestaurantService
from .category_service import CategoryService
from .product_service import ProductService
from .ingredient_service import IngredientService
from .tag_service import TagService
from .question_service import QuestionService
from .translation_service import TranslationService

__all__ = [
    "ChainService",
    "RestaurantService",
    "CategoryService",
    "ProductService",
    "IngredientService",
    "TagService",
    "QuestionService",
    "TranslationService",
]
