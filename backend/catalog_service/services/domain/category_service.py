"""
Category Service.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from catalog_service.models import Category
from catalog_service.schemas import CategoryOutput
from catalog_service.services.base_service import BaseCRUDService


class CategoryService(BaseCRUDService[Category, CategoryOutput]):
    """Categories are listed while status=true; soft delete turns status off."""

    def __init__(self, db: Session, events=None):
        super().__init__(
            db=db,
            model=Category,
            output_schema=CategoryOutput,
            entity_name="Category",
            entity_plural="categories",
            order_by=Category.name,
            events=events,
        )
