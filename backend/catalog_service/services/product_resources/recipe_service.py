"""
Product recipe service.

A recipe line says how much of an ingredient goes into a product. Every
referenced ingredient must be active and not deleted.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import select

from catalog_service.models import Ingredient, ProductRecipe
from catalog_service.schemas import ProductRecipeOutput
from catalog_service.services.crud.repository import BaseRepository
from shared.config.constants import CatalogEvents
from shared.utils.exceptions import MissingEntitiesError
from .base import ProductResourceService


class ProductRecipeService(ProductResourceService[ProductRecipe, ProductRecipeOutput]):
    model = ProductRecipe
    output_schema = ProductRecipeOutput
    entity_name = "Product recipe"
    entity_plural = "product recipes"
    response_key = "recipe"
    created_event = CatalogEvents.PRODUCT_RECIPE_CREATED

    def find_by_product_id(self, product_id: str) -> list[ProductRecipeOutput]:
        """Recipe lines of a product, by ingredient name."""
        rows = self._db.scalars(
            select(ProductRecipe)
            .join(Ingredient, Ingredient.id == ProductRecipe.ingredient_id)
            .where(ProductRecipe.product_id == product_id)
            .order_by(Ingredient.name, ProductRecipe.id)
        ).all()
        return [self.to_output(row) for row in rows]

    def _validate_items(self, product_id: str, items: Sequence[dict[str, Any]]) -> None:
        self._check_ingredients([item["ingredient_id"] for item in items])

    def _validate_update(self, row: ProductRecipe, data: dict[str, Any]) -> None:
        if data.get("ingredient_id"):
            self._check_ingredients([data["ingredient_id"]])

    def _check_ingredients(self, ingredient_ids: list[str]) -> None:
        wanted = list(dict.fromkeys(ingredient_ids))
        found = {
            ingredient.id
            for ingredient in BaseRepository(Ingredient, self._db).find_by_ids(wanted, active_only=True)
        }
        missing = [ingredient_id for ingredient_id in wanted if ingredient_id not in found]
        if missing:
            raise MissingEntitiesError("ingredients", missing)
