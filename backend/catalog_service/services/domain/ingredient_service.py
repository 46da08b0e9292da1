"""
Ingredient Service.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Sequence

from sqlalchemy.orm import Session

from catalog_service.models import Ingredient
from catalog_service.schemas import IngredientOutput
from catalog_service.services.base_service import BaseCRUDService


class IngredientService(BaseCRUDService[Ingredient, IngredientOutput]):
    """
    Service for ingredients.

    Business rules:
    - Ingredient names are unique (409 on duplicates)
    - validate_ingredients only accepts active, live ingredients
    """

    def __init__(self, db: Session, events=None):
        super().__init__(
            db=db,
            model=Ingredient,
            output_schema=IngredientOutput,
            entity_name="Ingredient",
            order_by=Ingredient.name,
            events=events,
        )

    def validate_ingredients(self, ids: Sequence[str]) -> list[IngredientOutput]:
        """
        Resolve ingredient ids for recipe validation.

        Raises:
            MissingEntitiesError: 404 unless every id is an active, live ingredient.
        """
        return self.validate_ids(ids, active_only=True, missing_status=HTTPStatus.NOT_FOUND)
