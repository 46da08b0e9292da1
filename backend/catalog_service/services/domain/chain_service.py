"""
Chain and Restaurant services.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from catalog_service.models import Chain, Restaurant
from catalog_service.schemas import ChainOutput, RestaurantOutput
from catalog_service.services.base_service import BaseCRUDService
from catalog_service.services.crud.repository import BaseRepository
from shared.utils.exceptions import ValidationError


class ChainService(BaseCRUDService[Chain, ChainOutput]):
    """A chain has no active flag; it is listed until soft-deleted."""

    def __init__(self, db: Session, events=None):
        super().__init__(
            db=db,
            model=Chain,
            output_schema=ChainOutput,
            entity_name="Chain",
            order_by=Chain.name,
            events=events,
        )


class RestaurantService(BaseCRUDService[Restaurant, RestaurantOutput]):
    """
    Service for restaurants.

    Business rules:
    - A restaurant belongs to a live chain
    - Only status=true restaurants are listed
    """

    def __init__(self, db: Session, events=None):
        super().__init__(
            db=db,
            model=Restaurant,
            output_schema=RestaurantOutput,
            entity_name="Restaurant",
            order_by=Restaurant.name,
            events=events,
        )

    def _check_chain(self, chain_id: str) -> None:
        if not BaseRepository(Chain, self._db).exists(chain_id):
            raise ValidationError(f"Chain with id {chain_id} not found", field="chain_id")

    def _validate_create(self, data: dict[str, Any]) -> None:
        self._check_chain(data["chain_id"])

    def _validate_update(self, entity: Restaurant, data: dict[str, Any]) -> None:
        if data.get("chain_id"):
            self._check_chain(data["chain_id"])
