"""
Ingredient schemas.
"""

from pydantic import Field

from shared.config.constants import Limits
from .common import AuditOutput, CommandInput


class IngredientCreate(CommandInput):
    name: str = Field(min_length=1, max_length=Limits.MAX_INGREDIENT_NAME_LENGTH)
    unit: str = Field(min_length=1, max_length=Limits.MAX_UNIT_LENGTH)
    status: bool = True
    created_by: str | None = None


class IngredientUpdate(CommandInput):
    id: str
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_INGREDIENT_NAME_LENGTH)
    unit: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_UNIT_LENGTH)
    status: bool | None = None
    updated_by: str | None = None


class IngredientOutput(AuditOutput):
    id: str
    name: str
    unit: str
    status: bool

    class Config:
        from_attributes = True
