"""
Tag schemas.
"""

from pydantic import BaseModel, Field

from shared.config.constants import Limits
from .catalog import ProductSummary
from .common import AuditOutput, CommandInput


class TagCreate(CommandInput):
    name: str = Field(min_length=1, max_length=Limits.MAX_INGREDIENT_NAME_LENGTH)
    created_by: str | None = None


class TagUpdate(CommandInput):
    id: str
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_INGREDIENT_NAME_LENGTH)
    updated_by: str | None = None


class MostUsedInput(CommandInput):
    limit: int = Field(default=Limits.DEFAULT_MOST_USED_TAGS, ge=1, le=Limits.MAX_PAGE_SIZE)


class TagOutput(AuditOutput):
    id: str
    name: str

    class Config:
        from_attributes = True


class TagWithProductsOutput(TagOutput):
    products: list[ProductSummary] = Field(default_factory=list)


class TagUsageOutput(BaseModel):
    id: str
    name: str
    product_count: int
