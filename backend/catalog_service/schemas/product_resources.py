"""
Schemas for product sub-resources: sizes, images, schedules, recipe lines,
tag links and question links.

Every sub-resource has the same payload family:
- <X>Create: one row, carries product_id
- <X>Data: one row of a bulk payload, product_id comes from the envelope
- <X>Bulk: {product_id, items}, used by bulk-create and replace-by-product-id
"""

import re
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from shared.config.constants import ItemType, Limits, TIME_OF_DAY_PATTERN
from .common import CommandInput

_TIME_RE = re.compile(TIME_OF_DAY_PATTERN)


def normalize_time_of_day(value: str) -> str:
    """Validate "H:MM"/"HH:MM" and return the zero-padded "HH:MM" form."""
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ValueError("time must be in HH:MM format (00:00-23:59)")
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


# =============================================================================
# Sizes
# =============================================================================


class ProductSizeData(CommandInput):
    name: str = Field(min_length=1, max_length=Limits.MAX_SIZE_NAME_LENGTH)
    price: Decimal = Field(ge=0, max_digits=8, decimal_places=2)
    status: bool = True


class ProductSizeCreate(ProductSizeData):
    product_id: str = Field(min_length=1)


class ProductSizeUpdate(CommandInput):
    id: str
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_SIZE_NAME_LENGTH)
    price: Decimal | None = Field(default=None, ge=0, max_digits=8, decimal_places=2)
    status: bool | None = None


class ProductSizeBulk(CommandInput):
    product_id: str = Field(min_length=1)
    items: list[ProductSizeData] = Field(default_factory=list, max_length=Limits.MAX_BULK_ITEMS)


class ProductSizeOutput(BaseModel):
    id: str
    product_id: str
    name: str
    price: float
    status: bool

    class Config:
        from_attributes = True


# =============================================================================
# Images
# =============================================================================


class ProductImageData(CommandInput):
    url: str = Field(min_length=1, max_length=Limits.MAX_URL_LENGTH)
    is_primary: bool = False


class ProductImageCreate(ProductImageData):
    product_id: str = Field(min_length=1)


class ProductImageUpdate(CommandInput):
    id: str
    url: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_URL_LENGTH)
    is_primary: bool | None = None


class ProductImageBulk(CommandInput):
    product_id: str = Field(min_length=1)
    items: list[ProductImageData] = Field(default_factory=list, max_length=Limits.MAX_BULK_ITEMS)


class SetPrimaryImageInput(CommandInput):
    product_id: str = Field(min_length=1)
    image_id: str = Field(min_length=1)


class ProductImageOutput(BaseModel):
    id: str
    product_id: str
    url: str
    is_primary: bool
    created_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# Schedules
# =============================================================================


class ProductScheduleData(CommandInput):
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def check_time(cls, value):
        return normalize_time_of_day(value)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class ProductScheduleCreate(ProductScheduleData):
    product_id: str = Field(min_length=1)


class ProductScheduleUpdate(CommandInput):
    id: str
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: str | None = None
    end_time: str | None = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def check_time(cls, value):
        if value is None:
            return value
        return normalize_time_of_day(value)


class ProductScheduleBulk(CommandInput):
    product_id: str = Field(min_length=1)
    items: list[ProductScheduleData] = Field(default_factory=list, max_length=Limits.MAX_BULK_ITEMS)


class IsAvailableAtTimeInput(CommandInput):
    product_id: str = Field(min_length=1)
    day_of_week: int = Field(ge=0, le=6)
    time: str

    @field_validator("time", mode="before")
    @classmethod
    def check_time(cls, value):
        return normalize_time_of_day(value)


class ProductScheduleOutput(BaseModel):
    id: str
    product_id: str
    day_of_week: int
    start_time: str
    end_time: str

    class Config:
        from_attributes = True


# =============================================================================
# Recipe lines
# =============================================================================


class ProductRecipeData(CommandInput):
    ingredient_id: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = Field(min_length=1, max_length=Limits.MAX_UNIT_LENGTH)


class ProductRecipeCreate(ProductRecipeData):
    product_id: str = Field(min_length=1)


class ProductRecipeUpdate(CommandInput):
    id: str
    ingredient_id: str | None = Field(default=None, min_length=1)
    quantity: float | None = Field(default=None, gt=0)
    unit: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_UNIT_LENGTH)


class ProductRecipeBulk(CommandInput):
    product_id: str = Field(min_length=1)
    items: list[ProductRecipeData] = Field(default_factory=list, max_length=Limits.MAX_BULK_ITEMS)


class ProductRecipeOutput(BaseModel):
    id: str
    product_id: str
    ingredient_id: str
    quantity: float
    unit: str

    class Config:
        from_attributes = True


# =============================================================================
# Tag links
# =============================================================================


class ProductTagCreate(CommandInput):
    product_id: str = Field(min_length=1)
    tag_id: str = Field(min_length=1)


# A tag link has no id of its own; find-one and remove use the pair
ProductTagKey = ProductTagCreate


class ProductTagBulk(CommandInput):
    product_id: str = Field(min_length=1)
    tag_ids: list[str] = Field(default_factory=list, max_length=Limits.MAX_BULK_ITEMS)


class ProductTagOutput(BaseModel):
    product_id: str
    tag_id: str

    class Config:
        from_attributes = True


# =============================================================================
# Question links
# =============================================================================


class ProductQuestionData(CommandInput):
    question_id: str = Field(min_length=1)
    position: int | None = Field(default=None, ge=0)
    item_type: ItemType


class ProductQuestionCreate(ProductQuestionData):
    product_id: str = Field(min_length=1)


class ProductQuestionUpdate(CommandInput):
    id: str
    question_id: str | None = Field(default=None, min_length=1)
    position: int | None = Field(default=None, ge=0)
    item_type: ItemType | None = None


class ProductQuestionBulk(CommandInput):
    product_id: str = Field(min_length=1)
    items: list[ProductQuestionData] = Field(default_factory=list, max_length=Limits.MAX_BULK_ITEMS)


class FindByProductIdAndTypeInput(CommandInput):
    product_id: str = Field(min_length=1)
    type: ItemType


class ProductQuestionOutput(BaseModel):
    id: str
    question_id: str
    product_id: str
    position: int
    item_type: ItemType

    class Config:
        from_attributes = True
