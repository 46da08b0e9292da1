"""
Question schemas.
"""

from pydantic import BaseModel, Field, model_validator

from shared.config.constants import ItemType, Limits, QuestionType
from shared.utils.pagination import PaginationInput
from .common import AuditOutput, CommandInput
from .translation import TranslationOutput


class QuestionCreate(CommandInput):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    required: bool = False
    min: int | None = Field(default=None, ge=0)
    max: int | None = Field(default=None, ge=1)
    type: QuestionType
    is_active: bool = True
    created_by: str | None = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min must not exceed max")
        return self


class QuestionUpdate(CommandInput):
    id: str
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    required: bool | None = None
    min: int | None = Field(default=None, ge=0)
    max: int | None = Field(default=None, ge=1)
    type: QuestionType | None = None
    is_active: bool | None = None
    updated_by: str | None = None


class FindByTypeInput(PaginationInput):
    type: QuestionType


class QuestionOutput(AuditOutput):
    id: str
    name: str
    required: bool
    min: int | None = None
    max: int | None = None
    type: QuestionType
    is_active: bool

    class Config:
        from_attributes = True


class QuestionLinkSummary(BaseModel):
    """A question's link to a product, seen from the question."""

    id: str
    product_id: str
    position: int
    item_type: ItemType

    class Config:
        from_attributes = True


class QuestionWithTranslationsOutput(QuestionOutput):
    translations: list[TranslationOutput] = Field(default_factory=list)


class QuestionDetailOutput(QuestionWithTranslationsOutput):
    links: list[QuestionLinkSummary] = Field(default_factory=list)
