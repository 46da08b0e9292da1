"""
Translation schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from shared.config.constants import LanguageCode, Limits, TRANSLATION_OWNER_FIELDS
from .common import CommandInput

TranslationOwnerField = Literal["category_id", "product_id", "question_id"]


class TranslationCreate(CommandInput):
    language_code: LanguageCode
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None
    category_id: str | None = None
    product_id: str | None = None
    question_id: str | None = None

    @model_validator(mode="after")
    def check_single_owner(self) -> "TranslationCreate":
        owners = [field for field in TRANSLATION_OWNER_FIELDS if getattr(self, field)]
        if len(owners) != 1:
            raise ValueError(
                "exactly one of category_id, product_id or question_id must be set"
            )
        return self


class TranslationUpdate(CommandInput):
    id: str
    language_code: LanguageCode | None = None
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = None


class FindByEntityInput(CommandInput):
    entity_type: TranslationOwnerField
    entity_id: str = Field(min_length=1)


class TranslationOutput(BaseModel):
    id: str
    language_code: str
    name: str
    description: str | None = None
    category_id: str | None = None
    product_id: str | None = None
    question_id: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
