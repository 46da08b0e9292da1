"""
Translation Service.

Translations are attached to exactly one category, product or question and
are hard-deleted.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from catalog_service.models import Category, Product, Question, Translation
from catalog_service.schemas import TranslationOutput
from catalog_service.services.base_service import BaseService
from catalog_service.services.crud.repository import BaseRepository
from shared.config.constants import TRANSLATION_OWNER_FIELDS
from shared.config.logging import get_logger
from shared.utils.exceptions import NotFoundError, ValidationError

logger = get_logger(__name__)

_OWNER_MODELS = {
    "category_id": (Category, "Category"),
    "product_id": (Product, "Product"),
    "question_id": (Question, "Question"),
}


class TranslationService(BaseService[Translation]):
    def __init__(self, db: Session, events=None):
        super().__init__(db, Translation, events=events)

    def create(self, data: dict[str, Any]) -> TranslationOutput:
        """
        Create a translation for a live owner.

        Raises:
            NotFoundError: If the owner is missing or soft-deleted.
            DuplicateEntityError: If the owner already has this language.
        """
        for field_name in TRANSLATION_OWNER_FIELDS:
            owner_id = data.get(field_name)
            if owner_id:
                model, label = _OWNER_MODELS[field_name]
                if not BaseRepository(model, self._db).exists(owner_id):
                    raise NotFoundError(label, owner_id)

        translation = self._repo.add(Translation(**data))
        self._commit("create", "Translation")
        self._db.refresh(translation)
        return TranslationOutput.model_validate(translation)

    def find_all_by_entity(self, entity_type: str, entity_id: str) -> list[TranslationOutput]:
        if entity_type not in TRANSLATION_OWNER_FIELDS:
            raise ValidationError(
                f"entity_type must be one of: {', '.join(TRANSLATION_OWNER_FIELDS)}",
                field="entity_type",
            )
        translations = self._repo.find_all(
            where=[getattr(Translation, entity_type) == entity_id],
            order_by=Translation.language_code,
        )
        return [TranslationOutput.model_validate(t) for t in translations]

    def find_one(self, translation_id: str) -> TranslationOutput:
        return TranslationOutput.model_validate(self._get_or_404(translation_id))

    def update(self, translation_id: str, data: dict[str, Any]) -> TranslationOutput:
        translation = self._get_or_404(translation_id)
        self._reject_nulls(data)
        for field_name, value in data.items():
            setattr(translation, field_name, value)
        self._commit("update", "Translation")
        self._db.refresh(translation)
        return TranslationOutput.model_validate(translation)

    def delete(self, translation_id: str) -> TranslationOutput:
        """Hard delete; returns the deleted row."""
        translation = self._get_or_404(translation_id)
        deleted = TranslationOutput.model_validate(translation)
        self._repo.delete(translation)
        self._commit("delete", "Translation")
        logger.info("Translation deleted", translation_id=translation_id)
        return deleted

    def _get_or_404(self, translation_id: str) -> Translation:
        translation = self._repo.find_by_id(translation_id)
        if translation is None:
            raise NotFoundError("Translation", translation_id)
        return translation
