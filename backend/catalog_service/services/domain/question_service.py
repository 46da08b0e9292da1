"""
Question Service.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_service.models import Question, QuestionProduct
from catalog_service.schemas import QuestionDetailOutput, QuestionOutput
from catalog_service.services.base_service import BaseCRUDService
from shared.config.constants import ItemType
from shared.utils.exceptions import ValidationError
from shared.utils.pagination import Pagination


class QuestionService(BaseCRUDService[Question, QuestionOutput]):
    """
    Service for questions.

    Business rules:
    - Only is_active questions are listed; soft delete clears is_active
    - min must not exceed max, also after a partial update
    """

    def __init__(self, db: Session, events=None):
        super().__init__(
            db=db,
            model=Question,
            output_schema=QuestionOutput,
            entity_name="Question",
            order_by=Question.name,
            events=events,
        )

    def find_one(self, entity_id: str) -> QuestionDetailOutput:
        """Question with its translations and product links."""
        return QuestionDetailOutput.model_validate(self.get_entity_or_404(entity_id))

    def find_by_type(self, question_type: str, pagination: Pagination) -> dict[str, Any]:
        return self._paginate(pagination, where=[Question.type == question_type])

    def find_by_product_id(self, product_id: str) -> list[QuestionOutput]:
        """Live, active questions asked about a product, by link position."""
        questions = self._db.scalars(
            select(Question)
            .join(QuestionProduct, QuestionProduct.question_id == Question.id)
            .where(
                QuestionProduct.product_id == product_id,
                QuestionProduct.item_type == ItemType.QUESTION,
                Question.deleted_at.is_(None),
                Question.is_active.is_(True),
            )
            .order_by(QuestionProduct.position, Question.name)
        ).all()
        return [self.to_output(q) for q in questions]

    def validate_questions(self, ids: Sequence[str]) -> list[QuestionOutput]:
        return self.validate_ids(ids)

    def _validate_update(self, entity: Question, data: dict[str, Any]) -> None:
        low = data.get("min", entity.min)
        high = data.get("max", entity.max)
        if low is not None and high is not None and low > high:
            raise ValidationError("min must not exceed max", field="min")
