"""
Question tree expansion.

A product can ask questions (QuestionProduct rows with item_type QUESTION);
each question offers answer products (rows with item_type ANSWER), which can
ask questions of their own. Expansion walks that graph depth-first and builds:

    [
        {...question, "answers": [
            {...answer product, "questions": [...]},
        ]},
    ]

The walk keeps the product ids on the current path. An answer product that
is already an ancestor is emitted with `questions: []` instead of being
expanded again; siblings sharing a product still expand fully.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_service.models import Product, Question, QuestionProduct
from catalog_service.schemas import AnswerProductOutput, QuestionNodeOutput
from shared.config.constants import ItemType
from shared.config.logging import get_logger

logger = get_logger(__name__)


class QuestionTreeExpander:
    """
    Read-only expander over QuestionProduct.

    Usage:
        questions = QuestionTreeExpander(db).expand(product.id)
    """

    def __init__(self, db: Session):
        self._db = db

    def expand(self, product_id: str) -> list[QuestionNodeOutput]:
        """Questions of a product with their answers expanded recursively."""
        return self._expand_node(product_id, frozenset({product_id}))

    def _expand_node(self, product_id: str, path: frozenset[str]) -> list[QuestionNodeOutput]:
        nodes: list[QuestionNodeOutput] = []
        for question in self._questions_of(product_id):
            answers: list[AnswerProductOutput] = []
            for answer in self._answers_of(question.id):
                if answer.id in path:
                    logger.warning(
                        "Question tree cycle, answer not expanded",
                        product_id=product_id,
                        question_id=question.id,
                        answer_product_id=answer.id,
                    )
                    questions: list[QuestionNodeOutput] = []
                else:
                    questions = self._expand_node(answer.id, path | {answer.id})
                answers.append(self._answer_output(answer, questions))
            nodes.append(self._question_output(question, answers))
        return nodes

    def _questions_of(self, product_id: str) -> Sequence[Question]:
        """Live questions asked about a product, by position."""
        query = (
            select(Question)
            .join(QuestionProduct, QuestionProduct.question_id == Question.id)
            .where(
                QuestionProduct.product_id == product_id,
                QuestionProduct.item_type == ItemType.QUESTION,
                Question.deleted_at.is_(None),
            )
            .order_by(QuestionProduct.position, QuestionProduct.created_at, QuestionProduct.id)
        )
        return self._db.scalars(query).all()

    def _answers_of(self, question_id: str) -> Sequence[Product]:
        """Live answer products of a question, by position."""
        query = (
            select(Product)
            .join(QuestionProduct, QuestionProduct.product_id == Product.id)
            .where(
                QuestionProduct.question_id == question_id,
                QuestionProduct.item_type == ItemType.ANSWER,
                Product.deleted_at.is_(None),
            )
            .order_by(QuestionProduct.position, QuestionProduct.created_at, QuestionProduct.id)
        )
        return self._db.scalars(query).all()

    @staticmethod
    def _question_output(
        question: Question, answers: list[AnswerProductOutput]
    ) -> QuestionNodeOutput:
        node = QuestionNodeOutput.model_validate(question)
        node.answers = answers
        return node

    @staticmethod
    def _answer_output(
        product: Product, questions: list[QuestionNodeOutput]
    ) -> AnswerProductOutput:
        node = AnswerProductOutput.model_validate(product)
        node.questions = questions
        return node
