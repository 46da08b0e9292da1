"""
Product question link service.

Links with item_type QUESTION attach a question to a product; links with
item_type ANSWER make the product an answer option of the question.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from catalog_service.models import Product, Question, QuestionProduct
from catalog_service.schemas import (
    ProductQuestionDetailOutput,
    ProductQuestionOutput,
    ProductSummary,
    QuestionWithTranslationsOutput,
)
from catalog_service.services.crud.repository import BaseRepository
from shared.config.constants import ItemType
from shared.utils.exceptions import MissingEntitiesError
from .base import ProductResourceService


class ProductQuestionService(ProductResourceService[QuestionProduct, ProductQuestionOutput]):
    model = QuestionProduct
    output_schema = ProductQuestionOutput
    entity_name = "Product question"
    entity_plural = "product questions"
    response_key = "product_question"

    def _listing_order(self):
        return (QuestionProduct.position, QuestionProduct.created_at, QuestionProduct.id)

    def find_by_product_id(self, product_id: str) -> list[ProductQuestionDetailOutput]:
        """Links of a product by position, each with its question and translations."""
        links = self._db.scalars(
            select(QuestionProduct)
            .where(QuestionProduct.product_id == product_id)
            .options(selectinload(QuestionProduct.question).selectinload(Question.translations))
            .order_by(*self._listing_order())
        ).all()
        return [self._detail(link, with_question=True) for link in links]

    def find_by_question_id(self, question_id: str) -> list[ProductQuestionDetailOutput]:
        """Links of a question with their products, by product name."""
        links = self._db.scalars(
            select(QuestionProduct)
            .join(Product, Product.id == QuestionProduct.product_id)
            .where(QuestionProduct.question_id == question_id, Product.deleted_at.is_(None))
            .options(selectinload(QuestionProduct.product))
            .order_by(Product.name, QuestionProduct.position)
        ).all()
        return [self._detail(link, with_product=True) for link in links]

    def find_by_product_id_and_type(
        self, product_id: str, item_type: str
    ) -> list[ProductQuestionDetailOutput]:
        """
        Links of a product with one item type, by position.

        QUESTION links include the question; ANSWER links include the product.
        """
        with_question = item_type == ItemType.QUESTION
        links = self._db.scalars(
            select(QuestionProduct)
            .where(
                QuestionProduct.product_id == product_id,
                QuestionProduct.item_type == item_type,
            )
            .options(
                selectinload(QuestionProduct.question if with_question else QuestionProduct.product)
            )
            .order_by(*self._listing_order())
        ).all()
        return [
            self._detail(link, with_question=with_question, with_product=not with_question)
            for link in links
        ]

    def _build(self, product_id: str, item: dict[str, Any], index: int) -> QuestionProduct:
        item = dict(item)
        if item.get("position") is None:
            item["position"] = index
        return QuestionProduct(product_id=product_id, **item)

    def _validate_items(self, product_id: str, items: Sequence[dict[str, Any]]) -> None:
        self._check_questions([item["question_id"] for item in items])

    def _validate_update(self, row: QuestionProduct, data: dict[str, Any]) -> None:
        if data.get("question_id"):
            self._check_questions([data["question_id"]])

    def _check_questions(self, question_ids: list[str]) -> None:
        wanted = list(dict.fromkeys(question_ids))
        found = {q.id for q in BaseRepository(Question, self._db).find_by_ids(wanted)}
        missing = [question_id for question_id in wanted if question_id not in found]
        if missing:
            raise MissingEntitiesError("questions", missing)

    @staticmethod
    def _detail(
        link: QuestionProduct,
        *,
        with_question: bool = False,
        with_product: bool = False,
    ) -> ProductQuestionDetailOutput:
        question = None
        if with_question:
            question = QuestionWithTranslationsOutput.model_validate(link.question)
        return ProductQuestionDetailOutput(
            id=link.id,
            question_id=link.question_id,
            product_id=link.product_id,
            position=link.position,
            item_type=link.item_type,
            question=question,
            product=ProductSummary.model_validate(link.product) if with_product else None,
        )
