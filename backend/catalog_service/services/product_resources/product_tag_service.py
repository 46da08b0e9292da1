"""
Product tag link service.

A link is identified by the (product_id, tag_id) pair and has no update.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import select

from catalog_service.models import Product, ProductTag, Tag
from catalog_service.schemas import ProductSummary, ProductTagOutput, TagSummary
from catalog_service.services.crud.repository import BaseRepository
from shared.config.constants import CatalogEvents
from shared.config.logging import get_logger
from shared.utils.exceptions import MissingEntitiesError, NotFoundError
from .base import ProductResourceService

logger = get_logger(__name__)


class ProductTagService(ProductResourceService[ProductTag, ProductTagOutput]):
    model = ProductTag
    output_schema = ProductTagOutput
    entity_name = "Product tag"
    entity_plural = "product tags"
    response_key = "tag"
    created_event = CatalogEvents.PRODUCT_TAG_CREATED

    def find_by_product_id(self, product_id: str) -> list[TagSummary]:
        """Live tags of a product as `[{id, name}]`, by tag name."""
        tags = self._db.scalars(
            select(Tag)
            .join(ProductTag, ProductTag.tag_id == Tag.id)
            .where(ProductTag.product_id == product_id, Tag.deleted_at.is_(None))
            .order_by(Tag.name)
        ).all()
        return [TagSummary.model_validate(tag) for tag in tags]

    def find_by_tag_id(self, tag_id: str) -> list[ProductSummary]:
        """Live products carrying a tag, by product name."""
        products = self._db.scalars(
            select(Product)
            .join(ProductTag, ProductTag.product_id == Product.id)
            .where(ProductTag.tag_id == tag_id, Product.deleted_at.is_(None))
            .order_by(Product.name)
        ).all()
        return [ProductSummary.model_validate(product) for product in products]

    def find_one(self, product_id: str, tag_id: str) -> ProductTagOutput:
        return self.to_output(self._get_link_or_404(product_id, tag_id))

    def remove(self, product_id: str, tag_id: str) -> dict[str, Any]:
        link = self._get_link_or_404(product_id, tag_id)
        self._repo.delete(link)
        self._commit("delete", self.entity_name)
        logger.info("Product tag deleted", product_id=product_id, tag_id=tag_id)
        return {
            "message": f"Tag {tag_id} was removed from product {product_id} successfully",
            "product_id": product_id,
            "deleted_count": 1,
        }

    def _validate_items(self, product_id: str, items: Sequence[dict[str, Any]]) -> None:
        wanted = list(dict.fromkeys(item["tag_id"] for item in items))
        found = {tag.id for tag in BaseRepository(Tag, self._db).find_by_ids(wanted)}
        missing = [tag_id for tag_id in wanted if tag_id not in found]
        if missing:
            raise MissingEntitiesError("tags", missing)

    def _build_all(self, product_id: str, items: Sequence[dict[str, Any]]) -> list[ProductTag]:
        # A repeated tag id would collide on the composite key
        tag_ids = dict.fromkeys(item["tag_id"] for item in items)
        return [ProductTag(product_id=product_id, tag_id=tag_id) for tag_id in tag_ids]

    def _get_link_or_404(self, product_id: str, tag_id: str) -> ProductTag:
        link = self._db.get(ProductTag, (product_id, tag_id))
        if link is None:
            raise NotFoundError("Product tag", f"{product_id}/{tag_id}")
        return link
