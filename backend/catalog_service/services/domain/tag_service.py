"""
Tag Service.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog_service.models import Product, ProductTag, Tag
from catalog_service.schemas import ProductSummary, TagOutput, TagUsageOutput, TagWithProductsOutput
from catalog_service.services.base_service import BaseCRUDService
from shared.config.constants import Limits
from shared.utils.pagination import Pagination, PaginatedResponse


class TagService(BaseCRUDService[Tag, TagOutput]):
    """
    Service for tags.

    Business rules:
    - Tag names are unique (409 on duplicates)
    - find_all and find_one include the live products linked to each tag
    """

    def __init__(self, db: Session, events=None):
        super().__init__(
            db=db,
            model=Tag,
            output_schema=TagOutput,
            entity_name="Tag",
            order_by=Tag.name,
            events=events,
        )

    def find_all(self, pagination: Pagination) -> dict[str, Any]:
        tags = self._repo.find_all(
            limit=pagination.limit,
            offset=pagination.offset,
            order_by=Tag.name,
        )
        return PaginatedResponse(
            items=[self._with_products(tag) for tag in tags],
            pagination=pagination,
            total=self._repo.count(),
        ).to_dict()

    def find_one(self, entity_id: str) -> TagWithProductsOutput:
        return self._with_products(self.get_entity_or_404(entity_id))

    def find_by_product_id(self, product_id: str) -> list[TagOutput]:
        """Live tags linked to a product, by name."""
        tags = self._repo.find_all(
            where=[
                Tag.id.in_(select(ProductTag.tag_id).where(ProductTag.product_id == product_id))
            ],
            order_by=Tag.name,
        )
        return [self.to_output(tag) for tag in tags]

    def get_most_used(self, limit: int = Limits.DEFAULT_MOST_USED_TAGS) -> list[TagUsageOutput]:
        """Live tags ordered by number of linked products, most used first."""
        product_count = func.count(ProductTag.product_id).label("product_count")
        rows = self._db.execute(
            select(Tag.id, Tag.name, product_count)
            .join(ProductTag, ProductTag.tag_id == Tag.id)
            .where(Tag.deleted_at.is_(None))
            .group_by(Tag.id, Tag.name)
            .order_by(product_count.desc(), Tag.name)
            .limit(limit)
        ).all()
        return [
            TagUsageOutput(id=row.id, name=row.name, product_count=row.product_count)
            for row in rows
        ]

    def validate_tags(self, ids: Sequence[str]) -> list[TagOutput]:
        return self.validate_ids(ids)

    def _with_products(self, tag: Tag) -> TagWithProductsOutput:
        products = self._db.scalars(
            select(Product)
            .join(ProductTag, ProductTag.product_id == Product.id)
            .where(ProductTag.tag_id == tag.id, Product.deleted_at.is_(None))
            .order_by(Product.name)
        ).all()
        return TagWithProductsOutput(
            **self.to_output(tag).model_dump(),
            products=[ProductSummary.model_validate(p) for p in products],
        )
