"""
Product image service.

A product has at most one primary image: making an image primary clears
the flag on every other image of the product in the same transaction.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import update

from catalog_service.models import ProductImage
from catalog_service.schemas import ProductImageOutput
from shared.utils.exceptions import NotFoundError
from .base import ProductResourceService


class ProductImageService(ProductResourceService[ProductImage, ProductImageOutput]):
    model = ProductImage
    output_schema = ProductImageOutput
    entity_name = "Product image"
    entity_plural = "product images"
    response_key = "image"

    def _listing_order(self):
        return (ProductImage.is_primary.desc(), ProductImage.created_at, ProductImage.id)

    def set_primary(self, product_id: str, image_id: str) -> dict[str, Any]:
        """
        Make one image the product's primary image.

        Raises:
            NotFoundError: If the image does not exist or belongs to another product.
        """
        image = self._repo.find_one_where(
            ProductImage.id == image_id,
            ProductImage.product_id == product_id,
        )
        if image is None:
            raise NotFoundError("Product image", image_id, product_id=product_id)

        self._clear_primary(product_id, keep_id=image.id)
        image.is_primary = True
        self._commit("set primary", self.entity_name)
        self._db.refresh(image)
        return self._reply(f"Image {image.id} is now primary for product {product_id}", image)

    def _before_commit_create(self, row: ProductImage) -> None:
        if row.is_primary:
            self._db.flush()
            self._clear_primary(row.product_id, keep_id=row.id)

    def _before_commit_update(self, row: ProductImage, data: dict[str, Any]) -> None:
        if data.get("is_primary"):
            self._clear_primary(row.product_id, keep_id=row.id)

    def _build_all(self, product_id: str, items: Sequence[dict[str, Any]]) -> list[ProductImage]:
        rows = super()._build_all(product_id, items)
        # Only the last image flagged primary in a batch keeps the flag
        primary = [row for row in rows if row.is_primary]
        for row in primary[:-1]:
            row.is_primary = False
        if primary:
            self._clear_primary(product_id, keep_id=None)
        return rows

    def _clear_primary(self, product_id: str, keep_id: str | None) -> None:
        stmt = update(ProductImage).where(
            ProductImage.product_id == product_id,
            ProductImage.is_primary.is_(True),
        )
        if keep_id is not None:
            stmt = stmt.where(ProductImage.id != keep_id)
        self._db.execute(stmt.values(is_primary=False))
