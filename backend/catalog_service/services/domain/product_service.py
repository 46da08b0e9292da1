"""
Product Service.

Handles product CRUD, batch validation and the product detail view:
recipe, tags, sizes, schedules, images, translations and the expanded
question tree.

Usage:
    from catalog_service.services.domain import ProductService

    service = ProductService(db, events=CatalogEventPublisher())
    detail = service.find_one(product_id)
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_service.models import (
    Ingredient,
    Product,
    ProductImage,
    ProductRecipe,
    ProductSchedule,
    ProductSize,
    ProductTag,
    Tag,
    Translation,
)
from catalog_service.schemas import (
    ProductDetailOutput,
    ProductImageOutput,
    ProductOutput,
    ProductResourcesOutput,
    ProductScheduleOutput,
    ProductSizeOutput,
    RecipeLineOutput,
    TagSummary,
    TranslationOutput,
)
from catalog_service.services.base_service import BaseCRUDService
from catalog_service.services.catalog import QuestionTreeExpander
from shared.config.constants import CatalogEvents
from shared.config.logging import get_logger

logger = get_logger(__name__)


class ProductService(BaseCRUDService[Product, ProductOutput]):
    """
    Service for products.

    Business rules:
    - Only ACTIVE products are listed and searched
    - find_one returns any live product, whatever its status
    - Soft delete moves the product to INACTIVE
    - Create and update publish product events after commit
    """

    def __init__(self, db: Session, events=None):
        super().__init__(
            db=db,
            model=Product,
            output_schema=ProductOutput,
            entity_name="Product",
            order_by=Product.name,
            events=events,
        )

    # =========================================================================
    # Query Methods
    # =========================================================================

    def find_one(self, entity_id: str) -> ProductDetailOutput:
        """Product detail view with its question tree expanded."""
        product = self.to_output(self.get_entity_or_404(entity_id))
        return ProductDetailOutput(
            **dict(self._with_resources(product)),
            questions=QuestionTreeExpander(self._db).expand(product.id),
        )

    def validate_products(self, ids: Sequence[str]) -> list[ProductResourcesOutput]:
        """
        Resolve a batch of product ids (duplicates collapsed) with their
        recipe, tags, sizes, schedules, images and translations.

        Raises:
            MissingEntitiesError: 400 listing the ids that were not found.
        """
        return [self._with_resources(product) for product in self.validate_ids(ids)]

    def _with_resources(self, product: ProductOutput) -> ProductResourcesOutput:
        sizes = self._db.scalars(
            select(ProductSize)
            .where(ProductSize.product_id == product.id, ProductSize.status.is_(True))
            .order_by(ProductSize.name)
        )
        schedules = self._db.scalars(
            select(ProductSchedule)
            .where(ProductSchedule.product_id == product.id)
            .order_by(ProductSchedule.day_of_week, ProductSchedule.start_time)
        )
        images = self._db.scalars(
            select(ProductImage)
            .where(ProductImage.product_id == product.id)
            .order_by(ProductImage.is_primary.desc(), ProductImage.created_at)
        )
        translations = self._db.scalars(
            select(Translation)
            .where(Translation.product_id == product.id)
            .order_by(Translation.language_code)
        )

        # Built from the scalar shape: the ORM relationships of the same
        # names hold link rows, not the detail shapes
        return ProductResourcesOutput(
            **product.model_dump(),
            recipe=self._recipe_lines(product.id),
            tags=[TagSummary.model_validate(t) for t in self._tags(product.id)],
            sizes=[ProductSizeOutput.model_validate(s) for s in sizes],
            schedules=[ProductScheduleOutput.model_validate(s) for s in schedules],
            images=[ProductImageOutput.model_validate(i) for i in images],
            translations=[TranslationOutput.model_validate(t) for t in translations],
        )

    def _recipe_lines(self, product_id: str) -> list[RecipeLineOutput]:
        rows = self._db.execute(
            select(ProductRecipe, Ingredient.name)
            .join(Ingredient, Ingredient.id == ProductRecipe.ingredient_id)
            .where(
                ProductRecipe.product_id == product_id,
                Ingredient.deleted_at.is_(None),
                Ingredient.status.is_(True),
            )
            .order_by(Ingredient.name)
        ).all()
        return [
            RecipeLineOutput(
                id=line.id,
                ingredient_id=line.ingredient_id,
                ingredient_name=ingredient_name,
                quantity=line.quantity,
                unit=line.unit,
            )
            for line, ingredient_name in rows
        ]

    def _tags(self, product_id: str) -> Sequence[Tag]:
        return self._db.scalars(
            select(Tag)
            .join(ProductTag, ProductTag.tag_id == Tag.id)
            .where(ProductTag.product_id == product_id, Tag.deleted_at.is_(None))
            .order_by(Tag.name)
        ).all()

    # =========================================================================
    # Lifecycle Hooks
    # =========================================================================

    def _after_create(self, entity: Product) -> None:
        logger.info("Product created", product_id=entity.id, sku=entity.sku)
        self._publish(CatalogEvents.PRODUCT_CREATED, entity.id)

    def _after_update(self, entity: Product) -> None:
        self._publish(CatalogEvents.PRODUCT_UPDATED, entity.id)
