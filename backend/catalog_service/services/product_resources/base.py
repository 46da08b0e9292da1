"""
Base service for product sub-resources.

Sizes, images, schedules, recipe lines, tag links and question links share
one contract:

    create(data)                      -> {message, product_id, <key>: row}
    find_by_product_id(product_id)    -> [row, ...]
    find_one(id)                      -> row
    update(id, data)                  -> {message, product_id, <key>: row}
    remove(id)                        -> {message, product_id, deleted_count: 1}
    remove_by_product_id(product_id)  -> {message, product_id, deleted_count}
    bulk_create(product_id, items)    -> {message, product_id, created_count}
    replace_by_product_id(...)        -> {message, product_id, deleted_count, created_count}

Rows are physically deleted. replace_by_product_id deletes and inserts in a
single transaction: if the insert fails the delete is rolled back too.
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from catalog_service.models import Base, Product
from catalog_service.services.base_service import BaseService
from catalog_service.services.crud.repository import BaseRepository
from shared.config.logging import get_logger
from shared.utils.exceptions import NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


class ProductResourceService(BaseService[ModelT], Generic[ModelT, OutputT]):
    """
    Subclasses set the class attributes and override the hooks they need.

    Attributes:
        model: ORM model of the sub-resource.
        output_schema: Reply schema of one row.
        entity_name: Human-readable name ("Product size").
        entity_plural: Plural used in batch messages ("product sizes").
        response_key: Key holding the row in create/update replies.
        created_event: Event published after create and non-empty bulk create.
    """

    model: ClassVar[type]
    output_schema: ClassVar[type[BaseModel]]
    entity_name: ClassVar[str]
    entity_plural: ClassVar[str]
    response_key: ClassVar[str]
    created_event: ClassVar[str | None] = None

    def __init__(self, db: Session, events=None):
        super().__init__(db, self.model, events=events)

    # =========================================================================
    # Reads
    # =========================================================================

    def find_by_product_id(self, product_id: str) -> list[Any]:
        rows = self._repo.find_all(
            where=[self.model.product_id == product_id, *self._listing_filter()],
            order_by=self._listing_order(),
        )
        return [self.to_output(row) for row in rows]

    def find_one(self, entity_id: str) -> OutputT:
        return self.to_output(self._get_or_404(entity_id))

    # =========================================================================
    # Single-row writes
    # =========================================================================

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Create one row for a live product.

        Raises:
            NotFoundError: If the product is missing or soft-deleted.
        """
        product_id = data["product_id"]
        self._ensure_product(product_id)
        item = {k: v for k, v in data.items() if k != "product_id"}
        self._validate_items(product_id, [item])

        row = self._repo.add(self._build(product_id, item, 0))
        self._before_commit_create(row)
        self._commit("create", self.entity_name)
        self._db.refresh(row)

        logger.info(f"{self.entity_name} created", product_id=product_id)
        if self.created_event:
            self._publish(self.created_event, product_id)
        return self._reply(f"{self.entity_name} was created successfully", row)

    def update(self, entity_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Apply the given fields to one row.

        Raises:
            NotFoundError: If the row does not exist (before any write).
        """
        row = self._get_or_404(entity_id)
        self._reject_nulls(data)
        self._validate_update(row, data)
        for field_name, value in data.items():
            setattr(row, field_name, value)
        self._before_commit_update(row, data)
        self._commit("update", self.entity_name)
        self._db.refresh(row)
        return self._reply(f"{self.entity_name} was updated successfully", row)

    def remove(self, entity_id: str) -> dict[str, Any]:
        row = self._get_or_404(entity_id)
        product_id = row.product_id
        self._repo.delete(row)
        self._commit("delete", self.entity_name)
        logger.info(f"{self.entity_name} deleted", entity_id=entity_id, product_id=product_id)
        return {
            "message": f"{self.entity_name} {entity_id} was deleted successfully",
            "product_id": product_id,
            "deleted_count": 1,
        }

    # =========================================================================
    # Batch writes
    # =========================================================================

    def remove_by_product_id(self, product_id: str) -> dict[str, Any]:
        deleted = self._repo.delete_where(self.model.product_id == product_id)
        self._commit("delete", self.entity_name)
        logger.info(f"{self.entity_plural} deleted", product_id=product_id, count=deleted)
        return {
            "message": f"{deleted} {self.entity_plural} for product {product_id} were deleted successfully",
            "product_id": product_id,
            "deleted_count": deleted,
        }

    def bulk_create(self, product_id: str, items: Sequence[dict[str, Any]]) -> dict[str, Any]:
        self._ensure_product(product_id)
        self._validate_items(product_id, items)

        rows = self._build_all(product_id, items)
        self._repo.add_all(rows)
        self._commit("bulk create", self.entity_name)

        self._after_bulk_create(product_id, len(rows))
        return {
            "message": f"{len(rows)} {self.entity_plural} for product {product_id} have been created successfully",
            "product_id": product_id,
            "created_count": len(rows),
        }

    def replace_by_product_id(
        self, product_id: str, items: Sequence[dict[str, Any]]
    ) -> dict[str, Any]:
        """
        Replace every row of a product with `items` in one transaction.

        Validation runs before the delete; a failed insert rolls the
        delete back so the previous set survives.
        """
        self._ensure_product(product_id)
        self._validate_items(product_id, items)

        deleted = self._repo.delete_where(self.model.product_id == product_id)
        rows = self._build_all(product_id, items)
        self._repo.add_all(rows)
        self._commit("replace", self.entity_name)

        logger.info(
            f"{self.entity_plural} replaced",
            product_id=product_id,
            deleted=deleted,
            created=len(rows),
        )
        self._after_bulk_create(product_id, len(rows))
        return {
            "message": f"{self.entity_plural} for product {product_id} were replaced successfully",
            "product_id": product_id,
            "deleted_count": deleted,
            "created_count": len(rows),
        }

    # =========================================================================
    # Hooks (override in subclasses)
    # =========================================================================

    def _listing_filter(self) -> list[Any]:
        """Extra filter for find_by_product_id."""
        return []

    def _listing_order(self) -> Any:
        """Order of find_by_product_id."""
        return self.model.id

    def _validate_items(self, product_id: str, items: Sequence[dict[str, Any]]) -> None:
        """Validate rows about to be inserted. Raise to reject the whole batch."""
        pass

    def _validate_update(self, row: ModelT, data: dict[str, Any]) -> None:
        pass

    def _build(self, product_id: str, item: dict[str, Any], index: int) -> ModelT:
        return self.model(product_id=product_id, **item)

    def _before_commit_create(self, row: ModelT) -> None:
        pass

    def _before_commit_update(self, row: ModelT, data: dict[str, Any]) -> None:
        pass

    def _after_bulk_create(self, product_id: str, count: int) -> None:
        if self.created_event and count > 0:
            self._publish(self.created_event, product_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def to_output(self, row: ModelT) -> Any:
        return self.output_schema.model_validate(row)

    def _reply(self, message: str, row: ModelT) -> dict[str, Any]:
        return {
            "message": message,
            "product_id": row.product_id,
            self.response_key: self.to_output(row),
        }

    def _build_all(self, product_id: str, items: Sequence[dict[str, Any]]) -> list[ModelT]:
        return [self._build(product_id, item, index) for index, item in enumerate(items)]

    def _get_or_404(self, entity_id: str) -> ModelT:
        row = self._repo.find_by_id(entity_id)
        if row is None:
            raise NotFoundError(self.entity_name, entity_id)
        return row

    def _ensure_product(self, product_id: str) -> None:
        if not BaseRepository(Product, self._db).exists(product_id):
            raise NotFoundError("Product", product_id)
