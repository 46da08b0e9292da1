"""
Base Service Classes.

Provides the uniform CRUD contract every catalog entity follows:
- find_all / search_by_name: paginated, live and active rows only
- find_one: live row or NotFoundError
- create / update / remove: validated, committed, then post-commit hooks
  (event publishing)

Architecture:
    Handler (thin) → Service (business logic) → Repository (data access) → Model

Usage:
    from catalog_service.services.base_service import BaseCRUDService

    class TagService(BaseCRUDService[Tag, TagOutput]):
        def __init__(self, db: Session, events=None):
            super().__init__(
                db=db,
                model=Tag,
                output_schema=TagOutput,
                entity_name="Tag",
                order_by=Tag.name,
                events=events,
            )
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Generic, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_service.models import Base
from catalog_service.services.crud.repository import BaseRepository
from catalog_service.services.events import CatalogEventPublisher
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    DatabaseError,
    DuplicateEntityError,
    MissingEntitiesError,
    NotFoundError,
    ValidationError,
)
from shared.utils.pagination import Pagination, PaginatedResponse

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


def _is_not_null_violation(error: IntegrityError) -> bool:
    # psycopg exposes the SQLSTATE, sqlite3 only the message
    sqlstate = getattr(error.orig, "sqlstate", None)
    if sqlstate is not None:
        return sqlstate == "23502"
    return "NOT NULL constraint failed" in str(error.orig)


class BaseService(Generic[ModelT]):
    """
    Base service for domain operations.

    Owns the session, the repository and the event publisher.
    """

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        *,
        events: CatalogEventPublisher | None = None,
    ):
        self._db = db
        self._model = model
        self._repo = BaseRepository(model, db)
        self._events = events

    @property
    def db(self) -> Session:
        """Database session."""
        return self._db

    @property
    def repo(self) -> BaseRepository[ModelT]:
        """Repository for data access."""
        return self._repo

    def _commit(self, operation: str, entity_name: str) -> None:
        """
        Commit the session, translating store failures.

        A NOT NULL violation becomes a 400, any other IntegrityError
        (unique or foreign key violation) a 409, and any other SQLAlchemy
        failure a DatabaseError.
        """
        try:
            safe_commit(self._db)
        except IntegrityError as e:
            logger.warning(
                f"Integrity error during {operation}",
                entity=entity_name,
                error=str(e.orig),
            )
            if _is_not_null_violation(e):
                raise ValidationError(f"{entity_name} is missing a required field") from e
            raise DuplicateEntityError(entity_name) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to {operation}", entity=entity_name, error=str(e))
            raise DatabaseError(f"{operation} {entity_name.lower()}") from e

    def _reject_nulls(self, data: dict[str, Any]) -> None:
        """
        Refuse an explicit null for a NOT NULL column before any write.

        Raises:
            ValidationError: Naming the first offending field.
        """
        columns = sa_inspect(self._model).columns
        for field_name, value in data.items():
            if value is None and field_name in columns and not columns[field_name].nullable:
                raise ValidationError(f"{field_name} cannot be null", field=field_name)

    def _publish(self, event_type: str, product_id: str) -> None:
        """Publish a catalog event if an event publisher was injected."""
        if self._events is not None:
            self._events.publish(event_type, product_id)


class BaseCRUDService(BaseService[ModelT], Generic[ModelT, OutputT]):
    """
    Base service for soft-deletable entities with CRUD operations.

    Responsibilities:
    - Data access via Repository (not direct queries)
    - DTO transformation via output schema
    - Audit fields for mutations
    - Validation and post-commit hooks for subclasses
    """

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        output_schema: Type[OutputT],
        entity_name: str,
        *,
        entity_plural: str | None = None,
        order_by: Any | None = None,
        events: CatalogEventPublisher | None = None,
    ):
        super().__init__(db, model, events=events)
        self._output_schema = output_schema
        self._entity_name = entity_name
        self._entity_plural = entity_plural or f"{entity_name.lower()}s"
        self._order_by = order_by

    @property
    def entity_name(self) -> str:
        """Human-readable entity name for messages."""
        return self._entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    def find_all(self, pagination: Pagination) -> dict[str, Any]:
        """Page of live, active entities: `{list, meta: {total, page, last_page}}`."""
        return self._paginate(pagination, where=None)

    def search_by_name(self, name: str, pagination: Pagination) -> dict[str, Any]:
        """Case-insensitive substring search with the same shape as find_all."""
        return self._paginate(pagination, where=self._repo.name_filter(name))

    def find_one(self, entity_id: str) -> OutputT:
        """
        Get a live entity by ID.

        Raises:
            NotFoundError: If the entity is missing or soft-deleted.
        """
        return self.to_output(self.get_entity_or_404(entity_id))

    def get_entity_or_404(self, entity_id: str, *, options: list[Any] | None = None) -> ModelT:
        entity = self._repo.find_by_id(entity_id, options=options)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    def validate_ids(
        self,
        ids: Sequence[str],
        *,
        active_only: bool = False,
        missing_status: int = HTTPStatus.BAD_REQUEST,
    ) -> list[OutputT]:
        """
        Resolve a batch of ids, de-duplicated in input order.

        Raises:
            MissingEntitiesError: If any id does not resolve to a live entity.
        """
        unique_ids = list(dict.fromkeys(ids))
        found = {e.id: e for e in self._repo.find_by_ids(unique_ids, active_only=active_only)}
        missing = [entity_id for entity_id in unique_ids if entity_id not in found]
        if missing:
            raise MissingEntitiesError(self._entity_plural, missing, status_code=missing_status)
        return [self.to_output(found[entity_id]) for entity_id in unique_ids]

    def _paginate(
        self,
        pagination: Pagination,
        *,
        where: list[Any] | None,
        options: list[Any] | None = None,
    ) -> dict[str, Any]:
        entities = self._repo.find_all(
            where=where,
            options=options,
            limit=pagination.limit,
            offset=pagination.offset,
            order_by=self._order_by,
        )
        total = self._repo.count(where=where)
        return PaginatedResponse(
            items=[self.to_output(e) for e in entities],
            pagination=pagination,
            total=total,
        ).to_dict()

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: dict[str, Any]) -> OutputT:
        """
        Create a new entity.

        Raises:
            ValidationError: If a hook rejects the data.
            DuplicateEntityError: If a unique constraint is violated.
        """
        data = dict(data)
        created_by = data.pop("created_by", None)
        self._validate_create(data)

        entity = self._model(**data)
        entity.set_created_by(created_by)
        self._repo.add(entity)

        self._commit("create", self._entity_name)
        self._db.refresh(entity)

        self._after_create(entity)
        return self.to_output(entity)

    def update(self, entity_id: str, data: dict[str, Any], updated_by: str | None = None) -> OutputT:
        """
        Apply the given fields to a live entity.

        Raises:
            NotFoundError: If the entity is missing or soft-deleted (before any write).
        """
        entity = self.get_entity_or_404(entity_id)
        self._reject_nulls(data)
        self._validate_update(entity, data)

        for field_name, value in data.items():
            if hasattr(entity, field_name):
                setattr(entity, field_name, value)
        entity.set_updated_by(updated_by)

        self._commit("update", self._entity_name)
        self._db.refresh(entity)

        self._after_update(entity)
        return self.to_output(entity)

    def remove(self, entity_id: str, deleted_by: str | None = None) -> OutputT:
        """
        Soft delete a live entity and return it.

        Raises:
            NotFoundError: If the entity is missing or already soft-deleted.
        """
        entity = self.get_entity_or_404(entity_id)
        self._validate_delete(entity)

        entity.soft_delete(deleted_by)
        self._commit("delete", self._entity_name)
        self._db.refresh(entity)

        logger.info(f"{self._entity_name} soft-deleted", entity_id=entity_id, deleted_by=deleted_by)
        return self.to_output(entity)

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        """
        Convert entity to output DTO.

        Override this method for custom transformation logic.
        """
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Validation Hooks (override in subclasses)
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> None:
        """Validate data before create. Raise ValidationError to reject."""
        pass

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> None:
        """Validate data before update. Raise ValidationError to reject."""
        pass

    def _validate_delete(self, entity: ModelT) -> None:
        """Validate before delete. Raise ValidationError to reject."""
        pass

    # =========================================================================
    # Lifecycle Hooks (override in subclasses)
    # =========================================================================

    def _after_create(self, entity: ModelT) -> None:
        """Hook called after the create commit. Override for side effects."""
        pass

    def _after_update(self, entity: ModelT) -> None:
        """Hook called after the update commit. Override for side effects."""
        pass
