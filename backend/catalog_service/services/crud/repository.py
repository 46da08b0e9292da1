"""
Repository Pattern for database access.

Provides a thin layer between services and SQLAlchemy with the catalog's
soft-delete default scope built in: rows with deleted_at set are never
returned unless a caller asks for them explicitly.

Usage:
    from catalog_service.services.crud.repository import BaseRepository

    product_repo = BaseRepository(Product, db)
    products = product_repo.find_all(limit=10, offset=0, order_by=Product.name)
    product = product_repo.find_by_id(product_id)

    # Only live rows that also pass the model's active predicate
    total = product_repo.count(active_only=True)
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import delete, exists as sql_exists, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from catalog_service.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Repository providing common database operations for one model.

    Nothing here commits; services own the transaction.
    """

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> Session:
        """The database session."""
        return self._session

    @property
    def soft_deletable(self) -> bool:
        return hasattr(self._model, "deleted_at")

    # =========================================================================
    # Query building
    # =========================================================================

    def _scope(self, query: Select, *, include_deleted: bool = False) -> Select:
        """Apply the soft-delete default scope."""
        if self.soft_deletable and not include_deleted:
            query = query.where(self._model.deleted_at.is_(None))
        return query

    def _apply_active_filter(self, query: Select, active_only: bool) -> Select:
        """Apply the model's active predicate (status, is_active) if it has one."""
        if active_only and hasattr(self._model, "active_clause"):
            clause = self._model.active_clause()
            if clause is not None:
                query = query.where(clause)
        return query

    def _apply_options(self, query: Select, options: list[Any] | None) -> Select:
        """Apply eager loading options."""
        if options:
            query = query.options(*options)
        return query

    def _filtered(
        self,
        query: Select,
        where: Sequence[Any] | None,
        *,
        active_only: bool,
        include_deleted: bool = False,
    ) -> Select:
        query = self._scope(query, include_deleted=include_deleted)
        query = self._apply_active_filter(query, active_only)
        if where:
            query = query.where(*where)
        return query

    # =========================================================================
    # Reads
    # =========================================================================

    def find_by_id(
        self,
        entity_id: Any,
        *,
        options: list[Any] | None = None,
        active_only: bool = False,
        include_deleted: bool = False,
    ) -> ModelT | None:
        """
        Find entity by primary key.

        Only the soft-delete scope applies by default: an inactive but
        not deleted row is still found.
        """
        query = select(self._model).where(self._model.id == entity_id)
        query = self._filtered(
            query, None, active_only=active_only, include_deleted=include_deleted
        )
        query = self._apply_options(query, options)
        return self._session.scalar(query)

    def find_one_where(
        self,
        *where: Any,
        options: list[Any] | None = None,
    ) -> ModelT | None:
        query = self._filtered(select(self._model), where, active_only=False)
        query = self._apply_options(query, options)
        return self._session.scalar(query)

    def find_all(
        self,
        *,
        where: Sequence[Any] | None = None,
        options: list[Any] | None = None,
        active_only: bool = True,
        limit: int | None = None,
        offset: int | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelT]:
        """
        Find live entities.

        Args:
            where: Extra filter expressions.
            options: SQLAlchemy loader options.
            active_only: Also apply the model's active predicate.
            limit: Maximum number of results.
            offset: Number of results to skip.
            order_by: Column, expression or tuple of them.

        Returns:
            Sequence of entities.
        """
        query = self._filtered(select(self._model), where, active_only=active_only)
        query = self._apply_options(query, options)

        if order_by is not None:
            if isinstance(order_by, (list, tuple)):
                query = query.order_by(*order_by)
            else:
                query = query.order_by(order_by)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return self._session.scalars(query).all()

    def count(
        self,
        *,
        where: Sequence[Any] | None = None,
        active_only: bool = True,
    ) -> int:
        """Count live entities matching the same filters as find_all."""
        query = select(func.count()).select_from(self._model)
        query = self._filtered(query, where, active_only=active_only)
        return self._session.scalar(query) or 0

    def name_filter(self, name: str) -> list[Any]:
        """
        Case-insensitive substring match on `name`; empty matches everything.

        `%` and `_` in the search text match literally.
        """
        if not name:
            return []
        escaped = name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return [self._model.name.ilike(f"%{escaped}%", escape="\\")]

    def exists(self, entity_id: Any) -> bool:
        """Check if a live entity exists by ID."""
        condition = self._model.id == entity_id
        if self.soft_deletable:
            condition = condition & self._model.deleted_at.is_(None)
        return self._session.scalar(select(sql_exists().where(condition))) or False

    def find_by_ids(
        self,
        ids: Sequence[Any],
        *,
        active_only: bool = False,
    ) -> Sequence[ModelT]:
        """Live entities whose id is in `ids`; missing ids are simply absent."""
        if not ids:
            return []
        query = self._filtered(
            select(self._model),
            [self._model.id.in_(list(ids))],
            active_only=active_only,
        )
        return self._session.scalars(query).all()

    # =========================================================================
    # Writes (not committed)
    # =========================================================================

    def add(self, entity: ModelT) -> ModelT:
        """Add entity to session (not committed)."""
        self._session.add(entity)
        return entity

    def add_all(self, entities: Sequence[ModelT]) -> Sequence[ModelT]:
        """Add multiple entities to session (not committed)."""
        self._session.add_all(entities)
        return entities

    def delete(self, entity: ModelT) -> None:
        """Delete entity from session (not committed)."""
        self._session.delete(entity)

    def delete_where(self, *where: Any) -> int:
        """
        Bulk physical delete; returns the number of rows removed.

        The session default synchronize_session ("auto") drops matching
        objects from the identity map, so they read as deleted afterwards.
        """
        result = self._session.execute(delete(self._model).where(*where))
        return result.rowcount or 0

    def flush(self) -> None:
        self._session.flush()

    def refresh(self, entity: ModelT) -> ModelT:
        """Refresh entity from database."""
        self._session.refresh(entity)
        return entity
