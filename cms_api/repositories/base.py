"""
Repository Pattern for database access.

Provides a clean abstraction layer between the collection services and the
ORM, with the soft-delete filter and display ordering built in.

Usage:
    from cms_api.repositories import BaseRepository, OrderedRepository

    faq_repo = OrderedRepository(FAQ, db)
    faqs = faq_repo.find_all_ordered()
    next_order = faq_repo.next_order()

    testimonial_repo = BaseRepository(Testimonial, db)
    trash = testimonial_repo.find_deleted()
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from cms_api.models import Base, ORDER_BASE

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common database operations.

    Models with ``is_deleted`` get soft-deleted rows filtered out unless
    ``include_deleted`` is requested.
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
        return hasattr(self._model, "is_deleted")

    def _base_query(self) -> Select:
        return select(self._model)

    def _apply_deleted_filter(self, query: Select, include_deleted: bool) -> Select:
        if self.soft_deletable and not include_deleted:
            query = query.where(self._model.is_deleted.is_(False))
        return query

    def find_by_id(
        self,
        entity_id: str,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> ModelT | None:
        """
        Find entity by primary key.

        Args:
            entity_id: The primary key value.
            include_deleted: Include soft-deleted entities.
            for_update: Lock the row until the transaction ends.
        """
        query = self._base_query().where(self._model.id == entity_id)
        query = self._apply_deleted_filter(query, include_deleted)
        if for_update:
            query = query.with_for_update()
        return self._session.scalar(query)

    def find_all(
        self,
        *,
        include_deleted: bool = False,
        order_by: Any | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[ModelT]:
        query = self._apply_deleted_filter(self._base_query(), include_deleted)

        if order_by is not None:
            query = query.order_by(order_by)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return self._session.scalars(query).all()

    def find_deleted(self, *, deleted_before: Any | None = None) -> Sequence[ModelT]:
        """Trash view: soft-deleted rows, most recently deleted first."""
        if not self.soft_deletable:
            return []
        query = self._base_query().where(self._model.is_deleted.is_(True))
        if deleted_before is not None:
            query = query.where(self._model.deleted_at < deleted_before)
        query = query.order_by(self._model.deleted_at.desc(), self._model.id)
        return self._session.scalars(query).all()

    def count(self, *, include_deleted: bool = False) -> int:
        query = select(func.count()).select_from(self._model)
        if self.soft_deletable and not include_deleted:
            query = query.where(self._model.is_deleted.is_(False))
        return self._session.scalar(query) or 0

    def add(self, entity: ModelT) -> ModelT:
        """Add entity to session (not committed)."""
        self._session.add(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        """Delete entity from session (not committed)."""
        self._session.delete(entity)

    def refresh(self, entity: ModelT) -> ModelT:
        self._session.refresh(entity)
        return entity


class OrderedRepository(BaseRepository[ModelT]):
    """
    Repository for models with a display ``order``.

    All reads are restricted to the live (non-deleted) part of the
    collection, which is the namespace the order values apply to.
    """

    def _ordered_query(self) -> Select:
        query = self._apply_deleted_filter(self._base_query(), include_deleted=False)
        return query.order_by(self._model.order, self._model.created_at, self._model.id)

    def find_all_ordered(self) -> Sequence[ModelT]:
        """Live items ascending by order."""
        return self._session.scalars(self._ordered_query()).all()

    def lock_collection(self) -> None:
        """
        Take a transaction-scoped advisory lock on the whole collection.

        Row locks alone cannot serialize two appends to an empty collection.
        Only PostgreSQL has advisory locks; other dialects skip this step.
        """
        if self._session.get_bind().dialect.name != "postgresql":
            return
        key = func.hashtext(self._model.__tablename__)
        self._session.execute(select(func.pg_advisory_xact_lock(key)))

    def lock_all_ordered(self) -> Sequence[ModelT]:
        """
        Same as find_all_ordered but locks the collection and its rows
        (SELECT ... FOR UPDATE), always in display order.

        Dialects without row locks (SQLite) ignore the clause.
        """
        self.lock_collection()
        return self._session.scalars(self._ordered_query().with_for_update()).all()

    def max_order(self) -> int | None:
        query = select(func.max(self._model.order))
        if self.soft_deletable:
            query = query.where(self._model.is_deleted.is_(False))
        return self._session.scalar(query)

    def next_order(self) -> int:
        """Order value for an item appended at the end of the collection."""
        current = self.max_order()
        return ORDER_BASE if current is None else current + 1
