"""
Base class shared by the ordering and lifecycle services.

Architecture:
    Router (thin) -> Service (rules, ActionResult) -> Repository -> Model
"""

from __future__ import annotations

from typing import Any, Optional

import pydantic
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cms_api.models import Base
from cms_api.repositories import BaseRepository, OrderedRepository
from cms_api.services.collections import CollectionSpec
from shared.infrastructure.db import safe_commit
from shared.config.logging import get_logger
from shared.utils.exceptions import NotFoundError, ValidationError, field_errors_from

logger = get_logger(__name__)


class CollectionService:
    """
    Common infrastructure: repository, DTO conversion, payload validation.

    Subclasses implement ``_read_collection`` which ``snapshot`` uses to attach
    the persisted state to failed results.
    """

    def __init__(self, db: Session, collection: CollectionSpec):
        self._db = db
        self._collection = collection
        if collection.ordered:
            self._repo: BaseRepository = OrderedRepository(collection.model, db)
        else:
            self._repo = BaseRepository(collection.model, db)

    @property
    def db(self) -> Session:
        """Database session."""
        return self._db

    @property
    def collection(self) -> CollectionSpec:
        return self._collection

    @property
    def repo(self) -> BaseRepository:
        """Repository for data access."""
        return self._repo

    @property
    def label(self) -> str:
        """Human-readable entity name for messages."""
        return self._collection.label

    def to_output(self, entity: Base) -> BaseModel:
        return self._collection.output_schema.model_validate(entity)

    def _read_collection(self) -> list[BaseModel]:
        raise NotImplementedError

    def snapshot(self) -> Optional[list[BaseModel]]:
        """
        Best-effort re-read of the collection after a failure.

        Returns None when the storage itself is unavailable.
        """
        try:
            return self._read_collection()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.warning("Snapshot after failure unavailable", collection=self._collection.key, error=str(e))
            return None

    def _commit(self) -> None:
        safe_commit(self._db)

    def _validate(self, payload: BaseModel | dict[str, Any], schema: type[BaseModel]) -> BaseModel:
        """Accept an already-validated schema instance or validate a raw dict."""
        if isinstance(payload, schema):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(payload)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid {self.label} data",
                field_errors=field_errors_from(e.errors()),
                collection=self._collection.key,
            ) from None

    @staticmethod
    def _require_id(entity_id: str | None) -> str:
        if not entity_id or not str(entity_id).strip():
            raise ValidationError("An id is required", field_errors={"id": ["required"]})
        return str(entity_id).strip()

    def _get_or_404(
        self,
        entity_id: str | None,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Base:
        entity_id = self._require_id(entity_id)
        entity = self._repo.find_by_id(entity_id, include_deleted=include_deleted, for_update=for_update)
        if entity is None:
            raise NotFoundError(self.label, entity_id, collection=self._collection.key)
        return entity
