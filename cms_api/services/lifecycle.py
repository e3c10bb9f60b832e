"""
Soft-Delete Lifecycle Manager.

States: Active (is_deleted=False) -> SoftDeleted (is_deleted=True,
deleted_at set, is_active forced False) -> Active again via restore, or Gone
via permanent_delete (allowed from either state).

Restore does not re-activate a record: publishing it again is a separate,
explicit ``set_active(id, True)`` call.

Usage:
    service = SoftDeleteService(db, TESTIMONIALS)
    service.soft_delete(testimonial_id)
    service.restore(testimonial_id)
    service.set_active(testimonial_id, True)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from sqlalchemy.orm import Session

from cms_api.models import Base, Customer
from cms_api.services.base import CollectionService
from cms_api.services.collections import CollectionSpec
from cms_api.services.ordering import compact_order
from cms_api.services.results import ActionResult, as_result
from shared.config.logging import get_logger
from shared.utils.exceptions import InvariantViolationError, NotFoundError, ValidationError

logger = get_logger(__name__)


def lifecycle_breaches(entity: Base) -> list[str]:
    """
    Check the cross-field invariants of one soft-deletable record.

    - is_deleted is True exactly when deleted_at is set
    - a deleted record is never active
    """
    problems: list[str] = []
    if entity.is_deleted and entity.deleted_at is None:
        problems.append("deleted record has no deleted_at")
    if not entity.is_deleted and entity.deleted_at is not None:
        problems.append("live record has deleted_at set")
    if entity.has_active_flag() and entity.is_deleted and entity.is_active:
        problems.append("deleted record is still active")
    return problems


class SoftDeleteService(CollectionService):
    """
    Trash lifecycle for soft-deletable collections.

    Business rules:
    - Deleting an already deleted record is rejected, nothing is written
    - Restoring a live record is rejected
    - A deleted record cannot be activated
    - Ordered collections (services) are renumbered when a live item leaves
      and a restored item goes to the end
    """

    def __init__(self, db: Session, collection: CollectionSpec):
        if not collection.soft_deletable:
            raise ValueError(f"{collection.key} does not support soft delete")
        super().__init__(db, collection)

    def _live_items(self) -> list[Base]:
        model = self.collection.model
        if self.collection.ordered:
            return list(self.repo.find_all_ordered())
        return list(self.repo.find_all(order_by=model.created_at.desc()))

    def _read_collection(self) -> list[BaseModel]:
        return [self.to_output(item) for item in self._live_items()]

    # =========================================================================
    # Query Methods
    # =========================================================================

    @as_result("list")
    def list_active(self) -> ActionResult:
        return ActionResult.ok(self._read_collection())

    @as_result("list trash")
    def list_deleted(self) -> ActionResult:
        """Trash view, most recently deleted first."""
        return ActionResult.ok([self.to_output(item) for item in self.repo.find_deleted()])

    @as_result("get")
    def get(self, entity_id: str, include_deleted: bool = False) -> ActionResult:
        entity = self._get_or_404(entity_id, include_deleted=include_deleted)
        return ActionResult.ok(self.to_output(entity))

    def check_invariants(self, entity: Base) -> list[str]:
        return lifecycle_breaches(entity)

    def find_invariant_breaches(self) -> dict[str, list[str]]:
        """Invariant breaches of every record, live and deleted, keyed by id."""
        breaches: dict[str, list[str]] = {}
        for entity in self.repo.find_all(include_deleted=True):
            problems = lifecycle_breaches(entity)
            if problems:
                breaches[entity.id] = problems
        return breaches

    # =========================================================================
    # Command Methods
    # =========================================================================

    @as_result("create")
    def create(self, payload: BaseModel | dict[str, Any]) -> ActionResult:
        data = self._validate(payload, self.collection.create_schema)
        values = data.model_dump()
        self._check_references(values)

        entity = self.collection.model(**values)
        if self.collection.ordered:
            self.repo.lock_all_ordered()
            entity.order = self.repo.next_order()
        self.repo.add(entity)
        self._commit()
        self.repo.refresh(entity)

        logger.info("Record created", collection=self.collection.key, item_id=entity.id)
        return ActionResult.ok(self.to_output(entity), message=f"{self.label} created")

    def _check_references(self, values: dict[str, Any]) -> None:
        customer_id = values.get("customer_id")
        if customer_id is None:
            return
        customer = self.db.get(Customer, customer_id)
        if customer is None or customer.is_deleted:
            raise NotFoundError("Customer", customer_id, collection=self.collection.key)

    def _lock_for_write(self, entity_id: str) -> tuple[Base, list[Base]]:
        """
        Lock the record to change, plus the live rows of an ordered collection.

        Live rows are locked first, in display order, the same order
        OrderedCollectionService uses, so concurrent writers cannot deadlock.
        """
        entity_id = self._require_id(entity_id)
        live = list(self.repo.lock_all_ordered()) if self.collection.ordered else []
        entity = self._get_or_404(entity_id, include_deleted=True, for_update=True)
        return entity, live

    @as_result("soft delete")
    def soft_delete(self, entity_id: str) -> ActionResult:
        """Move a live record to the trash."""
        entity, live = self._lock_for_write(entity_id)
        if entity.is_deleted:
            raise InvariantViolationError(
                f"{self.label} is already deleted",
                collection=self.collection.key,
                item_id=entity.id,
            )

        entity.soft_delete()
        entity.touch()
        if self.collection.ordered:
            compact_order([item for item in live if item.id != entity.id])
        self._commit()
        self.repo.refresh(entity)

        logger.info("Record soft deleted", collection=self.collection.key, item_id=entity.id)
        return ActionResult.ok(self.to_output(entity), message=f"{self.label} moved to trash")

    @as_result("restore")
    def restore(self, entity_id: str) -> ActionResult:
        """Take a record out of the trash. ``is_active`` stays as it is."""
        entity, _ = self._lock_for_write(entity_id)
        if not entity.is_deleted:
            raise InvariantViolationError(
                f"{self.label} is not deleted",
                collection=self.collection.key,
                item_id=entity.id,
            )

        if self.collection.ordered:
            entity.order = self.repo.next_order()

        entity.restore()
        entity.touch()
        self._commit()
        self.repo.refresh(entity)

        logger.info("Record restored", collection=self.collection.key, item_id=entity.id)
        return ActionResult.ok(self.to_output(entity), message=f"{self.label} restored")

    @as_result("permanent delete")
    def permanent_delete(self, entity_id: str) -> ActionResult:
        """Physically remove a record, deleted or not. Irreversible."""
        entity, live = self._lock_for_write(entity_id)
        was_live = not entity.is_deleted

        self.repo.delete(entity)
        if was_live and live:
            compact_order([item for item in live if item.id != entity.id])
        self._commit()

        logger.info(
            "Record permanently deleted",
            collection=self.collection.key,
            item_id=entity_id,
            was_live=was_live,
        )
        return ActionResult.ok(None, message=f"{self.label} permanently deleted")

    @as_result("set active")
    def set_active(self, entity_id: str, desired: bool) -> ActionResult:
        """Publish or unpublish a record. A deleted record cannot be activated."""
        if not self.collection.has_active_flag:
            raise ValidationError(f"{self.label} has no active state")

        entity = self._get_or_404(entity_id, include_deleted=True, for_update=True)
        if desired and entity.is_deleted:
            raise InvariantViolationError(
                f"Cannot activate a deleted {self.label.lower()}",
                collection=self.collection.key,
                item_id=entity.id,
            )

        if entity.is_active == desired:
            return ActionResult.ok(self.to_output(entity), message="No changes")

        entity.is_active = desired
        entity.touch()
        self._commit()
        self.repo.refresh(entity)

        logger.info(
            "Record active state changed",
            collection=self.collection.key,
            item_id=entity.id,
            is_active=desired,
        )
        state = "activated" if desired else "deactivated"
        return ActionResult.ok(self.to_output(entity), message=f"{self.label} {state}")

    @as_result("purge trash")
    def purge_deleted_before(self, cutoff: datetime) -> ActionResult:
        """Permanently delete records that sit in the trash since before ``cutoff``."""
        expired = self.repo.find_deleted(deleted_before=cutoff)
        for entity in expired:
            self.repo.delete(entity)
        if expired:
            self._commit()
            logger.info("Trash purged", collection=self.collection.key, purged=len(expired))
        return ActionResult.ok(len(expired), message=f"{len(expired)} {self.label.lower()}(s) purged")
