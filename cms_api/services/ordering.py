"""
Ordered Collection Manager.

Keeps the ``order`` column of a collection gap-free and unique: the live
items of a collection of n items hold exactly ORDER_BASE .. ORDER_BASE + n - 1.

Every multi-row write runs in a single transaction after locking the live
rows with SELECT ... FOR UPDATE, so readers never see a half-renumbered
collection. Two reorders racing on the same collection are resolved by
whichever commits last.

Usage:
    service = OrderedCollectionService(db, FAQS)
    result = service.append({"question": "...", "answer": "..."})
    result = service.reorder([c_id, a_id, b_id])
    result = service.remove(b_id)
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

from pydantic import BaseModel
from sqlalchemy.orm import Session

from cms_api.models import ORDER_BASE, Base
from cms_api.repositories import OrderedRepository
from cms_api.services.base import CollectionService
from cms_api.services.collections import CollectionSpec
from cms_api.services.results import ActionResult, as_result
from shared.config.logging import get_logger
from shared.utils.exceptions import InvariantViolationError, NotFoundError, ValidationError

logger = get_logger(__name__)


def compact_order(items: Sequence[Base]) -> int:
    """
    Assign ORDER_BASE + position to ``items`` (already in display order).

    Returns how many items changed.
    """
    changed = 0
    for position, item in enumerate(items):
        target = ORDER_BASE + position
        if item.order != target:
            item.order = target
            item.touch()
            changed += 1
    return changed


def describe_order_breaches(orders: Sequence[int]) -> list[str]:
    """Messages for every way ``orders`` differs from a gap-free sequence."""
    problems: list[str] = []
    expected = set(range(ORDER_BASE, ORDER_BASE + len(orders)))

    duplicates = sorted(value for value, count in Counter(orders).items() if count > 1)
    if duplicates:
        problems.append(f"duplicate order values: {duplicates}")

    gaps = sorted(expected - set(orders))
    if gaps:
        problems.append(f"missing order values: {gaps}")

    out_of_range = sorted(value for value in set(orders) if value not in expected)
    if out_of_range:
        problems.append(f"order values out of range: {out_of_range}")

    return problems


class OrderedCollectionService(CollectionService):
    """
    List, append, update, reorder and remove items of an ordered collection.

    Business rules:
    - New items go to the end (max order + 1, or ORDER_BASE when empty)
    - Reorder takes the complete list of live ids, no partial lists
    - Removing an item renumbers the rest, keeping their relative order
    - Soft-deletable collections (services) soft delete on remove
    """

    def __init__(self, db: Session, collection: CollectionSpec):
        if not collection.ordered:
            raise ValueError(f"{collection.key} is not an ordered collection")
        super().__init__(db, collection)

    @property
    def repo(self) -> OrderedRepository:
        return self._repo

    def _read_collection(self) -> list[BaseModel]:
        return [self.to_output(item) for item in self.repo.find_all_ordered()]

    # =========================================================================
    # Query Methods
    # =========================================================================

    @as_result("list")
    def list(self) -> ActionResult:
        """Live items ascending by order."""
        return ActionResult.ok(self._read_collection())

    def check_invariants(self) -> list[str]:
        """Describe any gap or duplicate in the live order values."""
        orders = [item.order for item in self.repo.find_all_ordered()]
        return describe_order_breaches(orders)

    # =========================================================================
    # Command Methods
    # =========================================================================

    @as_result("append")
    def append(self, payload: BaseModel | dict[str, Any]) -> ActionResult:
        """Create an item at the end of the collection. Existing items are untouched."""
        data = self._validate(payload, self.collection.create_schema)

        # Serialize concurrent appends on the same collection
        self.repo.lock_all_ordered()
        entity = self.collection.model(**data.model_dump(), order=self.repo.next_order())
        self.repo.add(entity)
        self._commit()
        self.repo.refresh(entity)

        logger.info(
            "Item appended",
            collection=self.collection.key,
            item_id=entity.id,
            order=entity.order,
        )
        return ActionResult.ok(self.to_output(entity), message=f"{self.label} created")

    @as_result("update")
    def update(self, entity_id: str, payload: BaseModel | dict[str, Any]) -> ActionResult:
        """Edit the payload fields of one item. The order is never editable here."""
        schema = self.collection.update_schema
        if schema is None:
            raise ValidationError(f"{self.label} cannot be edited")
        data = self._validate(payload, schema)

        entity = self._get_or_404(entity_id, for_update=True)
        changes = data.model_dump(exclude_unset=True)

        columns = self.collection.model.__table__.columns
        required = [field for field, value in changes.items() if value is None and not columns[field].nullable]
        if required:
            raise ValidationError(
                f"Invalid {self.label} data",
                field_errors={field: ["cannot be empty"] for field in required},
            )

        if not changes:
            return ActionResult.ok(self.to_output(entity), message="No changes")

        for field, value in changes.items():
            setattr(entity, field, value)
        entity.touch()
        self._commit()
        self.repo.refresh(entity)

        logger.info(
            "Item updated",
            collection=self.collection.key,
            item_id=entity.id,
            fields=sorted(changes),
        )
        return ActionResult.ok(self.to_output(entity), message=f"{self.label} updated")

    @as_result("reorder", snapshot_on_failure=True)
    def reorder(self, ids: Sequence[str]) -> ActionResult:
        """
        Give the item at position i of ``ids`` the order ORDER_BASE + i.

        Raises (as failed results):
            ValidationError: empty list, blank or duplicate ids.
            NotFoundError: an id is not a live item of the collection.
            InvariantViolationError: live items are missing from the list.
        """
        ids = list(ids or [])
        if not ids:
            raise ValidationError(
                "The reorder list cannot be empty",
                field_errors={"ids": ["at least one id is required"]},
            )
        if any(not isinstance(item_id, str) or not item_id.strip() for item_id in ids):
            raise ValidationError("The reorder list contains blank ids", field_errors={"ids": ["blank id"]})

        duplicates = sorted(item_id for item_id, count in Counter(ids).items() if count > 1)
        if duplicates:
            raise ValidationError(
                "The reorder list contains duplicate ids",
                field_errors={"ids": [f"duplicate id {item_id}" for item_id in duplicates]},
            )

        items = self.repo.lock_all_ordered()
        by_id = {item.id: item for item in items}

        unknown = [item_id for item_id in ids if item_id not in by_id]
        if unknown:
            raise NotFoundError(self.label, ", ".join(unknown), collection=self.collection.key)

        missing = sorted(set(by_id) - set(ids))
        if missing:
            raise InvariantViolationError(
                f"Reorder must include every {self.label}: {len(missing)} missing",
                collection=self.collection.key,
                missing_ids=missing,
            )

        changed = compact_order([by_id[item_id] for item_id in ids])
        self._commit()

        logger.info(
            "Collection reordered",
            collection=self.collection.key,
            items=len(ids),
            changed=changed,
        )
        return ActionResult.ok(self._read_collection(), message=f"{self.label} order updated")

    @as_result("remove", snapshot_on_failure=True)
    def remove(self, entity_id: str) -> ActionResult:
        """Delete one item and close the gap it leaves, in one transaction."""
        entity_id = self._require_id(entity_id)
        items = self.repo.lock_all_ordered()

        target = next((item for item in items if item.id == entity_id), None)
        if target is None:
            raise NotFoundError(self.label, entity_id, collection=self.collection.key)

        if self.collection.soft_deletable:
            target.soft_delete()
            target.touch()
        else:
            self.repo.delete(target)

        remaining = [item for item in items if item is not target]
        changed = compact_order(remaining)
        self._commit()

        logger.info(
            "Item removed",
            collection=self.collection.key,
            item_id=entity_id,
            soft=self.collection.soft_deletable,
            renumbered=changed,
        )
        return ActionResult.ok(self._read_collection(), message=f"{self.label} deleted")

    @as_result("renumber")
    def renumber(self) -> ActionResult:
        """
        Repair pass: compact the live items into a gap-free sequence.

        Relative order is kept; ties are broken by creation time, then id.
        """
        items = self.repo.lock_all_ordered()
        changed = compact_order(items)
        if changed:
            self._commit()
            logger.info("Collection renumbered", collection=self.collection.key, changed=changed)
        return ActionResult.ok(self._read_collection(), message=f"{changed} item(s) renumbered")
