"""
Collection services: the ordering and lifecycle managers.

Usage:
    from cms_api.services import OrderedCollectionService, SoftDeleteService, FAQS

    result = OrderedCollectionService(db, FAQS).reorder(ids)
"""

from .collections import (
    CollectionSpec,
    COLLECTIONS,
    ORDERED_COLLECTIONS,
    SOFT_DELETE_COLLECTIONS,
    FAQS,
    ABOUT_SECTIONS,
    ABOUT_BENEFITS,
    HOME_VALUES,
    SERVICES,
    TESTIMONIALS,
    CUSTOMERS,
    APPOINTMENTS,
    PRODUCTS,
    get_collection,
)
from .results import ActionResult, STATUS_BY_KIND, as_result
from .base import CollectionService
from .ordering import OrderedCollectionService, compact_order, describe_order_breaches
from .lifecycle import SoftDeleteService, lifecycle_breaches

__all__ = [
    # Registry
    "CollectionSpec",
    "COLLECTIONS",
    "ORDERED_COLLECTIONS",
    "SOFT_DELETE_COLLECTIONS",
    "FAQS",
    "ABOUT_SECTIONS",
    "ABOUT_BENEFITS",
    "HOME_VALUES",
    "SERVICES",
    "TESTIMONIALS",
    "CUSTOMERS",
    "APPOINTMENTS",
    "PRODUCTS",
    "get_collection",
    # Results
    "ActionResult",
    "STATUS_BY_KIND",
    "as_result",
    # Services
    "CollectionService",
    "OrderedCollectionService",
    "compact_order",
    "describe_order_breaches",
    "SoftDeleteService",
    "lifecycle_breaches",
]
