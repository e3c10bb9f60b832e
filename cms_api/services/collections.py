"""
Registry of the admin-managed collections.

Each entry ties a URL slug to its model, schemas, permission resource and the
pages that must be revalidated after a mutation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from cms_api.models import (
    AboutBenefit,
    AboutSection,
    Appointment,
    Base,
    Customer,
    FAQ,
    HomeValue,
    Product,
    Service,
    Testimonial,
)
from cms_api import schemas
from shared.utils.exceptions import NotFoundError


@dataclass(frozen=True)
class CollectionSpec:
    """Static description of one collection type."""

    key: str
    model: type[Base]
    label: str
    output_schema: type[BaseModel]
    create_schema: type[BaseModel]
    update_schema: Optional[type[BaseModel]]
    revalidate_paths: tuple[str, ...]

    @property
    def resource(self) -> str:
        """Permission resource name."""
        return self.key

    @property
    def ordered(self) -> bool:
        return hasattr(self.model, "order")

    @property
    def soft_deletable(self) -> bool:
        return hasattr(self.model, "is_deleted")

    @property
    def has_active_flag(self) -> bool:
        return hasattr(self.model, "is_active")


FAQS = CollectionSpec(
    key="faqs",
    model=FAQ,
    label="FAQ",
    output_schema=schemas.FAQOutput,
    create_schema=schemas.FAQCreate,
    update_schema=schemas.FAQUpdate,
    revalidate_paths=("/faq", "/admin/content/faq"),
)

ABOUT_SECTIONS = CollectionSpec(
    key="about-sections",
    model=AboutSection,
    label="About section",
    output_schema=schemas.AboutSectionOutput,
    create_schema=schemas.AboutSectionCreate,
    update_schema=schemas.AboutSectionUpdate,
    revalidate_paths=("/about", "/admin/content/about"),
)

HOME_VALUES = CollectionSpec(
    key="home-values",
    model=HomeValue,
    label="Home value",
    output_schema=schemas.HomeValueOutput,
    create_schema=schemas.HomeValueCreate,
    update_schema=schemas.HomeValueUpdate,
    revalidate_paths=("/", "/admin/content/home"),
)

ABOUT_BENEFITS = CollectionSpec(
    key="about-benefits",
    model=AboutBenefit,
    label="About benefit",
    output_schema=schemas.AboutBenefitOutput,
    create_schema=schemas.AboutBenefitCreate,
    update_schema=schemas.AboutBenefitUpdate,
    revalidate_paths=("/about", "/admin/content/about"),
)

SERVICES = CollectionSpec(
    key="services",
    model=Service,
    label="Service",
    output_schema=schemas.ServiceOutput,
    create_schema=schemas.ServiceCreate,
    update_schema=schemas.ServiceUpdate,
    revalidate_paths=("/", "/admin/services"),
)

TESTIMONIALS = CollectionSpec(
    key="testimonials",
    model=Testimonial,
    label="Testimonial",
    output_schema=schemas.TestimonialOutput,
    create_schema=schemas.TestimonialCreate,
    update_schema=None,
    revalidate_paths=("/testimonials", "/admin/testimonials"),
)

CUSTOMERS = CollectionSpec(
    key="customers",
    model=Customer,
    label="Customer",
    output_schema=schemas.CustomerOutput,
    create_schema=schemas.CustomerCreate,
    update_schema=None,
    revalidate_paths=("/admin/customers", "/admin"),
)

APPOINTMENTS = CollectionSpec(
    key="appointments",
    model=Appointment,
    label="Appointment",
    output_schema=schemas.AppointmentOutput,
    create_schema=schemas.AppointmentCreate,
    update_schema=None,
    revalidate_paths=("/admin/appointments", "/admin/appointments/trash"),
)

PRODUCTS = CollectionSpec(
    key="products",
    model=Product,
    label="Product",
    output_schema=schemas.ProductOutput,
    create_schema=schemas.ProductCreate,
    update_schema=None,
    revalidate_paths=("/products", "/admin/products", "/admin/products/trash"),
)

COLLECTIONS: dict[str, CollectionSpec] = {
    spec.key: spec
    for spec in (
        FAQS,
        ABOUT_SECTIONS,
        ABOUT_BENEFITS,
        HOME_VALUES,
        SERVICES,
        TESTIMONIALS,
        CUSTOMERS,
        APPOINTMENTS,
        PRODUCTS,
    )
}

ORDERED_COLLECTIONS = tuple(spec for spec in COLLECTIONS.values() if spec.ordered)
SOFT_DELETE_COLLECTIONS = tuple(spec for spec in COLLECTIONS.values() if spec.soft_deletable)


def get_collection(key: str) -> CollectionSpec:
    """Look up a collection by slug. Raises NotFoundError for unknown slugs."""
    try:
        return COLLECTIONS[key]
    except KeyError:
        raise NotFoundError("Collection", key) from None
