"""
SQLAlchemy models.

Import models from here:
    from cms_api.models import FAQ, Service, Testimonial
"""

from .base import (
    Base,
    EntityMixin,
    OrderedMixin,
    SoftDeleteMixin,
    ORDER_BASE,
    utcnow,
    new_id,
)
from .content import FAQ, AboutBenefit, AboutSection, HomeValue, Service
from .records import (
    Testimonial,
    TestimonialSource,
    Customer,
    Appointment,
    AppointmentStatus,
    Product,
)
from .auth import Permission, Role, User, role_permission

__all__ = [
    # Base
    "Base",
    "EntityMixin",
    "OrderedMixin",
    "SoftDeleteMixin",
    "ORDER_BASE",
    "utcnow",
    "new_id",
    # Content
    "FAQ",
    "AboutSection",
    "AboutBenefit",
    "HomeValue",
    "Service",
    # Records
    "Testimonial",
    "TestimonialSource",
    "Customer",
    "Appointment",
    "AppointmentStatus",
    "Product",
    # Auth
    "Permission",
    "Role",
    "User",
    "role_permission",
]
