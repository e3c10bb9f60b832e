"""
Business records managed through the trash (soft delete / restore) lifecycle.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin, SoftDeleteMixin


class TestimonialSource:
    INTERNAL = "internal"
    GOOGLE = "google"
    FACEBOOK = "facebook"
    TRUSTPILOT = "trustpilot"

    ALL = (INTERNAL, GOOGLE, FACEBOOK, TRUSTPILOT)


class AppointmentStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, COMPLETED, CANCELLED)


class Testimonial(EntityMixin, SoftDeleteMixin, Base):
    """Customer review. Publicly visible only when active and not deleted."""

    __tablename__ = "testimonial"
    # Keeps pytest from collecting the model as a test class
    __test__ = False

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    source: Mapped[str] = mapped_column(String(20), default=TestimonialSource.INTERNAL, nullable=False)
    external_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    external_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Customer(EntityMixin, SoftDeleteMixin, Base):
    """Store customer."""

    __tablename__ = "customer"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    appointments: Mapped[list["Appointment"]] = relationship(back_populates="customer")


class Appointment(EntityMixin, SoftDeleteMixin, Base):
    """Booked appointment, optionally linked to a customer record."""

    __tablename__ = "appointment"

    customer_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("customer.id", ondelete="SET NULL"), nullable=True, index=True
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    service_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=AppointmentStatus.PENDING, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer: Mapped[Optional[Customer]] = relationship(back_populates="appointments")


class Product(EntityMixin, SoftDeleteMixin, Base):
    """Catalog product (frames, lenses, accessories)."""

    __tablename__ = "product"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
