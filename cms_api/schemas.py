"""
Pydantic schemas for the admin API.

Input schemas sanitize text before length checks run, so a payload made only
of markup is rejected as empty. Output schemas are built from ORM objects.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cms_api.models import AppointmentStatus, TestimonialSource
from shared.utils.sanitize import sanitize_email, sanitize_optional, sanitize_string


class _Input(BaseModel):
    """Base for request bodies: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class _Output(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Ordering / lifecycle requests
# =============================================================================


class ReorderRequest(_Input):
    """Complete list of live ids in the desired display order."""

    ids: list[str]


class SetActiveRequest(_Input):
    is_active: bool


# =============================================================================
# FAQ
# =============================================================================


class FAQCreate(_Input):
    question: str = Field(min_length=1, max_length=500)
    answer: str = Field(min_length=1, max_length=5000)

    @field_validator("question", "answer", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v


class FAQUpdate(_Input):
    question: Optional[str] = Field(default=None, min_length=1, max_length=500)
    answer: Optional[str] = Field(default=None, min_length=1, max_length=5000)

    @field_validator("question", "answer", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v


class FAQOutput(_Output):
    id: str
    question: str
    answer: str
    order: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# About sections
# =============================================================================


class AboutSectionCreate(_Input):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=10000)
    image_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("title", "content", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("image_url", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class AboutSectionUpdate(_Input):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=10000)
    image_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("title", "content", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("image_url", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class AboutSectionOutput(_Output):
    id: str
    title: str
    content: str
    image_url: Optional[str] = None
    order: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# Home values
# =============================================================================


class HomeValueCreate(_Input):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    highlight: Optional[str] = Field(default=None, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=50)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("highlight", "icon", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class HomeValueUpdate(_Input):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    highlight: Optional[str] = Field(default=None, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=50)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("highlight", "icon", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class HomeValueOutput(_Output):
    id: str
    title: str
    description: str
    highlight: Optional[str] = None
    icon: Optional[str] = None
    order: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# About benefits
# =============================================================================

_HEX_COLOR = r"^(#[0-9a-fA-F]{3,8}|[a-z][a-z0-9-]*)$"


class AboutBenefitCreate(_Input):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    highlight: Optional[str] = Field(default=None, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, max_length=30, pattern=_HEX_COLOR)
    bg_color: Optional[str] = Field(default=None, max_length=30, pattern=_HEX_COLOR)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("highlight", "icon", "color", "bg_color", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class AboutBenefitUpdate(_Input):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    highlight: Optional[str] = Field(default=None, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, max_length=30, pattern=_HEX_COLOR)
    bg_color: Optional[str] = Field(default=None, max_length=30, pattern=_HEX_COLOR)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("highlight", "icon", "color", "bg_color", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class AboutBenefitOutput(_Output):
    id: str
    title: str
    description: str
    highlight: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    bg_color: Optional[str] = None
    order: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# Services
# =============================================================================


class ServiceCreate(_Input):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("description", "icon", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class ServiceUpdate(_Input):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)

    @field_validator("name", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("description", "icon", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class ServiceOutput(_Output):
    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    order: int
    is_active: bool
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# Testimonials
# =============================================================================


class TestimonialCreate(_Input):
    __test__ = False

    name: str = Field(min_length=2, max_length=100)
    message: str = Field(min_length=10, max_length=1000)
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=150)
    source: str = TestimonialSource.INTERNAL
    external_id: Optional[str] = Field(default=None, max_length=255)
    external_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    is_verified: bool = False

    @field_validator("name", "message", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("title", "external_id", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v

    @field_validator("source")
    @classmethod
    def _known_source(cls, v: str) -> str:
        if v not in TestimonialSource.ALL:
            raise ValueError(f"source must be one of: {', '.join(TestimonialSource.ALL)}")
        return v

    @field_validator("external_url")
    @classmethod
    def _http_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("https://", "http://")):
            raise ValueError("external_url must be an http(s) URL")
        return v


class TestimonialOutput(_Output):
    __test__ = False

    id: str
    name: str
    message: str
    rating: int
    title: Optional[str] = None
    source: str
    external_id: Optional[str] = None
    external_url: Optional[str] = None
    is_verified: bool
    is_active: bool
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# Customers
# =============================================================================


class CustomerCreate(_Input):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[str] = Field(default=None, max_length=30)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def _clean_email(cls, v):
        return sanitize_email(v) if isinstance(v, str) else v

    @field_validator("phone", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class CustomerOutput(_Output):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# Appointments
# =============================================================================


class AppointmentCreate(_Input):
    customer_id: Optional[str] = None
    full_name: str = Field(min_length=2, max_length=200)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[str] = Field(default=None, max_length=30)
    scheduled_at: datetime
    service_name: Optional[str] = Field(default=None, max_length=100)
    status: str = AppointmentStatus.PENDING
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("full_name", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def _clean_email(cls, v):
        return sanitize_email(v) if isinstance(v, str) else v

    @field_validator("phone", "service_name", "notes", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v

    @field_validator("status")
    @classmethod
    def _known_status(cls, v: str) -> str:
        if v not in AppointmentStatus.ALL:
            raise ValueError(f"status must be one of: {', '.join(AppointmentStatus.ALL)}")
        return v


class AppointmentOutput(_Output):
    id: str
    customer_id: Optional[str] = None
    full_name: str
    email: str
    phone: Optional[str] = None
    scheduled_at: datetime
    service_name: Optional[str] = None
    status: str
    notes: Optional[str] = None
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# Products
# =============================================================================


class ProductCreate(_Input):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    price: Decimal = Field(gt=0, le=100000, max_digits=10, decimal_places=2)
    brand: Optional[str] = Field(default=None, max_length=100)
    reference: Optional[str] = Field(default=None, max_length=100)

    @field_validator("name", "description", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("brand", "reference", mode="before")
    @classmethod
    def _clean_optional(cls, v):
        return sanitize_optional(v) if isinstance(v, str) else v


class ProductOutput(_Output):
    id: str
    name: str
    description: str
    price: float
    brand: Optional[str] = None
    reference: Optional[str] = None
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# Security
# =============================================================================


class CSRFTokenOutput(BaseModel):
    csrf_token: str
    header_name: str
