"""
CMS content models: ordered collections shown on the public pages.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, EntityMixin, OrderedMixin, SoftDeleteMixin


class FAQ(EntityMixin, OrderedMixin, Base):
    """Question/answer pair of the FAQ page."""

    __tablename__ = "faq"

    question: Mapped[str] = mapped_column(String(500), nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)


class AboutSection(EntityMixin, OrderedMixin, Base):
    """Block of the About page."""

    __tablename__ = "about_section"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)


class HomeValue(EntityMixin, OrderedMixin, Base):
    """Value pillar displayed on the home page."""

    __tablename__ = "home_value"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    highlight: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)


class Service(EntityMixin, OrderedMixin, SoftDeleteMixin, Base):
    """
    Service offered by the store (eye exam, lens fitting, ...).

    Ordered and soft-deletable: the order namespace only covers services that
    are not deleted.
    """

    __tablename__ = "service"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class AboutBenefit(EntityMixin, OrderedMixin, Base):
    """Benefit card of the About page (icon, colors, short pitch)."""

    __tablename__ = "about_benefit"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    highlight: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    bg_color: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
