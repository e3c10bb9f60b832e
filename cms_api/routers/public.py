"""
Public read endpoints used by the website pages. No authentication required.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from cms_api.routers._base import respond
from cms_api.services import (
    ABOUT_BENEFITS,
    ABOUT_SECTIONS,
    FAQS,
    HOME_VALUES,
    PRODUCTS,
    SERVICES,
    TESTIMONIALS,
    ActionResult,
    CollectionSpec,
    OrderedCollectionService,
    SoftDeleteService,
)
from shared.infrastructure.db import get_db

router = APIRouter(prefix="/api/public", tags=["public"])


def _published(result: ActionResult) -> ActionResult:
    """Keep only items flagged active (deleted ones are already excluded)."""
    if result.success and result.data is not None:
        result.data = [item for item in result.data if item.is_active]
    return result


def _ordered(db: Session, spec: CollectionSpec) -> JSONResponse:
    return respond(OrderedCollectionService(db, spec).list())


@router.get("/faqs")
def public_faqs(db: Session = Depends(get_db)) -> JSONResponse:
    return _ordered(db, FAQS)


@router.get("/about-sections")
def public_about_sections(db: Session = Depends(get_db)) -> JSONResponse:
    return _ordered(db, ABOUT_SECTIONS)


@router.get("/about-benefits")
def public_about_benefits(db: Session = Depends(get_db)) -> JSONResponse:
    return _ordered(db, ABOUT_BENEFITS)


@router.get("/home-values")
def public_home_values(db: Session = Depends(get_db)) -> JSONResponse:
    return _ordered(db, HOME_VALUES)


@router.get("/services")
def public_services(db: Session = Depends(get_db)) -> JSONResponse:
    """Active services in display order."""
    return respond(_published(OrderedCollectionService(db, SERVICES).list()))


@router.get("/testimonials")
def public_testimonials(db: Session = Depends(get_db)) -> JSONResponse:
    """Active testimonials, newest first."""
    return respond(_published(SoftDeleteService(db, TESTIMONIALS).list_active()))


@router.get("/products")
def public_products(db: Session = Depends(get_db)) -> JSONResponse:
    """Catalog products that are not in the trash, newest first."""
    return respond(SoftDeleteService(db, PRODUCTS).list_active())
