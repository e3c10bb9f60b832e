"""
Admin endpoints for ordered collections (FAQs, about sections, home values,
services).

One router per collection is built from its CollectionSpec:

    GET    /{collection}            list in display order
    POST   /{collection}            append at the end
    PATCH  /{collection}/{item_id}  edit payload fields
    PUT    /{collection}/order      reorder, body {"ids": [...]}
    DELETE /{collection}/{item_id}  remove and renumber
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cms_api.schemas import ReorderRequest
from cms_api.services import ActionResult, CollectionSpec, OrderedCollectionService, ORDERED_COLLECTIONS
from cms_api.routers._base import (
    Action,
    Depends,
    Request,
    RevalidationPublisher,
    Session,
    User,
    admin_rate_limit,
    endpoint_name,
    get_db,
    get_revalidation_publisher,
    require_csrf,
    require_permission,
    respond,
)


def build_ordered_router(spec: CollectionSpec) -> APIRouter:
    router = APIRouter(prefix=f"/{spec.key}", tags=[f"admin-{spec.key}"])
    slug = spec.key.replace("-", "_")
    create_schema = spec.create_schema
    update_schema = spec.update_schema
    output_schema = spec.output_schema

    @router.get("", response_model=ActionResult[list[output_schema]])
    @endpoint_name(f"list_{slug}")
    def list_items(
        db: Session = Depends(get_db),
        user: User = Depends(require_permission(spec.resource, Action.READ)),
    ) -> JSONResponse:
        return respond(OrderedCollectionService(db, spec).list())

    @router.post("", response_model=ActionResult[output_schema], status_code=201)
    @admin_rate_limit
    @endpoint_name(f"create_{slug}")
    def create_item(
        request: Request,
        payload: create_schema,
        user: User = Depends(require_permission(spec.resource, Action.CREATE)),
        db: Session = Depends(get_db),
        publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
    ) -> JSONResponse:
        require_csrf(request)
        result = OrderedCollectionService(db, spec).append(payload)
        return respond(result, collection=spec, publisher=publisher, success_status=201)

    @router.put("/order", response_model=ActionResult[list[output_schema]])
    @admin_rate_limit
    @endpoint_name(f"reorder_{slug}")
    def reorder_items(
        request: Request,
        body: ReorderRequest,
        user: User = Depends(require_permission(spec.resource, Action.UPDATE)),
        db: Session = Depends(get_db),
        publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
    ) -> JSONResponse:
        """Full list of live ids in the new display order."""
        require_csrf(request)
        result = OrderedCollectionService(db, spec).reorder(body.ids)
        return respond(result, collection=spec, publisher=publisher)

    @router.patch("/{item_id}", response_model=ActionResult[output_schema])
    @admin_rate_limit
    @endpoint_name(f"update_{slug}")
    def update_item(
        request: Request,
        item_id: str,
        payload: update_schema,
        user: User = Depends(require_permission(spec.resource, Action.UPDATE)),
        db: Session = Depends(get_db),
        publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
    ) -> JSONResponse:
        require_csrf(request)
        result = OrderedCollectionService(db, spec).update(item_id, payload)
        return respond(result, collection=spec, publisher=publisher)

    @router.delete("/{item_id}", response_model=ActionResult[list[output_schema]])
    @admin_rate_limit
    @endpoint_name(f"remove_{slug}")
    def remove_item(
        request: Request,
        item_id: str,
        user: User = Depends(require_permission(spec.resource, Action.DELETE)),
        db: Session = Depends(get_db),
        publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
    ) -> JSONResponse:
        require_csrf(request)
        result = OrderedCollectionService(db, spec).remove(item_id)
        return respond(result, collection=spec, publisher=publisher)

    return router


router = APIRouter()
for _spec in ORDERED_COLLECTIONS:
    router.include_router(build_ordered_router(_spec))
