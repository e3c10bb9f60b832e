"""
Trash lifecycle endpoints for soft-deletable collections.

    GET    /{collection}                     live records
    GET    /{collection}/trash               soft-deleted records
    GET    /{collection}/{item_id}           one record (?include_deleted=true)
    POST   /{collection}                     create
    POST   /{collection}/{item_id}/delete    move to trash
    POST   /{collection}/{item_id}/restore   take out of trash (stays inactive)
    DELETE /{collection}/{item_id}/permanent physical delete
    POST   /{collection}/{item_id}/status    publish / unpublish

Services are ordered as well: their list/create routes live in the content
router, only the trash routes are added here.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cms_api.schemas import SetActiveRequest
from cms_api.services import ActionResult, CollectionSpec, SoftDeleteService, SOFT_DELETE_COLLECTIONS
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


def build_records_router(spec: CollectionSpec) -> APIRouter:
    router = APIRouter(prefix=f"/{spec.key}", tags=[f"admin-{spec.key}"])
    slug = spec.key.replace("-", "_")
    output_schema = spec.output_schema
    create_schema = spec.create_schema

    if not spec.ordered:

        @router.get("", response_model=ActionResult[list[output_schema]])
        @endpoint_name(f"list_{slug}")
        def list_records(
            db: Session = Depends(get_db),
            user: User = Depends(require_permission(spec.resource, Action.READ)),
        ) -> JSONResponse:
            return respond(SoftDeleteService(db, spec).list_active())

        @router.post("", response_model=ActionResult[output_schema], status_code=201)
        @admin_rate_limit
        @endpoint_name(f"create_{slug}")
        def create_record(
            request: Request,
            payload: create_schema,
            user: User = Depends(require_permission(spec.resource, Action.CREATE)),
            db: Session = Depends(get_db),
            publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
        ) -> JSONResponse:
            require_csrf(request)
            result = SoftDeleteService(db, spec).create(payload)
            return respond(result, collection=spec, publisher=publisher, success_status=201)

    @router.get("/trash", response_model=ActionResult[list[output_schema]])
    @endpoint_name(f"list_{slug}_trash")
    def list_trash(
        db: Session = Depends(get_db),
        user: User = Depends(require_permission(spec.resource, Action.READ)),
    ) -> JSONResponse:
        return respond(SoftDeleteService(db, spec).list_deleted())

    if not spec.ordered:

        @router.get("/{item_id}", response_model=ActionResult[output_schema])
        @endpoint_name(f"get_{slug}")
        def get_record(
            item_id: str,
            include_deleted: bool = False,
            db: Session = Depends(get_db),
            user: User = Depends(require_permission(spec.resource, Action.READ)),
        ) -> JSONResponse:
            return respond(SoftDeleteService(db, spec).get(item_id, include_deleted=include_deleted))

    @router.post("/{item_id}/delete", response_model=ActionResult[output_schema])
    @admin_rate_limit
    @endpoint_name(f"soft_delete_{slug}")
    def soft_delete_record(
        request: Request,
        item_id: str,
        user: User = Depends(require_permission(spec.resource, Action.DELETE)),
        db: Session = Depends(get_db),
        publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
    ) -> JSONResponse:
        require_csrf(request)
        result = SoftDeleteService(db, spec).soft_delete(item_id)
        return respond(result, collection=spec, publisher=publisher)

    @router.post("/{item_id}/restore", response_model=ActionResult[output_schema])
    @admin_rate_limit
    @endpoint_name(f"restore_{slug}")
    def restore_record(
        request: Request,
        item_id: str,
        user: User = Depends(require_permission(spec.resource, Action.UPDATE)),
        db: Session = Depends(get_db),
        publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
    ) -> JSONResponse:
        require_csrf(request)
        result = SoftDeleteService(db, spec).restore(item_id)
        return respond(result, collection=spec, publisher=publisher)

    @router.delete("/{item_id}/permanent", response_model=ActionResult[None])
    @admin_rate_limit
    @endpoint_name(f"permanent_delete_{slug}")
    def permanent_delete_record(
        request: Request,
        item_id: str,
        user: User = Depends(require_permission(spec.resource, Action.DELETE)),
        db: Session = Depends(get_db),
        publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
    ) -> JSONResponse:
        require_csrf(request)
        result = SoftDeleteService(db, spec).permanent_delete(item_id)
        return respond(result, collection=spec, publisher=publisher)

    if spec.has_active_flag:

        @router.post("/{item_id}/status", response_model=ActionResult[output_schema])
        @admin_rate_limit
        @endpoint_name(f"set_{slug}_status")
        def set_record_status(
            request: Request,
            item_id: str,
            body: SetActiveRequest,
            user: User = Depends(require_permission(spec.resource, Action.UPDATE)),
            db: Session = Depends(get_db),
            publisher: RevalidationPublisher = Depends(get_revalidation_publisher),
        ) -> JSONResponse:
            require_csrf(request)
            result = SoftDeleteService(db, spec).set_active(item_id, body.is_active)
            return respond(result, collection=spec, publisher=publisher)

    return router


router = APIRouter()
for _spec in SOFT_DELETE_COLLECTIONS:
    router.include_router(build_records_router(_spec))
