"""Routes for the public site content and its admin CRUD."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from institute.common import Capability, User

from .models import PopupNotice

if TYPE_CHECKING:
    from institute.app.activity import ActivityQueries
    from institute.app.auth import Validate
    from institute.app.repository import TableQueries

    from .queries import NoticeQueries

LOGGER = logging.getLogger(__name__)

_NULLABLE_FIELDS = frozenset({"image", "price"})


@dataclass
class ContentResource:
    """Everything the generic CRUD routes need to know about one table.

    :param name: Singular name used in messages and activity log actions
    :param queries: Repository for the table
    :param create_model: Request body model for creation
    :param update_model: Request body model for partial updates
    :param response_model: Response model for a single row
    :param public_filters: Query parameters the public listing may filter by
    """

    name: str
    queries: "TableQueries"
    create_model: type[BaseModel]
    update_model: type[BaseModel]
    response_model: type[BaseModel]
    public_filters: tuple[str, ...] = ()


def _not_found(resource: ContentResource) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{resource.name.capitalize()} not found",
    )


def _public_filters(resource: ContentResource, request: Request) -> dict[str, str]:
    return {
        key: value
        for key, value in request.query_params.items()
        if key in resource.public_filters
    }


def configure_content_router(
    router: APIRouter,
    resource: ContentResource,
    validate: "Validate",
    activity: "ActivityQueries",
) -> APIRouter:
    """Configure CRUD routes for one content table.

    Anonymous visitors only ever see active rows. Any role may list
    everything; editing needs the edit capability and deleting needs the
    delete capability.

    :param router: The APIRouter to configure
    :param resource: The table to expose
    :param validate: The Validate instance for authorization
    :param activity: Activity log for recording changes
    :return: The configured APIRouter
    """
    queries = resource.queries
    create_model = resource.create_model
    update_model = resource.update_model
    response_model = resource.response_model

    @router.get("", response_model=list[response_model])
    async def list_active(request: Request) -> Any:
        return await queries.list_rows(
            active_only=True,
            filters=_public_filters(resource, request),
        )

    @router.get("/all", response_model=list[response_model])
    async def list_all(
        _user: Annotated[User, Depends(validate.staff())],
    ) -> Any:
        return await queries.list_rows()

    @router.get("/{record_id}", response_model=response_model)
    async def get_active(record_id: str) -> Any:
        row = await queries.get(record_id)
        if row is None or not row["is_active"]:
            raise _not_found(resource)
        return row

    @router.post("", response_model=response_model, status_code=status.HTTP_201_CREATED)
    async def create(
        body: create_model,
        user: Annotated[User, Depends(validate.capability(Capability.EDIT))],
    ) -> Any:
        row = await queries.insert(body.model_dump(mode="json"))
        if row is None:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to create {resource.name}",
            )
        await activity.log(user, f"create_{resource.name}", {"id": row["id"]})
        return row

    @router.patch("/{record_id}", response_model=response_model)
    async def update(
        record_id: str,
        body: update_model,
        user: Annotated[User, Depends(validate.capability(Capability.EDIT))],
    ) -> Any:
        if await queries.get(record_id) is None:
            raise _not_found(resource)
        changes = {
            field: value
            for field, value in body.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or field in _NULLABLE_FIELDS
        }
        row = await queries.update(record_id, changes)
        if row is None:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to update {resource.name}",
            )
        await activity.log(
            user,
            f"update_{resource.name}",
            {"id": record_id, "fields": sorted(changes)},
        )
        return row

    @router.delete("/{record_id}")
    async def delete(
        record_id: str,
        user: Annotated[User, Depends(validate.capability(Capability.DELETE))],
    ) -> str:
        if not await queries.delete(record_id):
            raise _not_found(resource)
        await activity.log(user, f"delete_{resource.name}", {"id": record_id})
        return f"{resource.name.capitalize()} deleted successfully"

    return router


def configure_notice_router(
    router: APIRouter,
    resource: ContentResource,
    validate: "Validate",
    activity: "ActivityQueries",
) -> APIRouter:
    """Configure the notice routes, including the popup feed.

    :param router: The APIRouter to configure
    :param resource: The notices resource; its queries must be NoticeQueries
    :param validate: The Validate instance for authorization
    :param activity: Activity log for recording changes
    :return: The configured APIRouter
    """
    notice_queries: NoticeQueries = resource.queries

    @router.get("/popup", response_model=list[PopupNotice])
    async def list_popup() -> Any:
        return await notice_queries.list_popup()

    return configure_content_router(router, resource, validate, activity)
