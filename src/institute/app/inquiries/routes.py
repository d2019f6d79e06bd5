"""Routes for the public contact form and inquiry management."""

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from institute.common import Capability, User

from .intake import InquiryStorageError
from .models import Inquiry, InquiryReceipt

if TYPE_CHECKING:
    from institute.app.activity import ActivityQueries
    from institute.app.auth import Validate

    from .intake import InquiryIntake
    from .queries import InquiryQueries

LOGGER = logging.getLogger(__name__)


async def _submit(intake: "InquiryIntake", payload: dict[str, Any]) -> InquiryReceipt:
    try:
        result = await intake.submit(payload)
    except InquiryStorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e

    if not result.accepted:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=result.errors,
        )
    return InquiryReceipt(inquiry=result.inquiry, notified=result.notified)


def configure_inquiry_router(
    router: APIRouter,
    intake: "InquiryIntake",
    inquiries: "InquiryQueries",
    validate: "Validate",
    activity: "ActivityQueries",
) -> APIRouter:
    """Configure the inquiry router.

    :param router: The APIRouter to configure
    :param intake: Contact form intake
    :param inquiries: Inquiry repository
    :param validate: The Validate instance for authorization
    :param activity: Activity log for recording changes
    :return: The configured APIRouter
    """

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def submit_inquiry(
        payload: Annotated[dict[str, Any], Body()],
    ) -> InquiryReceipt:
        return await _submit(intake, payload)

    @router.get("")
    async def list_inquiries(
        _user: Annotated[User, Depends(validate.staff())],
        *,
        unread_only: bool = False,
    ) -> list[Inquiry]:
        filters = {"is_read": 0} if unread_only else None
        rows = await inquiries.list_rows(filters=filters)
        return [Inquiry.model_validate(row) for row in rows]

    @router.patch("/{inquiry_id}/read")
    async def mark_read(
        inquiry_id: str,
        user: Annotated[User, Depends(validate.capability(Capability.EDIT))],
    ) -> Inquiry:
        row = await inquiries.mark_read(inquiry_id)
        if row is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Inquiry not found",
            )
        await activity.log(user, "mark_inquiry_read", {"id": inquiry_id})
        return Inquiry.model_validate(row)

    @router.delete("/{inquiry_id}")
    async def delete_inquiry(
        inquiry_id: str,
        user: Annotated[User, Depends(validate.capability(Capability.DELETE))],
    ) -> str:
        if not await inquiries.delete(inquiry_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Inquiry not found",
            )
        await activity.log(user, "delete_inquiry", {"id": inquiry_id})
        return "Inquiry deleted successfully"

    return router
