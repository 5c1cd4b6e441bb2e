from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lido_social.config import settings
from lido_social.dependencies.auth import require_principal
from lido_social.dependencies.services import get_notification_service
from lido_social.domain import PrincipalId
from lido_social.models import Profile
from lido_social.schemas.common import SuccessResponse
from lido_social.schemas.notification import NotificationPatchRequest, NotificationsResponse
from lido_social.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=NotificationsResponse,
    responses={401: {"description": "Not authenticated"}},
)
def list_notifications(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[NotificationService, Depends(get_notification_service)],
    limit: int = Query(settings.notifications_default_limit, ge=1, le=100),
) -> NotificationsResponse:
    return svc.list_notifications(PrincipalId(principal.id), limit=limit)


@router.patch(
    "",
    response_model=SuccessResponse,
    summary="Mark notifications as read",
    responses={
        400: {"description": "notification_id missing without mark_all_read"},
        401: {"description": "Not authenticated"},
    },
)
def mark_notifications_read(
    payload: NotificationPatchRequest,
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[NotificationService, Depends(get_notification_service)],
) -> SuccessResponse:
    svc.mark_read(
        PrincipalId(principal.id),
        notification_id=payload.notification_id,
        mark_all_read=payload.mark_all_read,
    )
    return SuccessResponse()
