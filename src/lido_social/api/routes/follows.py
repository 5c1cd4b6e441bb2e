from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lido_social.config import settings
from lido_social.dependencies.auth import require_principal
from lido_social.dependencies.services import get_follow_service
from lido_social.domain import PrincipalId
from lido_social.models import Profile
from lido_social.schemas.follow import (
    ConnectionsResponse,
    FollowActionResponse,
    FollowRequest,
    FollowStatusResponse,
)
from lido_social.services.follow_service import FollowService

router = APIRouter(tags=["follows"])

_auth_errors = {401: {"description": "Not authenticated"}}


@router.get("/follows", response_model=FollowStatusResponse, responses=_auth_errors)
def get_follow_status(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[FollowService, Depends(get_follow_service)],
    user_id: str = Query(..., min_length=1, description="Profile to check"),
) -> FollowStatusResponse:
    """Check whether the caller follows ``user_id``."""
    return FollowStatusResponse(is_following=svc.is_following(principal, PrincipalId(user_id)))


@router.post(
    "/follows",
    response_model=FollowActionResponse,
    summary="Follow a user",
    description="Idempotent: following someone already followed also reports success.",
    responses={
        **_auth_errors,
        400: {"description": "Cannot follow yourself"},
        404: {"description": "User not found"},
    },
)
def follow_user(
    payload: FollowRequest,
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[FollowService, Depends(get_follow_service)],
) -> FollowActionResponse:
    svc.follow(principal, PrincipalId(payload.user_id))
    return FollowActionResponse(action="followed")


@router.delete("/follows", response_model=FollowActionResponse, responses=_auth_errors)
def unfollow_user(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[FollowService, Depends(get_follow_service)],
    user_id: str = Query(..., min_length=1, description="Profile to unfollow"),
) -> FollowActionResponse:
    svc.unfollow(principal, PrincipalId(user_id))
    return FollowActionResponse(action="unfollowed")


@router.get("/users/{user_id}/followers", response_model=ConnectionsResponse)
def list_followers(
    user_id: str,
    svc: Annotated[FollowService, Depends(get_follow_service)],
    limit: int = Query(
        settings.feed_default_limit,
        ge=1,
        le=settings.feed_max_limit,
        description="Max number of profiles to return",
    ),
    cursor: datetime | None = Query(None, description="followed_at of the last profile seen"),
) -> ConnectionsResponse:
    """Profiles following ``user_id``, oldest follow first."""
    return svc.list_followers(PrincipalId(user_id), limit=limit, cursor=cursor)


@router.get("/users/{user_id}/following", response_model=ConnectionsResponse)
def list_following(
    user_id: str,
    svc: Annotated[FollowService, Depends(get_follow_service)],
    limit: int = Query(
        settings.feed_default_limit,
        ge=1,
        le=settings.feed_max_limit,
        description="Max number of profiles to return",
    ),
    cursor: datetime | None = Query(None, description="followed_at of the last profile seen"),
) -> ConnectionsResponse:
    """Profiles ``user_id`` follows, oldest follow first."""
    return svc.list_following(PrincipalId(user_id), limit=limit, cursor=cursor)
