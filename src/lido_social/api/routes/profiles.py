from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from lido_social.dependencies.auth import require_identity, require_principal
from lido_social.dependencies.services import get_profile_service
from lido_social.domain import PrincipalId
from lido_social.models import Profile
from lido_social.schemas.profile import ProfileCreateRequest, ProfileRead, UserSearchResponse
from lido_social.services.profile_service import ProfileService

router = APIRouter(tags=["profiles"])


@router.post(
    "/profiles",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a profile",
    description="Creates the profile for the authenticated identity.",
    responses={
        401: {"description": "Not authenticated"},
        409: {"description": "Username taken or identity already registered"},
    },
)
def register_profile(
    payload: ProfileCreateRequest,
    identity: Annotated[PrincipalId, Depends(require_identity)],
    svc: Annotated[ProfileService, Depends(get_profile_service)],
) -> ProfileRead:
    return svc.register(identity, payload)


@router.get(
    "/me",
    response_model=ProfileRead,
    responses={401: {"description": "Not authenticated"}},
)
def get_my_profile(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[ProfileService, Depends(get_profile_service)],
) -> ProfileRead:
    return svc.get_profile(principal)


@router.get(
    "/profiles/{username}",
    response_model=ProfileRead,
    responses={404: {"description": "User not found"}},
)
def get_profile(
    username: str,
    svc: Annotated[ProfileService, Depends(get_profile_service)],
) -> ProfileRead:
    return svc.get_by_username(username)


@router.get(
    "/users/search",
    response_model=UserSearchResponse,
    summary="Search users",
    description="Matches username or display name. Queries shorter than 2 characters return [].",
)
def search_users(
    svc: Annotated[ProfileService, Depends(get_profile_service)],
    q: str = Query("", max_length=100, description="Part of a username or display name"),
) -> UserSearchResponse:
    return UserSearchResponse(users=svc.search(q))
