"""Identity Gate.

The upstream identity provider authenticates the caller and forwards its
subject id in ``X-User-Id``. Resolution never raises: a missing header, a
blank header or an unregistered subject all resolve to ``None``. Routes that
mutate state depend on ``require_principal`` instead.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyHeader

from lido_social.dependencies.repositories import get_profiles_repository
from lido_social.domain import PrincipalId
from lido_social.errors import Unauthenticated
from lido_social.models import Profile
from lido_social.repositories.profiles_repository import ProfilesRepository

api_key_header = APIKeyHeader(name="X-User-Id", auto_error=False)


def get_identity(
    api_key: Annotated[str | None, Depends(api_key_header)] = None,
) -> PrincipalId | None:
    if not api_key or not api_key.strip():
        return None
    return PrincipalId(api_key.strip())


def require_identity(
    identity: Annotated[PrincipalId | None, Depends(get_identity)],
) -> PrincipalId:
    if identity is None:
        raise Unauthenticated("Missing or empty X-User-Id header")
    return identity


def resolve_principal(
    identity: Annotated[PrincipalId | None, Depends(get_identity)],
    repo: Annotated[ProfilesRepository, Depends(get_profiles_repository)],
) -> Profile | None:
    if identity is None:
        return None
    return repo.get_by_id(identity)


def require_principal(
    principal: Annotated[Profile | None, Depends(resolve_principal)],
) -> Profile:
    if principal is None:
        raise Unauthenticated("Unauthorized")
    return principal
