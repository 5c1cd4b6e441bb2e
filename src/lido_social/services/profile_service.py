from pydantic import validate_call

from lido_social.domain import PrincipalId
from lido_social.errors import Conflict, NotFound
from lido_social.models import Profile
from lido_social.repositories.follows_repository import FollowsRepository
from lido_social.repositories.profiles_repository import ProfilesRepository
from lido_social.schemas.profile import ProfileCreateRequest, ProfileRead, ProfileSummary


class ProfileService:
    def __init__(
        self,
        repo: ProfilesRepository,
        follows_repo: FollowsRepository,
        search_min_length: int = 2,
        search_limit: int = 20,
    ) -> None:
        self.repo = repo
        self.follows_repo = follows_repo
        self.search_min_length = search_min_length
        self.search_limit = search_limit

    def _map_to_schema(self, profile: Profile) -> ProfileRead:
        return ProfileRead(
            id=profile.id,
            username=profile.username,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            bio=profile.bio,
            level=profile.level,
            xp_points=profile.xp_points,
            followers_count=self.follows_repo.count_followers(PrincipalId(profile.id)),
            following_count=self.follows_repo.count_following(PrincipalId(profile.id)),
            created_at=profile.created_at,
        )

    @validate_call
    def register(self, identity: PrincipalId, payload: ProfileCreateRequest) -> ProfileRead:
        if self.repo.get_by_id(identity) is not None:
            raise Conflict("Profile already registered for this identity")
        if self.repo.get_by_username(payload.username) is not None:
            raise Conflict(f"Username {payload.username} is already taken")

        profile = self.repo.create(
            id=identity,
            username=payload.username,
            display_name=payload.display_name,
            avatar_url=payload.avatar_url,
            bio=payload.bio,
        )
        return self._map_to_schema(profile)

    def get_profile(self, profile: Profile) -> ProfileRead:
        return self._map_to_schema(profile)

    def get_by_username(self, username: str) -> ProfileRead:
        profile = self.repo.get_by_username(username)
        if profile is None:
            raise NotFound(f"User {username} not found")
        return self._map_to_schema(profile)

    def search(self, query: str) -> list[ProfileSummary]:
        """Short queries return nothing instead of scanning every profile."""
        term = query.strip()
        if len(term) < self.search_min_length:
            return []
        return [
            ProfileSummary.model_validate(p) for p in self.repo.search(term, self.search_limit)
        ]
