from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from lido_social.domain import ADMIN_LEVEL, Username
from lido_social.schemas.common import AuthorSummary


class ProfileCreateRequest(BaseModel):
    username: Username = Field(
        description="Unique handle: lowercase letters, digits, '_' or '.'",
        examples=["ana.reads"],
    )
    display_name: str | None = Field(default=None, max_length=80, examples=["Ana"])
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    bio: str | None = Field(default=None, max_length=500)


class ProfileRead(BaseModel):
    id: str = Field(description="Identity provider subject id")
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    level: int = Field(description="Reader level, admins are level 10 or above", ge=1)
    xp_points: int = Field(description="Total experience points", ge=0)
    followers_count: int = 0
    following_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_admin(self) -> bool:
        return self.level >= ADMIN_LEVEL


class ProfileSummary(AuthorSummary):
    bio: str | None = None


class UserSearchResponse(BaseModel):
    users: list[ProfileSummary] = Field(default_factory=list)
