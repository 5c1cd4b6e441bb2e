from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from lido_social.schemas.common import AuthorSummary


class FollowRequest(BaseModel):
    user_id: str = Field(min_length=1, description="Profile to follow")


class FollowStatusResponse(BaseModel):
    is_following: bool = Field(alias="isFollowing")

    model_config = ConfigDict(populate_by_name=True)


class FollowActionResponse(BaseModel):
    success: bool = True
    action: Literal["followed", "unfollowed"]


class Connection(BaseModel):
    user: AuthorSummary
    followed_at: datetime = Field(description="When the follow edge was created")


class ConnectionsResponse(BaseModel):
    users: list[Connection]
    next_cursor: datetime | None = Field(default=None, alias="nextCursor")

    model_config = ConfigDict(populate_by_name=True)
