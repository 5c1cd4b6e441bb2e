from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from lido_social.schemas.common import AuthorSummary


class VibeRead(BaseModel):
    id: int
    name: str
    slug: str
    emoji: str

    model_config = ConfigDict(from_attributes=True)


class ReviewSubmitRequest(BaseModel):
    book_id: str = Field(min_length=1, description="Reviewed book")
    # Range is checked by the service so the failure renders as a 400.
    rating: int = Field(description="Star rating from 1 to 5", examples=[5])
    content: str | None = Field(default=None, description="Optional review text")
    vibes: list[int] | None = Field(default=None, description="Vibe ids to tag the review")
    contains_spoilers: bool = False


class ReviewRecord(BaseModel):
    id: str
    user_id: str
    book_id: str
    rating: int
    content: str | None = None
    contains_spoilers: bool
    likes_count: int
    comments_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewRead(BaseModel):
    id: str
    book_id: str
    rating: int
    content: str | None = None
    contains_spoilers: bool
    likes_count: int
    comments_count: int
    created_at: datetime
    user: AuthorSummary
    vibes: list[VibeRead] = Field(default_factory=list)


class ReviewSubmitResponse(BaseModel):
    success: bool = True
    data: ReviewRecord
    created: bool = False
    updated: bool = False


class ReviewListResponse(BaseModel):
    reviews: list[ReviewRead]


class LikeToggleRequest(BaseModel):
    review_id: str = Field(min_length=1)


class LikeStatusResponse(BaseModel):
    liked: bool


class LikeToggleResponse(BaseModel):
    liked: bool
    action: Literal["liked", "unliked"]


class CommentCreateRequest(BaseModel):
    review_id: str = Field(min_length=1)
    content: str = Field(description="Comment text, must not be blank")


class CommentRead(BaseModel):
    id: str
    content: str
    created_at: datetime
    user: AuthorSummary


class CommentCreateResponse(BaseModel):
    success: bool = True
    comment: CommentRead


class CommentListResponse(BaseModel):
    comments: list[CommentRead]
