from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from lido_social.schemas.common import AuthorSummary, BookSummary


class ReviewedMetadata(BaseModel):
    rating: int = Field(ge=1, le=5, description="Rating given in the review")
    excerpt: str | None = Field(default=None, description="Leading slice of the review text")
    contains_spoilers: bool = False


class ReadingMetadata(BaseModel):
    """Shelf transitions carry no extra fields beyond the book."""


class AddedToListMetadata(BaseModel):
    status: str | None = Field(default=None, description="Shelf the book was placed on")


class FollowedMetadata(BaseModel):
    target_username: str | None = None


class TrendingMetadata(BaseModel):
    rank: int | None = Field(default=None, ge=1)
    reason: str | None = None


class FeedItemBase(BaseModel):
    id: int
    user_id: str | None = Field(default=None, description="Actor, absent for system events")
    book_id: str | None = None
    review_id: str | None = None
    target_user_id: str | None = None
    is_public: bool = True
    created_at: datetime = Field(description="Event time, also the pagination cursor")
    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    book_title: str | None = None
    book_cover: str | None = None


class ReviewedFeedItem(FeedItemBase):
    activity_type: Literal["user_reviewed"]
    metadata: ReviewedMetadata


class StartedReadingFeedItem(FeedItemBase):
    activity_type: Literal["user_started_reading"]
    metadata: ReadingMetadata = Field(default_factory=ReadingMetadata)


class FinishedBookFeedItem(FeedItemBase):
    activity_type: Literal["user_finished_book"]
    metadata: ReadingMetadata = Field(default_factory=ReadingMetadata)


class AddedToListFeedItem(FeedItemBase):
    activity_type: Literal["user_added_to_list"]
    metadata: AddedToListMetadata = Field(default_factory=AddedToListMetadata)


class FollowedFeedItem(FeedItemBase):
    activity_type: Literal["user_followed"]
    metadata: FollowedMetadata = Field(default_factory=FollowedMetadata)


class TrendingFeedItem(FeedItemBase):
    activity_type: Literal["book_trending"]
    metadata: TrendingMetadata = Field(default_factory=TrendingMetadata)


FeedItem = Annotated[
    ReviewedFeedItem
    | StartedReadingFeedItem
    | FinishedBookFeedItem
    | AddedToListFeedItem
    | FollowedFeedItem
    | TrendingFeedItem,
    Field(discriminator="activity_type"),
]

FeedMetadata = (
    ReviewedMetadata | ReadingMetadata | AddedToListMetadata | FollowedMetadata | TrendingMetadata
)

METADATA_BY_ACTIVITY: dict[str, type[BaseModel]] = {
    "user_reviewed": ReviewedMetadata,
    "user_started_reading": ReadingMetadata,
    "user_finished_book": ReadingMetadata,
    "user_added_to_list": AddedToListMetadata,
    "user_followed": FollowedMetadata,
    "book_trending": TrendingMetadata,
}


class FeedPage(BaseModel):
    items: list[FeedItem]
    next_cursor: datetime | None = Field(default=None, alias="nextCursor")
    has_more: bool = Field(alias="hasMore")

    model_config = ConfigDict(populate_by_name=True)


class FriendStatus(BaseModel):
    user: AuthorSummary
    status: str


class FriendReview(BaseModel):
    rating: int
    content: str | None = None
    user: AuthorSummary


class FriendsActivityResponse(BaseModel):
    friends: list[FriendStatus] = Field(default_factory=list)
    reviews: list[FriendReview] = Field(default_factory=list)


class FriendsBookEntry(BaseModel):
    book: BookSummary
    friends: list[FriendStatus]
    last_interaction: datetime


class FriendsBooksResponse(BaseModel):
    books: list[FriendsBookEntry] = Field(default_factory=list)
