from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from lido_social.schemas.common import AuthorSummary


class LikeReviewData(BaseModel):
    review_id: str
    book_id: str | None = None
    book_title: str | None = None
    link: str | None = None


class CommentReviewData(BaseModel):
    review_id: str
    book_id: str | None = None
    book_title: str | None = None
    comment_preview: str = Field(description="First characters of the comment")
    link: str | None = None


class NewFollowerData(BaseModel):
    follower_username: str | None = None
    link: str | None = None


class SystemAlertData(BaseModel):
    message: str
    link: str | None = None


NotificationData = LikeReviewData | CommentReviewData | NewFollowerData | SystemAlertData

DATA_BY_TYPE: dict[str, type[BaseModel]] = {
    "like_review": LikeReviewData,
    "comment_review": CommentReviewData,
    "new_follower": NewFollowerData,
    "system_alert": SystemAlertData,
}


class NotificationBase(BaseModel):
    id: int
    actor_id: str | None = None
    actor: AuthorSummary | None = None
    read: bool = False
    created_at: datetime


class LikeReviewNotification(NotificationBase):
    type: Literal["like_review"]
    data: LikeReviewData


class CommentReviewNotification(NotificationBase):
    type: Literal["comment_review"]
    data: CommentReviewData


class NewFollowerNotification(NotificationBase):
    type: Literal["new_follower"]
    data: NewFollowerData


class SystemAlertNotification(NotificationBase):
    type: Literal["system_alert"]
    data: SystemAlertData


NotificationRead = Annotated[
    LikeReviewNotification
    | CommentReviewNotification
    | NewFollowerNotification
    | SystemAlertNotification,
    Field(discriminator="type"),
]


class NotificationsResponse(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int = Field(alias="unreadCount")

    model_config = ConfigDict(populate_by_name=True)


class NotificationPatchRequest(BaseModel):
    notification_id: int | None = None
    mark_all_read: bool = False
