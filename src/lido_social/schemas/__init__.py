from lido_social.schemas.common import AuthorSummary, BookSummary, ErrorResponse, SuccessResponse
from lido_social.schemas.feed import FeedItem, FeedPage
from lido_social.schemas.notification import NotificationRead, NotificationsResponse
from lido_social.schemas.profile import ProfileCreateRequest, ProfileRead
from lido_social.schemas.review import ReviewRead, ReviewSubmitRequest

__all__ = [
    "AuthorSummary",
    "BookSummary",
    "ErrorResponse",
    "FeedItem",
    "FeedPage",
    "NotificationRead",
    "NotificationsResponse",
    "ProfileCreateRequest",
    "ProfileRead",
    "ReviewRead",
    "ReviewSubmitRequest",
    "SuccessResponse",
]
