from typing import Annotated

from fastapi import Depends

from lido_social.config import settings
from lido_social.dependencies.repositories import (
    get_engagement_repository,
    get_feed_repository,
    get_follows_repository,
    get_notifications_repository,
    get_profiles_repository,
    get_reviews_repository,
    get_user_books_repository,
    get_xp_repository,
)
from lido_social.repositories.engagement_repository import EngagementRepository
from lido_social.repositories.feed_repository import FeedRepository
from lido_social.repositories.follows_repository import FollowsRepository
from lido_social.repositories.notifications_repository import NotificationsRepository
from lido_social.repositories.profiles_repository import ProfilesRepository
from lido_social.repositories.reviews_repository import ReviewsRepository
from lido_social.repositories.user_books_repository import UserBooksRepository
from lido_social.repositories.xp_repository import XPRepository
from lido_social.services.engagement_service import EngagementService
from lido_social.services.feed_service import FeedService
from lido_social.services.follow_service import FollowService
from lido_social.services.notification_service import NotificationService
from lido_social.services.profile_service import ProfileService
from lido_social.services.review_service import ReviewService
from lido_social.services.user_book_service import UserBookService
from lido_social.services.xp_ledger import XPLedger


def get_notification_service(
    repo: Annotated[NotificationsRepository, Depends(get_notifications_repository)],
) -> NotificationService:
    return NotificationService(repo=repo)


def get_xp_ledger(repo: Annotated[XPRepository, Depends(get_xp_repository)]) -> XPLedger:
    return XPLedger(repo=repo, xp_per_level=settings.xp_per_level)


def get_feed_service(
    repo: Annotated[FeedRepository, Depends(get_feed_repository)],
    follows_repo: Annotated[FollowsRepository, Depends(get_follows_repository)],
    user_books_repo: Annotated[UserBooksRepository, Depends(get_user_books_repository)],
    reviews_repo: Annotated[ReviewsRepository, Depends(get_reviews_repository)],
) -> FeedService:
    return FeedService(
        repo=repo,
        follows_repo=follows_repo,
        user_books_repo=user_books_repo,
        reviews_repo=reviews_repo,
        friends_books_window=settings.friends_books_window,
    )


def get_follow_service(
    repo: Annotated[FollowsRepository, Depends(get_follows_repository)],
    profiles_repo: Annotated[ProfilesRepository, Depends(get_profiles_repository)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
    feed: Annotated[FeedService, Depends(get_feed_service)],
) -> FollowService:
    return FollowService(
        repo=repo, profiles_repo=profiles_repo, notifications=notifications, feed=feed
    )


def get_engagement_service(
    repo: Annotated[EngagementRepository, Depends(get_engagement_repository)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
) -> EngagementService:
    return EngagementService(
        repo=repo,
        notifications=notifications,
        comment_preview_length=settings.comment_preview_length,
    )


def get_review_service(
    repo: Annotated[ReviewsRepository, Depends(get_reviews_repository)],
    user_books_repo: Annotated[UserBooksRepository, Depends(get_user_books_repository)],
    feed: Annotated[FeedService, Depends(get_feed_service)],
    xp: Annotated[XPLedger, Depends(get_xp_ledger)],
) -> ReviewService:
    return ReviewService(
        repo=repo,
        user_books_repo=user_books_repo,
        feed=feed,
        xp=xp,
        xp_review=settings.xp_review,
        xp_indie_review=settings.xp_indie_review,
        excerpt_length=settings.review_excerpt_length,
    )


def get_user_book_service(
    repo: Annotated[UserBooksRepository, Depends(get_user_books_repository)],
    reviews_repo: Annotated[ReviewsRepository, Depends(get_reviews_repository)],
    feed: Annotated[FeedService, Depends(get_feed_service)],
    xp: Annotated[XPLedger, Depends(get_xp_ledger)],
) -> UserBookService:
    return UserBookService(
        repo=repo,
        reviews_repo=reviews_repo,
        feed=feed,
        xp=xp,
        xp_finish_book=settings.xp_finish_book,
    )


def get_profile_service(
    repo: Annotated[ProfilesRepository, Depends(get_profiles_repository)],
    follows_repo: Annotated[FollowsRepository, Depends(get_follows_repository)],
) -> ProfileService:
    return ProfileService(
        repo=repo,
        follows_repo=follows_repo,
        search_min_length=settings.user_search_min_length,
        search_limit=settings.user_search_limit,
    )
