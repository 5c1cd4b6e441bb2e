from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from lido_social.dependencies.db import get_db_session
from lido_social.repositories.engagement_repository import EngagementRepository
from lido_social.repositories.feed_repository import FeedRepository
from lido_social.repositories.follows_repository import FollowsRepository
from lido_social.repositories.notifications_repository import NotificationsRepository
from lido_social.repositories.profiles_repository import ProfilesRepository
from lido_social.repositories.reviews_repository import ReviewsRepository
from lido_social.repositories.user_books_repository import UserBooksRepository
from lido_social.repositories.xp_repository import XPRepository

SessionDep = Annotated[Session, Depends(get_db_session)]


def get_profiles_repository(session: SessionDep) -> ProfilesRepository:
    return ProfilesRepository(session=session)


def get_follows_repository(session: SessionDep) -> FollowsRepository:
    return FollowsRepository(session=session)


def get_engagement_repository(session: SessionDep) -> EngagementRepository:
    return EngagementRepository(session=session)


def get_reviews_repository(session: SessionDep) -> ReviewsRepository:
    return ReviewsRepository(session=session)


def get_user_books_repository(session: SessionDep) -> UserBooksRepository:
    return UserBooksRepository(session=session)


def get_feed_repository(session: SessionDep) -> FeedRepository:
    return FeedRepository(session=session)


def get_notifications_repository(session: SessionDep) -> NotificationsRepository:
    return NotificationsRepository(session=session)


def get_xp_repository(session: SessionDep) -> XPRepository:
    return XPRepository(session=session)
