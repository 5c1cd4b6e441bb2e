import logging
from datetime import datetime

from lido_social.domain import PrincipalId
from lido_social.errors import InvalidArgument, NotFound
from lido_social.models import FollowEdge, Profile
from lido_social.repositories.follows_repository import FollowsRepository
from lido_social.repositories.profiles_repository import ProfilesRepository
from lido_social.schemas.common import AuthorSummary
from lido_social.schemas.feed import FollowedMetadata
from lido_social.schemas.follow import Connection, ConnectionsResponse
from lido_social.schemas.notification import NewFollowerData
from lido_social.services.feed_service import FeedService
from lido_social.services.notification_service import NotificationService
from lido_social.services.pagination import next_cursor, normalize_cursor

logger = logging.getLogger(__name__)


class FollowService:
    def __init__(
        self,
        repo: FollowsRepository,
        profiles_repo: ProfilesRepository,
        notifications: NotificationService,
        feed: FeedService,
    ) -> None:
        self.repo = repo
        self.profiles_repo = profiles_repo
        self.notifications = notifications
        self.feed = feed

    def follow(self, follower: Profile, followee_id: PrincipalId) -> bool:
        """
        Creates the follow edge. Following someone already followed is a success.

        Returns True when a new edge was created, False when it already existed.
        """
        if follower.id == followee_id:
            raise InvalidArgument("Cannot follow yourself")

        followee = self.profiles_repo.get_by_id(followee_id)
        if followee is None:
            raise NotFound(f"User {followee_id} not found")

        created = self.repo.insert_if_absent(follower.id, followee.id)
        if not created:
            logger.info("Follow already present follower=%s followee=%s", follower.id, followee.id)
            return False

        logger.info("Follow created follower=%s followee=%s", follower.id, followee.id)
        self.notifications.emit(
            recipient_id=PrincipalId(followee.id),
            actor_id=PrincipalId(follower.id),
            type="new_follower",
            payload=NewFollowerData(
                follower_username=follower.username,
                link=f"/profile/{follower.username}",
            ),
        )
        self.feed.record(
            "user_followed",
            actor_id=PrincipalId(follower.id),
            metadata=FollowedMetadata(target_username=followee.username),
            target_user_id=followee.id,
        )
        return True

    def unfollow(self, follower: Profile, followee_id: PrincipalId) -> bool:
        removed = self.repo.delete(follower.id, followee_id)
        logger.info(
            "Unfollow follower=%s followee=%s removed=%s", follower.id, followee_id, removed
        )
        return removed

    def is_following(self, follower: Profile | None, followee_id: PrincipalId) -> bool:
        if follower is None:
            return False
        return self.repo.exists(follower.id, followee_id)

    def list_followers(
        self, principal_id: PrincipalId, limit: int, cursor: datetime | None = None
    ) -> ConnectionsResponse:
        rows = self.repo.list_followers(principal_id, limit=limit, cursor=normalize_cursor(cursor))
        return self._to_connections(rows, limit)

    def list_following(
        self, principal_id: PrincipalId, limit: int, cursor: datetime | None = None
    ) -> ConnectionsResponse:
        rows = self.repo.list_following(principal_id, limit=limit, cursor=normalize_cursor(cursor))
        return self._to_connections(rows, limit)

    @staticmethod
    def _to_connections(rows: list[tuple[FollowEdge, Profile]], limit: int) -> ConnectionsResponse:
        return ConnectionsResponse(
            users=[
                Connection(user=AuthorSummary.model_validate(profile), followed_at=edge.created_at)
                for edge, profile in rows
            ],
            next_cursor=next_cursor([edge.created_at for edge, _ in rows], limit),
        )
