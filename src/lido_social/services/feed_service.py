import logging
from datetime import datetime

from pydantic import TypeAdapter, ValidationError

from lido_social.domain import ActivityType, BookId, FeedScope, PrincipalId
from lido_social.errors import LidoError
from lido_social.models import ActivityEvent, Book, Profile
from lido_social.repositories.feed_repository import FeedRepository
from lido_social.repositories.follows_repository import FollowsRepository
from lido_social.repositories.reviews_repository import ReviewsRepository
from lido_social.repositories.user_books_repository import UserBooksRepository
from lido_social.schemas.common import AuthorSummary, BookSummary
from lido_social.schemas.feed import (
    METADATA_BY_ACTIVITY,
    FeedItem,
    FeedMetadata,
    FeedPage,
    FriendReview,
    FriendsActivityResponse,
    FriendsBookEntry,
    FriendsBooksResponse,
    FriendStatus,
)
from lido_social.services.pagination import next_cursor, normalize_cursor

logger = logging.getLogger(__name__)

_feed_item_adapter: TypeAdapter[FeedItem] = TypeAdapter(FeedItem)


class FeedService:
    def __init__(
        self,
        repo: FeedRepository,
        follows_repo: FollowsRepository,
        user_books_repo: UserBooksRepository,
        reviews_repo: ReviewsRepository,
        friends_books_window: int = 20,
    ) -> None:
        self.repo = repo
        self.follows_repo = follows_repo
        self.user_books_repo = user_books_repo
        self.reviews_repo = reviews_repo
        self.friends_books_window = friends_books_window

    def record(
        self,
        activity_type: ActivityType,
        actor_id: PrincipalId | None,
        metadata: FeedMetadata,
        book_id: str | None = None,
        review_id: str | None = None,
        target_user_id: str | None = None,
        is_public: bool = True,
    ) -> ActivityEvent | None:
        """Appends an activity event. Failures are logged, never raised."""
        expected = METADATA_BY_ACTIVITY[activity_type]
        if not isinstance(metadata, expected):
            raise TypeError(f"{activity_type} events carry {expected.__name__} metadata")

        try:
            return self.repo.append(
                activity_type=activity_type,
                user_id=actor_id,
                metadata=metadata.model_dump(mode="json", exclude_none=True),
                book_id=book_id,
                review_id=review_id,
                target_user_id=target_user_id,
                is_public=is_public,
            )
        except LidoError:
            logger.exception(
                "Failed to record activity type=%s actor=%s book=%s",
                activity_type,
                actor_id,
                book_id,
            )
            return None

    def get_feed(
        self,
        viewer: Profile | None,
        cursor: datetime | None,
        limit: int,
        scope: FeedScope = "all",
    ) -> FeedPage:
        rows = self.repo.page(
            viewer_id=viewer.id if viewer else None,
            cursor=normalize_cursor(cursor),
            limit=limit,
            following_only=scope == "following" and viewer is not None,
        )

        items: list[FeedItem] = []
        for event, actor, book in rows:
            item = self._to_item(event, actor, book)
            if item is not None:
                items.append(item)

        # The cursor follows the raw rows so a skipped row cannot stall the walk.
        cursor_out = next_cursor([event.created_at for event, _, _ in rows], limit)
        return FeedPage(items=items, next_cursor=cursor_out, has_more=cursor_out is not None)

    def get_friends_activity(
        self, viewer: Profile | None, book_id: BookId
    ) -> FriendsActivityResponse:
        if viewer is None:
            return FriendsActivityResponse()

        following_ids = self.follows_repo.following_ids(viewer.id)
        if not following_ids:
            return FriendsActivityResponse()

        statuses = self.user_books_repo.list_for_book_by_users(book_id, following_ids)
        reviews = self.reviews_repo.list_for_book_by_users(book_id, following_ids)
        return FriendsActivityResponse(
            friends=[
                FriendStatus(user=AuthorSummary.model_validate(profile), status=entry.status)
                for entry, profile in statuses
            ],
            reviews=[
                FriendReview(
                    rating=review.rating,
                    content=review.content,
                    user=AuthorSummary.model_validate(profile),
                )
                for review, profile in reviews
            ],
        )

    def get_friends_books(self, viewer: Profile | None) -> FriendsBooksResponse:
        if viewer is None:
            return FriendsBooksResponse()

        following_ids = self.follows_repo.following_ids(viewer.id)
        if not following_ids:
            return FriendsBooksResponse()

        activity = self.user_books_repo.recent_by_users(
            following_ids, limit=self.friends_books_window
        )

        # Rows arrive newest first, so the first row seen for a book is its latest interaction.
        grouped: dict[str, FriendsBookEntry] = {}
        for entry, book, profile in activity:
            group = grouped.get(book.id)
            if group is None:
                group = FriendsBookEntry(
                    book=BookSummary.model_validate(book),
                    friends=[],
                    last_interaction=entry.updated_at,
                )
                grouped[book.id] = group
            if all(friend.user.id != profile.id for friend in group.friends):
                group.friends.append(
                    FriendStatus(user=AuthorSummary.model_validate(profile), status=entry.status)
                )

        return FriendsBooksResponse(books=list(grouped.values()))

    @staticmethod
    def _to_item(
        event: ActivityEvent, actor: Profile | None, book: Book | None
    ) -> FeedItem | None:
        try:
            return _feed_item_adapter.validate_python(
                {
                    "id": event.id,
                    "activity_type": event.activity_type,
                    "user_id": event.user_id,
                    "book_id": event.book_id,
                    "review_id": event.review_id,
                    "target_user_id": event.target_user_id,
                    "metadata": event.metadata_ or {},
                    "is_public": event.is_public,
                    "created_at": event.created_at,
                    "username": actor.username if actor else None,
                    "display_name": actor.display_name if actor else None,
                    "avatar_url": actor.avatar_url if actor else None,
                    "book_title": book.title if book else None,
                    "book_cover": book.cover_url if book else None,
                }
            )
        except ValidationError:
            logger.warning(
                "Skipping malformed activity row id=%s type=%s",
                event.id,
                event.activity_type,
            )
            return None
