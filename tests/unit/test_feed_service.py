from datetime import UTC, datetime, timedelta
from unittest.mock import create_autospec

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from lido_social.errors import Unavailable
from lido_social.models import Profile, UserBook
from lido_social.repositories.feed_repository import FeedRepository
from lido_social.repositories.follows_repository import FollowsRepository
from lido_social.repositories.reviews_repository import ReviewsRepository
from lido_social.repositories.user_books_repository import UserBooksRepository
from lido_social.schemas.feed import (
    AddedToListMetadata,
    FollowedMetadata,
    ReviewedFeedItem,
    ReviewedMetadata,
)
from lido_social.services.feed_service import FeedService
from tests.conftest import DataFactory

BASE = datetime(2026, 6, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def feed_service(db_session: Session) -> FeedService:
    return FeedService(
        repo=FeedRepository(db_session),
        follows_repo=FollowsRepository(db_session),
        user_books_repo=UserBooksRepository(db_session),
        reviews_repo=ReviewsRepository(db_session),
        friends_books_window=20,
    )


@pytest.fixture
def viewer(test_data: DataFactory) -> Profile:
    v = test_data.create_profile("viewer")
    test_data.create_profile("ana")
    test_data.create_profile("bia")
    test_data.create_profile("stranger")
    test_data.create_book("b1", title="Dom Casmurro")
    test_data.create_book("b2", title="Vidas Secas")
    test_data.create_follow("viewer", "ana")
    test_data.create_follow("viewer", "bia")
    test_data.commit()
    return v


def _shelve(test_data: DataFactory, user_id: str, book_id: str, status: str, at: datetime):
    entry = UserBook(user_id=user_id, book_id=book_id, status=status, added_at=at, updated_at=at)
    test_data.session.add(entry)
    return entry


def test_get_feed_returns_typed_items_and_skips_malformed_rows(
    feed_service: FeedService, test_data: DataFactory, viewer: Profile
) -> None:
    # Given: a valid review event and one whose metadata lacks the rating
    test_data.create_event(
        "ana",
        "user_reviewed",
        BASE,
        book_id="b1",
        metadata_={"rating": 5, "excerpt": "Wow"},
    )
    test_data.create_event(
        "ana", "user_reviewed", BASE + timedelta(minutes=1), metadata_={"excerpt": "?"}
    )
    test_data.commit()

    # When
    page = feed_service.get_feed(viewer, cursor=None, limit=10)

    # Then
    assert len(page.items) == 1
    item = page.items[0]
    assert isinstance(item, ReviewedFeedItem)
    assert item.metadata.rating == 5
    assert item.username == "ana"
    assert item.book_title == "Dom Casmurro"
    assert page.has_more is False
    assert page.next_cursor is None


def test_get_feed_cursor_advances_past_skipped_rows(
    feed_service: FeedService, test_data: DataFactory, viewer: Profile
) -> None:
    test_data.create_event("ana", "user_reviewed", BASE, metadata_={"rating": 3})
    test_data.create_event("ana", "user_reviewed", BASE + timedelta(minutes=1), metadata_={})
    test_data.commit()

    page = feed_service.get_feed(viewer, cursor=None, limit=1)

    assert page.items == []
    assert page.has_more is True
    nxt = feed_service.get_feed(viewer, cursor=page.next_cursor, limit=1)
    assert [i.metadata.rating for i in nxt.items] == [3]


def test_following_scope_hides_strangers(
    feed_service: FeedService, test_data: DataFactory, viewer: Profile
) -> None:
    test_data.create_event("stranger", "user_started_reading", BASE)
    test_data.create_event("bia", "user_started_reading", BASE + timedelta(minutes=1))
    test_data.commit()

    everyone = feed_service.get_feed(viewer, cursor=None, limit=10)
    circle = feed_service.get_feed(viewer, cursor=None, limit=10, scope="following")
    anonymous = feed_service.get_feed(None, cursor=None, limit=10, scope="following")

    assert [i.user_id for i in everyone.items] == ["bia", "stranger"]
    assert [i.user_id for i in circle.items] == ["bia"]
    assert [i.user_id for i in anonymous.items] == ["bia", "stranger"]


def test_record_serializes_metadata(
    feed_service: FeedService, test_data: DataFactory, viewer: Profile
) -> None:
    event = feed_service.record(
        "user_followed",
        actor_id="viewer",
        metadata=FollowedMetadata(target_username="ana"),
        target_user_id="ana",
    )

    assert event is not None
    assert test_data.get_events("user_followed")[0].metadata_ == {"target_username": "ana"}


def test_record_rejects_mismatched_metadata(feed_service: FeedService) -> None:
    with pytest.raises(TypeError):
        feed_service.record("user_reviewed", actor_id="viewer", metadata=AddedToListMetadata())


def test_record_swallows_store_failures() -> None:
    repo = create_autospec(FeedRepository, instance=True)
    repo.append.side_effect = Unavailable("Failed to record activity")
    svc = FeedService(
        repo=repo,
        follows_repo=create_autospec(FollowsRepository, instance=True),
        user_books_repo=create_autospec(UserBooksRepository, instance=True),
        reviews_repo=create_autospec(ReviewsRepository, instance=True),
    )

    result = svc.record("user_reviewed", actor_id="viewer", metadata=ReviewedMetadata(rating=4))

    assert result is None


def test_record_swallows_failure_reloading_the_event() -> None:
    # Given: the append commits but reading the row back fails
    session = create_autospec(Session, instance=True)
    session.refresh.side_effect = OperationalError("SELECT", {}, Exception("connection reset"))
    svc = FeedService(
        repo=FeedRepository(session),
        follows_repo=create_autospec(FollowsRepository, instance=True),
        user_books_repo=create_autospec(UserBooksRepository, instance=True),
        reviews_repo=create_autospec(ReviewsRepository, instance=True),
    )

    # When
    result = svc.record("user_followed", actor_id="viewer", metadata=FollowedMetadata())

    # Then
    assert result is None
    session.rollback.assert_called_once()


def test_friends_books_groups_by_book_newest_first(
    feed_service: FeedService, test_data: DataFactory, viewer: Profile
) -> None:
    # Given
    _shelve(test_data, "ana", "b1", "reading", BASE)
    _shelve(test_data, "bia", "b2", "read", BASE + timedelta(hours=1))
    _shelve(test_data, "bia", "b1", "want_to_read", BASE + timedelta(hours=2))
    _shelve(test_data, "stranger", "b2", "reading", BASE + timedelta(hours=3))
    test_data.commit()

    # When
    response = feed_service.get_friends_books(viewer)

    # Then
    assert [entry.book.id for entry in response.books] == ["b1", "b2"]
    b1, b2 = response.books
    assert [(f.user.id, f.status) for f in b1.friends] == [
        ("bia", "want_to_read"),
        ("ana", "reading"),
    ]
    assert [(f.user.id, f.status) for f in b2.friends] == [("bia", "read")]
    assert b1.last_interaction.replace(tzinfo=None) == (BASE + timedelta(hours=2)).replace(
        tzinfo=None
    )


def test_friends_activity_for_book(
    feed_service: FeedService, test_data: DataFactory, viewer: Profile
) -> None:
    _shelve(test_data, "ana", "b1", "reading", BASE)
    _shelve(test_data, "stranger", "b1", "read", BASE)
    test_data.create_review("bia", "b1", rating=5, content="Masterpiece")
    test_data.create_review("stranger", "b1", rating=1)
    test_data.commit()

    response = feed_service.get_friends_activity(viewer, "b1")

    assert [(f.user.id, f.status) for f in response.friends] == [("ana", "reading")]
    assert [(r.user.id, r.rating, r.content) for r in response.reviews] == [
        ("bia", 5, "Masterpiece")
    ]


def test_friends_views_are_empty_without_viewer_or_follows(
    feed_service: FeedService, test_data: DataFactory
) -> None:
    loner = test_data.create_profile("loner")
    test_data.commit()

    assert feed_service.get_friends_books(None).books == []
    assert feed_service.get_friends_books(loner).books == []
    assert feed_service.get_friends_activity(loner, "b1").friends == []
