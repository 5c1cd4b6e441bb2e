from datetime import UTC, datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from lido_social.schemas.feed import (
    AddedToListFeedItem,
    FeedItem,
    FeedPage,
    TrendingFeedItem,
)
from lido_social.schemas.notification import NewFollowerNotification, NotificationRead

feed_item = TypeAdapter(FeedItem)
notification = TypeAdapter(NotificationRead)
NOW = datetime(2026, 2, 1, tzinfo=UTC)


def test_feed_item_dispatches_on_activity_type() -> None:
    item = feed_item.validate_python(
        {
            "id": 1,
            "activity_type": "user_added_to_list",
            "metadata": {"status": "want_to_read"},
            "created_at": NOW,
        }
    )

    assert isinstance(item, AddedToListFeedItem)
    assert item.metadata.status == "want_to_read"


def test_system_feed_item_has_no_actor() -> None:
    item = feed_item.validate_python(
        {"id": 2, "activity_type": "book_trending", "metadata": {"rank": 1}, "created_at": NOW}
    )

    assert isinstance(item, TrendingFeedItem)
    assert item.user_id is None


def test_feed_item_rejects_unknown_activity_type() -> None:
    with pytest.raises(ValidationError):
        feed_item.validate_python({"id": 3, "activity_type": "user_sneezed", "created_at": NOW})


def test_review_item_requires_rating_in_range() -> None:
    with pytest.raises(ValidationError):
        feed_item.validate_python(
            {
                "id": 4,
                "activity_type": "user_reviewed",
                "metadata": {"rating": 9},
                "created_at": NOW,
            }
        )


def test_feed_page_serializes_camel_case_keys() -> None:
    page = FeedPage(items=[], next_cursor=None, has_more=False)

    assert page.model_dump(by_alias=True) == {"items": [], "nextCursor": None, "hasMore": False}


def test_notification_dispatches_on_type() -> None:
    item = notification.validate_python(
        {
            "id": 1,
            "type": "new_follower",
            "data": {"follower_username": "ana"},
            "created_at": NOW,
        }
    )

    assert isinstance(item, NewFollowerNotification)
    assert item.data.follower_username == "ana"
    assert item.read is False
