from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest

from lido_social.errors import Forbidden, InvalidArgument, NotFound
from lido_social.models import Book, Profile, Review, ReviewComment
from lido_social.repositories.engagement_repository import EngagementRepository
from lido_social.schemas.notification import CommentReviewData, LikeReviewData
from lido_social.services.engagement_service import EngagementService
from lido_social.services.notification_service import NotificationService

ALICE = Profile(id="alice", username="alice")


@pytest.fixture
def repo() -> EngagementRepository:
    repo = create_autospec(EngagementRepository, instance=True)
    review = Review(id="r-1", user_id="bob", book_id="b1", rating=5)
    repo.get_review_with_book.return_value = (review, Book(id="b1", title="Dom Casmurro"))
    return repo


@pytest.fixture
def notifications() -> NotificationService:
    return create_autospec(NotificationService, instance=True)


@pytest.fixture
def svc(repo: EngagementRepository, notifications: NotificationService) -> EngagementService:
    return EngagementService(repo, notifications, comment_preview_length=10)


def test_toggle_like_inserts_and_notifies(
    svc: EngagementService, repo: EngagementRepository, notifications: NotificationService
) -> None:
    # Given
    repo.remove_like.return_value = False
    repo.add_like.return_value = True

    # When
    liked = svc.toggle_like(ALICE, "r-1")

    # Then
    assert liked is True
    notifications.emit.assert_called_once()
    kwargs = notifications.emit.call_args.kwargs
    assert kwargs["recipient_id"] == "bob"
    assert kwargs["type"] == "like_review"
    assert kwargs["payload"] == LikeReviewData(
        review_id="r-1", book_id="b1", book_title="Dom Casmurro", link="/books/b1"
    )


def test_toggle_like_removes_existing_like(
    svc: EngagementService, repo: EngagementRepository, notifications: NotificationService
) -> None:
    repo.remove_like.return_value = True

    liked = svc.toggle_like(ALICE, "r-1")

    assert liked is False
    repo.add_like.assert_not_called()
    notifications.emit.assert_not_called()


def test_toggle_like_lost_race_reports_liked_without_notifying(
    svc: EngagementService, repo: EngagementRepository, notifications: NotificationService
) -> None:
    # Given: nothing to delete, yet a concurrent request inserted the like first
    repo.remove_like.return_value = False
    repo.add_like.return_value = False

    assert svc.toggle_like(ALICE, "r-1") is True
    notifications.emit.assert_not_called()


def test_toggle_like_unknown_review(svc: EngagementService, repo: EngagementRepository) -> None:
    repo.get_review_with_book.return_value = None

    with pytest.raises(NotFound):
        svc.toggle_like(ALICE, "missing")


def test_is_liked_is_false_for_anonymous(
    svc: EngagementService, repo: EngagementRepository
) -> None:
    assert svc.is_liked(None, "r-1") is False
    repo.like_exists.assert_not_called()


def test_add_comment_notifies_with_preview(
    svc: EngagementService, repo: EngagementRepository, notifications: NotificationService
) -> None:
    repo.add_comment.return_value = ReviewComment(
        id="c-1",
        user_id="alice",
        review_id="r-1",
        content="A really long comment",
        created_at=datetime.now(UTC),
    )

    comment = svc.add_comment(ALICE, "r-1", "  A really long comment  ")

    assert comment.user.username == "alice"
    repo.add_comment.assert_called_once_with("alice", "r-1", "A really long comment")
    payload = notifications.emit.call_args.kwargs["payload"]
    assert isinstance(payload, CommentReviewData)
    assert payload.comment_preview == "A really l"


def test_add_comment_rejects_blank_text(
    svc: EngagementService, repo: EngagementRepository
) -> None:
    with pytest.raises(InvalidArgument):
        svc.add_comment(ALICE, "r-1", "   ")

    repo.add_comment.assert_not_called()


def test_delete_comment_by_other_user_is_forbidden(
    svc: EngagementService, repo: EngagementRepository
) -> None:
    repo.get_comment.return_value = ReviewComment(id="c-1", user_id="bob", review_id="r-1")

    with pytest.raises(Forbidden):
        svc.delete_comment(ALICE, "c-1")

    repo.delete_comment.assert_not_called()


def test_delete_missing_comment(svc: EngagementService, repo: EngagementRepository) -> None:
    repo.get_comment.return_value = None

    with pytest.raises(NotFound):
        svc.delete_comment(ALICE, "c-404")
