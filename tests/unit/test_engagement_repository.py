import pytest
from sqlalchemy.orm import Session

from lido_social.models import Review
from lido_social.repositories.engagement_repository import EngagementRepository
from tests.conftest import DataFactory


@pytest.fixture
def review(test_data: DataFactory) -> Review:
    test_data.create_profile("author")
    for i in range(5):
        test_data.create_profile(f"fan-{i}")
    test_data.create_book("b1")
    r = test_data.create_review("author", "b1", rating=5, content="Loved it")
    test_data.commit()
    return r


def test_likes_count_tracks_likes_minus_unlikes(db_session: Session, review: Review) -> None:
    # Given
    repo = EngagementRepository(db_session)

    # When: five distinct readers like, two of them unlike
    for i in range(5):
        assert repo.add_like(f"fan-{i}", review.id) is True
    assert repo.remove_like("fan-0", review.id) is True
    assert repo.remove_like("fan-3", review.id) is True

    # Then
    db_session.refresh(review)
    assert review.likes_count == 3
    assert repo.like_exists("fan-1", review.id)
    assert not repo.like_exists("fan-0", review.id)


def test_repeated_like_does_not_double_count(db_session: Session, review: Review) -> None:
    repo = EngagementRepository(db_session)

    assert repo.add_like("fan-1", review.id) is True
    assert repo.add_like("fan-1", review.id) is False

    db_session.refresh(review)
    assert review.likes_count == 1


def test_removing_absent_like_leaves_counter_alone(db_session: Session, review: Review) -> None:
    repo = EngagementRepository(db_session)

    assert repo.remove_like("fan-2", review.id) is False

    db_session.refresh(review)
    assert review.likes_count == 0


def test_comment_counter_follows_adds_and_deletes(db_session: Session, review: Review) -> None:
    # Given
    repo = EngagementRepository(db_session)
    first = repo.add_comment("fan-1", review.id, "Great take")
    repo.add_comment("fan-2", review.id, "Agreed")

    # When
    repo.delete_comment(first)

    # Then
    db_session.refresh(review)
    assert review.comments_count == 1
    remaining = repo.list_comments(review.id)
    assert [(c.content, author.id) for c, author in remaining] == [("Agreed", "fan-2")]


def test_decrement_never_goes_below_zero(
    db_session: Session, test_data: DataFactory, review: Review
) -> None:
    # Given: a drifted counter that already reads zero while a comment row exists
    repo = EngagementRepository(db_session)
    comment = repo.add_comment("fan-1", review.id, "Hi")
    review.comments_count = 0
    test_data.commit()

    # When
    repo.delete_comment(comment)

    # Then
    db_session.refresh(review)
    assert review.comments_count == 0


def test_get_review_with_book_returns_pair(db_session: Session, review: Review) -> None:
    repo = EngagementRepository(db_session)

    found = repo.get_review_with_book(review.id)

    assert found is not None
    assert found[0].id == review.id
    assert found[1] is not None and found[1].id == "b1"
    assert repo.get_review_with_book("missing") is None
