from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from lido_social.domain import CommentId, PrincipalId, ReviewId
from lido_social.errors import translate_store_errors
from lido_social.models import Book, Profile, Review, ReviewComment, ReviewLike
from lido_social.repositories.conflict_insert import insert_ignoring_conflicts


class EngagementRepository:
    """Likes and comments on reviews, each paired with one atomic counter delta."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_review_with_book(self, review_id: ReviewId) -> tuple[Review, Book | None] | None:
        stmt = (
            select(Review, Book)
            .outerjoin(Book, Book.id == Review.book_id)
            .where(Review.id == review_id)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return row[0], row[1]

    def like_exists(self, user_id: PrincipalId, review_id: ReviewId) -> bool:
        stmt = select(ReviewLike.id).where(
            ReviewLike.user_id == user_id, ReviewLike.review_id == review_id
        )
        return self.session.scalars(stmt).first() is not None

    def remove_like(self, user_id: PrincipalId, review_id: ReviewId) -> bool:
        """Deletes the like and decrements likes_count in one transaction."""
        stmt = delete(ReviewLike).where(
            ReviewLike.user_id == user_id, ReviewLike.review_id == review_id
        )
        with translate_store_errors(self.session, "unlike review"):
            result = self.session.execute(stmt)
            removed = max(getattr(result, "rowcount", 0), 0) > 0
            if removed:
                self._decrement(Review.likes_count, review_id)
            self.session.commit()
        return removed

    def add_like(self, user_id: PrincipalId, review_id: ReviewId) -> bool:
        """Inserts the like unless present; increments likes_count only on insert."""
        with translate_store_errors(self.session, "like review"):
            inserted = insert_ignoring_conflicts(
                self.session,
                ReviewLike,
                {"user_id": user_id, "review_id": review_id, "created_at": datetime.now(UTC)},
                index_elements=["user_id", "review_id"],
            )
            if inserted:
                self._increment(Review.likes_count, review_id)
            self.session.commit()
        return inserted

    def add_comment(
        self, user_id: PrincipalId, review_id: ReviewId, content: str
    ) -> ReviewComment:
        comment = ReviewComment(user_id=user_id, review_id=review_id, content=content)
        with translate_store_errors(self.session, "add comment"):
            self.session.add(comment)
            self.session.flush()
            self._increment(Review.comments_count, review_id)
            self.session.commit()
            self.session.refresh(comment)
        return comment

    def get_comment(self, comment_id: CommentId) -> ReviewComment | None:
        return self.session.get(ReviewComment, comment_id)

    def delete_comment(self, comment: ReviewComment) -> None:
        review_id = comment.review_id
        stmt = delete(ReviewComment).where(ReviewComment.id == comment.id)
        with translate_store_errors(self.session, "delete comment"):
            result = self.session.execute(stmt)
            if max(getattr(result, "rowcount", 0), 0) > 0:
                self._decrement(Review.comments_count, review_id)
            self.session.commit()

    def list_comments(self, review_id: ReviewId) -> list[tuple[ReviewComment, Profile]]:
        stmt = (
            select(ReviewComment, Profile)
            .join(Profile, Profile.id == ReviewComment.user_id)
            .where(ReviewComment.review_id == review_id)
            .order_by(ReviewComment.created_at.asc())
        )
        return [(comment, profile) for comment, profile in self.session.execute(stmt).all()]

    def _increment(self, column: InstrumentedAttribute[int], review_id: str) -> None:
        stmt = (
            update(Review)
            .where(Review.id == review_id)
            .values({column.key: column + 1})
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)

    def _decrement(self, column: InstrumentedAttribute[int], review_id: str) -> None:
        # Floor at zero: a drifted counter never goes negative.
        stmt = (
            update(Review)
            .where(Review.id == review_id, column > 0)
            .values({column.key: column - 1})
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
