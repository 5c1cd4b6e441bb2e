from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from lido_social.domain import BookId, PrincipalId, ReviewId
from lido_social.errors import translate_store_errors
from lido_social.models import (
    Book,
    Profile,
    PublishedBook,
    Review,
    ReviewComment,
    ReviewLike,
    ReviewVibe,
    Vibe,
)


class ReviewsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, review_id: ReviewId) -> Review | None:
        return self.session.get(Review, review_id)

    def get_by_user_and_book(self, user_id: PrincipalId, book_id: BookId) -> Review | None:
        stmt = select(Review).where(Review.user_id == user_id, Review.book_id == book_id)
        return self.session.scalars(stmt).first()

    def get_book(self, book_id: BookId) -> Book | None:
        return self.session.get(Book, book_id)

    def is_published_book(self, book_id: BookId) -> bool:
        stmt = select(PublishedBook.id).where(PublishedBook.book_id == book_id)
        return self.session.scalars(stmt).first() is not None

    def existing_vibe_ids(self, vibe_ids: Sequence[int]) -> set[int]:
        if not vibe_ids:
            return set()
        stmt = select(Vibe.id).where(Vibe.id.in_(vibe_ids))
        return set(self.session.scalars(stmt).all())

    def create(
        self,
        user_id: PrincipalId,
        book_id: BookId,
        rating: int,
        content: str | None,
        contains_spoilers: bool,
        vibe_ids: Sequence[int] | None = None,
    ) -> Review:
        now = datetime.now(UTC)
        review = Review(
            user_id=user_id,
            book_id=book_id,
            rating=rating,
            content=content,
            contains_spoilers=contains_spoilers,
            likes_count=0,
            comments_count=0,
            created_at=now,
            updated_at=now,
        )
        with translate_store_errors(self.session, "create review"):
            self.session.add(review)
            self.session.flush()
            if vibe_ids:
                self._replace_vibes(review.id, vibe_ids)
            self.session.commit()
            self.session.refresh(review)
        return review

    def update(
        self,
        review: Review,
        rating: int,
        content: str | None,
        contains_spoilers: bool,
        vibe_ids: Sequence[int] | None = None,
    ) -> Review:
        with translate_store_errors(self.session, "update review"):
            review.rating = rating
            review.content = content
            review.contains_spoilers = contains_spoilers
            review.updated_at = datetime.now(UTC)
            if vibe_ids:
                self._replace_vibes(review.id, vibe_ids)
            self.session.commit()
            self.session.refresh(review)
        return review

    def delete(self, review: Review) -> None:
        review_id = review.id
        with translate_store_errors(self.session, "delete review"):
            self.session.execute(delete(ReviewLike).where(ReviewLike.review_id == review_id))
            self.session.execute(
                delete(ReviewComment).where(ReviewComment.review_id == review_id)
            )
            self.session.execute(delete(ReviewVibe).where(ReviewVibe.review_id == review_id))
            self.session.delete(review)
            self.session.commit()

    def list_for_book(self, book_id: BookId) -> list[tuple[Review, Profile]]:
        stmt = (
            select(Review, Profile)
            .join(Profile, Profile.id == Review.user_id)
            .where(Review.book_id == book_id)
            .order_by(Review.created_at.desc())
        )
        return [(review, profile) for review, profile in self.session.execute(stmt).all()]

    def list_for_book_by_users(
        self, book_id: BookId, user_ids: Sequence[str]
    ) -> list[tuple[Review, Profile]]:
        if not user_ids:
            return []
        stmt = (
            select(Review, Profile)
            .join(Profile, Profile.id == Review.user_id)
            .where(Review.book_id == book_id, Review.user_id.in_(user_ids))
            .order_by(Review.created_at.desc())
        )
        return [(review, profile) for review, profile in self.session.execute(stmt).all()]

    def vibes_for(self, review_ids: Sequence[str]) -> dict[str, list[Vibe]]:
        """
        Returns the vibes attached to each review, keyed by review id.
        """
        if not review_ids:
            return {}
        stmt = (
            select(ReviewVibe.review_id, Vibe)
            .join(Vibe, Vibe.id == ReviewVibe.vibe_id)
            .where(ReviewVibe.review_id.in_(review_ids))
            .order_by(Vibe.id.asc())
        )
        grouped: dict[str, list[Vibe]] = {}
        for review_id, vibe in self.session.execute(stmt).all():
            grouped.setdefault(review_id, []).append(vibe)
        return grouped

    def _replace_vibes(self, review_id: str, vibe_ids: Sequence[int]) -> None:
        self.session.execute(delete(ReviewVibe).where(ReviewVibe.review_id == review_id))
        self.session.add_all(
            ReviewVibe(review_id=review_id, vibe_id=vibe_id) for vibe_id in dict.fromkeys(vibe_ids)
        )
