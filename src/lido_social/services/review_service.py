import logging
from datetime import UTC, datetime

from lido_social.domain import BookId, PrincipalId, ReviewId
from lido_social.errors import Conflict, Forbidden, InvalidArgument, LidoError, NotFound
from lido_social.models import Profile, Review
from lido_social.repositories.reviews_repository import ReviewsRepository
from lido_social.repositories.user_books_repository import UserBooksRepository
from lido_social.schemas.common import AuthorSummary
from lido_social.schemas.feed import ReviewedMetadata
from lido_social.schemas.review import (
    ReviewRead,
    ReviewRecord,
    ReviewSubmitRequest,
    ReviewSubmitResponse,
    VibeRead,
)
from lido_social.services.feed_service import FeedService
from lido_social.services.xp_ledger import XPLedger

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(
        self,
        repo: ReviewsRepository,
        user_books_repo: UserBooksRepository,
        feed: FeedService,
        xp: XPLedger,
        xp_review: int = 10,
        xp_indie_review: int = 25,
        excerpt_length: int = 200,
    ) -> None:
        self.repo = repo
        self.user_books_repo = user_books_repo
        self.feed = feed
        self.xp = xp
        self.xp_review = xp_review
        self.xp_indie_review = xp_indie_review
        self.excerpt_length = excerpt_length

    def submit_review(
        self, principal: Profile, payload: ReviewSubmitRequest
    ) -> ReviewSubmitResponse:
        """
        Creates the caller's review of a book, or updates it when one exists.

        Only a newly created review marks the book as read, lands in the
        activity feed and earns XP; edits do none of those.
        """
        if payload.rating < 1 or payload.rating > 5:
            raise InvalidArgument("Rating must be between 1 and 5")

        book = self.repo.get_book(BookId(payload.book_id))
        if book is None:
            raise NotFound(f"Book {payload.book_id} not found")

        vibe_ids = list(dict.fromkeys(payload.vibes or []))
        if vibe_ids:
            unknown = set(vibe_ids) - self.repo.existing_vibe_ids(vibe_ids)
            if unknown:
                raise InvalidArgument(f"Unknown vibe ids: {sorted(unknown)}")

        content = payload.content or None

        existing = self.repo.get_by_user_and_book(PrincipalId(principal.id), BookId(book.id))
        if existing is not None:
            return self._update(existing, payload, content, vibe_ids)

        try:
            review = self.repo.create(
                user_id=PrincipalId(principal.id),
                book_id=BookId(book.id),
                rating=payload.rating,
                content=content,
                contains_spoilers=payload.contains_spoilers,
                vibe_ids=vibe_ids,
            )
        except Conflict:
            # A concurrent submission for the same (user, book) won the insert.
            raced = self.repo.get_by_user_and_book(PrincipalId(principal.id), BookId(book.id))
            if raced is None:
                raise
            return self._update(raced, payload, content, vibe_ids)

        logger.info("Review created review=%s book=%s user=%s", review.id, book.id, principal.id)
        self._after_create(principal, review)
        return ReviewSubmitResponse(data=ReviewRecord.model_validate(review), created=True)

    def delete_review(self, principal: Profile, review_id: ReviewId) -> None:
        review = self.repo.get_by_id(review_id)
        if review is None:
            raise NotFound("Review not found")
        if review.user_id != principal.id:
            raise Forbidden("Only the author can delete this review")
        self.repo.delete(review)
        logger.info("Review deleted review=%s user=%s", review_id, principal.id)

    def list_reviews(self, book_id: BookId) -> list[ReviewRead]:
        rows = self.repo.list_for_book(book_id)
        vibes = self.repo.vibes_for([review.id for review, _ in rows])
        return [
            ReviewRead(
                id=review.id,
                book_id=review.book_id,
                rating=review.rating,
                content=review.content,
                contains_spoilers=review.contains_spoilers,
                likes_count=review.likes_count,
                comments_count=review.comments_count,
                created_at=review.created_at,
                user=AuthorSummary.model_validate(author),
                vibes=[VibeRead.model_validate(v) for v in vibes.get(review.id, [])],
            )
            for review, author in rows
        ]

    def _update(
        self,
        review: Review,
        payload: ReviewSubmitRequest,
        content: str | None,
        vibe_ids: list[int],
    ) -> ReviewSubmitResponse:
        updated = self.repo.update(
            review,
            rating=payload.rating,
            content=content,
            contains_spoilers=payload.contains_spoilers,
            vibe_ids=vibe_ids,
        )
        logger.info("Review updated review=%s", updated.id)
        return ReviewSubmitResponse(data=ReviewRecord.model_validate(updated), updated=True)

    def _after_create(self, principal: Profile, review: Review) -> None:
        try:
            self.user_books_repo.upsert_status(
                PrincipalId(principal.id), BookId(review.book_id), "read", now=datetime.now(UTC)
            )
        except LidoError:
            logger.exception("Failed to shelve reviewed book review=%s", review.id)

        excerpt = review.content[: self.excerpt_length] if review.content else None
        self.feed.record(
            "user_reviewed",
            actor_id=PrincipalId(principal.id),
            metadata=ReviewedMetadata(
                rating=review.rating,
                excerpt=excerpt,
                contains_spoilers=review.contains_spoilers,
            ),
            book_id=review.book_id,
            review_id=review.id,
        )

        if self.repo.is_published_book(BookId(review.book_id)):
            self.xp.award(
                PrincipalId(principal.id), "indie_review", self.xp_indie_review, review.book_id
            )
        else:
            self.xp.award(PrincipalId(principal.id), "review", self.xp_review, review.book_id)
