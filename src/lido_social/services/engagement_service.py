import logging

from lido_social.domain import CommentId, PrincipalId, ReviewId
from lido_social.errors import Forbidden, InvalidArgument, NotFound
from lido_social.models import Profile, ReviewComment
from lido_social.repositories.engagement_repository import EngagementRepository
from lido_social.schemas.common import AuthorSummary
from lido_social.schemas.notification import CommentReviewData, LikeReviewData
from lido_social.schemas.review import CommentRead
from lido_social.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class EngagementService:
    def __init__(
        self,
        repo: EngagementRepository,
        notifications: NotificationService,
        comment_preview_length: int = 100,
    ) -> None:
        self.repo = repo
        self.notifications = notifications
        self.comment_preview_length = comment_preview_length

    def toggle_like(self, principal: Profile, review_id: ReviewId) -> bool:
        """
        Flips the caller's like on a review and returns the resulting state.

        The delete is attempted first; only when nothing was deleted is a
        conflict-guarded insert issued. Each side moves ``likes_count`` by one
        only when a row actually changed, so a double-click from one user cannot
        push the counter out of step with the like rows.
        """
        found = self.repo.get_review_with_book(review_id)
        if found is None:
            raise NotFound(f"Review {review_id} not found")
        review, book = found

        if self.repo.remove_like(principal.id, review.id):
            logger.info("Review unliked review=%s user=%s", review.id, principal.id)
            return False

        inserted = self.repo.add_like(principal.id, review.id)
        if not inserted:
            # A concurrent request from the same user created the like first.
            logger.info("Like already present review=%s user=%s", review.id, principal.id)
            return True

        logger.info("Review liked review=%s user=%s", review.id, principal.id)
        self.notifications.emit(
            recipient_id=PrincipalId(review.user_id),
            actor_id=PrincipalId(principal.id),
            type="like_review",
            payload=LikeReviewData(
                review_id=review.id,
                book_id=review.book_id,
                book_title=book.title if book else None,
                link=f"/books/{review.book_id}",
            ),
        )
        return True

    def is_liked(self, principal: Profile | None, review_id: ReviewId) -> bool:
        if principal is None:
            return False
        return self.repo.like_exists(principal.id, review_id)

    def add_comment(self, principal: Profile, review_id: ReviewId, text: str) -> CommentRead:
        content = (text or "").strip()
        if not content:
            raise InvalidArgument("review_id and content are required")

        found = self.repo.get_review_with_book(review_id)
        if found is None:
            raise NotFound(f"Review {review_id} not found")
        review, book = found

        comment = self.repo.add_comment(principal.id, review.id, content)
        logger.info(
            "Comment added comment=%s review=%s user=%s", comment.id, review.id, principal.id
        )

        self.notifications.emit(
            recipient_id=PrincipalId(review.user_id),
            actor_id=PrincipalId(principal.id),
            type="comment_review",
            payload=CommentReviewData(
                review_id=review.id,
                book_id=review.book_id,
                book_title=book.title if book else None,
                comment_preview=content[: self.comment_preview_length],
                link=f"/books/{review.book_id}",
            ),
        )
        return self._to_read(comment, principal)

    def delete_comment(self, principal: Profile, comment_id: CommentId) -> None:
        comment = self.repo.get_comment(comment_id)
        if comment is None:
            raise NotFound("Comment not found")
        if comment.user_id != principal.id:
            raise Forbidden("Forbidden")

        self.repo.delete_comment(comment)
        logger.info("Comment deleted comment=%s user=%s", comment_id, principal.id)

    def list_comments(self, review_id: ReviewId) -> list[CommentRead]:
        return [
            self._to_read(comment, author) for comment, author in self.repo.list_comments(review_id)
        ]

    @staticmethod
    def _to_read(comment: ReviewComment, author: Profile) -> CommentRead:
        return CommentRead(
            id=comment.id,
            content=comment.content,
            created_at=comment.created_at,
            user=AuthorSummary.model_validate(author),
        )
