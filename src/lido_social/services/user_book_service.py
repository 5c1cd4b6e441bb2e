import logging
from datetime import UTC, datetime

from lido_social.domain import BookId, PrincipalId, ReadingStatus
from lido_social.errors import InvalidArgument, NotFound
from lido_social.models import Book, Profile, UserBook
from lido_social.repositories.reviews_repository import ReviewsRepository
from lido_social.repositories.user_books_repository import UserBooksRepository
from lido_social.schemas.common import BookSummary
from lido_social.schemas.feed import AddedToListMetadata, ReadingMetadata
from lido_social.schemas.user_book import UserBookRead
from lido_social.services.feed_service import FeedService
from lido_social.services.xp_ledger import XPLedger

logger = logging.getLogger(__name__)

STATUS_ALIASES: dict[str, ReadingStatus] = {
    "want-to-read": "want_to_read",
    "want_to_read": "want_to_read",
    "reading": "reading",
    "read": "read",
    "dnf": "dnf",
}


def parse_status(raw: str) -> ReadingStatus:
    status = STATUS_ALIASES.get(raw.strip().lower())
    if status is None:
        raise InvalidArgument(f"Unknown reading status: {raw}")
    return status


class UserBookService:
    def __init__(
        self,
        repo: UserBooksRepository,
        reviews_repo: ReviewsRepository,
        feed: FeedService,
        xp: XPLedger,
        xp_finish_book: int = 20,
    ) -> None:
        self.repo = repo
        self.reviews_repo = reviews_repo
        self.feed = feed
        self.xp = xp
        self.xp_finish_book = xp_finish_book

    def set_status(self, principal: Profile, book_id: BookId, raw_status: str) -> UserBookRead:
        status = parse_status(raw_status)
        book = self.reviews_repo.get_book(book_id)
        if book is None:
            raise NotFound(f"Book {book_id} not found")

        entry, changed = self.repo.upsert_status(
            PrincipalId(principal.id), book_id, status, now=datetime.now(UTC)
        )
        logger.info(
            "Shelf updated user=%s book=%s status=%s changed=%s",
            principal.id,
            book_id,
            status,
            changed,
        )

        if status == "reading":
            self.feed.record(
                "user_started_reading",
                actor_id=PrincipalId(principal.id),
                metadata=ReadingMetadata(),
                book_id=book_id,
            )
        elif status == "read":
            self.feed.record(
                "user_finished_book",
                actor_id=PrincipalId(principal.id),
                metadata=ReadingMetadata(),
                book_id=book_id,
            )
        else:
            self.feed.record(
                "user_added_to_list",
                actor_id=PrincipalId(principal.id),
                metadata=AddedToListMetadata(status=status),
                book_id=book_id,
            )

        # Finishing pays out once per transition into "read".
        if status == "read" and changed:
            self.xp.award(PrincipalId(principal.id), "finish_book", self.xp_finish_book, book_id)

        return self._to_read(entry, book)

    def list_books(self, principal: Profile, raw_status: str | None = None) -> list[UserBookRead]:
        status = None if raw_status in (None, "", "all") else parse_status(raw_status)
        rows = self.repo.list_for_user(PrincipalId(principal.id), status=status)
        return [self._to_read(entry, book) for entry, book in rows]

    def remove_book(self, principal: Profile, book_id: BookId) -> bool:
        return self.repo.delete(PrincipalId(principal.id), book_id)

    @staticmethod
    def _to_read(entry: UserBook, book: Book) -> UserBookRead:
        return UserBookRead(
            id=entry.id,
            status=entry.status,
            added_at=entry.added_at,
            started_at=entry.started_at,
            finished_at=entry.finished_at,
            book=BookSummary.model_validate(book),
        )
