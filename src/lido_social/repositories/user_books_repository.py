from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from lido_social.domain import BookId, PrincipalId, ReadingStatus
from lido_social.errors import translate_store_errors
from lido_social.models import Book, Profile, UserBook


class UserBooksRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: PrincipalId, book_id: BookId) -> UserBook | None:
        stmt = select(UserBook).where(UserBook.user_id == user_id, UserBook.book_id == book_id)
        return self.session.scalars(stmt).first()

    def upsert_status(
        self,
        user_id: PrincipalId,
        book_id: BookId,
        status: ReadingStatus,
        now: datetime,
    ) -> tuple[UserBook, bool]:
        """
        Inserts the shelf entry or moves it to ``status`` in a single statement.

        Returns the entry and whether the status changed. A new entry counts as a
        change. Re-applying the current status leaves the row untouched, so under
        concurrent requests exactly one caller sees a given transition.
        """
        values = {
            "user_id": user_id,
            "book_id": book_id,
            "status": status,
            "added_at": now,
            "started_at": now if status == "reading" else None,
            "finished_at": now if status == "read" else None,
            "updated_at": now,
        }
        changes: dict[str, Any] = {
            "status": status,
            "finished_at": values["finished_at"],
            "updated_at": now,
        }
        if status == "reading":
            changes["started_at"] = now

        dialect = self.session.get_bind().dialect.name
        stmt: Any
        if dialect == "sqlite":
            stmt = sqlite_insert(UserBook).values(values)
        else:
            stmt = pg_insert(UserBook).values(values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "book_id"],
            set_=changes,
            where=UserBook.status != stmt.excluded.status,
        )

        with translate_store_errors(self.session, "update reading status"):
            result = self.session.execute(stmt)
            changed = max(getattr(result, "rowcount", 0), 0) > 0
            self.session.commit()
            entry = self.session.scalars(
                select(UserBook)
                .where(UserBook.user_id == user_id, UserBook.book_id == book_id)
                .execution_options(populate_existing=True)
            ).one()
        return entry, changed

    def delete(self, user_id: PrincipalId, book_id: BookId) -> bool:
        stmt = delete(UserBook).where(UserBook.user_id == user_id, UserBook.book_id == book_id)
        with translate_store_errors(self.session, "remove book from shelf"):
            result = self.session.execute(stmt)
            self.session.commit()
        return max(getattr(result, "rowcount", 0), 0) > 0

    def list_for_user(
        self, user_id: PrincipalId, status: ReadingStatus | None = None
    ) -> list[tuple[UserBook, Book]]:
        stmt = (
            select(UserBook, Book)
            .join(Book, Book.id == UserBook.book_id)
            .where(UserBook.user_id == user_id)
        )
        if status is not None:
            stmt = stmt.where(UserBook.status == status)
        stmt = stmt.order_by(UserBook.added_at.desc())
        return [(entry, book) for entry, book in self.session.execute(stmt).all()]

    def list_for_book_by_users(
        self, book_id: BookId, user_ids: Sequence[str]
    ) -> list[tuple[UserBook, Profile]]:
        if not user_ids:
            return []
        stmt = (
            select(UserBook, Profile)
            .join(Profile, Profile.id == UserBook.user_id)
            .where(UserBook.book_id == book_id, UserBook.user_id.in_(user_ids))
            .order_by(UserBook.updated_at.desc())
        )
        return [(entry, profile) for entry, profile in self.session.execute(stmt).all()]

    def recent_by_users(
        self, user_ids: Sequence[str], limit: int
    ) -> list[tuple[UserBook, Book, Profile]]:
        if not user_ids:
            return []
        stmt = (
            select(UserBook, Book, Profile)
            .join(Book, Book.id == UserBook.book_id)
            .join(Profile, Profile.id == UserBook.user_id)
            .where(UserBook.user_id.in_(user_ids))
            .order_by(UserBook.updated_at.desc(), UserBook.id.desc())
            .limit(limit)
        )
        return [(entry, book, profile) for entry, book, profile in self.session.execute(stmt).all()]
