from datetime import UTC, datetime
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from lido_social.domain import ActivityType, PrincipalId
from lido_social.errors import translate_store_errors
from lido_social.models import ActivityEvent, Book, FollowEdge, Profile


class FeedRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def append(
        self,
        activity_type: ActivityType,
        user_id: PrincipalId | None,
        metadata: dict[str, Any],
        book_id: str | None = None,
        review_id: str | None = None,
        target_user_id: str | None = None,
        is_public: bool = True,
        created_at: datetime | None = None,
    ) -> ActivityEvent:
        event = ActivityEvent(
            activity_type=activity_type,
            user_id=user_id,
            book_id=book_id,
            review_id=review_id,
            target_user_id=target_user_id,
            metadata_=metadata,
            is_public=is_public,
            created_at=created_at or datetime.now(UTC),
        )
        with translate_store_errors(self.session, "record activity"):
            self.session.add(event)
            self.session.commit()
            self.session.refresh(event)
        return event

    def page(
        self,
        viewer_id: PrincipalId | None,
        cursor: datetime | None,
        limit: int,
        following_only: bool = False,
    ) -> list[tuple[ActivityEvent, Profile | None, Book | None]]:
        """
        Returns one page of events, newest first, strictly older than ``cursor``.

        Without a viewer only public events are visible. With a viewer, events by
        the viewer or anyone the viewer follows are visible regardless of the
        public flag, and ``following_only`` hides everybody else.
        """
        stmt = (
            select(ActivityEvent, Profile, Book)
            .outerjoin(Profile, Profile.id == ActivityEvent.user_id)
            .outerjoin(Book, Book.id == ActivityEvent.book_id)
        )

        if viewer_id is None:
            stmt = stmt.where(ActivityEvent.is_public.is_(True))
        else:
            followed = select(FollowEdge.following_id).where(FollowEdge.follower_id == viewer_id)
            in_circle = or_(ActivityEvent.user_id == viewer_id, ActivityEvent.user_id.in_(followed))
            if following_only:
                stmt = stmt.where(in_circle)
            else:
                stmt = stmt.where(or_(ActivityEvent.is_public.is_(True), in_circle))

        if cursor is not None:
            stmt = stmt.where(ActivityEvent.created_at < cursor)

        stmt = stmt.order_by(ActivityEvent.created_at.desc(), ActivityEvent.id.desc()).limit(limit)
        return [(event, actor, book) for event, actor, book in self.session.execute(stmt).all()]
