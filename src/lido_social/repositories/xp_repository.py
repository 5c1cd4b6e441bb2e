from sqlalchemy import select, update
from sqlalchemy.orm import Session

from lido_social.domain import PrincipalId, XPEventType
from lido_social.errors import translate_store_errors
from lido_social.models import Profile, XPEvent


class XPRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def append_and_increment(
        self,
        user_id: PrincipalId,
        event_type: XPEventType,
        amount: int,
        book_id: str | None,
        xp_per_level: int,
    ) -> XPEvent:
        """
        Appends a ledger row and bumps the running total in the same transaction.

        The level is only ever promoted, so a level set by an administrator survives.
        """
        event = XPEvent(user_id=user_id, event_type=event_type, xp_amount=amount, book_id=book_id)
        earned_level = 1 + Profile.xp_points // xp_per_level
        with translate_store_errors(self.session, "award xp"):
            self.session.add(event)
            self.session.execute(
                update(Profile)
                .where(Profile.id == user_id)
                .values(xp_points=Profile.xp_points + amount)
                .execution_options(synchronize_session=False)
            )
            self.session.execute(
                update(Profile)
                .where(Profile.id == user_id, Profile.level < earned_level)
                .values(level=earned_level)
                .execution_options(synchronize_session=False)
            )
            self.session.commit()
            self.session.refresh(event)
        return event

    def events_for(self, user_id: PrincipalId) -> list[XPEvent]:
        stmt = (
            select(XPEvent)
            .where(XPEvent.user_id == user_id)
            .order_by(XPEvent.created_at.asc(), XPEvent.id.asc())
        )
        return list(self.session.scalars(stmt).all())
