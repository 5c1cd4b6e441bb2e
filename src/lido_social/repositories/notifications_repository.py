from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from lido_social.domain import NotificationType, PrincipalId
from lido_social.errors import translate_store_errors
from lido_social.models import Notification, Profile


class NotificationsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(
        self,
        recipient_id: PrincipalId,
        actor_id: PrincipalId | None,
        type: NotificationType,
        data: dict[str, Any],
    ) -> Notification:
        notification = Notification(
            user_id=recipient_id, actor_id=actor_id, type=type, data=data, read=False
        )
        with translate_store_errors(self.session, "create notification"):
            self.session.add(notification)
            self.session.commit()
            self.session.refresh(notification)
        return notification

    def list_for(
        self, recipient_id: PrincipalId, limit: int
    ) -> list[tuple[Notification, Profile | None]]:
        stmt = (
            select(Notification, Profile)
            .outerjoin(Profile, Profile.id == Notification.actor_id)
            .where(Notification.user_id == recipient_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return [(notif, actor) for notif, actor in self.session.execute(stmt).all()]

    def unread_count(self, recipient_id: PrincipalId) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == recipient_id, Notification.read.is_(False))
        )
        return self.session.execute(stmt).scalar_one()

    def mark_read(self, recipient_id: PrincipalId, notification_id: int | None = None) -> int:
        """Flips the read flag on one notification, or on all when no id is given."""
        stmt = update(Notification).where(Notification.user_id == recipient_id)
        if notification_id is not None:
            stmt = stmt.where(Notification.id == notification_id)
        stmt = stmt.values(read=True).execution_options(synchronize_session=False)
        with translate_store_errors(self.session, "mark notifications read"):
            result = self.session.execute(stmt)
            self.session.commit()
        return max(getattr(result, "rowcount", 0), 0)
