import logging

from pydantic import TypeAdapter, ValidationError

from lido_social.domain import NotificationType, PrincipalId
from lido_social.errors import InvalidArgument, LidoError
from lido_social.models import Notification, Profile
from lido_social.repositories.notifications_repository import NotificationsRepository
from lido_social.schemas.common import AuthorSummary
from lido_social.schemas.notification import (
    DATA_BY_TYPE,
    NotificationData,
    NotificationRead,
    NotificationsResponse,
)

logger = logging.getLogger(__name__)

_notification_adapter: TypeAdapter[NotificationRead] = TypeAdapter(NotificationRead)


class NotificationService:
    def __init__(self, repo: NotificationsRepository) -> None:
        self.repo = repo

    def emit(
        self,
        recipient_id: PrincipalId,
        actor_id: PrincipalId | None,
        type: NotificationType,
        payload: NotificationData,
    ) -> Notification | None:
        """
        Persists a notification for ``recipient_id`` as a side effect of another write.

        Self-notifications are skipped. Store failures are logged and swallowed so
        the action that triggered the notification still succeeds.
        """
        if actor_id is not None and actor_id == recipient_id:
            logger.debug("Skipping self-notification type=%s user=%s", type, recipient_id)
            return None

        expected = DATA_BY_TYPE[type]
        if not isinstance(payload, expected):
            raise TypeError(f"{type} notifications carry {expected.__name__} payloads")

        try:
            notification = self.repo.create(
                recipient_id=recipient_id,
                actor_id=actor_id,
                type=type,
                data=payload.model_dump(mode="json", exclude_none=True),
            )
        except LidoError:
            logger.exception(
                "Failed to emit notification type=%s recipient=%s actor=%s",
                type,
                recipient_id,
                actor_id,
            )
            return None

        logger.info(
            "Notification created id=%s type=%s recipient=%s",
            notification.id,
            type,
            recipient_id,
        )
        return notification

    def list_notifications(self, recipient_id: PrincipalId, limit: int) -> NotificationsResponse:
        rows = self.repo.list_for(recipient_id, limit=limit)
        notifications: list[NotificationRead] = []
        for notification, actor in rows:
            item = self._to_read(notification, actor)
            if item is not None:
                notifications.append(item)
        return NotificationsResponse(
            notifications=notifications,
            unread_count=self.repo.unread_count(recipient_id),
        )

    def mark_read(
        self,
        recipient_id: PrincipalId,
        notification_id: int | None = None,
        mark_all_read: bool = False,
    ) -> int:
        if mark_all_read:
            return self.repo.mark_read(recipient_id)
        if notification_id is None:
            raise InvalidArgument("notification_id is required")
        return self.repo.mark_read(recipient_id, notification_id=notification_id)

    @staticmethod
    def _to_read(notification: Notification, actor: Profile | None) -> NotificationRead | None:
        try:
            return _notification_adapter.validate_python(
                {
                    "id": notification.id,
                    "type": notification.type,
                    "actor_id": notification.actor_id,
                    "actor": AuthorSummary.model_validate(actor) if actor else None,
                    "data": notification.data or {},
                    "read": notification.read,
                    "created_at": notification.created_at,
                }
            )
        except ValidationError:
            logger.warning(
                "Skipping malformed notification row id=%s type=%s",
                notification.id,
                notification.type,
            )
            return None
