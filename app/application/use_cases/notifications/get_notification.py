"""Use case for retrieving a single notification."""

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.domain.exceptions import NotFoundError
from app.infrastructure.repositories import NotificationRepository


def get_notification(session: Session, user_id: str, notification_id: str) -> Notification:
    """Return the notification identified by ``notification_id`` or raise an error."""

    notification = NotificationRepository(session).get_for_recipient(notification_id, user_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification
