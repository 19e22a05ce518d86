"""SQLAlchemy model for member notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, String

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class NotificationPreferenceModel(Base):
    """One row per member that changed the default preferences."""

    __tablename__ = "notification_preference"

    user_id = Column(String(64), primary_key=True)
    email_enabled = Column(Boolean, nullable=False, default=True)
    push_enabled = Column(Boolean, nullable=False, default=True)
    digest = Column(String(10), nullable=False, default="DAILY")
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationPreferenceModel"]
