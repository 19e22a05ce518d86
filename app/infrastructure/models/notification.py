"""SQLAlchemy models for persisted notifications and their deliveries."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for member notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created_at", "recipient", "created_at"),
        Index("ix_notification_recipient_is_read", "recipient", "is_read"),
    )

    id = Column(String(32), primary_key=True)
    type = Column(String(20), nullable=False, index=True)
    priority = Column(String(10), nullable=False, index=True)
    recipient = Column(String(64), nullable=False)
    sender = Column(String(64), nullable=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    channels = Column(JSON, nullable=False, default=list)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(), nullable=True)
    action_url = Column(String(500), nullable=True)
    group_id = Column(String(120), nullable=True, index=True)
    group_count = Column(Integer, nullable=False, default=1)
    related_entities = Column(JSON, nullable=False, default=list)
    # ``metadata`` is reserved by the declarative base.
    extra = Column("metadata", JSON, nullable=False, default=dict)
    expires_at = Column(DateTime(), nullable=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )

    deliveries = relationship(
        "NotificationDeliveryModel",
        lazy="selectin",
        order_by="NotificationDeliveryModel.position",
        cascade="all, delete-orphan",
    )


class NotificationDeliveryModel(Base):
    """Delivery status of one notification over one channel."""

    __tablename__ = "notification_delivery"
    __table_args__ = (
        UniqueConstraint("notification_id", "channel", name="uq_notification_delivery_channel"),
    )

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        String(32),
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    channel = Column(String(20), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pending")
    sent_at = Column(DateTime(), nullable=True)
    error = Column(Text, nullable=True)


__all__ = ["NotificationDeliveryModel", "NotificationModel"]
