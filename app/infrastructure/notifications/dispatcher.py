"""Fan a stored notification out to its delivery channels."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings
from app.domain.entities import DeliveryState, Notification, NotificationChannel
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone

from .push import PushDeliveryChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result reported by a channel handler."""

    state: DeliveryState
    error: str | None = None

    @classmethod
    def sent(cls) -> "DeliveryOutcome":
        return cls(DeliveryState.SENT)

    @classmethod
    def failed(cls, error: str) -> "DeliveryOutcome":
        return cls(DeliveryState.FAILED, error)


ChannelHandler = Callable[[str, Notification], DeliveryOutcome]
SessionFactory = Callable[[], Session]


class DeliveryDispatcher:
    """Run one handler per channel and record each outcome on the stored record.

    Handlers are blocking callables executed in worker threads; a handler that
    raises marks only its own channel as failed. Outcomes are written back
    through a fresh session because dispatch outlives the request session.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        handlers: Mapping[NotificationChannel, ChannelHandler],
    ) -> None:
        self._session_factory = session_factory
        self._handlers = dict(handlers)

    async def dispatch(self, notification: Notification) -> dict[NotificationChannel, DeliveryOutcome]:
        if notification.id is None:
            raise ValueError("Only persisted notifications can be dispatched")

        channels = list(dict.fromkeys(notification.channels))
        outcomes = await asyncio.gather(
            *(self._deliver(channel, notification) for channel in channels)
        )
        return dict(zip(channels, outcomes))

    async def _deliver(
        self, channel: NotificationChannel, notification: Notification
    ) -> DeliveryOutcome:
        handler = self._handlers.get(channel)
        if handler is None:
            outcome = DeliveryOutcome.failed(f"No handler registered for channel {channel.value}")
        else:
            try:
                outcome = await to_thread.run_sync(handler, notification.recipient, notification)
            except Exception as exc:
                logger.warning(
                    "Delivery of notification %s over %s failed: %s",
                    notification.id,
                    channel.value,
                    exc,
                )
                outcome = DeliveryOutcome.failed(str(exc) or exc.__class__.__name__)

        await to_thread.run_sync(self._record, notification.id, channel, outcome)
        return outcome

    def _record(self, notification_id: str, channel: NotificationChannel, outcome: DeliveryOutcome) -> None:
        if outcome.state is DeliveryState.PENDING:
            return

        session = self._session_factory()
        try:
            NotificationRepository(session).update_delivery_status(
                notification_id,
                channel,
                outcome.state,
                sent_at=now_in_app_timezone() if outcome.state is DeliveryState.SENT else None,
                error=outcome.error,
            )
        except SQLAlchemyError:
            session.rollback()
            logger.exception(
                "Could not record %s delivery status for notification %s",
                channel.value,
                notification_id,
            )
        finally:
            session.close()


def deliver_in_app(recipient: str, notification: Notification) -> DeliveryOutcome:
    """In-app notifications are delivered once stored and cached."""

    return DeliveryOutcome.sent()


def push_handler(push_channel: PushDeliveryChannel) -> ChannelHandler:
    def handler(recipient: str, notification: Notification) -> DeliveryOutcome:
        push_channel.send_to_user(recipient, notification)
        return DeliveryOutcome.sent()

    return handler


def stub_handler(channel: NotificationChannel, state: DeliveryState) -> ChannelHandler:
    """Handler for channels without a transport; reports the configured ``state``."""

    def handler(recipient: str, notification: Notification) -> DeliveryOutcome:
        if state is DeliveryState.FAILED:
            return DeliveryOutcome.failed(f"{channel.value} delivery is not implemented")
        return DeliveryOutcome(state)

    return handler


def build_dispatcher(
    settings: Settings,
    session_factory: SessionFactory,
    push_channel: PushDeliveryChannel,
) -> DeliveryDispatcher:
    stub_state = DeliveryState(settings.stub_channel_outcome)
    return DeliveryDispatcher(
        session_factory,
        {
            NotificationChannel.IN_APP: deliver_in_app,
            NotificationChannel.PUSH: push_handler(push_channel),
            NotificationChannel.EMAIL: stub_handler(NotificationChannel.EMAIL, stub_state),
            NotificationChannel.SLACK: stub_handler(NotificationChannel.SLACK, stub_state),
        },
    )


__all__ = [
    "ChannelHandler",
    "DeliveryDispatcher",
    "DeliveryOutcome",
    "build_dispatcher",
    "deliver_in_app",
    "push_handler",
    "stub_handler",
]
