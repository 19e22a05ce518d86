"""Schedule notification dispatch without blocking the caller."""

from __future__ import annotations

import asyncio
import logging

from fastapi import BackgroundTasks

from app.domain.entities import Notification

from .dispatcher import DeliveryDispatcher

logger = logging.getLogger(__name__)


class DispatchScheduler:
    """Hand notifications to the dispatcher in the background."""

    def __init__(self, dispatcher: DeliveryDispatcher) -> None:
        self._dispatcher = dispatcher
        self._tasks: set[asyncio.Task] = set()

    def schedule(
        self, notification: Notification, background_tasks: BackgroundTasks | None = None
    ) -> None:
        """Schedule ``notification`` for delivery.

        Inside a request the work is attached to ``background_tasks`` and runs
        after the response is sent. Otherwise it goes onto the running loop or,
        when there is none, runs to completion before returning.
        """

        if background_tasks is not None:
            background_tasks.add_task(self._run, notification)
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._run(notification))
        else:
            task = loop.create_task(self._run(notification))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, notification: Notification) -> None:
        try:
            await self._dispatcher.dispatch(notification)
        except Exception:
            logger.exception("Dispatch of notification %s failed", notification.id)


__all__ = ["DispatchScheduler"]
