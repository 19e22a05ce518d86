import logging
from contextlib import asynccontextmanager
from typing import Any, Callable

import redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pywebpush import webpush

from app.config import get_settings
from app.infrastructure.cache import NotificationCache, create_redis_client
from app.infrastructure.database import SessionLocal, engine, initialize_database
from app.infrastructure.notifications import (
    DispatchScheduler,
    PushDeliveryChannel,
    build_dispatcher,
)
from app.interfaces.api.errors import register_error_handlers
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def create_app(
    *,
    redis_client: redis.Redis | None = None,
    push_sender: Callable[..., Any] = webpush,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``redis_client`` and ``push_sender`` replace the Redis connection and the
    Web Push transport built from the settings.
    """

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables and client handles at startup and release them on shutdown."""

        initialize_database()
        client = redis_client or create_redis_client(settings.redis_url)
        cache = NotificationCache(client, ttl_seconds=settings.notification_cache_ttl_seconds)
        push_channel = PushDeliveryChannel.from_settings(settings, cache, sender=push_sender)
        if not push_channel.configured:
            logger.warning("VAPID keys are not set; push deliveries will be marked as failed")
        dispatcher = build_dispatcher(settings, SessionLocal, push_channel)

        app.state.redis = client
        app.state.notification_cache = cache
        app.state.push_channel = push_channel
        app.state.dispatch_scheduler = DispatchScheduler(dispatcher)
        yield
        if redis_client is None:
            client.close()
        engine.dispose()

    app = FastAPI(title="GAIAthon Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    register_routes(app)
    return app


app = create_app()
