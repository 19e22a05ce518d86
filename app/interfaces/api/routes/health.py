import logging

from fastapi import APIRouter, Request
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health(request: Request) -> dict[str, str]:
    """Report whether the service is up and the notification cache reachable."""

    client = getattr(request.app.state, "redis", None)
    cache_status = "disabled"
    if client is not None:
        try:
            client.ping()
            cache_status = "ok"
        except RedisError as exc:
            logger.warning("Redis ping failed: %s", exc)
            cache_status = "unavailable"
    return {"status": "ok", "cache": cache_status}
