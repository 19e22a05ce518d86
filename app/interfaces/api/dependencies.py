"""FastAPI dependency utilities."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.domain.exceptions import PushConfigurationError, UnauthorizedError
from app.infrastructure.cache import NotificationCache
from app.infrastructure.notifications import DispatchScheduler, PushDeliveryChannel
from app.infrastructure.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_member_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Return the member id carried in the ``sub`` claim of the session token."""

    if credentials is None:
        raise UnauthorizedError("Unauthorized")
    try:
        payload = decode_access_token(credentials.credentials)
    except ValueError as exc:
        raise UnauthorizedError("Unauthorized") from exc

    member_id = payload.get("sub")
    if not isinstance(member_id, str) or not member_id:
        raise UnauthorizedError("Unauthorized")
    return member_id


def get_notification_cache(request: Request) -> NotificationCache | None:
    """Return the cache built at startup; ``None`` serves every read from the database."""

    return getattr(request.app.state, "notification_cache", None)


def get_push_channel(request: Request) -> PushDeliveryChannel:
    push_channel = getattr(request.app.state, "push_channel", None)
    if push_channel is None:
        raise PushConfigurationError("Push notifications are not configured")
    return push_channel


def get_dispatch_scheduler(request: Request) -> DispatchScheduler | None:
    return getattr(request.app.state, "dispatch_scheduler", None)
