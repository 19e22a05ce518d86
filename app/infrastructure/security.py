"""Security helpers for session token handling."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.config import get_settings

ALGORITHM = "HS256"
DEFAULT_TOKEN_LIFETIME = timedelta(hours=12)


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Issue a token for ``subject``; sessions are normally issued elsewhere."""

    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    return jwt.encode({"sub": subject, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
