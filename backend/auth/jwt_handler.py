from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config


def create_access_token(user_id: int, expires_minutes: int | None = None, secret: str | None = None) -> str:
    expire_minutes = config.JWT_EXPIRES_MINUTES if expires_minutes is None else expires_minutes
    issued_at = datetime.now(timezone.utc)
    payload = {
        "user": {"id": user_id},
        "exp": issued_at + timedelta(minutes=expire_minutes),
        "iat": issued_at,
    }
    return jwt.encode(payload, secret or config.get_jwt_secret(), algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str, secret: str | None = None) -> dict:
    # Expiry is checked by the caller against an explicit clock.
    return jwt.decode(
        token,
        secret or config.get_jwt_secret(),
        algorithms=[config.JWT_ALGORITHM],
        options={"verify_exp": False},
    )
