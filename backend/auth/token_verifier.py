"""Request credential verification.

Everything here is independent of FastAPI: a verification is a pure function
of the request headers, the shared secret and the current time.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

import jwt

from backend.auth import jwt_handler

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-auth-token"
AUTHORIZATION_HEADER = "authorization"
BEARER_PREFIX = "Bearer "

NO_TOKEN_MESSAGE = "No token, authorization denied"
INVALID_TOKEN_MESSAGE = "Token is not valid"


class AuthenticationError(Exception):
    status_code = 401

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Identity:
    id: int


def extract_token(headers: Mapping[str, str]) -> str | None:
    normalized = {key.lower(): value for key, value in headers.items()}

    token = normalized.get(TOKEN_HEADER)
    if token:
        return token

    auth_header = normalized.get(AUTHORIZATION_HEADER)
    if auth_header and auth_header.startswith(BEARER_PREFIX):
        return auth_header[len(BEARER_PREFIX):] or None

    return None


def _identity_from_payload(payload: dict) -> Identity:
    user_claim = payload.get("user")
    if not isinstance(user_claim, dict):
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    user_id = user_claim.get("id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)
    return Identity(id=user_id)


def verify_token(headers: Mapping[str, str], secret: str, now: datetime | None = None) -> Identity:
    token = extract_token(headers)
    if not token:
        raise AuthenticationError(NO_TOKEN_MESSAGE)

    try:
        payload = jwt_handler.decode_access_token(token, secret=secret)
    except jwt.PyJWTError as exc:
        logger.debug("Rejected token: %s", exc)
        raise AuthenticationError(INVALID_TOKEN_MESSAGE) from exc

    expires_at = payload.get("exp")
    if expires_at is not None:
        current_time = now or datetime.now(timezone.utc)
        if not isinstance(expires_at, (int, float)) or expires_at <= current_time.timestamp():
            logger.debug("Rejected expired token")
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    return _identity_from_payload(payload)
