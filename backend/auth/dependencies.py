from fastapi import HTTPException, Request

from backend.auth.token_verifier import AuthenticationError, Identity, verify_token
from backend.core import config


def get_current_identity(request: Request) -> Identity:
    identity = getattr(request.state, "identity", None)
    if identity is not None:
        return identity

    try:
        return verify_token(request.headers, config.get_jwt_secret())
    except AuthenticationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
