import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from backend.auth.token_verifier import AuthenticationError, verify_token
from backend.core import config

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/websites",)
PROTECTED_PATHS = ("/auth/me",)


def requires_token(path: str) -> bool:
    if path in PROTECTED_PATHS:
        return True
    return any(path == prefix or path.startswith(f"{prefix}/") for prefix in PROTECTED_PREFIXES)


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """Rejects unauthenticated requests to protected paths before the body is read or a route is matched."""

    async def dispatch(self, request, call_next):
        if request.method != "OPTIONS" and requires_token(request.url.path):
            try:
                request.state.identity = verify_token(request.headers, config.get_jwt_secret())
            except AuthenticationError as exc:
                logger.debug("Denied %s %s: %s", request.method, request.url.path, exc.message)
                return JSONResponse(status_code=exc.status_code, content={"msg": exc.message})

        return await call_next(request)
