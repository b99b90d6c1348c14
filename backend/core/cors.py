from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from backend.core import config

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": config.CORS_ALLOW_METHODS,
    "Access-Control-Allow-Headers": config.CORS_ALLOW_HEADERS,
}


class StaticCORSMiddleware(BaseHTTPMiddleware):
    """Answers every preflight directly and stamps fixed CORS headers on all responses."""

    async def dispatch(self, request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response
